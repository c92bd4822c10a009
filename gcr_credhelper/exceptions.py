"""Custom exception hierarchy for gcr-credhelper.

This module defines a structured exception hierarchy that lets callers
tell apart the failure kinds of the credential helper: missing
credentials, unsupported operations on GCR registries, configuration
mistakes and failures of external token sources.

Exception Hierarchy:
    CredHelperError (base)
    ├── ConfigurationError
    │   └── UnknownTokenSourceError
    └── CredentialError
        ├── CredentialNotFoundError
        ├── BackendNotAvailableError
        └── HelperError
            ├── UnsupportedOperationError
            └── TokenSourceError

Example Usage:
    >>> from gcr_credhelper.exceptions import CredentialNotFoundError
    >>> try:
    ...     username, secret = helper.get("https://index.docker.io/v1/")
    ... except CredentialNotFoundError:
    ...     username, secret = "", ""
"""

HELPER_ERROR_PREFIX = "gcr-credhelper/helper"


class CredHelperError(Exception):
    """Base exception for all gcr-credhelper errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(CredHelperError):
    """Configuration-related errors.

    Examples:
        - Configuration file not readable
        - Invalid YAML syntax
        - Token source list naming an unknown source
    """

    pass


class UnknownTokenSourceError(ConfigurationError):
    """A token source identifier is not one of the recognized sources.

    Attributes:
        source: The offending identifier
    """

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"{HELPER_ERROR_PREFIX}: unknown token source: {source}")


class CredentialError(CredHelperError):
    """Credential-related errors.

    This is the base class for credential-specific errors. Subclasses:
    - CredentialNotFoundError: The store holds no record for a server
    - BackendNotAvailableError: Storage backend unavailable
    - HelperError: Failure of a helper operation, with its cause

    Attributes:
        message: Human-readable error description
        reference: The server URL or store key that failed
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        reference: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            reference: The server URL or store key that failed
            suggestion: Optional suggestion for resolution
        """
        self.reference = reference
        self.suggestion = suggestion

        full_message = message
        if reference:
            full_message = f"{message} (reference: {reference})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # Preserve original message (super sets self.message to full_message)
        self.message = message


class CredentialNotFoundError(CredentialError):
    """The credential store has no credentials for the requested server.

    Never wrapped by the helper: callers rely on catching this type to
    distinguish "not found" from every other failure.
    """

    pass


class BackendNotAvailableError(CredentialError):
    """Requested storage backend is not available on this system."""

    pass


class HelperError(CredentialError):
    """Failure of a credential helper operation.

    The rendered message always carries the fixed ``gcr-credhelper/helper``
    prefix, followed by the operation-specific message and, when present,
    the underlying cause::

        gcr-credhelper/helper: could not store 3p credentials for quay.io: disk full

    Attributes:
        cause: The underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        reference: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Description of what the helper was doing
            cause: Underlying exception
            reference: The server URL involved
            suggestion: Optional suggestion for resolution
        """
        self.cause = cause
        text = f"{HELPER_ERROR_PREFIX}: {message}"
        if cause is not None:
            text = f"{text}: {cause}"
        super().__init__(text, reference=reference, suggestion=suggestion)


class UnsupportedOperationError(HelperError):
    """Operation is not supported for GCR registries (add/delete)."""

    pass


class TokenSourceError(HelperError):
    """A token source failed to produce a usable access token.

    Attributes:
        source: Identifier of the failing source, if known
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        source: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.source = source
        super().__init__(message, cause=cause, suggestion=suggestion)
