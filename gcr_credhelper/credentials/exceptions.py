"""Credential-related exceptions.

This module re-exports credential exceptions from gcr_credhelper.exceptions
so that credential modules can use relative imports. New code outside the
credentials package should import directly from gcr_credhelper.exceptions.
"""

from gcr_credhelper.exceptions import (
    BackendNotAvailableError,
    CredentialError,
    CredentialNotFoundError,
    HelperError,
    TokenSourceError,
    UnknownTokenSourceError,
    UnsupportedOperationError,
)

__all__ = [
    "CredentialError",
    "CredentialNotFoundError",
    "BackendNotAvailableError",
    "HelperError",
    "TokenSourceError",
    "UnknownTokenSourceError",
    "UnsupportedOperationError",
]
