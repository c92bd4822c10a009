"""Abstract protocol for credential storage."""

from typing import Protocol

from .models import Credentials, GCRAuth


class CredStore(Protocol):
    """Protocol defining the interface of the credential store.

    The store persists third-party registry logins and the OAuth material
    used by the ``store`` token source. All implementations must provide
    these methods to be usable by the GCR credential helper.
    """

    def all_third_party_creds(self) -> dict[str, Credentials]:
        """Return every stored third-party credential keyed by server URL."""
        ...

    def set_other_creds(self, creds: Credentials) -> None:
        """Store credentials for a third-party registry.

        Args:
            creds: Credentials to store, replacing any existing entry
        """
        ...

    def get_other_creds(self, server_url: str) -> Credentials:
        """Retrieve credentials for a third-party registry.

        Args:
            server_url: Registry server URL

        Returns:
            Stored credentials

        Raises:
            CredentialNotFoundError: If no credentials are stored for server_url
        """
        ...

    def delete_other_creds(self, server_url: str) -> bool:
        """Remove credentials for a third-party registry.

        Args:
            server_url: Registry server URL

        Returns:
            True if credentials were deleted, False if none were stored
        """
        ...

    def get_gcr_auth(self) -> GCRAuth:
        """Retrieve the persisted GCR OAuth material.

        Raises:
            CredentialNotFoundError: If no GCR auth material is stored
        """
        ...
