"""OS-level keyring credential store.

Platform Support:
- Linux: Secret Service API (GNOME Keyring, KWallet)
- macOS: Keychain
- Windows: Windows Credential Locker

Layout: all third-party credentials live in a single JSON document under
the ``third_party`` key of the configured keyring service, and the GCR
OAuth material under the ``gcr_auth`` key.
"""

import json
import logging
from typing import cast

import keyring
from keyring.backends import fail
from keyring.errors import KeyringError, PasswordDeleteError
from pydantic import ValidationError

from .exceptions import BackendNotAvailableError, CredentialError, CredentialNotFoundError
from .models import Credentials, GCRAuth

logger = logging.getLogger(__name__)

THIRD_PARTY_KEY = "third_party"
GCR_AUTH_KEY = "gcr_auth"


class KeyringCredStore:
    """Credential store backed by the system keyring.

    Example:
        >>> store = KeyringCredStore()
        >>> store.set_other_creds(Credentials(server_url="quay.io", username="me", secret="s3cret"))
        >>> store.get_other_creds("quay.io").username
        'me'
    """

    def __init__(self, service: str = "gcr-credhelper") -> None:
        """Initialize keyring store.

        Args:
            service: Keyring service name used to namespace all entries
        """
        self.service = service

    @property
    def available(self) -> bool:
        """Check if a functional keyring backend is configured.

        Returns False on headless systems where keyring falls back to its
        failing backend, or when the backend fails to initialize.
        """
        try:
            return not isinstance(keyring.get_keyring(), fail.Keyring)
        except Exception as e:
            logger.debug(f"Keyring not available: {e}")
            return False

    def _require_available(self) -> None:
        if not self.available:
            raise BackendNotAvailableError(
                "Keyring backend is not available",
                suggestion="Configure a keyring backend, see https://pypi.org/project/keyring/",
            )

    def _read(self, key: str) -> str | None:
        self._require_available()
        try:
            return cast(str | None, keyring.get_password(self.service, key))
        except KeyringError as e:
            raise CredentialError(f"Keyring operation failed: {e}", reference=f"{self.service}/{key}") from e

    def _write(self, key: str, value: str) -> None:
        self._require_available()
        try:
            keyring.set_password(self.service, key, value)
        except KeyringError as e:
            raise CredentialError(f"Failed to store credential: {e}", reference=f"{self.service}/{key}") from e

    def _erase(self, key: str) -> bool:
        self._require_available()
        try:
            keyring.delete_password(self.service, key)
            return True
        except PasswordDeleteError:
            # Nothing stored - not an error
            return False
        except KeyringError as e:
            raise CredentialError(f"Failed to delete credential: {e}", reference=f"{self.service}/{key}") from e

    def _load_third_party(self) -> dict[str, dict[str, str]]:
        raw = self._read(THIRD_PARTY_KEY)
        if raw is None:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CredentialError(
                "Stored third-party credentials are corrupted",
                reference=f"{self.service}/{THIRD_PARTY_KEY}",
                suggestion="Remove them with: gcr-credhelper clear",
            ) from e
        if not isinstance(data, dict):
            raise CredentialError(
                "Stored third-party credentials are corrupted",
                reference=f"{self.service}/{THIRD_PARTY_KEY}",
            )
        return cast(dict[str, dict[str, str]], data)

    def _save_third_party(self, data: dict[str, dict[str, str]]) -> None:
        if data:
            self._write(THIRD_PARTY_KEY, json.dumps(data, sort_keys=True))
        else:
            self._erase(THIRD_PARTY_KEY)

    def all_third_party_creds(self) -> dict[str, Credentials]:
        """Return all stored third-party credentials keyed by server URL."""
        return {
            server_url: Credentials(
                server_url=server_url,
                username=entry.get("username", ""),
                secret=entry.get("secret", ""),
            )
            for server_url, entry in self._load_third_party().items()
        }

    def set_other_creds(self, creds: Credentials) -> None:
        """Store (or replace) credentials for a third-party registry."""
        data = self._load_third_party()
        data[creds.server_url] = {"username": creds.username, "secret": creds.secret}
        self._save_third_party(data)
        logger.info(f"Stored credentials in keyring: {creds.server_url}")

    def get_other_creds(self, server_url: str) -> Credentials:
        """Retrieve credentials for a third-party registry.

        Raises:
            CredentialNotFoundError: If nothing is stored for server_url
        """
        entry = self._load_third_party().get(server_url)
        if entry is None:
            raise CredentialNotFoundError("credentials not found in native keychain", reference=server_url)

        logger.debug(f"Retrieved credentials from keyring: {server_url}")
        return Credentials(
            server_url=server_url,
            username=entry.get("username", ""),
            secret=entry.get("secret", ""),
        )

    def delete_other_creds(self, server_url: str) -> bool:
        """Delete credentials for a third-party registry.

        Returns:
            True if deleted, False if not found
        """
        data = self._load_third_party()
        if server_url not in data:
            return False

        del data[server_url]
        self._save_third_party(data)
        logger.info(f"Deleted credentials from keyring: {server_url}")
        return True

    def get_gcr_auth(self) -> GCRAuth:
        """Retrieve the stored GCR OAuth material.

        Raises:
            CredentialNotFoundError: If no GCR auth material is stored
            CredentialError: If the stored material cannot be parsed
        """
        raw = self._read(GCR_AUTH_KEY)
        if raw is None:
            raise CredentialNotFoundError(
                "GCR credentials not found in keyring",
                reference=f"{self.service}/{GCR_AUTH_KEY}",
                suggestion="Use the 'env' or 'gcloud_sdk' token sources instead",
            )
        try:
            return GCRAuth.model_validate_json(raw)
        except ValidationError as e:
            raise CredentialError(
                "Stored GCR credentials are corrupted",
                reference=f"{self.service}/{GCR_AUTH_KEY}",
                suggestion="Remove them with: gcr-credhelper clear",
            ) from e

    def set_gcr_auth(self, auth: GCRAuth) -> None:
        """Persist GCR OAuth material, replacing any existing entry."""
        self._write(GCR_AUTH_KEY, auth.model_dump_json())
        logger.info("Stored GCR credentials in keyring")

    def delete_gcr_auth(self) -> bool:
        """Delete the stored GCR OAuth material.

        Returns:
            True if deleted, False if not found
        """
        return self._erase(GCR_AUTH_KEY)

    def clear(self) -> None:
        """Delete all third-party credentials and GCR OAuth material."""
        self._erase(THIRD_PARTY_KEY)
        self._erase(GCR_AUTH_KEY)
        logger.info(f"Cleared all credentials for keyring service: {self.service}")
