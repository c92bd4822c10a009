"""Credential helper with special handling for GCR authentication.

GCR registries are served with a short-lived OAuth access token paired
with the fixed ``oauth2accesstoken`` username; every other registry is
delegated to the credential store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from gcr_credhelper.config.registries import (
    DEFAULT_TOKEN_SOURCES,
    GCR_OAUTH2_USERNAME,
    GCR_SCOPES,
    SUPPORTED_GCR_REGISTRIES,
)
from gcr_credhelper.config.settings import HelperSettings

from .classifier import RegistryClassifier
from .exceptions import CredentialNotFoundError, HelperError, UnsupportedOperationError
from .keyring_store import KeyringCredStore
from .models import Credentials
from .resolver import TokenResolver
from .sources import Strategy, build_strategies
from .store import CredStore

logger = logging.getLogger(__name__)


class GCRCredentialHelper:
    """Credential helper backed by a credential store, specialized for GCR.

    Implements the list/add/delete/get verbs invoked by a credential helper
    protocol layer.

    Example:
        >>> helper = GCRCredentialHelper(KeyringCredStore(), sources=["env", "gcloud_sdk"])
        >>> username, secret = helper.get("https://gcr.io")
        >>> username
        'oauth2accesstoken'
    """

    def __init__(
        self,
        store: CredStore,
        sources: Sequence[str] = DEFAULT_TOKEN_SOURCES,
        registries: Iterable[str] = SUPPORTED_GCR_REGISTRIES,
        strategies: Mapping[str, Strategy] | None = None,
        scopes: Sequence[str] = GCR_SCOPES,
        gcloud_timeout: float | None = None,
    ) -> None:
        """Initialize credential helper.

        Args:
            store: Credential store for third-party credentials and GCR auth
            sources: Token sources to try for GCR registries, in order
            registries: Hostnames handled as GCR registries
            strategies: Token source callables keyed by identifier; defaults
                to the env, gcloud_sdk and store sources bound to *store*
            scopes: OAuth scopes requested by the env source
            gcloud_timeout: Timeout for the gcloud_sdk source, None for none
        """
        self.store = store
        self.classifier = RegistryClassifier(registries)
        if strategies is None:
            strategies = build_strategies(store, scopes=scopes, gcloud_timeout=gcloud_timeout)
        self.resolver = TokenResolver(sources, strategies)

    @classmethod
    def from_settings(cls, settings: HelperSettings, store: CredStore | None = None) -> GCRCredentialHelper:
        """Build a helper from settings, defaulting to the keyring store."""
        if store is None:
            store = KeyringCredStore(service=settings.keyring_service)
        return cls(
            store,
            sources=settings.token_sources,
            registries=settings.registries,
            scopes=settings.oauth_scopes,
            gcloud_timeout=settings.gcloud_timeout,
        )

    def is_gcr_registry(self, server_url: str) -> bool:
        """Return True if *server_url* is one of the configured GCR registries."""
        return self.classifier.is_privileged_registry(server_url)

    def list(self) -> dict[str, str]:
        """List all stored credentials and associated usernames.

        Every GCR registry appears once with the ``oauth2accesstoken``
        username, whether or not a token can currently be obtained.

        Raises:
            HelperError: If the store cannot be read
        """
        try:
            all_creds = self.store.all_third_party_creds()
        except Exception as e:
            raise HelperError("could not retrieve 3p credentials", cause=e) from e

        resp = {server_url: creds.username for server_url, creds in all_creds.items()}
        for registry in self.classifier.registries:
            resp[registry] = GCR_OAUTH2_USERNAME
        return resp

    def add(self, creds: Credentials) -> None:
        """Store third-party credentials.

        Raises:
            UnsupportedOperationError: If the server is a GCR registry
            HelperError: If the store fails
        """
        server_url = creds.server_url
        if self.is_gcr_registry(server_url):
            raise UnsupportedOperationError(
                "this operation is unsupported for GCR, please see the gcr-credhelper "
                "documentation for supported login methods",
                reference=server_url,
            )

        try:
            self.store.set_other_creds(creds)
        except Exception as e:
            raise HelperError(f"could not store 3p credentials for {server_url}", cause=e) from e
        logger.debug(f"Stored 3p credentials for {server_url}")

    def delete(self, server_url: str) -> None:
        """Remove third-party credentials from the store.

        Raises:
            UnsupportedOperationError: If the server is a GCR registry
            HelperError: If the store fails
        """
        if self.is_gcr_registry(server_url):
            raise UnsupportedOperationError(f"delete is unimplemented for GCR: {server_url}")

        try:
            self.store.delete_other_creds(server_url)
        except Exception as e:
            raise HelperError(f"could not delete 3p credentials for {server_url}", cause=e) from e
        logger.debug(f"Deleted 3p credentials for {server_url}")

    def get(self, server_url: str) -> tuple[str, str]:
        """Return the username and secret to use for a registry server URL.

        Raises:
            CredentialNotFoundError: Unwrapped, if the store has no credentials
                for a third-party server
            HelperError: For any other failure
        """
        if self.is_gcr_registry(server_url):
            try:
                access_token = self.resolver.resolve_access_token()
            except Exception as e:
                raise HelperError(f"could not retrieve {server_url}'s access token", cause=e) from e
            return GCR_OAUTH2_USERNAME, access_token

        try:
            creds = self.store.get_other_creds(server_url)
        except CredentialNotFoundError:
            raise
        except Exception as e:
            raise HelperError(f"could not retrieve 3p credentials for {server_url}", cause=e) from e
        return creds.username, creds.secret
