"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from gcr_credhelper.credentials import Credentials, CredentialNotFoundError, GCRAuth


class InMemoryCredStore:
    """Credential store keeping everything in dictionaries.

    Records every method call in ``calls`` so tests can assert that the
    store was (or was not) touched.
    """

    def __init__(self, creds: dict[str, Credentials] | None = None, gcr_auth: GCRAuth | None = None):
        self.creds = dict(creds or {})
        self.gcr_auth = gcr_auth
        self.calls: list[str] = []

    def all_third_party_creds(self) -> dict[str, Credentials]:
        self.calls.append("all_third_party_creds")
        return dict(self.creds)

    def set_other_creds(self, creds: Credentials) -> None:
        self.calls.append("set_other_creds")
        self.creds[creds.server_url] = creds

    def get_other_creds(self, server_url: str) -> Credentials:
        self.calls.append("get_other_creds")
        if server_url not in self.creds:
            raise CredentialNotFoundError("credentials not found", reference=server_url)
        return self.creds[server_url]

    def delete_other_creds(self, server_url: str) -> bool:
        self.calls.append("delete_other_creds")
        return self.creds.pop(server_url, None) is not None

    def get_gcr_auth(self) -> GCRAuth:
        self.calls.append("get_gcr_auth")
        if self.gcr_auth is None:
            raise CredentialNotFoundError("GCR credentials not found")
        return self.gcr_auth


@pytest.fixture
def quay_creds() -> Credentials:
    """Sample third-party credentials."""
    return Credentials(server_url="https://quay.io", username="robot", secret="quay-secret")


@pytest.fixture
def gcr_auth() -> GCRAuth:
    """Sample stored GCR OAuth material."""
    return GCRAuth(
        client_id="client-id.apps.googleusercontent.com",
        client_secret="client-secret",
        refresh_token="refresh-token",
    )


@pytest.fixture
def memory_store(quay_creds: Credentials) -> InMemoryCredStore:
    """In-memory store holding one third-party credential."""
    return InMemoryCredStore({quay_creds.server_url: quay_creds})


@pytest.fixture
def future_expiry() -> datetime:
    """An expiry time an hour from now."""
    return datetime.now(timezone.utc) + timedelta(hours=1)


@pytest.fixture
def cred_store():
    """Factory fixture for creating in-memory credential stores."""
    return InMemoryCredStore
