"""Tests for the GCR-aware credential helper."""

from unittest.mock import Mock, patch

import pytest

from gcr_credhelper.config import GCR_OAUTH2_USERNAME, SUPPORTED_GCR_REGISTRIES, HelperSettings
from gcr_credhelper.credentials import (
    CredentialError,
    CredentialNotFoundError,
    Credentials,
    GCRCredentialHelper,
    HelperError,
    TokenSourceError,
    UnknownTokenSourceError,
    UnsupportedOperationError,
)


def helper_with(store, **strategies) -> GCRCredentialHelper:
    """Helper whose token sources are the given strategies, in order."""
    return GCRCredentialHelper(store, sources=list(strategies), strategies=strategies)


class TestList:
    """Test listing stored credentials."""

    def test_includes_third_party_and_gcr_entries(self, memory_store):
        """Stored 3p usernames plus one sentinel entry per GCR registry."""
        result = GCRCredentialHelper(memory_store, strategies={}).list()

        assert result["https://quay.io"] == "robot"
        for registry in SUPPORTED_GCR_REGISTRIES:
            assert result[registry] == GCR_OAUTH2_USERNAME
        assert len(result) == len(SUPPORTED_GCR_REGISTRIES) + 1

    def test_gcr_entries_listed_without_token(self, cred_store):
        """GCR registries are listed even when no source can produce a token."""
        strategies = {"env": Mock(side_effect=TokenSourceError("no adc"))}
        helper = GCRCredentialHelper(cred_store(), sources=["env"], strategies=strategies)

        assert set(helper.list()) == set(SUPPORTED_GCR_REGISTRIES)
        strategies["env"].assert_not_called()

    def test_custom_registries(self, cred_store):
        """Only configured registries get sentinel entries."""
        helper = GCRCredentialHelper(cred_store(), registries={"gcr.io"}, strategies={})

        assert helper.list() == {"gcr.io": GCR_OAUTH2_USERNAME}

    def test_store_failure_wrapped(self):
        """Store errors are wrapped with the helper prefix."""
        store = Mock()
        store.all_third_party_creds.side_effect = CredentialError("keyring locked")
        helper = GCRCredentialHelper(store, strategies={})

        with pytest.raises(HelperError) as exc_info:
            helper.list()

        assert str(exc_info.value) == "gcr-credhelper/helper: could not retrieve 3p credentials: keyring locked"


class TestAdd:
    """Test adding credentials."""

    def test_third_party_stored(self, cred_store, quay_creds):
        """Non-GCR credentials are delegated to the store."""
        store = cred_store()
        GCRCredentialHelper(store, strategies={}).add(quay_creds)

        assert store.creds == {"https://quay.io": quay_creds}

    @pytest.mark.parametrize("server_url", ["gcr.io", "https://eu.gcr.io"])
    def test_gcr_rejected_without_touching_store(self, cred_store, server_url):
        """GCR registries cannot be added and the store is never called."""
        store = cred_store()
        helper = GCRCredentialHelper(store, strategies={})

        with pytest.raises(UnsupportedOperationError) as exc_info:
            helper.add(Credentials(server_url=server_url, username="u", secret="s"))

        assert "unsupported for GCR" in str(exc_info.value)
        assert store.calls == []

    def test_store_failure_wrapped(self, quay_creds):
        """Store errors name the server URL."""
        store = Mock()
        store.set_other_creds.side_effect = CredentialError("write failed")

        with pytest.raises(HelperError, match="could not store 3p credentials for https://quay.io: write failed"):
            GCRCredentialHelper(store, strategies={}).add(quay_creds)


class TestDelete:
    """Test deleting credentials."""

    def test_third_party_deleted(self, memory_store):
        """Non-GCR credentials are removed from the store."""
        GCRCredentialHelper(memory_store, strategies={}).delete("https://quay.io")

        assert memory_store.creds == {}

    def test_missing_third_party_is_not_an_error(self, cred_store):
        """Deleting unknown credentials succeeds silently."""
        GCRCredentialHelper(cred_store(), strategies={}).delete("https://quay.io")

    def test_gcr_rejected_without_touching_store(self, cred_store):
        """GCR registries cannot be deleted and the store is never called."""
        store = cred_store()

        with pytest.raises(UnsupportedOperationError) as exc_info:
            GCRCredentialHelper(store, strategies={}).delete("https://gcr.io")

        assert "delete is unimplemented for GCR: https://gcr.io" in str(exc_info.value)
        assert store.calls == []

    def test_store_failure_wrapped(self):
        """Store errors name the server URL."""
        store = Mock()
        store.delete_other_creds.side_effect = CredentialError("delete failed")

        with pytest.raises(HelperError, match="could not delete 3p credentials for quay.io"):
            GCRCredentialHelper(store, strategies={}).delete("quay.io")


class TestGet:
    """Test retrieving credentials."""

    def test_gcr_returns_sentinel_and_token(self, cred_store):
        """GCR registries resolve an access token with the sentinel username."""
        store = cred_store()
        helper = helper_with(store, env=Mock(return_value="ya29.token"))

        assert helper.get("https://gcr.io") == (GCR_OAUTH2_USERNAME, "ya29.token")
        assert "get_other_creds" not in store.calls

    def test_gcr_falls_back_across_sources(self, cred_store):
        """The first successful source supplies the token."""
        helper = helper_with(
            cred_store(),
            env=Mock(side_effect=TokenSourceError("no adc")),
            gcloud_sdk=Mock(return_value="T"),
        )

        assert helper.get("us.gcr.io") == (GCR_OAUTH2_USERNAME, "T")

    def test_gcr_resolution_failure_wrapped(self, cred_store):
        """The last source error is wrapped with the server URL."""
        cause = TokenSourceError("gcloud not found on PATH")
        helper = helper_with(cred_store(), gcloud_sdk=Mock(side_effect=cause))

        with pytest.raises(HelperError) as exc_info:
            helper.get("https://gcr.io")

        assert exc_info.value.cause is cause
        assert "could not retrieve https://gcr.io's access token" in str(exc_info.value)
        assert "gcloud not found on PATH" in str(exc_info.value)

    def test_store_io_failure_falls_back_to_gcloud(self):
        """A store raising OSError does not stop later token sources."""
        store = Mock()
        store.get_gcr_auth.side_effect = OSError("cred store file unreadable")
        gcloud = Mock(return_value="T")
        with patch("gcr_credhelper.credentials.sources.token_from_gcloud_sdk", gcloud):
            helper = GCRCredentialHelper(store, sources=["store", "gcloud_sdk"])

            assert helper.get("gcr.io") == (GCR_OAUTH2_USERNAME, "T")

        store.get_gcr_auth.assert_called_once_with()

    def test_store_io_failure_wrapped(self):
        """A non-credential error from the last source is wrapped."""
        store = Mock()
        cause = OSError("cred store file unreadable")
        store.get_gcr_auth.side_effect = cause
        helper = GCRCredentialHelper(store, sources=["store"])

        with pytest.raises(HelperError) as exc_info:
            helper.get("gcr.io")

        assert exc_info.value.cause is cause
        assert "could not retrieve gcr.io's access token: cred store file unreadable" in str(exc_info.value)

    def test_unknown_source_wrapped(self, cred_store):
        """A misconfigured source list surfaces through the helper error."""
        helper = GCRCredentialHelper(cred_store(), sources=["bogus"], strategies={})

        with pytest.raises(HelperError) as exc_info:
            helper.get("gcr.io")

        assert isinstance(exc_info.value.cause, UnknownTokenSourceError)

    def test_third_party_returned_from_store(self, memory_store):
        """Non-GCR servers return the stored username and secret."""
        helper = GCRCredentialHelper(memory_store, strategies={})

        assert helper.get("https://quay.io") == ("robot", "quay-secret")

    def test_third_party_not_found_is_not_wrapped(self, cred_store):
        """The store's not-found error reaches the caller as-is."""
        helper = GCRCredentialHelper(cred_store(), strategies={})

        with pytest.raises(CredentialNotFoundError) as exc_info:
            helper.get("https://quay.io")

        assert not isinstance(exc_info.value, HelperError)

    def test_third_party_store_failure_wrapped(self):
        """Other store errors are wrapped."""
        store = Mock()
        store.get_other_creds.side_effect = CredentialError("keyring locked")

        with pytest.raises(HelperError, match="could not retrieve 3p credentials for quay.io"):
            GCRCredentialHelper(store, strategies={}).get("quay.io")


class TestFromSettings:
    """Test building a helper from settings."""

    def test_settings_are_applied(self, cred_store):
        """Sources and registries come from settings."""
        settings = HelperSettings(token_sources=("gcloud_sdk",), registries=frozenset({"gcr.io"}))
        helper = GCRCredentialHelper.from_settings(settings, store=cred_store())

        assert helper.resolver.sources == ("gcloud_sdk",)
        assert helper.classifier.registries == frozenset({"gcr.io"})

    @patch("gcr_credhelper.credentials.helper.build_strategies")
    def test_strategies_bound_to_settings(self, mock_build, cred_store):
        """Scopes and gcloud timeout are forwarded to the token sources."""
        mock_build.return_value = {}
        store = cred_store()
        settings = HelperSettings(gcloud_timeout=2.5)

        GCRCredentialHelper.from_settings(settings, store=store)

        mock_build.assert_called_once_with(store, scopes=settings.oauth_scopes, gcloud_timeout=2.5)

    @patch("gcr_credhelper.credentials.helper.KeyringCredStore")
    def test_defaults_to_keyring_store(self, mock_keyring_store):
        """Without an explicit store the keyring store is used."""
        settings = HelperSettings(keyring_service="custom-service")

        helper = GCRCredentialHelper.from_settings(settings)

        mock_keyring_store.assert_called_once_with(service="custom-service")
        assert helper.store is mock_keyring_store.return_value
