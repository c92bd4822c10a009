"""GCR-aware credential resolution.

This package provides:
- Classification of registry server URLs as GCR or third-party
- Ordered fallback over GCR token sources (env, gcloud_sdk, store)
- The credential helper facade (list/add/delete/get)
- A keyring-backed credential store

Example usage:

    from gcr_credhelper.credentials import GCRCredentialHelper, KeyringCredStore

    helper = GCRCredentialHelper(KeyringCredStore(), sources=["env", "gcloud_sdk"])
    username, secret = helper.get("gcr.io")
"""

from .classifier import RegistryClassifier, is_privileged_registry
from .exceptions import (
    BackendNotAvailableError,
    CredentialError,
    CredentialNotFoundError,
    HelperError,
    TokenSourceError,
    UnknownTokenSourceError,
    UnsupportedOperationError,
)
from .helper import GCRCredentialHelper
from .keyring_store import KeyringCredStore
from .models import AccessToken, Credentials, GCRAuth
from .resolver import TokenResolver
from .sources import (
    build_strategies,
    token_from_env,
    token_from_gcloud_sdk,
    token_from_private_store,
)
from .store import CredStore

__all__ = [
    # Classification
    "RegistryClassifier",
    "is_privileged_registry",
    # Models
    "AccessToken",
    "Credentials",
    "GCRAuth",
    # Stores
    "CredStore",
    "KeyringCredStore",
    # Token resolution
    "TokenResolver",
    "build_strategies",
    "token_from_env",
    "token_from_gcloud_sdk",
    "token_from_private_store",
    # Helper
    "GCRCredentialHelper",
    # Exceptions
    "CredentialError",
    "CredentialNotFoundError",
    "BackendNotAvailableError",
    "HelperError",
    "TokenSourceError",
    "UnknownTokenSourceError",
    "UnsupportedOperationError",
]
