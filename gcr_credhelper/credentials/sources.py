"""Token sources: independent strategies for obtaining a GCR access token.

Each source is a plain callable returning the access token string or
raising a :class:`~gcr_credhelper.exceptions.CredentialError`:

- ``env``: Application Default Credentials from the environment
- ``gcloud_sdk``: ``gcloud auth print-access-token``
- ``store``: OAuth material persisted in the credential store
"""

from __future__ import annotations

import functools
import logging
import shutil
import subprocess
from collections.abc import Callable, Sequence

from google.auth.exceptions import GoogleAuthError

from gcr_credhelper.config.registries import GCR_SCOPES
from gcr_credhelper.enums import TokenSource

from .exceptions import TokenSourceError
from .oauth import default_token_source, store_token_source
from .store import CredStore

logger = logging.getLogger(__name__)

GCLOUD_BINARY = "gcloud"

Strategy = Callable[[], str]


def token_from_env(scopes: Sequence[str] = GCR_SCOPES) -> str:
    """Retrieve an access token from Application Default Credentials.

    Raises:
        TokenSourceError: If no credentials are found, the refresh fails, or
            the token is invalid or not a bearer token
    """
    try:
        token = default_token_source(scopes).token()
    except GoogleAuthError as e:
        raise TokenSourceError(
            "could not obtain application default credentials", cause=e, source=TokenSource.ENV.value
        ) from e

    if not token.valid:
        raise TokenSourceError("token was invalid", source=TokenSource.ENV.value)

    if token.token_type.lower() != "bearer":
        raise TokenSourceError(
            f'expected token type "Bearer" but got "{token.token_type}"',
            source=TokenSource.ENV.value,
        )

    return token.access_token


def token_from_gcloud_sdk(timeout: float | None = None) -> str:
    """Generate an access token with the gcloud SDK.

    Shelling out to gcloud is the only supported way of obtaining the
    gcloud access token. gcloud's stderr is passed through to ours.

    Args:
        timeout: Seconds to wait for gcloud; None waits indefinitely

    Raises:
        TokenSourceError: If gcloud is not on PATH, fails, times out, or
            prints an empty token
    """
    gcloud = shutil.which(GCLOUD_BINARY)
    if gcloud is None:
        raise TokenSourceError(
            "gcloud not found on PATH",
            source=TokenSource.GCLOUD_SDK.value,
            suggestion="Install the Google Cloud SDK: https://cloud.google.com/sdk/docs/install",
        )

    logger.debug(f"Requesting access token from {gcloud}")
    try:
        result = subprocess.run(  # nosec B603 # fixed arguments, resolved binary
            [gcloud, "auth", "print-access-token"],
            stdout=subprocess.PIPE,
            text=True,
            check=True,
            timeout=timeout,
        )
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
        raise TokenSourceError(
            "gcloud auth print-access-token failed", cause=e, source=TokenSource.GCLOUD_SDK.value
        ) from e

    token = result.stdout.strip()
    if not token:
        raise TokenSourceError(
            "gcloud auth print-access-token returned empty access_token",
            source=TokenSource.GCLOUD_SDK.value,
        )
    return token


def token_from_private_store(store: CredStore) -> str:
    """Refresh the OAuth material held by *store* into an access token.

    Errors raised by the store itself propagate unchanged.

    Raises:
        TokenSourceError: If the refresh fails or the token is invalid
    """
    auth = store.get_gcr_auth()

    try:
        token = store_token_source(auth).token()
    except GoogleAuthError as e:
        raise TokenSourceError(
            "could not refresh stored GCR credentials", cause=e, source=TokenSource.STORE.value
        ) from e

    if not token.valid:
        raise TokenSourceError("token was invalid", source=TokenSource.STORE.value)

    return token.access_token


def build_strategies(
    store: CredStore,
    scopes: Sequence[str] = GCR_SCOPES,
    gcloud_timeout: float | None = None,
) -> dict[str, Strategy]:
    """Bind the token sources to their arguments, keyed by source identifier."""
    return {
        TokenSource.ENV.value: functools.partial(token_from_env, tuple(scopes)),
        TokenSource.GCLOUD_SDK.value: functools.partial(token_from_gcloud_sdk, gcloud_timeout),
        TokenSource.STORE.value: functools.partial(token_from_private_store, store),
    }
