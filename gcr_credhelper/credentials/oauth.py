"""Adapter over google-auth producing :class:`AccessToken` values.

google-auth owns discovery of Application Default Credentials and the
OAuth2 refresh exchange; this module only turns its credential objects
into the token model used by the token sources.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, Protocol

import google.auth
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials as OAuth2Credentials

from .models import AccessToken, GCRAuth

logger = logging.getLogger(__name__)


class OAuthTokenSource(Protocol):
    """Anything that can hand out an access token."""

    def token(self) -> AccessToken:
        """Return a current access token, refreshing if necessary.

        Raises:
            google.auth.exceptions.GoogleAuthError: If the token cannot be obtained
        """
        ...


class GoogleTokenSource:
    """Token source wrapping a google-auth credentials object.

    google-auth only issues bearer tokens (credentials are applied as an
    ``Authorization: Bearer`` header), so every token is typed "Bearer".
    """

    def __init__(self, credentials: Any, request: Request | None = None) -> None:
        self._credentials = credentials
        self._request = request

    def token(self) -> AccessToken:
        if not self._credentials.valid:
            logger.debug("Refreshing OAuth credentials")
            self._credentials.refresh(self._request or Request())

        expiry = self._credentials.expiry
        # google-auth keeps expiry as a naive UTC datetime
        if expiry is not None and expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)

        return AccessToken(
            access_token=self._credentials.token or "",
            token_type="Bearer",
            expiry=expiry,
        )


def default_token_source(scopes: Sequence[str], request: Request | None = None) -> GoogleTokenSource:
    """Token source using Application Default Credentials.

    Looks for credentials in the following places, preferring the first found:

    1. A JSON file named by the GOOGLE_APPLICATION_CREDENTIALS environment variable.
    2. The gcloud application default credentials file
       (``~/.config/gcloud/application_default_credentials.json``).
    3. The App Engine or Compute Engine metadata server.

    Raises:
        google.auth.exceptions.DefaultCredentialsError: If no credentials are found
    """
    credentials, project_id = google.auth.default(scopes=list(scopes))
    logger.debug(f"Found application default credentials (project: {project_id})")
    return GoogleTokenSource(credentials, request)


def _naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def store_token_source(auth: GCRAuth, request: Request | None = None) -> GoogleTokenSource:
    """Token source refreshing the OAuth material held by the credential store."""
    credentials = OAuth2Credentials(
        token=auth.access_token,
        refresh_token=auth.refresh_token,
        token_uri=auth.token_uri,
        client_id=auth.client_id,
        client_secret=auth.client_secret,
        scopes=list(auth.scopes),
        expiry=_naive_utc(auth.expiry),
    )
    return GoogleTokenSource(credentials, request)
