"""Data models for registry credentials and OAuth tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, Field

from gcr_credhelper.config.registries import GCR_SCOPES, GOOGLE_TOKEN_URI

# Tokens expiring within this window are treated as already expired.
EXPIRY_DELTA = timedelta(seconds=10)


class Credentials(BaseModel):
    """Login material for a third-party (non-GCR) registry."""

    model_config = ConfigDict(frozen=True)

    server_url: str = Field(..., min_length=1, description="Registry server URL")
    username: str = Field(default="", description="Registry username")
    secret: str = Field(default="", description="Password or token for the registry")


class GCRAuth(BaseModel):
    """OAuth material persisted by the store for the ``store`` token source.

    Holds a refresh token and the OAuth client it was issued to, plus an
    optional cached access token.
    """

    client_id: str
    client_secret: str
    refresh_token: str
    token_uri: str = GOOGLE_TOKEN_URI
    scopes: tuple[str, ...] = GCR_SCOPES
    access_token: str | None = None
    expiry: datetime | None = None


@dataclass(frozen=True)
class AccessToken:
    """A short-lived OAuth access token.

    Attributes:
        access_token: The bearer token string
        token_type: Token type reported by the issuer (normally "Bearer")
        expiry: Expiry time in UTC, or None if the token does not expire
    """

    access_token: str
    token_type: str = "Bearer"
    expiry: datetime | None = None

    @property
    def valid(self) -> bool:
        """True if the token is non-empty and not about to expire."""
        if not self.access_token:
            return False
        if self.expiry is None:
            return True
        expiry = self.expiry
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)
        return expiry - EXPIRY_DELTA > datetime.now(timezone.utc)
