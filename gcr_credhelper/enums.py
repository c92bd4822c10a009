"""Enumerations for gcr-credhelper token sources."""

from enum import Enum


class TokenSource(str, Enum):
    """Origins from which a GCR access token can be obtained.

    The configured order of these values defines the fallback priority
    used by the token resolver.
    """

    ENV = "env"
    GCLOUD_SDK = "gcloud_sdk"
    STORE = "store"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def values(cls) -> tuple[str, ...]:
        """Return the recognized identifiers in declaration order."""
        return tuple(member.value for member in cls)
