"""Static configuration for Google's container registries."""

# Hostnames served by the GCR OAuth token path rather than stored passwords.
SUPPORTED_GCR_REGISTRIES: frozenset[str] = frozenset(
    {
        "gcr.io",
        "us.gcr.io",
        "eu.gcr.io",
        "asia.gcr.io",
        "staging-k8s.gcr.io",
        "marketplace.gcr.io",
    }
)

GCR_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/cloud-platform",)

DEFAULT_TOKEN_SOURCES: tuple[str, ...] = ("store", "gcloud_sdk")

GCR_OAUTH2_USERNAME = "oauth2accesstoken"

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
