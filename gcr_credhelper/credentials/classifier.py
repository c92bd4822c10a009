"""Classification of registry server URLs as GCR or third-party."""

from collections.abc import Iterable
from urllib.parse import urlsplit

from gcr_credhelper.config.registries import SUPPORTED_GCR_REGISTRIES


class RegistryClassifier:
    """Decide whether a server URL belongs to a GCR registry.

    Callers may pass either a bare host (``gcr.io``) or a full URL
    (``https://gcr.io``); both forms are matched against the registry set.

    Example:
        >>> classifier = RegistryClassifier({"gcr.io"})
        >>> classifier.is_privileged_registry("https://gcr.io")
        True
        >>> classifier.is_privileged_registry("quay.io")
        False
    """

    def __init__(self, registries: Iterable[str] = SUPPORTED_GCR_REGISTRIES) -> None:
        self._registries = frozenset(registries)

    @property
    def registries(self) -> frozenset[str]:
        """Registry hostnames treated as GCR."""
        return self._registries

    def is_privileged_registry(self, server_url: str) -> bool:
        """Return True if *server_url* names one of the configured registries.

        The parsed network location (``host[:port]``) and the raw input are
        both checked. Input that fails to parse, or that contains ASCII
        control characters, is never privileged.
        """
        # urlsplit strips tabs and newlines instead of rejecting them
        if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in server_url):
            return False
        try:
            parsed = urlsplit(server_url)
            # Accessing port validates it; a malformed port raises ValueError.
            _ = parsed.port
        except ValueError:
            return False
        host = parsed.netloc.rpartition("@")[2]
        return host in self._registries or server_url in self._registries


_default_classifier = RegistryClassifier()


def is_privileged_registry(server_url: str) -> bool:
    """Classify *server_url* against :data:`SUPPORTED_GCR_REGISTRIES`."""
    return _default_classifier.is_privileged_registry(server_url)
