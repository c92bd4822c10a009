"""Ordered fallback over token sources."""

import logging
from collections.abc import Mapping, Sequence

from .exceptions import TokenSourceError, UnknownTokenSourceError
from .sources import Strategy

logger = logging.getLogger(__name__)


class TokenResolver:
    """Resolve a GCR access token by trying token sources in order.

    Sources are tried strictly one after another; the first one to return
    a token wins and later sources are never attempted. When every source
    fails, the error of the last attempted source is raised. Each failure
    is logged at debug level.

    Example:
        >>> resolver = TokenResolver(["env", "gcloud_sdk"], build_strategies(store))
        >>> token = resolver.resolve_access_token()
    """

    def __init__(self, sources: Sequence[str], strategies: Mapping[str, Strategy]) -> None:
        """Initialize token resolver.

        Args:
            sources: Source identifiers in priority order
            strategies: Callables producing a token, keyed by source identifier
        """
        self._sources = tuple(str(source) for source in sources)
        self._strategies = dict(strategies)

    @property
    def sources(self) -> tuple[str, ...]:
        """Configured source identifiers in priority order."""
        return self._sources

    def resolve_access_token(self) -> str:
        """Return the access token from the first source that succeeds.

        Raises:
            UnknownTokenSourceError: On reaching an unrecognized source identifier
            TokenSourceError: If no sources are configured
            Exception: The last attempted source's error, if all fail
        """
        last_error: Exception | None = None

        for source in self._sources:
            strategy = self._strategies.get(source)
            if strategy is None:
                raise UnknownTokenSourceError(source)

            try:
                token = strategy()
            except Exception as e:
                logger.debug(f"Token source {source} failed: {e}")
                last_error = e
                continue

            logger.debug(f"Resolved access token from source: {source}")
            return token

        if last_error is None:
            raise TokenSourceError(
                "no token sources configured",
                suggestion="Set token_sources to one or more of: env, gcloud_sdk, store",
            )
        raise last_error
