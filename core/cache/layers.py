"""
Namespaced Caching Layer for NotifyHub

This module provides:
- Cache key builders: Consistent, environment-scoped cache keys
- Namespaced cache: Derived-data caching grouped under a key prefix
- Cache invalidation: Evict every key of a prefix for one environment

Invalidation works on every Django cache backend. Each (prefix, environment)
pair owns a namespace token stored in the cache; data keys embed the token,
so replacing the token makes all previously cached entries unreachable. When
the backend supports pattern deletion (django-redis), the stale keys are
removed as well.
"""

import logging
import uuid
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from django.core.cache import caches

logger = logging.getLogger(__name__)


class CacheKeyPrefix(str, Enum):
    """Namespaces for derived data cached per environment."""

    INTEGRATION = 'integration'


# =============================================================================
# CACHE KEY BUILDERS
# =============================================================================

class CacheKeyBuilder:
    """
    Utility class for building consistent, namespaced cache keys.

    Ensures environment isolation and prevents key collisions across
    environments and prefixes.
    """

    # Global prefix for all NotifyHub cache keys
    PREFIX = 'nh'

    # Cache version (increment to invalidate all caches)
    VERSION = 1

    @classmethod
    def build(
        cls,
        *parts: Any,
        environment_id: Optional[str] = None,
        include_version: bool = True
    ) -> str:
        """
        Build a namespaced cache key.

        Args:
            *parts: Key components to join
            environment_id: Environment ID for isolation
            include_version: Include cache version

        Returns:
            Formatted cache key string
        """
        components = [cls.PREFIX]

        if include_version:
            components.append(f'v{cls.VERSION}')

        if environment_id:
            components.append(f'e:{environment_id}')

        components.extend(_part(p) for p in parts)

        return ':'.join(str(c) for c in components)

    @classmethod
    def namespace_key(cls, prefix: CacheKeyPrefix, environment_id: str) -> str:
        """Build the key holding the namespace token of a prefix."""
        return cls.build('ns', prefix, environment_id=environment_id)

    @classmethod
    def pattern_key(cls, prefix: CacheKeyPrefix, environment_id: str) -> str:
        """Build pattern key matching all data keys of a prefix."""
        base = cls.build(prefix, environment_id=environment_id)
        return f'{base}:*'


def _part(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


# =============================================================================
# NAMESPACED CACHE
# =============================================================================

class NamespacedCache:
    """
    Cache for derived data grouped by prefix and environment.

    Usage:
        nc = NamespacedCache(timeout=600)

        integrations = nc.get_or_compute(
            CacheKeyPrefix.INTEGRATION,
            'active:email',
            lambda: list(queryset),
            environment_id=environment_id,
        )
    """

    def __init__(self, timeout: int = 300, cache_alias: str = 'default'):
        self.timeout = timeout
        self.cache_alias = cache_alias

    @property
    def cache(self):
        return caches[self.cache_alias]

    def namespace_token(self, prefix: CacheKeyPrefix, environment_id: str) -> str:
        """Return the current namespace token, creating one if missing."""
        ns_key = CacheKeyBuilder.namespace_key(prefix, environment_id)
        token = self.cache.get(ns_key)
        if token is None:
            # add() keeps a token written concurrently by another process
            self.cache.add(ns_key, uuid.uuid4().hex, timeout=None)
            token = self.cache.get(ns_key)
        return token

    def build_key(self, prefix: CacheKeyPrefix, key: str, environment_id: str) -> str:
        token = self.namespace_token(prefix, environment_id)
        return CacheKeyBuilder.build(prefix, token, key, environment_id=environment_id)

    def get_or_compute(
        self,
        prefix: CacheKeyPrefix,
        key: str,
        compute_func: Callable[[], Any],
        environment_id: str,
        timeout: Optional[int] = None
    ) -> Any:
        """
        Get cached value or compute and cache.

        Args:
            prefix: Namespace the value belongs to
            key: Cache key within the namespace
            compute_func: Function to compute value on cache miss
            environment_id: Environment the value is scoped to
            timeout: Optional timeout override

        Returns:
            Cached or computed value
        """
        timeout = timeout or self.timeout
        cache_key = self.build_key(prefix, key, environment_id)

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"NamespacedCache HIT: {cache_key}")
            return cached

        logger.debug(f"NamespacedCache MISS: {cache_key}")
        result = compute_func()
        self.cache.set(cache_key, result, timeout)

        return result


# =============================================================================
# CACHE INVALIDATION
# =============================================================================

class CacheInvalidator:
    """
    Evicts cached derived data for whole prefixes of one environment.

    Backend errors are not caught: a failed invalidation must reach the
    caller rather than leave stale entries readable.

    Usage:
        invalidator = CacheInvalidator()
        invalidator.clear_cache([CacheKeyPrefix.INTEGRATION], environment_id=env_id)
    """

    def __init__(self, cache_alias: str = 'default'):
        self.cache_alias = cache_alias

    @property
    def cache(self):
        return caches[self.cache_alias]

    def clear_cache(self, prefixes: Iterable[CacheKeyPrefix], environment_id: str) -> None:
        """
        Invalidate every cached key under the given prefixes.

        Args:
            prefixes: Key prefixes to evict
            environment_id: Environment whose entries are evicted
        """
        environment_id = str(environment_id)
        for prefix in prefixes:
            ns_key = CacheKeyBuilder.namespace_key(prefix, environment_id)
            self.cache.set(ns_key, uuid.uuid4().hex, timeout=None)

            # Redis backend supports delete_pattern
            if hasattr(self.cache, 'delete_pattern'):
                self.cache.delete_pattern(CacheKeyBuilder.pattern_key(prefix, environment_id))

            logger.debug(f"Invalidated cache prefix '{_part(prefix)}' for environment {environment_id}")


# Global instances
namespaced_cache = NamespacedCache()
cache_invalidator = CacheInvalidator()
