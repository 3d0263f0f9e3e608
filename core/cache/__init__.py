"""
NotifyHub Cache Module - Environment-Scoped Caching Infrastructure

This module provides:
- Cache key builder with environment isolation
- Namespaced cache for derived lookups
- Prefix-wide cache invalidation

Usage:
    from core.cache import (
        CacheKeyPrefix, namespaced_cache, cache_invalidator
    )
"""

from core.cache.layers import (
    # Key builders
    CacheKeyBuilder,
    CacheKeyPrefix,

    # Derived-data caching
    NamespacedCache,
    namespaced_cache,

    # Invalidation
    CacheInvalidator,
    cache_invalidator,
)

__all__ = [
    'CacheKeyBuilder',
    'CacheKeyPrefix',
    'NamespacedCache',
    'namespaced_cache',
    'CacheInvalidator',
    'cache_invalidator',
]
