"""
Core - Shared Infrastructure for NotifyHub

This package provides cross-cutting components used by the apps:
- cache: Environment-scoped derived-data caching and invalidation
"""
