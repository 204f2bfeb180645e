"""lrucache exception hierarchy.

Keep this module small and dependency-free: it is imported by every other
module and by tests.
"""


class LRUCacheError(Exception):
    """Base exception for all lrucache errors."""


class LRUCacheConfigError(LRUCacheError):
    """Raised for invalid cache configuration."""
