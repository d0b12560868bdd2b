"""
Optimization module for the atomizer.

Provides:
- Bounded, expiring callback token cache
"""

from atomizer.optimization.cache import CacheEntry, CallbackTokenCache

__all__ = [
    "CacheEntry",
    "CallbackTokenCache",
]
