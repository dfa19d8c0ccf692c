# 📄 File: freeexperience/shared/infrastructure/cache/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Exposes the short-lived memory cache that avoids repeating the same lookups.
#
# 🧪 Purpose (Technical Summary):
# Exports KeyedAsyncCache.
#
# 🔗 Dependencies:
# keyed_async_cache
#
# 🔄 Connected Modules / Calls From:
# AppContext, services, SessionResolver

"""
In-process caching for async reads.
"""

from .keyed_async_cache import CacheEntry, KeyedAsyncCache

__all__ = ["CacheEntry", "KeyedAsyncCache"]
