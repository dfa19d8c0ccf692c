# 📄 File: freeexperience/shared/infrastructure/storage/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Exposes the local notebook used when no cloud database is configured.
#
# 🧪 Purpose (Technical Summary):
# Exports LocalKeyValueStore.
#
# 🔗 Dependencies:
# local_store
#
# 🔄 Connected Modules / Calls From:
# DualBackendStore, AppContext

"""
Local durable key-value storage used when the remote backend is unavailable.
"""

from .local_store import LocalKeyValueStore

__all__ = ["LocalKeyValueStore"]
