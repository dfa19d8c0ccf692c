# 📄 File: freeexperience/modules/marketplace/infrastructure/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Lists the two places data can live (cloud or local notebook) and the switch that picks one.
#
# 🧪 Purpose (Technical Summary):
# Exports DualBackendStore and its builders.
#
# 🔗 Dependencies:
# dual_backend_store, local, remote
#
# 🔄 Connected Modules / Calls From:
# freeexperience.context, tests

"""
Marketplace infrastructure: local and remote backends and the store that
binds one of them for the process.
"""

from .dual_backend_store import (
    BackendKind,
    DualBackendStore,
    build_dual_backend_store,
    build_local_store,
    build_remote_store,
)

__all__ = [
    "BackendKind",
    "DualBackendStore",
    "build_dual_backend_store",
    "build_local_store",
    "build_remote_store",
]
