# 📄 File: freeexperience/modules/marketplace/infrastructure/local/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Lists the helpers that keep marketplace data in the local notebook.
#
# 🧪 Purpose (Technical Summary):
# Exports the local-backend stores.
#
# 🔗 Dependencies:
# local_records, local_repositories, local_session_store
#
# 🔄 Connected Modules / Calls From:
# DualBackendStore

"""
Local durable-store backend for the marketplace stores.
"""

from .local_records import LocalRecords
from .local_repositories import (
    LocalApplicationStore,
    LocalArticleStore,
    LocalAssetStore,
    LocalCompanyStore,
    LocalProjectStore,
    LocalSpecialistStore,
)
from .local_session_store import LocalSessionStore

__all__ = [
    "LocalRecords",
    "LocalApplicationStore",
    "LocalArticleStore",
    "LocalAssetStore",
    "LocalCompanyStore",
    "LocalProjectStore",
    "LocalSpecialistStore",
    "LocalSessionStore",
]
