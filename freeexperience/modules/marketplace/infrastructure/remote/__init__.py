# 📄 File: freeexperience/modules/marketplace/infrastructure/remote/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Lists the helpers that keep marketplace data in the cloud database.
#
# 🧪 Purpose (Technical Summary):
# Exports the Supabase gateway and remote-backend stores.
#
# 🔗 Dependencies:
# supabase_gateway, remote_repositories
#
# 🔄 Connected Modules / Calls From:
# DualBackendStore, AppContext

"""
Remote (Supabase) backend for the marketplace stores.
"""

from .remote_repositories import (
    RemoteApplicationStore,
    RemoteArticleStore,
    RemoteAssetStore,
    RemoteCompanyStore,
    RemoteProjectStore,
    RemoteSessionStore,
    RemoteSpecialistStore,
    identity_from_user,
)
from .supabase_gateway import RemoteGateway, SupabaseGateway, map_remote_error

__all__ = [
    "RemoteApplicationStore",
    "RemoteArticleStore",
    "RemoteAssetStore",
    "RemoteCompanyStore",
    "RemoteProjectStore",
    "RemoteSessionStore",
    "RemoteSpecialistStore",
    "identity_from_user",
    "RemoteGateway",
    "SupabaseGateway",
    "map_remote_error",
]
