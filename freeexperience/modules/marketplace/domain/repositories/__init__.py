# 📄 File: freeexperience/modules/marketplace/domain/repositories/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Lists the promises every storage place makes and the search forms used to ask it for data.
#
# 🧪 Purpose (Technical Summary):
# Exports the store interfaces and filter objects.
#
# 🔗 Dependencies:
# entity_store, filters
#
# 🔄 Connected Modules / Calls From:
# Local and remote stores, application services

"""
Repository interfaces and filters for the marketplace data layer.
"""

from .entity_store import (
    ApplicationStore,
    ArticleStore,
    AssetStore,
    CompanyStore,
    EntityStore,
    ProjectStore,
    SessionStore,
    SpecialistStore,
)
from .filters import ApplicationFilter, ArticleFilter, EntityFilter, ProjectFilter, SpecialistFilter

__all__ = [
    "ApplicationStore",
    "ArticleStore",
    "AssetStore",
    "CompanyStore",
    "EntityStore",
    "ProjectStore",
    "SessionStore",
    "SpecialistStore",
    "ApplicationFilter",
    "ArticleFilter",
    "EntityFilter",
    "ProjectFilter",
    "SpecialistFilter",
]
