# 📄 File: freeexperience/modules/marketplace/domain/models/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Lists the things the marketplace talks about: people, profiles, projects, applications and articles.
#
# 🧪 Purpose (Technical Summary):
# Exports the canonical domain models.
#
# 🔗 Dependencies:
# domain model modules
#
# 🔄 Connected Modules / Calls From:
# Repositories, services, schemas

"""
Marketplace domain models.
"""

from .actor import Actor, FALLBACK_DISPLAY_NAME, IdentityRecord, ResolutionState, UserRole
from .application import Application, ApplicationStatus
from .article import Article, ArticleDraft, derive_excerpt
from .project import Project, ProjectDraft, ProjectStatus
from .specialist import (
    MAX_IMAGES_PER_ITEM,
    MAX_PORTFOLIO_ITEMS,
    MAX_PREVIEW_IMAGES,
    PortfolioProject,
    Specialization,
    SpecialistProfile,
    derive_portfolio_preview,
)

__all__ = [
    "Actor",
    "FALLBACK_DISPLAY_NAME",
    "IdentityRecord",
    "ResolutionState",
    "UserRole",
    "Application",
    "ApplicationStatus",
    "Article",
    "ArticleDraft",
    "derive_excerpt",
    "Project",
    "ProjectDraft",
    "ProjectStatus",
    "MAX_IMAGES_PER_ITEM",
    "MAX_PORTFOLIO_ITEMS",
    "MAX_PREVIEW_IMAGES",
    "PortfolioProject",
    "Specialization",
    "SpecialistProfile",
    "derive_portfolio_preview",
]
