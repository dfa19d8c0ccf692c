# 📄 File: freeexperience/modules/marketplace/application/services/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Lists the marketplace actions: signing in, editing profiles, posting projects, applying and writing articles.
#
# 🧪 Purpose (Technical Summary):
# Exports the application services built by AppContext.
#
# 🔗 Dependencies:
# auth, profile, project, application and article services
#
# 🔄 Connected Modules / Calls From:
# freeexperience.context, presentation dependencies

"""
Marketplace application services.
"""

from .application_service import ApplicationService
from .article_service import ArticleService
from .auth_service import AuthService, derive_display_name
from .profile_service import ProfileService, SpecialistSort
from .project_service import ProjectService

__all__ = [
    "ApplicationService",
    "ArticleService",
    "AuthService",
    "derive_display_name",
    "ProfileService",
    "SpecialistSort",
    "ProjectService",
]
