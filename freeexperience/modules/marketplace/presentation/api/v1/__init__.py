# 📄 File: freeexperience/modules/marketplace/presentation/api/v1/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Lists the marketplace web endpoint groups.
#
# 🧪 Purpose (Technical Summary):
# Exports the marketplace v1 routers.
#
# 🔗 Dependencies:
# FastAPI routers
#
# 🔄 Connected Modules / Calls From:
# freeexperience.api.v1.router

"""
Marketplace API v1 routers.
"""

from .articles import articles_router
from .auth import auth_router
from .projects import projects_router
from .session import session_router
from .specialists import specialists_router

__all__ = ["articles_router", "auth_router", "projects_router", "session_router", "specialists_router"]
