# 📄 File: freeexperience/api/v1/router.py
#
# 🧭 Purpose (Layman Explanation):
# The traffic director for version 1 of the API: sends session, login, specialist,
# project and article requests to the right handlers.
#
# 🧪 Purpose (Technical Summary):
# Aggregates the marketplace routers and the health router under one APIRouter that the
# application mounts at /api/v1.
#
# 🔗 Dependencies:
# FastAPI, marketplace presentation routers
#
# 🔄 Connected Modules / Calls From:
# freeexperience.main

from fastapi import APIRouter

from freeexperience.modules.marketplace.presentation.api.v1 import (
    articles_router,
    auth_router,
    projects_router,
    session_router,
    specialists_router,
)
from .health import health_router

api_v1_router = APIRouter()

api_v1_router.include_router(health_router)
api_v1_router.include_router(session_router, prefix="/session", tags=["Session"])
api_v1_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_v1_router.include_router(specialists_router, prefix="/specialists", tags=["Specialists"])
api_v1_router.include_router(projects_router, prefix="/projects", tags=["Projects"])
api_v1_router.include_router(articles_router, prefix="/articles", tags=["Articles"])
