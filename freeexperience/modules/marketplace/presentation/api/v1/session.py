# 📄 File: freeexperience/modules/marketplace/presentation/api/v1/session.py
#
# 🧭 Purpose (Layman Explanation):
# Lets the web app ask who is signed in right now, and ask again without waiting for the cache.
#
# 🧪 Purpose (Technical Summary):
# Session endpoints: read the current actor and force a refresh through SessionResolver.
#
# 🔗 Dependencies:
# - FastAPI router, AppContext dependency, session schemas
#
# 🔄 Connected Modules / Calls From:
# api/v1/router.py (mounted at /session)

from fastapi import APIRouter, Depends

from ...dependencies import get_app_context
from ..schemas.session_schemas import SessionResponse

session_router = APIRouter()


@session_router.get(
    "",
    response_model=SessionResponse,
    summary="Current session",
    description="Resolve the current actor (cached identity and profile lookups)"
)
async def get_session(context=Depends(get_app_context)) -> SessionResponse:
    actor = await context.resolver.resolve()
    return SessionResponse.from_actor(actor, context.resolver.state)


@session_router.post(
    "/refresh",
    response_model=SessionResponse,
    summary="Refresh session",
    description="Opportunistic refresh, throttled to once per configured interval"
)
async def refresh_session(context=Depends(get_app_context)) -> SessionResponse:
    actor = await context.resolver.refresh_on_focus()
    return SessionResponse.from_actor(actor, context.resolver.state)
