# 📄 File: freeexperience/api/v1/health.py
#
# 🧭 Purpose (Layman Explanation):
# A simple "are you alive?" endpoint that also says which storage the app is using.
#
# 🧪 Purpose (Technical Summary):
# Health endpoint reporting service status, backend kind, cache size and event bus stats.
#
# 🔗 Dependencies:
# FastAPI, AppContext
#
# 🔄 Connected Modules / Calls From:
# API v1 router, monitoring

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from freeexperience.modules.marketplace.presentation.dependencies import get_app_context

health_router = APIRouter()


@health_router.get(
    "/health",
    summary="Basic Health Check",
    description="Health check with backend and cache status",
    tags=["Health Check"]
)
async def health_check(context=Depends(get_app_context)) -> dict:
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "freeexperience-api",
        "version": context.settings.APP_VERSION,
        "backend": context.store.kind.value,
        "cache": context.cache.stats(),
        "events": context.event_bus.get_stats(),
    }
