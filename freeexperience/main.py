# 📄 File: freeexperience/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main control center that starts the FreeExperience backend, picks where data lives,
# connects all the parts together and gets ready to answer the web app.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point: logging setup, AppContext lifecycle in the
# lifespan handler, middleware, router registration under /api/v1 and the exception
# handler that renders FreeExperienceException as the standard error envelope.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn
# - freeexperience.shared.config.settings
# - freeexperience.context (AppContext)
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup (``freeexperience`` console script)
# - Tests (create_application with an injected context)

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from freeexperience.api.middleware import ErrorHandlingMiddleware
from freeexperience.api.v1.router import api_v1_router
from freeexperience.context import AppContext
from freeexperience.shared.config.settings import Settings, get_settings
from freeexperience.shared.core.exceptions import ErrorKind, FreeExperienceException, is_server_error
from freeexperience.shared.utils.logging import (
    get_logger,
    log_shutdown_event,
    log_startup_event,
    setup_logging,
)

logger = get_logger(__name__)


def _error_body(request: Request, code: str, message: str, details: dict) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": getattr(request.state, "request_id", None),
        }
    }


def create_application(
    settings: Optional[Settings] = None,
    context: Optional[AppContext] = None
) -> FastAPI:
    """
    Application factory function.

    Args:
        settings: Settings override (get_settings() when omitted)
        context: Prebuilt AppContext; built from settings at startup when omitted

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        log_startup_event(settings.APP_NAME, settings.APP_VERSION, {"environment": settings.ENVIRONMENT})

        app_context = context or AppContext.build(settings)
        app.state.context = app_context
        await app_context.start()
        logger.info("✅ FreeExperience API startup complete")

        try:
            yield
        finally:
            await app_context.close()
            log_shutdown_event(settings.APP_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )
    app.add_middleware(ErrorHandlingMiddleware, settings=settings)

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(api_v1_router, prefix="/api/v1")

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(FreeExperienceException)
    async def freeexperience_exception_handler(request: Request, exc: FreeExperienceException) -> JSONResponse:
        """Render domain and backend failures as the standard error envelope."""
        if is_server_error(exc):
            logger.error(
                f"{exc.error_code} in {request.method} {request.url.path}: {exc.message}",
                extra={"details": exc.details}
            )
        else:
            logger.info(f"{exc.error_code} in {request.method} {request.url.path}: {exc.message}")

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.error_code, exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=_error_body(
                request,
                ErrorKind.VALIDATION.value,
                "Request validation failed",
                {"validation_errors": [
                    {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
                    for err in exc.errors()
                ]},
            ),
        )

    # =========================================================================
    # ROOT ENDPOINTS
    # =========================================================================

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "description": settings.APP_DESCRIPTION,
            "docs_url": "/docs" if settings.DEBUG else None,
            "health_check": "/api/v1/health",
            "api_base": "/api/v1",
        }

    @app.get("/favicon.ico", include_in_schema=False)
    async def favicon():
        return Response(status_code=204)

    return app


def main():
    """
    Run the API with uvicorn.

    Used by the ``freeexperience`` console script and ``python -m freeexperience.main``.
    """
    settings = get_settings()
    setup_logging()
    uvicorn.run(
        "freeexperience.main:create_application",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
