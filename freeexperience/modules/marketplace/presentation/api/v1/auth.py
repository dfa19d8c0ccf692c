# 📄 File: freeexperience/modules/marketplace/presentation/api/v1/auth.py
#
# 🧭 Purpose (Layman Explanation):
# Web endpoints for creating an account, logging in and logging out.
#
# 🧪 Purpose (Technical Summary):
# Thin FastAPI routes over AuthService; each returns the resulting session.
#
# 🔗 Dependencies:
# FastAPI, AuthService, auth and session schemas
#
# 🔄 Connected Modules / Calls From:
# API v1 router

from fastapi import APIRouter, Depends, status

from ....application.services import AuthService
from ...dependencies import get_app_context, get_auth_service
from ..schemas.auth_schemas import SignInRequest, SignUpRequest
from ..schemas.session_schemas import SessionResponse

auth_router = APIRouter()


@auth_router.post(
    "/sign-up",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an account"
)
async def sign_up(
    request: SignUpRequest,
    auth: AuthService = Depends(get_auth_service),
    context=Depends(get_app_context)
) -> SessionResponse:
    """
    Register a specialist or company account.

    The account is signed in immediately unless the identity provider
    requires email confirmation, in which case the session is empty.
    """
    actor = await auth.sign_up(request.email, request.password, request.role, request.display_name)
    return SessionResponse.from_actor(actor, context.resolver.state)


@auth_router.post("/sign-in", response_model=SessionResponse, summary="Sign in with email and password")
async def sign_in(
    request: SignInRequest,
    auth: AuthService = Depends(get_auth_service),
    context=Depends(get_app_context)
) -> SessionResponse:
    actor = await auth.sign_in(request.email, request.password)
    return SessionResponse.from_actor(actor, context.resolver.state)


@auth_router.post("/sign-out", response_model=SessionResponse, summary="Sign out")
async def sign_out(
    auth: AuthService = Depends(get_auth_service),
    context=Depends(get_app_context)
) -> SessionResponse:
    await auth.sign_out()
    return SessionResponse.from_actor(None, context.resolver.state)
