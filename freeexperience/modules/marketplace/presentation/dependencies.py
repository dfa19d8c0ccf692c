# 📄 File: freeexperience/modules/marketplace/presentation/dependencies.py
#
# 🧭 Purpose (Layman Explanation):
# Small helpers every web endpoint uses to reach the shared services and to find out who
# is logged in, refusing the request when someone must be logged in but is not.
#
# 🧪 Purpose (Technical Summary):
# FastAPI dependencies resolving the AppContext from ``app.state`` and the current Actor
# through the SessionResolver. The resolved actor id is bound to the log context.
#
# 🔗 Dependencies:
# FastAPI, AppContext, SessionResolver
#
# 🔄 Connected Modules / Calls From:
# All marketplace routers

from typing import Optional

from fastapi import Depends, Request

from freeexperience.shared.core.exceptions import AuthenticationError, PermissionDeniedError
from freeexperience.shared.utils.logging import actor_id_var
from ..application.services import (
    ApplicationService,
    ArticleService,
    AuthService,
    ProfileService,
    ProjectService,
)
from ..domain.models.actor import Actor


def get_app_context(request: Request):
    """AppContext built by the application lifespan."""
    return request.app.state.context


def get_auth_service(context=Depends(get_app_context)) -> AuthService:
    return context.auth


def get_profile_service(context=Depends(get_app_context)) -> ProfileService:
    return context.profiles


def get_project_service(context=Depends(get_app_context)) -> ProjectService:
    return context.projects


def get_application_service(context=Depends(get_app_context)) -> ApplicationService:
    return context.applications


def get_article_service(context=Depends(get_app_context)) -> ArticleService:
    return context.articles


async def get_optional_actor(context=Depends(get_app_context)) -> Optional[Actor]:
    """
    Current actor, or None for anonymous requests.

    Resolution goes through the cache, so concurrent requests share the
    identity and profile lookups.
    """
    actor = await context.resolver.resolve()
    if actor is not None:
        actor_id_var.set(actor.id)
    return actor


async def get_current_actor(actor: Optional[Actor] = Depends(get_optional_actor)) -> Actor:
    """
    Current actor, required.

    Raises:
        AuthenticationError: If nobody is signed in
    """
    if actor is None:
        raise AuthenticationError("Войдите, чтобы продолжить")
    return actor


async def get_current_specialist(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not actor.is_specialist:
        raise PermissionDeniedError("Доступно только специалистам", actor_id=actor.id)
    return actor


async def get_current_company(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not actor.is_company:
        raise PermissionDeniedError("Доступно только компаниям", actor_id=actor.id)
    return actor
