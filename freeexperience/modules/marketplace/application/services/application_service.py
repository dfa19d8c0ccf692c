# 📄 File: freeexperience/modules/marketplace/application/services/application_service.py
#
# 🧭 Purpose (Layman Explanation):
# Lets a specialist apply to a project with a short message, and stops them from
# applying to the same project twice.
#
# 🧪 Purpose (Technical Summary):
# Application use cases. Uniqueness of (project, applicant) is enforced by a lookup in the
# same backend before the insert; the remote unique constraint backs it up. The lookup and
# the insert are not atomic across processes.
#
# 🔗 Dependencies:
# - DualBackendStore (projects, applications), KeyedAsyncCache
#
# 🔄 Connected Modules / Calls From:
# - Applications API router

from datetime import datetime, timezone
from typing import List

from freeexperience.shared.core.exceptions import (
    DuplicateApplicationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from freeexperience.shared.infrastructure.cache import KeyedAsyncCache
from freeexperience.shared.utils.helpers import utc_now
from freeexperience.shared.utils.logging import get_logger
from ...domain.models.actor import Actor
from ...domain.models.application import Application
from ...domain.repositories.filters import ApplicationFilter
from ...infrastructure.dual_backend_store import DualBackendStore
from .project_service import PROJECTS_CACHE_PREFIX, project_cache_key

logger = get_logger(__name__)


class ApplicationService:
    """Applying to projects"""

    def __init__(self, store: DualBackendStore, cache: KeyedAsyncCache):
        self.store = store
        self.cache = cache

    async def submit(self, actor: Actor, project_id: str, message: str) -> Application:
        """
        Apply to a project.

        Args:
            actor: Current actor, must be a specialist
            project_id: Project to apply to
            message: Cover message, must not be blank

        Returns:
            Application: The stored application

        Raises:
            PermissionDeniedError: If the actor is not a specialist
            ValidationError: If the message is blank
            NotFoundError: If the project does not exist
            DuplicateApplicationError: If the actor already applied
        """
        if not actor.is_specialist:
            raise PermissionDeniedError(
                "Откликаться на проекты могут только специалисты",
                resource_type="project",
                resource_id=project_id,
                actor_id=actor.id
            )

        text = (message or "").strip()
        if not text:
            raise ValidationError("Напишите сопроводительное сообщение", field="message")

        project = await self.store.projects.read(project_id)
        if project is None:
            raise NotFoundError("Проект не найден", resource_type="project", resource_id=project_id)

        if await self.has_applied(project_id, actor.id):
            raise DuplicateApplicationError(project_id=project_id, applicant_id=actor.id)

        application = await self.store.applications.write(Application(
            id="",
            project_id=project_id,
            applicant_id=actor.id,
            message=text,
            applicant_name=actor.display_name,
            applicant_email=actor.email,
            project_title=project.title,
            created_at=utc_now(),
        ))

        self.cache.invalidate(PROJECTS_CACHE_PREFIX)
        self.cache.invalidate(project_cache_key(project_id))
        logger.log_user_action("apply", actor.id, resource=f"project:{project_id}")
        return application

    async def list_for_project(self, project_id: str) -> List[Application]:
        """Applications to one project, newest first."""
        applications = await self.store.applications.list(ApplicationFilter(project_id=project_id))
        return sorted(
            applications,
            key=lambda a: a.created_at or datetime.min.replace(tzinfo=timezone.utc),
            reverse=True,
        )

    async def has_applied(self, project_id: str, applicant_id: str) -> bool:
        return await self.store.applications.exists(
            ApplicationFilter(project_id=project_id, applicant_id=applicant_id)
        )
