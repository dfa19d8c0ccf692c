# 📄 File: freeexperience/modules/marketplace/application/services/project_service.py
#
# 🧭 Purpose (Layman Explanation):
# Lists the projects companies have posted, shows one project, and lets a company post a
# new one after checking it has a title, a description and a sensible deadline.
#
# 🧪 Purpose (Technical Summary):
# Project read paths are memoized under ``projects:{status}`` and ``project:{id}``.
# Application counts are recomputed from the application store in one round trip per
# listing; when that count cannot be obtained the stored count is kept.
#
# 🔗 Dependencies:
# - DualBackendStore (projects, applications, companies), KeyedAsyncCache
#
# 🔄 Connected Modules / Calls From:
# - Projects API router, ApplicationService

from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from freeexperience.shared.core.exceptions import PermissionDeniedError, TransportFailureError, ValidationError
from freeexperience.shared.infrastructure.cache import KeyedAsyncCache
from freeexperience.shared.utils.helpers import clean_whitespace, utc_now
from freeexperience.shared.utils.logging import get_logger
from ...domain.models.actor import Actor
from ...domain.models.project import (
    DEFAULT_PROJECT_SPECIALIZATION,
    FALLBACK_COMPANY_NAME,
    Project,
    ProjectDraft,
    ProjectStatus,
)
from ...domain.repositories.filters import ProjectFilter
from ...infrastructure.dual_backend_store import DualBackendStore

logger = get_logger(__name__)

PROJECTS_CACHE_PREFIX = "projects"


def projects_cache_key(status: Optional[ProjectStatus]) -> str:
    return f"{PROJECTS_CACHE_PREFIX}:{status.value if status else 'all'}"


def project_cache_key(project_id: str) -> str:
    return f"project:{project_id}"


def _newest_first(project: Project) -> datetime:
    return project.created_at or datetime.min.replace(tzinfo=timezone.utc)


class ProjectService:
    """Project board"""

    def __init__(
        self,
        store: DualBackendStore,
        cache: KeyedAsyncCache,
        projects_ttl: float = 30.0,
        today: Callable[[], date] = date.today
    ):
        self.store = store
        self.cache = cache
        self.projects_ttl = projects_ttl
        self._today = today

    async def list_projects(
        self,
        status: Optional[ProjectStatus] = ProjectStatus.OPEN,
        force_refresh: bool = False
    ) -> List[Project]:
        """
        Projects with the given status, newest first.

        Args:
            status: Status to list; None lists every project
            force_refresh: Bypass a fresh cached listing
        """
        async def fetch() -> List[Project]:
            projects = await self.store.projects.list(ProjectFilter(status=status))
            projects = await self._with_live_counts(projects)
            return sorted(projects, key=_newest_first, reverse=True)

        return await self.cache.get(
            projects_cache_key(status), fetch, ttl=self.projects_ttl, force_refresh=force_refresh
        )

    async def get_project(self, project_id: str, force_refresh: bool = False) -> Optional[Project]:
        async def fetch() -> Optional[Project]:
            project = await self.store.projects.read(project_id)
            if project is None:
                return None
            counted = await self._with_live_counts([project])
            return counted[0]

        return await self.cache.get(
            project_cache_key(project_id), fetch, ttl=self.projects_ttl, force_refresh=force_refresh
        )

    async def create_project(self, actor: Actor, draft: ProjectDraft) -> Project:
        """
        Publish a project on behalf of a company.

        Args:
            actor: Current actor, must be a company
            draft: Project fields as entered

        Returns:
            Project: The stored project with its assigned id

        Raises:
            PermissionDeniedError: If the actor is not a company
            ValidationError: If title or description is missing or the deadline has passed
        """
        if not actor.is_company:
            raise PermissionDeniedError(
                "Только компании могут публиковать проекты",
                resource_type="project",
                actor_id=actor.id
            )

        title = clean_whitespace(draft.title)
        description = draft.description.strip()
        if not title:
            raise ValidationError("Укажите название проекта", field="title")
        if not description:
            raise ValidationError("Добавьте описание проекта", field="description")
        if draft.deadline is not None and draft.deadline < self._today():
            raise ValidationError(
                "Дедлайн не может быть в прошлом",
                field="deadline",
                value=draft.deadline.isoformat()
            )

        skills = [s.strip() for s in draft.skills if s and s.strip()]
        company_name = (
            await self.store.companies.read_name(actor.id)
            or actor.display_name
            or FALLBACK_COMPANY_NAME
        )

        project = Project(
            id="",
            owner_id=actor.id,
            title=title,
            description=description,
            full_description=draft.full_description.strip() or description,
            specialization=draft.specialization or (skills[0] if skills else DEFAULT_PROJECT_SPECIALIZATION),
            skills=skills,
            location=draft.location.strip(),
            deadline=draft.deadline,
            budget=draft.budget,
            timeline=draft.timeline,
            requirements=[r for r in draft.requirements if r and r.strip()],
            deliverables=[d for d in draft.deliverables if d and d.strip()],
            status=ProjectStatus.OPEN,
            company_name=company_name,
            created_at=utc_now(),
        )

        saved = await self.store.projects.write(project)
        self.cache.invalidate(PROJECTS_CACHE_PREFIX)
        logger.log_user_action("create_project", actor.id, resource=f"project:{saved.id}")
        return saved

    async def _with_live_counts(self, projects: Sequence[Project]) -> List[Project]:
        if not projects:
            return []

        try:
            counts: Dict[str, int] = await self.store.applications.count_by_project([p.id for p in projects])
        except TransportFailureError as e:
            logger.warning(
                f"Live application counts unavailable, keeping stored counts: {e.message}",
                extra={"projects": len(projects)}
            )
            return list(projects)

        return [
            p.model_copy(update={"application_count": counts.get(p.id, p.application_count)})
            for p in projects
        ]
