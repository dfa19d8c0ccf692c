# 📄 File: freeexperience/modules/marketplace/presentation/api/v1/projects.py
#
# 🧭 Purpose (Layman Explanation):
# Web endpoints for the project board, plus applying to a project and seeing who applied.
#
# 🧪 Purpose (Technical Summary):
# FastAPI routes over ProjectService and ApplicationService. Listings include live
# application counts; applications are nested under their project.
#
# 🔗 Dependencies:
# - FastAPI, ProjectService, ApplicationService, project and application schemas
#
# 🔄 Connected Modules / Calls From:
# - API v1 router

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from freeexperience.shared.core.exceptions import NotFoundError, PermissionDeniedError
from ....application.services import ApplicationService, ProjectService
from ....domain.models.actor import Actor
from ....domain.models.project import ProjectStatus
from ...dependencies import (
    get_application_service,
    get_current_actor,
    get_current_company,
    get_current_specialist,
    get_project_service,
)
from ..schemas.application_schemas import (
    ApplicationCreateRequest,
    ApplicationListResponse,
    ApplicationResponse,
)
from ..schemas.project_schemas import ProjectCreateRequest, ProjectListResponse, ProjectResponse

projects_router = APIRouter()


@projects_router.get("", response_model=ProjectListResponse, summary="List projects")
async def list_projects(
    project_status: Optional[ProjectStatus] = Query(ProjectStatus.OPEN, alias="status"),
    projects: ProjectService = Depends(get_project_service)
) -> ProjectListResponse:
    items = await projects.list_projects(project_status)
    return ProjectListResponse(items=[ProjectResponse.from_domain(p) for p in items], total=len(items))


@projects_router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish a project"
)
async def create_project(
    request: ProjectCreateRequest,
    actor: Actor = Depends(get_current_company),
    projects: ProjectService = Depends(get_project_service)
) -> ProjectResponse:
    project = await projects.create_project(actor, request.to_draft())
    return ProjectResponse.from_domain(project)


@projects_router.get("/{project_id}", response_model=ProjectResponse, summary="Get project")
async def get_project(
    project_id: str = Path(..., min_length=1),
    projects: ProjectService = Depends(get_project_service)
) -> ProjectResponse:
    project = await projects.get_project(project_id)
    if project is None:
        raise NotFoundError("Проект не найден", resource_type="project", resource_id=project_id)
    return ProjectResponse.from_domain(project)


# =========================================================================
# APPLICATIONS
# =========================================================================

@projects_router.get(
    "/{project_id}/applications",
    response_model=ApplicationListResponse,
    summary="Applications to a project"
)
async def list_applications(
    project_id: str = Path(..., min_length=1),
    actor: Actor = Depends(get_current_actor),
    projects: ProjectService = Depends(get_project_service),
    applications: ApplicationService = Depends(get_application_service)
) -> ApplicationListResponse:
    """
    The owning company sees every application; a specialist sees only
    their own, which is how the project page shows "already applied".
    """
    project = await projects.get_project(project_id)
    if project is None:
        raise NotFoundError("Проект не найден", resource_type="project", resource_id=project_id)

    items = await applications.list_for_project(project_id)
    if actor.is_company:
        if project.owner_id != actor.id:
            raise PermissionDeniedError(
                "Отклики видит только автор проекта",
                resource_type="project",
                resource_id=project_id,
                actor_id=actor.id
            )
    else:
        items = [a for a in items if a.applicant_id == actor.id]

    return ApplicationListResponse(
        items=[ApplicationResponse.from_domain(a) for a in items],
        total=len(items),
        has_applied=any(a.applicant_id == actor.id for a in items),
    )


@projects_router.post(
    "/{project_id}/applications",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply to a project"
)
async def submit_application(
    request: ApplicationCreateRequest,
    project_id: str = Path(..., min_length=1),
    actor: Actor = Depends(get_current_specialist),
    applications: ApplicationService = Depends(get_application_service)
) -> ApplicationResponse:
    application = await applications.submit(actor, project_id, request.message)
    return ApplicationResponse.from_domain(application)
