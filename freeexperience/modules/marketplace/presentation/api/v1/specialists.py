# 📄 File: freeexperience/modules/marketplace/presentation/api/v1/specialists.py
#
# 🧭 Purpose (Layman Explanation):
# Web endpoints for browsing specialists, opening one card, editing your own card and
# uploading pictures for it.
#
# 🧪 Purpose (Technical Summary):
# FastAPI routes over ProfileService. Listing supports text search, specialization
# filter and sorting; updates are partial and owner-only; uploads use multipart form data.
#
# 🔗 Dependencies:
# - FastAPI (UploadFile via python-multipart), ProfileService, specialist schemas
#
# 🔄 Connected Modules / Calls From:
# - API v1 router

from typing import Optional

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile, status

from freeexperience.shared.core.exceptions import NotFoundError
from ....application.services import ProfileService, SpecialistSort
from ....domain.models.actor import Actor
from ....domain.models.specialist import Specialization
from ...dependencies import get_current_specialist, get_profile_service
from ..schemas.specialist_schemas import (
    AssetUploadResponse,
    ProfileUpdateRequest,
    SpecialistListResponse,
    SpecialistResponse,
)

specialists_router = APIRouter()


@specialists_router.get("", response_model=SpecialistListResponse, summary="Search specialists")
async def list_specialists(
    q: Optional[str] = Query(None, max_length=200, description="Name, specialization or bio text"),
    specialization: Optional[Specialization] = Query(None),
    include_hidden: bool = Query(False, description="Include profiles hidden from search"),
    sort_by: SpecialistSort = Query(SpecialistSort.HIRED),
    profiles: ProfileService = Depends(get_profile_service)
) -> SpecialistListResponse:
    items = await profiles.list_specialists(q, specialization, include_hidden, sort_by)
    return SpecialistListResponse(
        items=[SpecialistResponse.from_domain(p) for p in items],
        total=len(items),
    )


@specialists_router.put("/me", response_model=SpecialistResponse, summary="Update own profile")
async def update_my_profile(
    request: ProfileUpdateRequest,
    actor: Actor = Depends(get_current_specialist),
    profiles: ProfileService = Depends(get_profile_service)
) -> SpecialistResponse:
    """
    Apply a partial update to the current specialist's profile.

    Only fields present in the request body are changed.
    """
    changes = request.model_dump(exclude_unset=True)
    profile = await profiles.save_profile(actor, changes)
    return SpecialistResponse.from_domain(profile)


@specialists_router.post(
    "/me/assets",
    response_model=AssetUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a profile image"
)
async def upload_asset(
    file: UploadFile = File(..., description="Avatar or portfolio image"),
    actor: Actor = Depends(get_current_specialist),
    profiles: ProfileService = Depends(get_profile_service)
) -> AssetUploadResponse:
    data = await file.read()
    content_type = file.content_type or "application/octet-stream"
    url = await profiles.upload_asset(actor, file.filename or "image", data, content_type)
    return AssetUploadResponse(url=url, content_type=content_type, size_bytes=len(data))


@specialists_router.get("/{specialist_id}", response_model=SpecialistResponse, summary="Get specialist")
async def get_specialist(
    specialist_id: str = Path(..., min_length=1),
    profiles: ProfileService = Depends(get_profile_service)
) -> SpecialistResponse:
    profile = await profiles.get_specialist(specialist_id)
    if profile is None:
        raise NotFoundError("Специалист не найден", resource_type="specialist", resource_id=specialist_id)
    return SpecialistResponse.from_domain(profile)
