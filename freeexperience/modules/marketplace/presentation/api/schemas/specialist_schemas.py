# 📄 File: freeexperience/modules/marketplace/presentation/api/schemas/specialist_schemas.py
#
# 🧭 Purpose (Layman Explanation):
# The shapes of specialist cards sent to the screen and of the "edit my profile" form.
#
# 🧪 Purpose (Technical Summary):
# Pydantic schemas for the specialist directory. Responses mirror the canonical
# SpecialistProfile including the derived preview images; the update request is partial,
# only fields that were sent are applied.
#
# 🔗 Dependencies:
# - pydantic, domain specialist model
#
# 🔄 Connected Modules / Calls From:
# - Specialists router

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ....domain.models.specialist import (
    MAX_IMAGES_PER_ITEM,
    MAX_PORTFOLIO_ITEMS,
    Specialization,
    SpecialistProfile,
)


class PortfolioProjectSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str = ""
    description: str = ""
    images: List[str] = Field(default_factory=list, max_length=MAX_IMAGES_PER_ITEM)
    link: Optional[str] = None


class SpecialistResponse(BaseModel):
    """Canonical specialist profile"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    full_name: str
    specialization: Specialization
    bio: str
    telegram_handle: str
    contact_email: Optional[str] = None
    avatar_url: Optional[str] = None
    visible_in_search: bool
    portfolio_items: List[PortfolioProjectSchema]
    portfolio_preview_images: List[str]
    rating: float
    hired_count: int

    @classmethod
    def from_domain(cls, profile: SpecialistProfile) -> "SpecialistResponse":
        return cls.model_validate(profile)


class SpecialistListResponse(BaseModel):
    items: List[SpecialistResponse]
    total: int


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields keep their stored value"""
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    specialization: Optional[Specialization] = None
    bio: Optional[str] = Field(None, max_length=2000)
    telegram_handle: Optional[str] = Field(None, max_length=100)
    contact_email: Optional[str] = None
    avatar_url: Optional[str] = None
    visible_in_search: Optional[bool] = None
    portfolio_items: Optional[List[PortfolioProjectSchema]] = Field(None, max_length=MAX_PORTFOLIO_ITEMS)


class AssetUploadResponse(BaseModel):
    url: str
    content_type: str
    size_bytes: int
