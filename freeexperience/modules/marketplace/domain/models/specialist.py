# 📄 File: freeexperience/modules/marketplace/domain/models/specialist.py
#
# 🧭 Purpose (Layman Explanation):
# Describes a specialist's public card: name, field of work, short bio, contacts,
# and up to three portfolio projects with pictures.
#
# 🧪 Purpose (Technical Summary):
# Canonical SpecialistProfile and PortfolioProject models, the closed Specialization set,
# portfolio limits and the derived portfolio preview (safe image URLs only).
#
# 🔗 Dependencies:
# pydantic, enum, typing
#
# 🔄 Connected Modules / Calls From:
# SchemaReconciler, ProfileService, SessionResolver, specialist stores, API schemas

from enum import Enum
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

MAX_PORTFOLIO_ITEMS = 3
MAX_IMAGES_PER_ITEM = 3
MAX_PREVIEW_IMAGES = 5


class Specialization(str, Enum):
    """Closed set of specialist directions"""
    DESIGN = "Дизайн"
    SMM = "SMM"
    WEB_DEVELOPMENT = "Веб-разработка"

    @classmethod
    def parse(cls, value: Any) -> "Specialization":
        """Read a stored value, defaulting unknown or missing ones to design."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value == value.strip():
                    return member
        return cls.DESIGN


def is_preview_url(url: Any) -> bool:
    """http(s) or root-relative URL; protocol-relative and inline data are rejected."""
    if not isinstance(url, str):
        return False
    if url.startswith(("http://", "https://")):
        return True
    return url.startswith("/") and not url.startswith("//")


def derive_portfolio_preview(items: Iterable["PortfolioProject"]) -> List[str]:
    """
    Collect up to five displayable image URLs across portfolio items.

    Args:
        items: Portfolio projects in display order

    Returns:
        List[str]: URLs in source order, inline base64 payloads excluded
    """
    preview: List[str] = []
    for item in items:
        for url in item.images:
            if is_preview_url(url):
                preview.append(url)
                if len(preview) == MAX_PREVIEW_IMAGES:
                    return preview
    return preview


class PortfolioProject(BaseModel):
    """One portfolio entry with at most three images"""
    id: str
    title: str = ""
    description: str = ""
    images: List[str] = Field(default_factory=list, max_length=MAX_IMAGES_PER_ITEM)
    link: Optional[str] = None


class SpecialistProfile(BaseModel):
    """
    Canonical specialist profile.

    Created empty at registration and mutated only by its owner. The
    stored-record variants are converted to and from this shape by the
    schema reconciler.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str
    first_name: str = ""
    last_name: str = ""
    specialization: Specialization = Specialization.DESIGN
    bio: str = ""
    telegram_handle: str = ""
    contact_email: Optional[str] = None
    avatar_url: Optional[str] = None
    visible_in_search: bool = True
    portfolio_items: List[PortfolioProject] = Field(
        default_factory=list,
        max_length=MAX_PORTFOLIO_ITEMS
    )
    rating: float = 0.0
    hired_count: int = 0

    @field_validator('specialization', mode='before')
    @classmethod
    def validate_specialization(cls, v):
        """Unknown directions collapse to the default one"""
        return Specialization.parse(v)

    @computed_field
    @property
    def portfolio_preview_images(self) -> List[str]:
        return derive_portfolio_preview(self.portfolio_items)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part).strip()
