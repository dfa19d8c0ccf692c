# 📄 File: freeexperience/modules/marketplace/domain/services/schema_reconciler.py
#
# 🧭 Purpose (Layman Explanation):
# Specialist profiles were saved in three different layouts over time. This file reads any
# of them and turns it into one clean profile, and can write a clean profile back in the
# layout a particular storage expects.
#
# 🧪 Purpose (Technical Summary):
# Pure reconciliation functions for specialist records. Variant detection happens once at
# ingestion (tag_record) and yields a tagged StoredSpecialistRecord; normalize never raises
# and enforces portfolio limits; denormalize renders a canonical profile for one variant.
#
# 🔗 Dependencies:
# dataclasses, enum, typing, domain models, shared helpers
#
# 🔄 Connected Modules / Calls From:
# Local and remote specialist stores, AuthService (name splitting), tests

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from freeexperience.shared.utils.helpers import clean_whitespace
from ..models.specialist import (
    MAX_IMAGES_PER_ITEM,
    MAX_PORTFOLIO_ITEMS,
    PortfolioProject,
    Specialization,
    SpecialistProfile,
    derive_portfolio_preview,
)

__all__ = [
    "RecordVariant",
    "StoredSpecialistRecord",
    "tag_record",
    "normalize",
    "denormalize",
    "derive_portfolio_preview",
    "split_display_name",
]


class RecordVariant(str, Enum):
    """Historical layouts of a stored specialist record"""
    LEGACY_COMBINED_NAME = "legacy_combined_name"
    LOCAL_SPLIT_NAME = "local_split_name"
    REMOTE_ROW = "remote_row"


@dataclass(frozen=True)
class StoredSpecialistRecord:
    """A raw stored record together with the layout it was detected as"""
    variant: RecordVariant
    raw: Mapping[str, Any]


# Field names per layout: canonical name -> stored name
_LOCAL_FIELDS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "avatar_url": "avatarUrl",
    "visible_in_search": "showInSearch",
    "portfolio_items": "projects",
    "rating": "rating",
    "hired_count": "hiredCount",
}

_REMOTE_FIELDS = {
    "first_name": "first_name",
    "last_name": "last_name",
    "avatar_url": "avatar_url",
    "visible_in_search": "show_in_search",
    "portfolio_items": "portfolio",
    "rating": "rating",
    "hired_count": "hired_count",
}


def tag_record(raw: Any) -> StoredSpecialistRecord:
    """
    Detect the layout of a stored specialist record.

    Detection order: ``first_name`` present means a remote row, ``firstName``
    present means the local split-name layout (even if a combined ``name`` is
    also present), a string ``name`` means the legacy layout, anything else is
    read as the local layout.

    Args:
        raw: Record as read from a backend

    Returns:
        StoredSpecialistRecord: The record tagged with its variant
    """
    if not isinstance(raw, Mapping):
        return StoredSpecialistRecord(RecordVariant.LOCAL_SPLIT_NAME, {})

    if "first_name" in raw:
        variant = RecordVariant.REMOTE_ROW
    elif "firstName" in raw:
        variant = RecordVariant.LOCAL_SPLIT_NAME
    elif isinstance(raw.get("name"), str):
        variant = RecordVariant.LEGACY_COMBINED_NAME
    else:
        variant = RecordVariant.LOCAL_SPLIT_NAME

    return StoredSpecialistRecord(variant, raw)


def split_display_name(text: Optional[str]) -> Tuple[str, str]:
    """
    Split a combined name on the first whitespace.

    Args:
        text: Display name such as "Иван Петров"

    Returns:
        Tuple[str, str]: (first name, remainder); empty strings when absent
    """
    cleaned = clean_whitespace(text) if isinstance(text, str) else ""
    if not cleaned:
        return "", ""

    first, _, rest = cleaned.partition(" ")
    return first, rest


def normalize(
    record: Union[StoredSpecialistRecord, Mapping[str, Any], Any],
    fallback_id: Optional[str] = None
) -> SpecialistProfile:
    """
    Convert a stored record of any layout into the canonical profile.

    Never raises: malformed fields fall back to their defaults, unknown
    specializations become the default one, and the portfolio is truncated
    to three items of three images each.

    Args:
        record: Raw stored record or an already tagged one
        fallback_id: Id to use when the record carries none

    Returns:
        SpecialistProfile: Canonical profile
    """
    tagged = record if isinstance(record, StoredSpecialistRecord) else tag_record(record)
    raw = tagged.raw

    if tagged.variant == RecordVariant.REMOTE_ROW:
        names = _REMOTE_FIELDS
    else:
        names = _LOCAL_FIELDS

    if tagged.variant == RecordVariant.LEGACY_COMBINED_NAME:
        first_name, last_name = split_display_name(raw.get("name"))
    else:
        first_name = _text(raw.get(names["first_name"]))
        last_name = _text(raw.get(names["last_name"]))

    visible = raw.get(names["visible_in_search"])

    return SpecialistProfile(
        id=_identifier(raw.get("id")) or fallback_id or "",
        first_name=first_name,
        last_name=last_name,
        specialization=Specialization.parse(raw.get("specialization")),
        bio=_text(raw.get("bio")),
        telegram_handle=_text(raw.get("telegram")),
        contact_email=_text(raw.get("email")) or None,
        avatar_url=_text(raw.get(names["avatar_url"])) or None,
        visible_in_search=visible if isinstance(visible, bool) else True,
        portfolio_items=_portfolio(raw.get(names["portfolio_items"])),
        rating=_number(raw.get(names["rating"]), float),
        hired_count=_number(raw.get(names["hired_count"]), int),
    )


def denormalize(profile: SpecialistProfile, variant: RecordVariant) -> Dict[str, Any]:
    """
    Render a canonical profile in the layout of one backend.

    Args:
        profile: Canonical profile
        variant: Target layout

    Returns:
        Dict: JSON-compatible stored record
    """
    portfolio = [
        {
            "id": item.id,
            "title": item.title,
            "description": item.description,
            "images": [{"url": url} for url in item.images],
            **({"link": item.link} if item.link else {}),
        }
        for item in profile.portfolio_items
    ]
    common = {
        "id": profile.id,
        "specialization": profile.specialization.value,
        "bio": profile.bio,
        "telegram": profile.telegram_handle,
        "email": profile.contact_email or "",
    }

    if variant == RecordVariant.REMOTE_ROW:
        return {
            **common,
            "first_name": profile.first_name,
            "last_name": profile.last_name,
            "avatar_url": profile.avatar_url or "",
            "show_in_search": profile.visible_in_search,
            "portfolio": portfolio,
        }

    local = {
        **common,
        "avatarUrl": profile.avatar_url or "",
        "showInSearch": profile.visible_in_search,
        "projects": portfolio,
        "rating": profile.rating,
        "hiredCount": profile.hired_count,
    }

    if variant == RecordVariant.LEGACY_COMBINED_NAME:
        return {"name": profile.full_name, **local}

    return {"firstName": profile.first_name, "lastName": profile.last_name, **local}


# =============================================================================
# FIELD COERCION
# =============================================================================

def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _identifier(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        return ""
    return _text(str(value))


def _number(value: Any, kind: type) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return kind(0)
    return kind(value)


def _image_url(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value or None
    if isinstance(value, Mapping) and isinstance(value.get("url"), str):
        return value["url"] or None
    return None


def _portfolio(value: Any) -> List[PortfolioProject]:
    if not isinstance(value, list):
        return []

    items: List[PortfolioProject] = []
    for index, entry in enumerate(value):
        if not isinstance(entry, Mapping):
            continue

        raw_images = entry.get("images")
        if not isinstance(raw_images, list):
            raw_images = []
        images = [url for url in map(_image_url, raw_images) if url]
        link = _text(entry.get("link")) or None
        items.append(PortfolioProject(
            id=_identifier(entry.get("id")) or str(index + 1),
            title=_text(entry.get("title")),
            description=_text(entry.get("description")),
            images=images[:MAX_IMAGES_PER_ITEM],
            link=link,
        ))
        if len(items) == MAX_PORTFOLIO_ITEMS:
            break

    return items
