# 📄 File: freeexperience/modules/marketplace/application/services/profile_service.py
#
# 🧭 Purpose (Layman Explanation):
# Shows specialist cards, lets people search them, and lets a specialist edit their own
# card and upload pictures for it.
#
# 🧪 Purpose (Technical Summary):
# Specialist read paths are memoized in KeyedAsyncCache (``specialists`` listing and
# ``specialist:{id}``), searching and sorting happen on the cached listing, and saves are
# restricted to the owner and invalidate both keys.
#
# 🔗 Dependencies:
# - pydantic (profile validation on save)
# - DualBackendStore (specialists, assets), KeyedAsyncCache, SessionResolver
#
# 🔄 Connected Modules / Calls From:
# - Specialists API router

import mimetypes
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from freeexperience.shared.core.exceptions import PermissionDeniedError, ValidationError
from freeexperience.shared.infrastructure.cache import KeyedAsyncCache
from freeexperience.shared.utils.helpers import generate_id
from freeexperience.shared.utils.logging import get_logger
from ...domain.models.actor import Actor
from ...domain.models.specialist import Specialization, SpecialistProfile
from ...domain.services.session_resolver import SessionResolver, specialist_cache_key
from ...infrastructure.dual_backend_store import DualBackendStore
from .auth_service import SPECIALISTS_CACHE_KEY

logger = get_logger(__name__)

EDITABLE_PROFILE_FIELDS = frozenset({
    "first_name",
    "last_name",
    "specialization",
    "bio",
    "telegram_handle",
    "contact_email",
    "avatar_url",
    "visible_in_search",
    "portfolio_items",
})

MAX_ASSET_BYTES = 5 * 1024 * 1024


def check_image_upload(filename: str, data: bytes, content_type: Optional[str] = None) -> Tuple[str, str]:
    """
    Validate an uploaded image.

    Returns:
        Tuple of the content type and the file extension to store it under

    Raises:
        ValidationError: If the file is not an image, is empty or is too large
    """
    content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
    if not content_type.startswith("image/"):
        raise ValidationError("Можно загружать только изображения", field="file", value=content_type)
    if not data:
        raise ValidationError("Файл пустой", field="file")
    if len(data) > MAX_ASSET_BYTES:
        raise ValidationError(
            "Файл слишком большой",
            field="file",
            constraint=f"max_bytes={MAX_ASSET_BYTES}"
        )

    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"
    return content_type, extension


class SpecialistSort(str, Enum):
    NAME = "name"
    RATING = "rating"
    HIRED = "hired"


class ProfileService:
    """Specialist directory and profile editing"""

    def __init__(
        self,
        store: DualBackendStore,
        cache: KeyedAsyncCache,
        resolver: SessionResolver,
        profile_ttl: float = 60.0
    ):
        self.store = store
        self.cache = cache
        self.resolver = resolver
        self.profile_ttl = profile_ttl

    async def get_specialist(self, specialist_id: str, force_refresh: bool = False) -> Optional[SpecialistProfile]:
        return await self.cache.get(
            specialist_cache_key(specialist_id),
            lambda: self.store.specialists.read(specialist_id),
            ttl=self.profile_ttl,
            force_refresh=force_refresh,
        )

    async def list_specialists(
        self,
        query: Optional[str] = None,
        specialization: Optional[Specialization] = None,
        include_hidden: bool = False,
        sort_by: SpecialistSort = SpecialistSort.HIRED
    ) -> List[SpecialistProfile]:
        """
        Search the specialist directory.

        Args:
            query: Case-insensitive text matched against name, specialization and bio
            specialization: Exact specialization filter
            include_hidden: Also return profiles hidden from search
            sort_by: Ordering of the result

        Returns:
            List[SpecialistProfile]: Matching profiles
        """
        profiles = await self.cache.get(
            SPECIALISTS_CACHE_KEY,
            lambda: self.store.specialists.list(),
            ttl=self.profile_ttl,
        )

        needle = (query or "").strip().lower()
        matches = []
        for profile in profiles:
            if not include_hidden and not profile.visible_in_search:
                continue
            if specialization is not None and profile.specialization != specialization:
                continue
            if needle and not (
                needle in profile.full_name.lower()
                or needle in profile.specialization.value.lower()
                or needle in profile.bio.lower()
            ):
                continue
            matches.append(profile)

        if sort_by == SpecialistSort.NAME:
            matches.sort(key=lambda p: p.full_name.lower())
        elif sort_by == SpecialistSort.RATING:
            matches.sort(key=lambda p: p.rating, reverse=True)
        else:
            matches.sort(key=lambda p: p.hired_count, reverse=True)
        return matches

    async def save_profile(self, actor: Actor, changes: Mapping[str, Any]) -> SpecialistProfile:
        """
        Apply the owner's edits to their profile.

        Args:
            actor: Current actor, must be a specialist
            changes: Editable fields to replace; anything else is ignored

        Returns:
            SpecialistProfile: The persisted profile

        Raises:
            PermissionDeniedError: If the actor is not a specialist
            ValidationError: If the resulting profile is invalid
        """
        if not actor.is_specialist:
            raise PermissionDeniedError(
                "Только специалисты могут редактировать профиль",
                resource_type="specialist_profile",
                actor_id=actor.id
            )

        current = (
            await self.store.specialists.claim_legacy_profile(actor.id)
            or await self.store.specialists.read(actor.id)
            or SpecialistProfile(id=actor.id)
        )
        data: Dict[str, Any] = current.model_dump(exclude={"portfolio_preview_images"})
        data.update({k: v for k, v in changes.items() if k in EDITABLE_PROFILE_FIELDS})
        data["id"] = actor.id

        try:
            updated = SpecialistProfile.model_validate(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            raise ValidationError(
                "Профиль заполнен некорректно",
                field=".".join(str(part) for part in first["loc"]),
                constraint=first["msg"]
            ) from e

        if not updated.first_name.strip():
            raise ValidationError("Укажите имя", field="first_name")

        saved = await self.store.specialists.write(updated)
        self.cache.invalidate(SPECIALISTS_CACHE_KEY)
        self.cache.invalidate(specialist_cache_key(actor.id))
        logger.log_user_action("save_profile", actor.id, resource=f"specialist:{actor.id}")

        # Profile name and avatar feed the current actor
        await self.resolver.resolve(force_refresh=True)
        return saved

    async def upload_asset(
        self,
        actor: Actor,
        filename: str,
        data: bytes,
        content_type: Optional[str] = None
    ) -> str:
        """
        Store an image for the actor's profile.

        Returns:
            str: Public URL of the stored image
        """
        content_type, extension = check_image_upload(filename, data, content_type)
        path = f"specialists/{actor.id}/{generate_id()}.{extension}"
        url = await self.store.assets.upload(path, data, content_type)
        logger.log_user_action("upload_asset", actor.id, resource=path)
        return url
