# 📄 File: freeexperience/modules/marketplace/domain/services/session_resolver.py
#
# 🧭 Purpose (Layman Explanation):
# Works out who is using the app right now by combining the login information with the
# person's profile, and keeps that answer up to date when they sign in or out.
#
# 🧪 Purpose (Technical Summary):
# Derives the canonical Actor from the session store and the linked specialist profile,
# both read through the KeyedAsyncCache. Reacts to identity events on the bus by
# invalidating ``auth:`` keys and re-resolving with a forced refresh; focus refreshes are
# throttled. Failures are logged and resolve to None (fail-closed).
#
# 🔗 Dependencies:
# asyncio, time, KeyedAsyncCache, repositories, display name candidates, event bus
#
# 🔄 Connected Modules / Calls From:
# AppContext (subscribed to the event bus), API dependencies, application services

import asyncio
import time
from typing import Callable, List, Optional, Sequence

from freeexperience.shared.core.event_bus import DomainEvent, EventHandler
from freeexperience.shared.core.exceptions import FreeExperienceException
from freeexperience.shared.infrastructure.cache import KeyedAsyncCache
from freeexperience.shared.utils.logging import get_logger
from ..events.identity_events import IdentityEvent
from ..models.actor import Actor, IdentityRecord, ResolutionState, UserRole
from ..models.specialist import SpecialistProfile
from ..repositories.entity_store import SessionStore, SpecialistStore
from .display_name import (
    DISPLAY_NAME_CANDIDATES,
    DisplayNameCandidate,
    DisplayNameSources,
    resolve_display_name,
)

logger = get_logger(__name__)

AUTH_CACHE_PREFIX = "auth:"
AUTH_USER_KEY = "auth:user"


def specialist_cache_key(specialist_id: str) -> str:
    return f"specialist:{specialist_id}"


class SessionResolver(EventHandler[DomainEvent]):
    """
    Canonical current-actor resolution.

    Concurrent callers share the cached identity and profile fetches, so
    resolving from several places at once costs one round trip per key.
    """

    def __init__(
        self,
        sessions: SessionStore,
        specialists: SpecialistStore,
        cache: KeyedAsyncCache,
        identity_ttl: float = 5.0,
        profile_ttl: float = 60.0,
        focus_refresh_interval: float = 1.0,
        candidates: Sequence[DisplayNameCandidate] = DISPLAY_NAME_CANDIDATES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.sessions = sessions
        self.specialists = specialists
        self.cache = cache
        self.identity_ttl = identity_ttl
        self.profile_ttl = profile_ttl
        self.focus_refresh_interval = max(focus_refresh_interval, 1.0)
        self.candidates = candidates
        self._clock = clock

        self.state = ResolutionState.UNRESOLVED
        self._actor: Optional[Actor] = None
        self._last_focus_refresh: Optional[float] = None

    @property
    def current_actor(self) -> Optional[Actor]:
        """Last resolved actor without touching any backend."""
        return self._actor

    # =========================================================================
    # EVENT HANDLING
    # =========================================================================

    @property
    def event_types(self) -> List[str]:
        return [event.value for event in IdentityEvent]

    async def handle(self, event: DomainEvent) -> None:
        logger.info(
            f"Identity event {event.event_type}, re-resolving current actor",
            extra={"event_type": event.event_type, "user_id": event.user_id}
        )
        self.cache.invalidate(AUTH_CACHE_PREFIX)
        await self.resolve(force_refresh=True)

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    async def resolve(self, force_refresh: bool = False) -> Optional[Actor]:
        """
        Resolve the current actor.

        Args:
            force_refresh: Bypass fresh cache entries for identity and profile

        Returns:
            Actor if a session exists, None when signed out or on failure
        """
        self.state = ResolutionState.RESOLVING
        try:
            actor = await self._resolve(force_refresh)
        except Exception as e:
            logger.error(f"Current actor resolution failed: {e}", exc_info=True)
            self.state = ResolutionState.FAILED
            self._actor = None
            return None

        self._actor = actor
        self.state = ResolutionState.RESOLVED
        return actor

    async def refresh_on_focus(self) -> Optional[Actor]:
        """
        Opportunistic refresh when the UI regains focus.

        At most one refresh runs per focus_refresh_interval; calls inside the
        interval return the last resolved actor.
        """
        now = self._clock()
        if (
            self._last_focus_refresh is not None
            and now - self._last_focus_refresh < self.focus_refresh_interval
        ):
            logger.debug("Focus refresh throttled")
            return self._actor

        self._last_focus_refresh = now
        return await self.resolve(force_refresh=True)

    async def _resolve(self, force_refresh: bool) -> Optional[Actor]:
        known = self._actor

        # Only a known specialist's profile is worth loading ahead of the identity
        if known is not None and known.is_specialist:
            identity, profile = await asyncio.gather(
                self._load_identity(force_refresh),
                self._load_profile(known.id, force_refresh),
            )
            if (
                identity is not None
                and identity.id != known.id
                and identity.role == UserRole.SPECIALIST
            ):
                profile = await self._load_profile(identity.id, force_refresh)
        else:
            identity = await self._load_identity(force_refresh)
            profile = None
            if identity is not None and identity.role == UserRole.SPECIALIST:
                profile = await self._load_profile(identity.id, force_refresh)

        if identity is None:
            return None

        if identity.role != UserRole.SPECIALIST:
            profile = None

        return self._build_actor(identity, profile)

    async def _load_identity(self, force_refresh: bool) -> Optional[IdentityRecord]:
        return await self.cache.get(
            AUTH_USER_KEY,
            self.sessions.read,
            ttl=self.identity_ttl,
            force_refresh=force_refresh,
        )

    async def _load_profile(self, specialist_id: str, force_refresh: bool) -> Optional[SpecialistProfile]:
        try:
            return await self.cache.get(
                specialist_cache_key(specialist_id),
                lambda: self.specialists.read(specialist_id),
                ttl=self.profile_ttl,
                force_refresh=force_refresh,
            )
        except FreeExperienceException as e:
            logger.warning(
                f"Profile lookup for {specialist_id} failed, resolving without it: {e.message}",
                extra={"specialist_id": specialist_id, "error_code": e.error_code}
            )
            return None

    def _build_actor(self, identity: IdentityRecord, profile: Optional[SpecialistProfile]) -> Actor:
        avatar_url = (
            (profile.avatar_url if profile else None)
            or identity.avatar_url
            or identity.metadata.get("avatar_url")
        )
        return Actor(
            id=identity.id,
            email=identity.email,
            display_name=resolve_display_name(
                DisplayNameSources(identity=identity, profile=profile),
                self.candidates,
            ),
            role=identity.role,
            avatar_url=avatar_url if isinstance(avatar_url, str) and avatar_url else None,
        )
