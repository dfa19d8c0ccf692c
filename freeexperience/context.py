# 📄 File: freeexperience/context.py
#
# 🧭 Purpose (Layman Explanation):
# Builds all the moving parts of the marketplace once when the app starts (the memory
# cache, the chosen storage, the "who is logged in" tracker and the services) and
# shares them with every request.
#
# 🧪 Purpose (Technical Summary):
# AppContext owns the process-wide KeyedAsyncCache, the DualBackendStore chosen at
# construction, the EventBus and the SessionResolver subscribed to it, plus the
# application services. In remote mode ``start`` bridges provider auth-state changes
# onto the event bus.
#
# 🔗 Dependencies:
# - Settings, SupabaseManager, DualBackendStore, KeyedAsyncCache, EventBus
#
# 🔄 Connected Modules / Calls From:
# - freeexperience.main (lifespan), API dependencies, tests

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Optional, Set

from freeexperience.modules.marketplace.application.services import (
    ApplicationService,
    ArticleService,
    AuthService,
    ProfileService,
    ProjectService,
)
from freeexperience.modules.marketplace.domain.events import IdentityEvent, identity_event
from freeexperience.modules.marketplace.domain.services import SessionResolver
from freeexperience.modules.marketplace.infrastructure import DualBackendStore, build_dual_backend_store
from freeexperience.modules.marketplace.infrastructure.remote import RemoteGateway
from freeexperience.shared.config.settings import Settings, get_settings
from freeexperience.shared.config.supabase import SupabaseManager
from freeexperience.shared.core.event_bus import EventBus
from freeexperience.shared.infrastructure.cache import KeyedAsyncCache
from freeexperience.shared.infrastructure.storage import LocalKeyValueStore
from freeexperience.shared.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Everything one process shares between requests"""

    settings: Settings
    cache: KeyedAsyncCache
    store: DualBackendStore
    event_bus: EventBus
    resolver: SessionResolver
    auth: AuthService
    profiles: ProfileService
    projects: ProjectService
    applications: ApplicationService
    articles: ArticleService
    supabase: Optional[SupabaseManager] = None
    _unsubscribe: Optional[Callable[[], None]] = None
    _pending_events: Set["asyncio.Task[None]"] = field(default_factory=set)

    @classmethod
    def build(
        cls,
        settings: Optional[Settings] = None,
        local_store: Optional[LocalKeyValueStore] = None,
        gateway: Optional[RemoteGateway] = None,
        cache: Optional[KeyedAsyncCache] = None,
    ) -> "AppContext":
        """
        Wire the context from settings.

        Args:
            settings: Application settings (get_settings() when omitted)
            local_store: Local durable store override
            gateway: Remote gateway override; selects the remote backend
            cache: Cache override (tests inject a manual clock)
        """
        settings = settings or get_settings()
        supabase = SupabaseManager(settings) if settings.supabase_configured and gateway is None else None

        store = build_dual_backend_store(settings, local_store=local_store, gateway=gateway, supabase=supabase)
        if cache is None:
            cache = KeyedAsyncCache(
                default_ttl=settings.CACHE_DEFAULT_TTL,
                request_timeout=settings.CACHE_REQUEST_TIMEOUT,
            )
        event_bus = EventBus()
        resolver = SessionResolver(
            store.sessions,
            store.specialists,
            cache,
            identity_ttl=settings.CACHE_AUTH_TTL,
            profile_ttl=settings.CACHE_SPECIALISTS_TTL,
            focus_refresh_interval=settings.SESSION_FOCUS_REFRESH_INTERVAL,
        )
        event_bus.subscribe(resolver)

        return cls(
            settings=settings,
            cache=cache,
            store=store,
            event_bus=event_bus,
            resolver=resolver,
            auth=AuthService(store, cache, event_bus, resolver),
            profiles=ProfileService(store, cache, resolver, profile_ttl=settings.CACHE_SPECIALISTS_TTL),
            projects=ProjectService(store, cache, projects_ttl=settings.CACHE_PROJECTS_TTL),
            applications=ApplicationService(store, cache),
            articles=ArticleService(store, cache, articles_ttl=settings.CACHE_ARTICLES_TTL),
            supabase=supabase if store.is_remote else None,
        )

    async def start(self) -> None:
        """Relay provider auth events and resolve the initial actor."""
        if self.store.is_remote and self.store.gateway is not None:
            self._unsubscribe = await self.store.gateway.on_auth_state_change(self._relay_auth_event)
            logger.info("Auth state changes bridged to the event bus")

        actor = await self.resolver.resolve()
        logger.info(
            f"Context started with {self.store.kind.value} backend",
            extra={"backend": self.store.kind.value, "signed_in": actor is not None}
        )

    async def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        for task in list(self._pending_events):
            task.cancel()
        self.event_bus.unsubscribe(self.resolver)
        self.cache.invalidate()

        if self.supabase is not None:
            await self.supabase.close()
        logger.info("Context closed")

    def _relay_auth_event(self, event_name: str, user_id: Optional[str]) -> None:
        kind = IdentityEvent.from_provider(event_name)
        if kind is None:
            logger.debug(f"Ignoring provider auth event {event_name}")
            return

        task = asyncio.get_running_loop().create_task(
            self.event_bus.publish(identity_event(kind, user_id, source="remote"))
        )
        self._pending_events.add(task)
        task.add_done_callback(self._pending_events.discard)
