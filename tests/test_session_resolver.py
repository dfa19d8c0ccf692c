"""
Tests for current-actor resolution.
"""
import asyncio

import pytest

from freeexperience.modules.marketplace.domain.events.identity_events import IdentityEvent, identity_event
from freeexperience.modules.marketplace.domain.models.actor import (
    FALLBACK_DISPLAY_NAME,
    IdentityRecord,
    ResolutionState,
    UserRole,
)
from freeexperience.modules.marketplace.domain.models.specialist import SpecialistProfile
from freeexperience.modules.marketplace.domain.repositories.entity_store import SpecialistStore
from freeexperience.modules.marketplace.domain.services.display_name import (
    DisplayNameSources,
    resolve_display_name,
)
from freeexperience.modules.marketplace.domain.services.session_resolver import SessionResolver
from freeexperience.shared.core.event_bus import EventBus
from freeexperience.shared.core.exceptions import TransportFailureError

from .conftest import StubSessionStore


class StubSpecialistStore(SpecialistStore):
    """Profiles by id, with a read counter and an optional failure."""

    def __init__(self, profiles=None, error=None):
        self.profiles = {p.id: p for p in (profiles or [])}
        self.error = error
        self.reads = 0

    async def read(self, entity_id):
        self.reads += 1
        if self.error is not None:
            raise self.error
        return self.profiles.get(entity_id)

    async def write(self, entity):
        self.profiles[entity.id] = entity
        return entity

    async def list(self, entity_filter=None):
        return list(self.profiles.values())


def make_resolver(cache, clock, identity=None, profiles=None, session_error=None, profile_error=None):
    sessions = StubSessionStore(identity, error=session_error)
    specialists = StubSpecialistStore(profiles, error=profile_error)
    resolver = SessionResolver(sessions, specialists, cache, clock=clock)
    return resolver, sessions, specialists


class TestDisplayName:

    def test_email_only_identity_gets_fallback(self):
        identity = IdentityRecord(id="u1", email="a@b.com")

        assert resolve_display_name(DisplayNameSources(identity)) == FALLBACK_DISPLAY_NAME

    def test_email_is_never_used_as_name(self):
        identity = IdentityRecord(id="u1", email="a@b.com", name="A@B.com", metadata={"displayName": "a@b.com"})

        assert resolve_display_name(DisplayNameSources(identity)) == FALLBACK_DISPLAY_NAME

    def test_profile_name_wins(self):
        identity = IdentityRecord(id="u1", email="a@b.com", name="Аккаунт", metadata={"displayName": "Мета"})
        profile = SpecialistProfile(id="u1", first_name="Иван", last_name="Петров")

        assert resolve_display_name(DisplayNameSources(identity, profile)) == "Иван Петров"

    @pytest.mark.parametrize("metadata,name,expected", [
        ({"displayName": "Мета", "full_name": "Полное", "name": "Имя"}, "Аккаунт", "Мета"),
        ({"full_name": "Полное", "name": "Имя"}, "Аккаунт", "Полное"),
        ({"name": "Имя"}, "Аккаунт", "Имя"),
        ({"displayName": "   "}, "Аккаунт", "Аккаунт"),
        ({"displayName": 12}, None, FALLBACK_DISPLAY_NAME),
    ])
    def test_metadata_precedence(self, metadata, name, expected):
        identity = IdentityRecord(id="u1", email="a@b.com", name=name, metadata=metadata)

        assert resolve_display_name(DisplayNameSources(identity)) == expected


class TestResolve:

    async def test_signed_out_resolves_to_none(self, cache, clock):
        resolver, _, _ = make_resolver(cache, clock)

        assert await resolver.resolve() is None
        assert resolver.state == ResolutionState.RESOLVED

    async def test_specialist_name_comes_from_profile(self, cache, clock):
        identity = IdentityRecord(id="u1", email="ivan@mail.ru", metadata={"displayName": "ivan"})
        profile = SpecialistProfile(id="u1", first_name="Иван", last_name="Петров", avatar_url="/a.png")
        resolver, _, _ = make_resolver(cache, clock, identity, [profile])

        actor = await resolver.resolve()

        assert actor.display_name == "Иван Петров"
        assert actor.avatar_url == "/a.png"
        assert actor.is_specialist
        assert resolver.current_actor == actor

    async def test_company_ignores_specialist_profile(self, cache, clock):
        identity = IdentityRecord(
            id="c1", email="co@mail.ru", role=UserRole.COMPANY, metadata={"displayName": "Ромашка"}
        )
        profile = SpecialistProfile(id="c1", first_name="Чужое", last_name="Имя")
        resolver, _, specialists = make_resolver(cache, clock, identity, [profile])

        actor = await resolver.resolve()

        assert actor.display_name == "Ромашка"
        assert actor.is_company
        assert specialists.reads == 0

    async def test_known_company_never_reads_specialist_profiles(self, cache, clock):
        identity = IdentityRecord(id="c1", email="co@mail.ru", role=UserRole.COMPANY)
        resolver, sessions, specialists = make_resolver(cache, clock, identity)

        await resolver.resolve()
        actor = await resolver.resolve(force_refresh=True)

        assert actor.is_company
        assert sessions.reads == 2
        assert specialists.reads == 0

    async def test_session_failure_fails_closed(self, cache, clock):
        resolver, _, _ = make_resolver(cache, clock, session_error=TransportFailureError("offline"))

        assert await resolver.resolve() is None
        assert resolver.state == ResolutionState.FAILED
        assert resolver.current_actor is None

    async def test_profile_failure_resolves_without_profile(self, cache, clock):
        identity = IdentityRecord(id="u1", email="a@mail.ru", metadata={"displayName": "Аня"})
        resolver, _, _ = make_resolver(
            cache, clock, identity, profile_error=TransportFailureError("offline")
        )

        actor = await resolver.resolve()

        assert actor.display_name == "Аня"
        assert resolver.state == ResolutionState.RESOLVED

    async def test_concurrent_resolves_share_one_read(self, cache, clock):
        identity = IdentityRecord(id="u1", email="a@mail.ru")
        resolver, sessions, specialists = make_resolver(
            cache, clock, identity, [SpecialistProfile(id="u1", first_name="Аня")]
        )

        first, second = await asyncio.gather(resolver.resolve(), resolver.resolve())

        assert first == second
        assert sessions.reads == 1
        assert specialists.reads == 1

    async def test_cached_identity_is_reused_within_ttl(self, cache, clock):
        resolver, sessions, _ = make_resolver(cache, clock, IdentityRecord(id="u1", email="a@mail.ru"))

        await resolver.resolve()
        await resolver.resolve()
        clock.advance(6)
        await resolver.resolve()

        assert sessions.reads == 2

    async def test_forced_resolve_rereads(self, cache, clock):
        resolver, sessions, specialists = make_resolver(
            cache, clock, IdentityRecord(id="u1", email="a@mail.ru"), [SpecialistProfile(id="u1")]
        )

        await resolver.resolve()
        await resolver.resolve(force_refresh=True)

        assert sessions.reads == 2
        assert specialists.reads == 2

    async def test_switched_account_loads_new_profile(self, cache, clock):
        resolver, sessions, _ = make_resolver(
            cache, clock, IdentityRecord(id="u1", email="a@mail.ru"),
            [SpecialistProfile(id="u1", first_name="Аня"), SpecialistProfile(id="u2", first_name="Борис")],
        )
        await resolver.resolve()

        sessions.identity = IdentityRecord(id="u2", email="b@mail.ru")
        actor = await resolver.resolve(force_refresh=True)

        assert actor.id == "u2"
        assert actor.display_name == "Борис"


class TestEventsAndFocus:

    async def test_identity_events_re_resolve(self, cache, clock):
        resolver, sessions, _ = make_resolver(cache, clock)
        bus = EventBus()
        bus.subscribe(resolver)
        await resolver.resolve()

        sessions.identity = IdentityRecord(id="u1", email="a@mail.ru", metadata={"displayName": "Аня"})
        await bus.publish(identity_event(IdentityEvent.SIGNED_IN, "u1"))

        assert resolver.current_actor.display_name == "Аня"

        sessions.identity = None
        await bus.publish(identity_event(IdentityEvent.SIGNED_OUT, "u1"))

        assert resolver.current_actor is None

    def test_resolver_listens_to_every_identity_event(self, cache, clock):
        resolver, _, _ = make_resolver(cache, clock)

        assert set(resolver.event_types) == {"SIGNED_IN", "SIGNED_OUT", "TOKEN_REFRESHED"}

    async def test_focus_refresh_is_throttled(self, cache, clock):
        resolver, sessions, _ = make_resolver(cache, clock, IdentityRecord(id="u1", email="a@mail.ru"))

        await resolver.refresh_on_focus()
        await resolver.refresh_on_focus()
        assert sessions.reads == 1

        clock.advance(1.5)
        await resolver.refresh_on_focus()
        assert sessions.reads == 2

    def test_unknown_provider_events_are_ignored(self):
        assert IdentityEvent.from_provider("USER_UPDATED") is None
        assert IdentityEvent.from_provider("SIGNED_OUT") == IdentityEvent.SIGNED_OUT
