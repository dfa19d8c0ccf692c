"""
Pytest configuration and fixtures.
"""
import copy
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from freeexperience.context import AppContext
from freeexperience.modules.marketplace.domain.models.actor import IdentityRecord
from freeexperience.modules.marketplace.domain.repositories.entity_store import SessionStore
from freeexperience.modules.marketplace.infrastructure import build_local_store, build_remote_store
from freeexperience.modules.marketplace.infrastructure.local import LocalRecords
from freeexperience.modules.marketplace.infrastructure.remote import RemoteGateway, map_remote_error
from freeexperience.shared.config.settings import Settings
from freeexperience.shared.infrastructure.cache import KeyedAsyncCache
from freeexperience.shared.infrastructure.storage import LocalKeyValueStore


class ManualClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGateway(RemoteGateway):
    """
    In-memory stand-in for the hosted service.

    Tables are lists of row dicts; provider failures are raised through
    map_remote_error the way the real gateway does.
    """

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            "specialists": [],
            "companies": [],
            "projects": [],
            "applications": [],
            "articles": [],
        }
        self.users: Dict[str, Dict[str, Any]] = {}
        self.current_user_id: Optional[str] = None
        self.uploads: Dict[str, bytes] = {}
        self.calls: List[tuple] = []
        self.auth_listeners: List[Any] = []

    # Tables ---------------------------------------------------------------

    def _matching(self, table, filters):
        rows = []
        for row in self.tables[table]:
            ok = True
            for column, value in (filters or {}).items():
                if isinstance(value, (list, tuple, set)):
                    ok = ok and row.get(column) in value
                else:
                    ok = ok and row.get(column) == value
            if ok:
                rows.append(row)
        return rows

    async def select(self, table, columns="*", filters=None, order_by=None, descending=True, limit=None):
        self.calls.append(("select", table))
        rows = [copy.deepcopy(r) for r in self._matching(table, filters)]
        if "companies(" in columns:
            for row in rows:
                company = next((c for c in self.tables["companies"] if c["id"] == row.get("company_id")), None)
                row["companies"] = {"company_name": company["company_name"]} if company else None
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by) or ""), reverse=descending)
        return rows[:limit] if limit else rows

    async def count(self, table, filters=None):
        self.calls.append(("count", table))
        return len(self._matching(table, filters))

    async def insert(self, table, row):
        self.calls.append(("insert", table))
        row = dict(row)
        if table == "applications" and self._matching(
            table, {"project_id": row["project_id"], "specialist_id": row["specialist_id"]}
        ):
            raise map_remote_error(
                SimpleNamespace(message="duplicate key value violates unique constraint", code="23505"),
                "insert applications",
            )
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self.tables[table].append(row)
        return copy.deepcopy(row)

    async def upsert(self, table, row):
        self.calls.append(("upsert", table))
        row = dict(row)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        rows = self.tables[table]
        for index, existing in enumerate(rows):
            if existing["id"] == row["id"]:
                rows[index] = {**existing, **row}
                return copy.deepcopy(rows[index])
        rows.append(row)
        return copy.deepcopy(row)

    # Auth -----------------------------------------------------------------

    def _public(self, user):
        return {"id": user["id"], "email": user["email"], "user_metadata": dict(user["user_metadata"])}

    async def get_user(self):
        self.calls.append(("get_user", None))
        if self.current_user_id is None:
            return None
        user = next(u for u in self.users.values() if u["id"] == self.current_user_id)
        return self._public(user)

    async def sign_up(self, email, password, metadata):
        if email in self.users:
            raise map_remote_error(SimpleNamespace(message="User already registered", code=""), "sign_up")
        user = {"id": str(uuid.uuid4()), "email": email, "password": password, "user_metadata": dict(metadata)}
        self.users[email] = user
        self.current_user_id = user["id"]
        return self._public(user)

    async def sign_in(self, email, password):
        user = self.users.get(email)
        if user is None or user["password"] != password:
            raise map_remote_error(SimpleNamespace(message="Invalid login credentials", code=""), "sign_in")
        self.current_user_id = user["id"]
        return self._public(user)

    async def sign_out(self):
        self.current_user_id = None

    async def update_user_metadata(self, metadata):
        user = next(u for u in self.users.values() if u["id"] == self.current_user_id)
        user["user_metadata"].update(metadata)
        return self._public(user)

    async def upload(self, bucket, path, data, content_type, cache_control):
        self.uploads[f"{bucket}/{path}"] = data
        return f"https://cdn.test/{bucket}/{path}"

    async def on_auth_state_change(self, callback):
        self.auth_listeners.append(callback)
        return lambda: self.auth_listeners.remove(callback)

    def emit(self, event_name: str, user_id: Optional[str]) -> None:
        for callback in list(self.auth_listeners):
            callback(event_name, user_id)


class StubSessionStore(SessionStore):
    """Session store returning a fixed identity and counting reads."""

    def __init__(self, identity: Optional[IdentityRecord] = None, error: Optional[Exception] = None):
        self.identity = identity
        self.error = error
        self.reads = 0

    async def read(self):
        self.reads += 1
        if self.error is not None:
            raise self.error
        return self.identity

    async def write(self, identity):
        self.identity = identity
        return identity

    async def clear(self):
        self.identity = None

    async def register(self, email, password, role, display_name):
        raise NotImplementedError

    async def authenticate(self, email, password):
        raise NotImplementedError


@pytest.fixture
def settings():
    """Settings for tests: no Supabase, in-memory local store."""
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        DEBUG=False,
        LOG_FORMAT="text",
        SUPABASE_URL=None,
        SUPABASE_ANON_KEY=None,
        LOCAL_STORE_PATH=None,
    )


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def cache(clock):
    return KeyedAsyncCache(default_ttl=30.0, request_timeout=5.0, clock=clock)


@pytest.fixture
def local_kv():
    return LocalKeyValueStore()


@pytest.fixture
def records(local_kv):
    return LocalRecords(local_kv)


@pytest.fixture
def local_backend(local_kv):
    return build_local_store(local_kv)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def remote_backend(gateway):
    return build_remote_store(gateway, "public-assets")


@pytest.fixture
def local_context(settings, local_kv, cache):
    return AppContext.build(settings, local_store=local_kv, cache=cache)


@pytest.fixture
def remote_context(settings, gateway, cache):
    return AppContext.build(settings, gateway=gateway, cache=cache)
