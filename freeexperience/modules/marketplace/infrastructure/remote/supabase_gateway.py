# 📄 File: freeexperience/modules/marketplace/infrastructure/remote/supabase_gateway.py
#
# 🧭 Purpose (Layman Explanation):
# The one doorway to the cloud service: every table read, login call and picture upload
# goes through here, and every cloud error is translated into one of our own error types.
#
# 🧪 Purpose (Technical Summary):
# RemoteGateway seam over the async Supabase client (PostgREST tables, GoTrue auth,
# Storage). Filters with list values become ``in`` queries. Provider errors are mapped to
# the FreeExperienceException hierarchy by code and message (already registered, invalid
# credentials, unconfirmed email, weak password, rate limit, 23505, 42501/RLS).
#
# 🔗 Dependencies:
# - supabase (AsyncClient) via SupabaseManager
# - postgrest APIError, httpx transport errors
#
# 🔄 Connected Modules / Calls From:
# - Remote repositories (tables, storage), RemoteSessionStore (auth)
# - AppContext (auth state bridge to the event bus)

import inspect
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

import httpx
from postgrest import APIError

from freeexperience.shared.config.supabase import SupabaseManager
from freeexperience.shared.core.exceptions import (
    AuthenticationError,
    ConflictError,
    FreeExperienceException,
    PermissionDeniedError,
    TransportFailureError,
    ValidationError,
)
from freeexperience.shared.utils.logging import get_logger

logger = get_logger(__name__)

AuthStateCallback = Callable[[str, Optional[str]], None]

UNIQUE_VIOLATION = "23505"
INSUFFICIENT_PRIVILEGE = "42501"

# Operations whose provider messages may reject a password
AUTH_OPERATIONS = frozenset({"sign_up", "sign_in", "update_user"})


# =============================================================================
# ERROR MAPPING
# =============================================================================

def map_remote_error(error: Any, operation: str) -> FreeExperienceException:
    """
    Translate a provider error into the exception hierarchy.

    Args:
        error: Exception raised by the Supabase client
        operation: Operation name, e.g. "sign_up" or "select projects";
            password wording is only read from auth operations

    Returns:
        FreeExperienceException: The mapped exception (not raised)
    """
    message = str(getattr(error, "message", None) or error or "")
    normalized = message.lower()
    code = str(getattr(error, "code", "") or "")
    status_code = getattr(error, "status", None)

    if "already registered" in normalized:
        return ConflictError(
            "Пользователь с таким email уже зарегистрирован",
            resource_type="account",
            conflict_field="email"
        )

    if "invalid login credentials" in normalized:
        return AuthenticationError("Неверный email или пароль")

    if "email not confirmed" in normalized or "confirm your email" in normalized:
        return AuthenticationError("Подтвердите email, чтобы завершить регистрацию")

    if operation in AUTH_OPERATIONS and "password" in normalized:
        return ValidationError(
            "Пароль должен быть не короче 6 символов",
            field="password",
            constraint="min_length=6"
        )

    if status_code == 429 or "too many requests" in normalized:
        return TransportFailureError(
            "Слишком много попыток. Попробуйте снова через минуту.",
            operation=operation,
            details={"retryable": True}
        )

    if code == UNIQUE_VIOLATION:
        return ConflictError(
            "Такие данные уже используются. Попробуйте другой email.",
            details={"code": code, "operation": operation}
        )

    if code == INSUFFICIENT_PRIVILEGE or "row-level security" in normalized:
        return PermissionDeniedError(
            "Недостаточно прав для выполнения операции. Войдите заново и попробуйте ещё раз.",
            details={"code": code or INSUFFICIENT_PRIVILEGE, "operation": operation}
        )

    return TransportFailureError(
        message or f"Remote {operation} failed",
        operation=operation,
        service_response=code or None
    )


# =============================================================================
# GATEWAY INTERFACE
# =============================================================================

class RemoteGateway(ABC):
    """
    Everything the remote backend needs from the hosted service.

    Rows are plain dicts; user objects are dicts with ``id``, ``email``
    and ``user_metadata``. Implementations raise FreeExperienceException
    subclasses only.
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def count(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        pass

    @abstractmethod
    async def insert(self, table: str, row: Mapping[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def upsert(self, table: str, row: Mapping[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def get_user(self) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def sign_up(self, email: str, password: str, metadata: Mapping[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        pass

    @abstractmethod
    async def update_user_metadata(self, metadata: Mapping[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        cache_control: str
    ) -> str:
        pass

    @abstractmethod
    async def on_auth_state_change(self, callback: AuthStateCallback) -> Callable[[], None]:
        """
        Register for provider auth events.

        Args:
            callback: Called with (event name, user id or None)

        Returns:
            Callable that removes the registration
        """
        pass


# =============================================================================
# SUPABASE IMPLEMENTATION
# =============================================================================

def _user_to_dict(user: Any) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    if isinstance(user, Mapping):
        return dict(user)
    return {
        "id": str(getattr(user, "id", "")),
        "email": getattr(user, "email", None) or "",
        "user_metadata": dict(getattr(user, "user_metadata", None) or {}),
    }


class SupabaseGateway(RemoteGateway):
    """RemoteGateway over the async Supabase client"""

    def __init__(self, manager: SupabaseManager):
        self.manager = manager

    async def _run(self, operation: str, call: Callable[[Any], Awaitable[Any]]) -> Any:
        client = await self.manager.get_client()
        action, _, entity = operation.partition(" ")
        try:
            result = await call(client)
        except FreeExperienceException:
            logger.log_backend_call("supabase", action, entity or "auth", success=False)
            raise
        except APIError as e:
            logger.warning(
                f"Supabase {operation} rejected: {e.message}",
                extra={"operation": operation, "code": e.code}
            )
            raise map_remote_error(e, operation) from e
        except httpx.HTTPError as e:
            logger.error(f"Supabase {operation} transport error: {e}", extra={"operation": operation})
            raise TransportFailureError(
                f"Remote service unreachable during {operation}",
                operation=operation
            ) from e
        except Exception as e:
            logger.warning(f"Supabase {operation} failed: {e}", extra={"operation": operation})
            raise map_remote_error(e, operation) from e

        logger.log_backend_call("supabase", action, entity or "auth")
        return result

    @staticmethod
    def _apply_filters(query: Any, filters: Optional[Mapping[str, Any]]) -> Any:
        for column, value in (filters or {}).items():
            if isinstance(value, (list, tuple, set)):
                query = query.in_(column, list(value))
            else:
                query = query.eq(column, value)
        return query

    # =========================================================================
    # TABLES
    # =========================================================================

    async def select(self, table, columns="*", filters=None, order_by=None, descending=True, limit=None):
        async def call(client):
            query = self._apply_filters(client.table(table).select(columns), filters)
            if order_by:
                query = query.order(order_by, desc=descending)
            if limit:
                query = query.limit(limit)
            response = await query.execute()
            return list(response.data or [])

        return await self._run(f"select {table}", call)

    async def count(self, table, filters=None):
        async def call(client):
            query = client.table(table).select("id", count="exact", head=True)
            response = await self._apply_filters(query, filters).execute()
            return int(response.count or 0)

        return await self._run(f"count {table}", call)

    async def insert(self, table, row):
        async def call(client):
            response = await client.table(table).insert(dict(row)).execute()
            return dict(response.data[0]) if response.data else dict(row)

        return await self._run(f"insert {table}", call)

    async def upsert(self, table, row):
        async def call(client):
            response = await client.table(table).upsert(dict(row)).execute()
            return dict(response.data[0]) if response.data else dict(row)

        return await self._run(f"upsert {table}", call)

    # =========================================================================
    # AUTH
    # =========================================================================

    async def get_user(self):
        async def call(client):
            response = await client.auth.get_user()
            return _user_to_dict(getattr(response, "user", None))

        return await self._run("get_user", call)

    async def sign_up(self, email, password, metadata):
        async def call(client):
            response = await client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": dict(metadata)},
            })
            user = _user_to_dict(response.user)
            if user is None:
                raise TransportFailureError("Не удалось создать пользователя", operation="sign_up")
            return user

        return await self._run("sign_up", call)

    async def sign_in(self, email, password):
        async def call(client):
            response = await client.auth.sign_in_with_password({"email": email, "password": password})
            user = _user_to_dict(response.user)
            if user is None:
                raise AuthenticationError("Неверный email или пароль", email=email)
            return user

        return await self._run("sign_in", call)

    async def sign_out(self):
        async def call(client):
            await client.auth.sign_out()

        await self._run("sign_out", call)

    async def update_user_metadata(self, metadata):
        async def call(client):
            response = await client.auth.update_user({"data": dict(metadata)})
            return _user_to_dict(response.user) or {}

        return await self._run("update_user", call)

    async def on_auth_state_change(self, callback):
        client = await self.manager.get_client()

        def relay(event: Any, session: Any) -> None:
            user = getattr(session, "user", None) if session is not None else None
            callback(str(getattr(event, "value", event)), str(user.id) if user is not None else None)

        subscription = client.auth.on_auth_state_change(relay)
        return subscription.unsubscribe

    # =========================================================================
    # STORAGE
    # =========================================================================

    async def upload(self, bucket, path, data, content_type, cache_control):
        async def call(client):
            storage = client.storage.from_(bucket)
            await storage.upload(
                path=path,
                file=data,
                file_options={
                    "content-type": content_type,
                    "cache-control": cache_control,
                    "upsert": "true",
                },
            )
            public_url = storage.get_public_url(path)
            if inspect.isawaitable(public_url):
                public_url = await public_url
            return public_url

        return await self._run(f"upload {bucket}", call)
