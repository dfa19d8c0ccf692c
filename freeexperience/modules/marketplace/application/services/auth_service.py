# 📄 File: freeexperience/modules/marketplace/application/services/auth_service.py
#
# 🧭 Purpose (Layman Explanation):
# Handles creating an account, logging in and logging out, and makes sure every new
# specialist or company gets an empty profile to fill in.
#
# 🧪 Purpose (Technical Summary):
# Account use cases over the bound SessionStore. Emails are normalized, registration
# display names never fall back to the full email address, a profile record is ensured
# after sign-up and sign-in, and the identity change is announced so the
# SessionResolver re-resolves the current actor.
#
# 🔗 Dependencies:
# - DualBackendStore (sessions, specialists, companies)
# - KeyedAsyncCache (invalidation of profile listings)
# - EventBus and identity events (local backend announcements)
#
# 🔄 Connected Modules / Calls From:
# - Auth API router
# - AppContext

from typing import Optional

from freeexperience.shared.core.event_bus import EventBus
from freeexperience.shared.core.exceptions import PermissionDeniedError, ValidationError
from freeexperience.shared.infrastructure.cache import KeyedAsyncCache
from freeexperience.shared.utils.helpers import (
    clean_whitespace,
    email_local_part,
    is_empty_or_whitespace,
    normalize_email,
)
from freeexperience.shared.utils.logging import get_logger
from ...domain.events.identity_events import IdentityEvent, identity_event
from ...domain.models.actor import Actor, IdentityRecord, UserRole
from ...domain.models.specialist import Specialization, SpecialistProfile
from ...domain.services.schema_reconciler import split_display_name
from ...domain.services.session_resolver import (
    AUTH_CACHE_PREFIX,
    SessionResolver,
    specialist_cache_key,
)
from ...infrastructure.dual_backend_store import DualBackendStore

logger = get_logger(__name__)

SPECIALISTS_CACHE_KEY = "specialists"
MIN_PASSWORD_LENGTH = 6
FALLBACK_SPECIALIST_NAME = "Специалист"
FALLBACK_COMPANY_NAME = "Компания"


def derive_display_name(provided: Optional[str], email: str, role: UserRole) -> str:
    """
    Name to store for a new account.

    Uses the provided name when present, otherwise the email local part
    (prefixed with "Компания" for companies). Never the full address.
    """
    name = clean_whitespace(provided)
    if name:
        return name

    local_part = email_local_part(email)
    if role == UserRole.COMPANY:
        return f"{FALLBACK_COMPANY_NAME} {local_part}" if local_part else FALLBACK_COMPANY_NAME
    return local_part or FALLBACK_SPECIALIST_NAME


class AuthService:
    """Registration, sign-in and sign-out for both backends"""

    def __init__(
        self,
        store: DualBackendStore,
        cache: KeyedAsyncCache,
        event_bus: EventBus,
        resolver: SessionResolver
    ):
        self.store = store
        self.cache = cache
        self.event_bus = event_bus
        self.resolver = resolver

    async def sign_up(
        self,
        email: str,
        password: str,
        role: UserRole = UserRole.SPECIALIST,
        display_name: Optional[str] = None
    ) -> Optional[Actor]:
        """
        Register an account, create its profile record and sign it in.

        Args:
            email: Login email (trimmed and lower-cased)
            password: Plain password, at least 6 characters
            role: Marketplace side of the account
            display_name: Name or company name as entered

        Returns:
            The resolved actor, or None when the provider requires email
            confirmation before a session exists

        Raises:
            ValidationError: If email or password is unusable
            ConflictError: If the email is already registered
        """
        email = self._validate_credentials(email, password)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                "Пароль должен быть не короче 6 символов",
                field="password",
                constraint=f"min_length={MIN_PASSWORD_LENGTH}"
            )

        name = derive_display_name(display_name, email, role)
        identity = await self.store.sessions.register(email, password, role, name)
        await self.ensure_profile_record(identity, name)

        logger.log_user_action("sign_up", identity.id, extra={"role": role.value})
        return await self._announce(IdentityEvent.SIGNED_IN, identity.id)

    async def sign_in(self, email: str, password: str) -> Optional[Actor]:
        """
        Authenticate and make the account current.

        Raises:
            AuthenticationError: If the credentials do not match
        """
        email = self._validate_credentials(email, password)
        identity = await self.store.sessions.authenticate(email, password)

        stored_name = identity.name or identity.metadata.get("displayName")
        name = clean_whitespace(stored_name) if isinstance(stored_name, str) else ""
        await self.ensure_profile_record(identity, name or derive_display_name(None, email, identity.role))

        logger.log_user_action("sign_in", identity.id)
        return await self._announce(IdentityEvent.SIGNED_IN, identity.id)

    async def sign_out(self) -> None:
        current = self.resolver.current_actor
        await self.store.sessions.clear()
        logger.log_user_action("sign_out", current.id if current else "anonymous")
        await self._announce(IdentityEvent.SIGNED_OUT, current.id if current else None)

    async def ensure_profile_record(self, identity: IdentityRecord, display_name: str) -> None:
        """
        Create the specialist profile or company record if it is missing.

        A row-level security rejection is logged and left for the next
        sign-in, since unconfirmed remote accounts cannot write yet.
        """
        try:
            if identity.role == UserRole.COMPANY:
                await self.store.companies.ensure(identity.id, identity.email, display_name)
                return

            if await self.store.specialists.claim_legacy_profile(identity.id) is not None:
                self._forget_profile(identity.id)
                return
            if await self.store.specialists.read(identity.id) is not None:
                return

            first_name, last_name = split_display_name(display_name)
            profile = SpecialistProfile(
                id=identity.id,
                first_name=first_name or display_name,
                last_name=last_name,
                specialization=Specialization.DESIGN,
                contact_email=identity.email or None,
            )
            await self.store.specialists.write(profile)
            self._forget_profile(identity.id)
            logger.info(f"Created empty specialist profile for {identity.id}")
        except PermissionDeniedError as e:
            logger.warning(
                f"Profile record for {identity.id} not created: {e.message}",
                extra={"role": identity.role.value}
            )

    def _forget_profile(self, user_id: str) -> None:
        self.cache.invalidate(SPECIALISTS_CACHE_KEY)
        self.cache.invalidate(specialist_cache_key(user_id))

    async def _announce(self, kind: IdentityEvent, user_id: Optional[str]) -> Optional[Actor]:
        if self.store.is_remote:
            # The provider's own auth-state event arrives later and coalesces with this
            self.cache.invalidate(AUTH_CACHE_PREFIX)
            return await self.resolver.resolve(force_refresh=True)

        await self.event_bus.publish(identity_event(kind, user_id, source=self.store.kind.value))
        return self.resolver.current_actor

    @staticmethod
    def _validate_credentials(email: str, password: str) -> str:
        normalized = normalize_email(email)
        if not normalized or "@" not in normalized:
            raise ValidationError("Введите корректный email", field="email", value=email)
        if is_empty_or_whitespace(password):
            raise ValidationError("Введите пароль", field="password")
        return normalized
