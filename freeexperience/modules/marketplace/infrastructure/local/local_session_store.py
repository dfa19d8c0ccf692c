# 📄 File: freeexperience/modules/marketplace/infrastructure/local/local_session_store.py
#
# 🧭 Purpose (Layman Explanation):
# When there is no cloud login service, this keeps a small list of accounts on disk
# and remembers which one is signed in.
#
# 🧪 Purpose (Technical Summary):
# SessionStore over the local key-value store: ``users`` holds the account registry
# (PBKDF2 password hashes via passlib), ``user`` holds the active account. Records
# written by earlier clients with a plaintext ``password`` are verified once and
# upgraded to a hash.
#
# 🔗 Dependencies:
# passlib (via shared security), LocalRecords, domain models
#
# 🔄 Connected Modules / Calls From:
# DualBackendStore (local backend), AuthService, SessionResolver

from typing import Any, Dict, Optional

from freeexperience.shared.core.exceptions import AuthenticationError, ConflictError
from freeexperience.shared.core.security import PasswordHasher, get_password_hasher
from freeexperience.shared.utils.helpers import generate_id, normalize_email
from freeexperience.shared.utils.logging import get_logger
from ...domain.models.actor import IdentityRecord, UserRole
from ...domain.repositories.entity_store import SessionStore
from .local_records import ACTIVE_USER_KEY, USERS_KEY, LocalRecords

logger = get_logger(__name__)


class LocalSessionStore(SessionStore):
    """Session and account registry kept in the local durable store"""

    def __init__(self, records: LocalRecords, hasher: Optional[PasswordHasher] = None):
        self.records = records
        self.hasher = hasher or get_password_hasher()

    # =========================================================================
    # SESSION
    # =========================================================================

    async def read(self) -> Optional[IdentityRecord]:
        active = self.records.read_object(ACTIVE_USER_KEY)
        if not active or not active.get("id"):
            return None
        return self._to_identity(active)

    async def write(self, identity: IdentityRecord) -> IdentityRecord:
        account = self._find_by_id(identity.id) or {}
        account.update({
            "id": identity.id,
            "email": normalize_email(identity.email),
            "name": identity.name or account.get("name") or "",
            "type": identity.role.value,
        })
        self.records.upsert(USERS_KEY, account, lambda existing: _same_id(existing, identity.id))
        self._activate(account)
        return self._to_identity(account)

    async def clear(self) -> None:
        self.records.remove(ACTIVE_USER_KEY)
        logger.info("Local session cleared")

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    async def register(
        self,
        email: str,
        password: str,
        role: UserRole,
        display_name: str
    ) -> IdentityRecord:
        email = normalize_email(email)
        if self._find_by_email(email) is not None:
            raise ConflictError(
                "User already registered",
                resource_type="account",
                conflict_field="email",
                existing_value=email
            )

        account: Dict[str, Any] = {
            "id": generate_id(),
            "email": email,
            "name": display_name,
            "passwordHash": self.hasher.hash_password(password),
            "type": role.value,
        }
        if role == UserRole.COMPANY:
            account["companyName"] = display_name

        users = self.records.read_list(USERS_KEY)
        users.append(account)
        self.records.write_json(USERS_KEY, users)
        self._activate(account)

        logger.info(f"Local account registered: {account['id']}", extra={"role": role.value})
        return self._to_identity(account)

    async def authenticate(self, email: str, password: str) -> IdentityRecord:
        email = normalize_email(email)
        account = self._find_by_email(email)
        if account is None or not self._verify(account, password):
            raise AuthenticationError("Неверный email или пароль", email=email)

        self._activate(account)
        return self._to_identity(account)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _verify(self, account: Dict[str, Any], password: str) -> bool:
        stored_hash = account.get("passwordHash")
        if isinstance(stored_hash, str):
            return self.hasher.verify_password(password, stored_hash)

        legacy = account.get("password")
        if not isinstance(legacy, str) or legacy != password:
            return False

        account.pop("password", None)
        account["passwordHash"] = self.hasher.hash_password(password)
        self.records.upsert(USERS_KEY, account, lambda existing: _same_id(existing, account.get("id")))
        logger.info(f"Upgraded plaintext password of local account {account.get('id')}")
        return True

    def _accounts(self):
        return [u for u in self.records.read_list(USERS_KEY) if isinstance(u, dict) and u.get("id")]

    def _find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        for account in self._accounts():
            if normalize_email(account.get("email")) == email:
                return account
        return None

    def _find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        for account in self._accounts():
            if account.get("id") == user_id:
                return account
        return None

    def _activate(self, account: Dict[str, Any]) -> None:
        public = {k: v for k, v in account.items() if k not in ("password", "passwordHash")}
        self.records.write_json(ACTIVE_USER_KEY, public)

    @staticmethod
    def _to_identity(account: Dict[str, Any]) -> IdentityRecord:
        name = account.get("name") if isinstance(account.get("name"), str) else None
        return IdentityRecord(
            id=str(account["id"]),
            email=normalize_email(account.get("email")),
            name=name or None,
            role=UserRole.parse(account.get("type")),
        )


def _same_id(existing: Any, user_id: Optional[str]) -> bool:
    return isinstance(existing, dict) and existing.get("id") == user_id
