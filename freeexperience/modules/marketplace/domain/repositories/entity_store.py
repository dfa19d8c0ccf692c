# 📄 File: freeexperience/modules/marketplace/domain/repositories/entity_store.py
#
# 🧭 Purpose (Layman Explanation):
# Defines the promise every storage place makes, whether it is the cloud database or
# the local notebook: read one thing, save one thing, list things, check if something exists.
#
# 🧪 Purpose (Technical Summary):
# Repository interfaces for the dual-backend data layer. One implementation per backend
# (remote Supabase, local key-value store) and per entity; callers only see these ABCs.
#
# 🔗 Dependencies:
# abc, typing, domain models, filters
#
# 🔄 Connected Modules / Calls From:
# DualBackendStore, application services, SessionResolver

from abc import ABC, abstractmethod
from typing import Dict, Generic, List, Optional, Sequence, TypeVar

from ..models.actor import IdentityRecord, UserRole
from ..models.application import Application
from ..models.article import Article
from ..models.project import Project
from ..models.specialist import SpecialistProfile
from .filters import ApplicationFilter, ArticleFilter, EntityFilter, ProjectFilter, SpecialistFilter

E = TypeVar("E")
F = TypeVar("F", bound=EntityFilter)


class EntityStore(ABC, Generic[E, F]):
    """
    Uniform async CRUD-like access to one logical entity.

    Implementation Notes:
    - ``read`` returns None for a missing entity and never raises for not-found
    - transport problems raise TransportFailureError, local capacity problems
      raise StorageQuotaExceededError
    - stored data that fails shape validation is logged and treated as absent
    """

    @abstractmethod
    async def read(self, entity_id: str) -> Optional[E]:
        """
        Get an entity by id.

        Args:
            entity_id: Identifier to look up

        Returns:
            The canonical entity, or None if absent
        """
        pass

    @abstractmethod
    async def write(self, entity: E) -> E:
        """
        Create or fully replace an entity.

        Args:
            entity: Canonical entity to persist

        Returns:
            The persisted form (backends may assign id or created_at)
        """
        pass

    @abstractmethod
    async def list(self, entity_filter: Optional[F] = None) -> List[E]:
        """
        Entities matching the filter, in no guaranteed order.

        Args:
            entity_filter: Filter object; None lists everything
        """
        pass

    async def exists(self, entity_filter: F) -> bool:
        """Whether any entity matches, evaluated against this same backend."""
        return bool(await self.list(entity_filter))


class SpecialistStore(EntityStore[SpecialistProfile, SpecialistFilter]):
    """Specialist profiles, reconciled to the canonical shape on the way out"""

    async def claim_legacy_profile(self, owner_id: str) -> Optional[SpecialistProfile]:
        """
        Hand a profile saved without an owner to ``owner_id``.

        Only the signed-in owner may call this; ``read`` never claims.
        Backends without ownerless records return None.

        Args:
            owner_id: Id of the signed-in specialist

        Returns:
            The claimed profile, or None when there was nothing to claim
        """
        return None


class ProjectStore(EntityStore[Project, ProjectFilter]):
    """Project postings"""


class ApplicationStore(EntityStore[Application, ApplicationFilter]):
    """Applications to projects"""

    @abstractmethod
    async def count_by_project(self, project_ids: Sequence[str]) -> Dict[str, int]:
        """
        Count applications for several projects in one round trip.

        Args:
            project_ids: Projects to count for

        Returns:
            Dict mapping every requested id to its count (0 when none)
        """
        pass


class ArticleStore(EntityStore[Article, ArticleFilter]):
    """Resource articles"""


class CompanyStore(ABC):
    """Company accounts; only the display name matters to the core"""

    @abstractmethod
    async def ensure(self, company_id: str, email: str, company_name: str) -> str:
        """
        Create the company record unless it exists.

        Returns:
            str: The stored company name
        """
        pass

    @abstractmethod
    async def read_name(self, company_id: str) -> Optional[str]:
        """Stored company name, or None if there is no record."""
        pass


class SessionStore(ABC):
    """
    Current identity of the process, plus the account operations of the
    backend that owns identities.
    """

    @abstractmethod
    async def read(self) -> Optional[IdentityRecord]:
        """Current identity, or None when signed out."""
        pass

    @abstractmethod
    async def write(self, identity: IdentityRecord) -> IdentityRecord:
        """Persist identity as current (or update its metadata remotely)."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Sign the current session out."""
        pass

    @abstractmethod
    async def register(
        self,
        email: str,
        password: str,
        role: UserRole,
        display_name: str
    ) -> IdentityRecord:
        """
        Create an account and make it current.

        Raises:
            ConflictError: If the email is already registered
            ValidationError: If the provider rejects the password
        """
        pass

    @abstractmethod
    async def authenticate(self, email: str, password: str) -> IdentityRecord:
        """
        Verify credentials and make the account current.

        Raises:
            AuthenticationError: If the credentials do not match an account
        """
        pass


class AssetStore(ABC):
    """Binary assets (avatars, portfolio images) addressed by stable URLs"""

    @abstractmethod
    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """
        Store bytes under path.

        Returns:
            str: Public URL of the stored asset
        """
        pass
