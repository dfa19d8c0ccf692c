# 📄 File: freeexperience/modules/marketplace/infrastructure/dual_backend_store.py
#
# 🧭 Purpose (Layman Explanation):
# Decides once, when the app starts, whether data lives in the cloud database or in the
# local notebook, and then hands out the matching set of storage helpers.
#
# 🧪 Purpose (Technical Summary):
# DualBackendStore bundles one store per entity, all bound to the same backend. The
# factory picks the remote backend when Supabase credentials are configured and falls
# back to the local durable store when the remote backend cannot be built.
#
# 🔗 Dependencies:
# Settings, SupabaseManager, local and remote repositories
#
# 🔄 Connected Modules / Calls From:
# AppContext, tests

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from freeexperience.shared.config.settings import Settings
from freeexperience.shared.config.supabase import SupabaseManager
from freeexperience.shared.core.exceptions import NotConfiguredError
from freeexperience.shared.core.security import PasswordHasher
from freeexperience.shared.infrastructure.storage import LocalKeyValueStore
from freeexperience.shared.utils.logging import get_logger
from ..domain.repositories.entity_store import (
    ApplicationStore,
    ArticleStore,
    AssetStore,
    CompanyStore,
    ProjectStore,
    SessionStore,
    SpecialistStore,
)
from .local import (
    LocalApplicationStore,
    LocalArticleStore,
    LocalAssetStore,
    LocalCompanyStore,
    LocalProjectStore,
    LocalRecords,
    LocalSessionStore,
    LocalSpecialistStore,
)
from .remote import (
    RemoteApplicationStore,
    RemoteArticleStore,
    RemoteAssetStore,
    RemoteCompanyStore,
    RemoteGateway,
    RemoteProjectStore,
    RemoteSessionStore,
    RemoteSpecialistStore,
    SupabaseGateway,
)

logger = get_logger(__name__)


class BackendKind(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class DualBackendStore:
    """
    Entity stores bound to exactly one backend for the life of the process.

    ``exists`` on a store is evaluated against the same backend that
    receives that store's writes.
    """
    kind: BackendKind
    sessions: SessionStore
    specialists: SpecialistStore
    companies: CompanyStore
    projects: ProjectStore
    applications: ApplicationStore
    articles: ArticleStore
    assets: AssetStore
    gateway: Optional[RemoteGateway] = None

    @property
    def is_remote(self) -> bool:
        return self.kind == BackendKind.REMOTE


def build_local_store(
    local_store: LocalKeyValueStore,
    hasher: Optional[PasswordHasher] = None
) -> DualBackendStore:
    """Bind every entity to the local durable store."""
    records = LocalRecords(local_store)
    return DualBackendStore(
        kind=BackendKind.LOCAL,
        sessions=LocalSessionStore(records, hasher),
        specialists=LocalSpecialistStore(records),
        companies=LocalCompanyStore(records),
        projects=LocalProjectStore(records),
        applications=LocalApplicationStore(records),
        articles=LocalArticleStore(records),
        assets=LocalAssetStore(),
    )


def build_remote_store(gateway: RemoteGateway, bucket: str, cache_control: str = "3600") -> DualBackendStore:
    """Bind every entity to the remote gateway."""
    return DualBackendStore(
        kind=BackendKind.REMOTE,
        sessions=RemoteSessionStore(gateway),
        specialists=RemoteSpecialistStore(gateway),
        companies=RemoteCompanyStore(gateway),
        projects=RemoteProjectStore(gateway),
        applications=RemoteApplicationStore(gateway),
        articles=RemoteArticleStore(gateway),
        assets=RemoteAssetStore(gateway, bucket, cache_control),
        gateway=gateway,
    )


def build_dual_backend_store(
    settings: Settings,
    local_store: Optional[LocalKeyValueStore] = None,
    gateway: Optional[RemoteGateway] = None,
    supabase: Optional[SupabaseManager] = None,
) -> DualBackendStore:
    """
    Choose the backend once and build its stores.

    Args:
        settings: Application settings (Supabase credentials decide the backend)
        local_store: Local durable store, created from settings when omitted
        gateway: Remote gateway override, used instead of Supabase when given
        supabase: Supabase manager for the default gateway

    Returns:
        DualBackendStore: Stores bound to the chosen backend
    """
    if gateway is not None:
        logger.info("Using remote backend (injected gateway)")
        return build_remote_store(
            gateway, settings.SUPABASE_STORAGE_BUCKET, settings.SUPABASE_STORAGE_CACHE_CONTROL
        )

    if settings.supabase_configured:
        manager = supabase or SupabaseManager(settings)
        try:
            manager.ensure_configured()
        except NotConfiguredError as e:
            logger.warning(
                f"Remote backend unavailable, falling back to local store: {e.message}",
                extra={"details": e.details}
            )
        else:
            logger.info("Using remote backend (Supabase)")
            return build_remote_store(
                SupabaseGateway(manager),
                manager.bucket,
                settings.SUPABASE_STORAGE_CACHE_CONTROL,
            )
    else:
        logger.info("Supabase is not configured, using local store")

    if local_store is None:
        local_store = LocalKeyValueStore(settings.LOCAL_STORE_PATH, settings.LOCAL_STORE_QUOTA_BYTES)
    return build_local_store(local_store)
