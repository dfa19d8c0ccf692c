# 📄 File: freeexperience/modules/marketplace/infrastructure/remote/remote_repositories.py
#
# 🧭 Purpose (Layman Explanation):
# Saves and loads specialists, companies, projects, applications, articles and pictures in the
# cloud database, and handles sign-in through the cloud login service.
#
# 🧪 Purpose (Technical Summary):
# Remote-backend implementations of the marketplace stores over RemoteGateway. Filters
# are mapped to table columns, rows pass through the schema reconciler and record
# mappers, application counts come from one ``in`` query, and a unique violation on
# applications becomes DuplicateApplicationError.
#
# 🔗 Dependencies:
# RemoteGateway, record mappers, schema reconciler, domain repositories
#
# 🔄 Connected Modules / Calls From:
# DualBackendStore (remote backend)

from typing import Any, Dict, List, Mapping, Optional, Sequence

from freeexperience.shared.core.exceptions import (
    ConflictError,
    DuplicateApplicationError,
    MalformedStoredDataError,
)
from freeexperience.shared.utils.helpers import normalize_email, utc_now
from freeexperience.shared.utils.logging import get_logger
from ...domain.models.actor import IdentityRecord, UserRole
from ...domain.models.application import Application
from ...domain.models.article import Article
from ...domain.models.project import Project
from ...domain.models.specialist import SpecialistProfile
from ...domain.repositories.entity_store import (
    ApplicationStore,
    ArticleStore,
    AssetStore,
    CompanyStore,
    ProjectStore,
    SessionStore,
    SpecialistStore,
)
from ...domain.repositories.filters import ApplicationFilter, ArticleFilter, ProjectFilter, SpecialistFilter
from ...domain.services.record_mappers import (
    application_from_remote,
    application_to_remote,
    article_from_remote,
    article_to_remote,
    project_from_remote,
    project_to_remote,
)
from ...domain.services.schema_reconciler import RecordVariant, denormalize, normalize
from .supabase_gateway import UNIQUE_VIOLATION, RemoteGateway

logger = get_logger(__name__)

SPECIALISTS_TABLE = "specialists"
COMPANIES_TABLE = "companies"
PROJECTS_TABLE = "projects"
APPLICATIONS_TABLE = "applications"
ARTICLES_TABLE = "articles"

PROJECT_COLUMNS = "*, companies(company_name)"

ROLE_METADATA_KEY = "userType"
NAME_METADATA_KEY = "displayName"


def identity_from_user(user: Mapping[str, Any]) -> IdentityRecord:
    """
    Build an IdentityRecord from a provider user object.

    The role comes from the ``userType`` metadata entry set at sign-up.
    """
    metadata = dict(user.get("user_metadata") or {})
    avatar = metadata.get("avatar_url")
    return IdentityRecord(
        id=str(user.get("id")),
        email=normalize_email(user.get("email")),
        name=None,
        role=UserRole.parse(metadata.get(ROLE_METADATA_KEY) or metadata.get("role")),
        metadata=metadata,
        avatar_url=avatar if isinstance(avatar, str) and avatar else None,
    )


class RemoteSessionStore(SessionStore):
    """Current identity as reported by the hosted auth service"""

    def __init__(self, gateway: RemoteGateway):
        self.gateway = gateway

    async def read(self) -> Optional[IdentityRecord]:
        user = await self.gateway.get_user()
        if not user or not user.get("id"):
            return None
        return identity_from_user(user)

    async def write(self, identity: IdentityRecord) -> IdentityRecord:
        metadata = {**identity.metadata, ROLE_METADATA_KEY: identity.role.value}
        if identity.name:
            metadata[NAME_METADATA_KEY] = identity.name
        user = await self.gateway.update_user_metadata(metadata)
        return identity_from_user(user) if user.get("id") else identity

    async def clear(self) -> None:
        await self.gateway.sign_out()
        logger.info("Remote session signed out")

    async def register(
        self,
        email: str,
        password: str,
        role: UserRole,
        display_name: str
    ) -> IdentityRecord:
        user = await self.gateway.sign_up(
            normalize_email(email),
            password,
            {ROLE_METADATA_KEY: role.value, NAME_METADATA_KEY: display_name},
        )
        logger.info(f"Remote account registered: {user.get('id')}", extra={"role": role.value})
        return identity_from_user(user)

    async def authenticate(self, email: str, password: str) -> IdentityRecord:
        user = await self.gateway.sign_in(normalize_email(email), password)
        return identity_from_user(user)


class RemoteSpecialistStore(SpecialistStore):
    """Specialist rows, reconciled on read and written in the row layout"""

    def __init__(self, gateway: RemoteGateway):
        self.gateway = gateway

    @staticmethod
    def _columns(entity_filter: Optional[SpecialistFilter]) -> Dict[str, Any]:
        criteria = entity_filter.criteria() if entity_filter else {}
        columns: Dict[str, Any] = {}
        if "ids" in criteria:
            columns["id"] = list(criteria["ids"])
        if "visible_in_search" in criteria:
            columns["show_in_search"] = criteria["visible_in_search"]
        if "specialization" in criteria:
            columns["specialization"] = criteria["specialization"].value
        return columns

    async def read(self, entity_id: str) -> Optional[SpecialistProfile]:
        rows = await self.gateway.select(SPECIALISTS_TABLE, filters={"id": entity_id}, limit=1)
        if not rows:
            return None
        return normalize(rows[0], fallback_id=entity_id)

    async def write(self, entity: SpecialistProfile) -> SpecialistProfile:
        row = await self.gateway.upsert(SPECIALISTS_TABLE, denormalize(entity, RecordVariant.REMOTE_ROW))
        saved = normalize(row, fallback_id=entity.id)
        # Rating counters are not stored remotely
        return saved.model_copy(update={"rating": entity.rating, "hired_count": entity.hired_count})

    async def list(self, entity_filter: Optional[SpecialistFilter] = None) -> List[SpecialistProfile]:
        if entity_filter is not None and entity_filter.ids is not None and not entity_filter.ids:
            return []
        rows = await self.gateway.select(SPECIALISTS_TABLE, filters=self._columns(entity_filter))
        profiles = []
        for row in rows:
            profile = normalize(row)
            if not profile.id:
                logger.warning("Skipping specialist row without id", extra={"table": SPECIALISTS_TABLE})
                continue
            profiles.append(profile)
        return profiles

    async def exists(self, entity_filter: SpecialistFilter) -> bool:
        return await self.gateway.count(SPECIALISTS_TABLE, self._columns(entity_filter)) > 0


class RemoteCompanyStore(CompanyStore):
    """Rows of the ``companies`` table"""

    def __init__(self, gateway: RemoteGateway):
        self.gateway = gateway

    async def ensure(self, company_id: str, email: str, company_name: str) -> str:
        existing = await self.read_name(company_id)
        if existing:
            return existing
        await self.gateway.insert(COMPANIES_TABLE, {
            "id": company_id,
            "email": normalize_email(email),
            "company_name": company_name,
        })
        logger.info(f"Remote company record created: {company_id}")
        return company_name

    async def read_name(self, company_id: str) -> Optional[str]:
        rows = await self.gateway.select(
            COMPANIES_TABLE, columns="id, company_name", filters={"id": company_id}, limit=1
        )
        if not rows:
            return None
        return rows[0].get("company_name") or None


class RemoteProjectStore(ProjectStore):
    """Project rows joined with the owning company's name"""

    def __init__(self, gateway: RemoteGateway):
        self.gateway = gateway

    @staticmethod
    def _columns(entity_filter: Optional[ProjectFilter]) -> Dict[str, Any]:
        criteria = entity_filter.criteria() if entity_filter else {}
        columns: Dict[str, Any] = {}
        if "ids" in criteria:
            columns["id"] = list(criteria["ids"])
        if "owner_id" in criteria:
            columns["company_id"] = criteria["owner_id"]
        if "status" in criteria:
            columns["status"] = criteria["status"].value
        return columns

    def _map_rows(self, rows: Sequence[Any]) -> List[Project]:
        projects = []
        for row in rows:
            try:
                projects.append(project_from_remote(row))
            except MalformedStoredDataError as e:
                logger.warning(
                    f"Skipping malformed project row: {e.message}",
                    extra={"table": PROJECTS_TABLE, "error_code": e.error_code}
                )
        return projects

    async def read(self, entity_id: str) -> Optional[Project]:
        rows = await self.gateway.select(
            PROJECTS_TABLE, columns=PROJECT_COLUMNS, filters={"id": entity_id}, limit=1
        )
        projects = self._map_rows(rows)
        return projects[0] if projects else None

    async def write(self, entity: Project) -> Project:
        row = await self.gateway.upsert(PROJECTS_TABLE, project_to_remote(entity))
        saved = project_from_remote(row, application_count=entity.application_count)
        return saved.model_copy(update={"company_name": entity.company_name})

    async def list(self, entity_filter: Optional[ProjectFilter] = None) -> List[Project]:
        if entity_filter is not None and entity_filter.ids is not None and not entity_filter.ids:
            return []
        rows = await self.gateway.select(
            PROJECTS_TABLE,
            columns=PROJECT_COLUMNS,
            filters=self._columns(entity_filter),
            order_by="created_at",
        )
        return self._map_rows(rows)

    async def exists(self, entity_filter: ProjectFilter) -> bool:
        return await self.gateway.count(PROJECTS_TABLE, self._columns(entity_filter)) > 0


class RemoteApplicationStore(ApplicationStore):
    """Rows of the ``applications`` table"""

    def __init__(self, gateway: RemoteGateway):
        self.gateway = gateway

    @staticmethod
    def _columns(entity_filter: Optional[ApplicationFilter]) -> Dict[str, Any]:
        criteria = entity_filter.criteria() if entity_filter else {}
        columns: Dict[str, Any] = {}
        if "project_id" in criteria:
            columns["project_id"] = criteria["project_id"]
        if "applicant_id" in criteria:
            columns["specialist_id"] = criteria["applicant_id"]
        if "project_ids" in criteria:
            columns["project_id"] = list(criteria["project_ids"])
        return columns

    async def read(self, entity_id: str) -> Optional[Application]:
        rows = await self.gateway.select(APPLICATIONS_TABLE, filters={"id": entity_id}, limit=1)
        applications = self._map_rows(rows)
        return applications[0] if applications else None

    async def write(self, entity: Application) -> Application:
        try:
            row = await self.gateway.insert(APPLICATIONS_TABLE, application_to_remote(entity))
        except ConflictError as e:
            if e.details.get("code") != UNIQUE_VIOLATION:
                raise
            raise DuplicateApplicationError(
                project_id=entity.project_id,
                applicant_id=entity.applicant_id
            ) from e

        saved = application_from_remote(row)
        return saved.model_copy(update={
            "applicant_name": entity.applicant_name,
            "applicant_email": entity.applicant_email,
            "project_title": entity.project_title,
        })

    async def list(self, entity_filter: Optional[ApplicationFilter] = None) -> List[Application]:
        if entity_filter is not None and entity_filter.project_ids is not None and not entity_filter.project_ids:
            return []
        rows = await self.gateway.select(
            APPLICATIONS_TABLE, filters=self._columns(entity_filter), order_by="created_at"
        )
        return self._map_rows(rows)

    async def exists(self, entity_filter: ApplicationFilter) -> bool:
        return await self.gateway.count(APPLICATIONS_TABLE, self._columns(entity_filter)) > 0

    async def count_by_project(self, project_ids: Sequence[str]) -> Dict[str, int]:
        counts = {project_id: 0 for project_id in project_ids}
        if not counts:
            return counts

        rows = await self.gateway.select(
            APPLICATIONS_TABLE, columns="project_id", filters={"project_id": list(counts)}
        )
        for row in rows:
            project_id = str(row.get("project_id"))
            if project_id in counts:
                counts[project_id] += 1
        return counts

    @staticmethod
    def _map_rows(rows: Sequence[Any]) -> List[Application]:
        applications = []
        for row in rows:
            try:
                applications.append(application_from_remote(row))
            except MalformedStoredDataError as e:
                logger.warning(
                    f"Skipping malformed application row: {e.message}",
                    extra={"table": APPLICATIONS_TABLE, "error_code": e.error_code}
                )
        return applications


class RemoteArticleStore(ArticleStore):
    """Rows of the ``articles`` table"""

    def __init__(self, gateway: RemoteGateway):
        self.gateway = gateway

    @staticmethod
    def _columns(entity_filter: Optional[ArticleFilter]) -> Dict[str, Any]:
        criteria = entity_filter.criteria() if entity_filter else {}
        columns: Dict[str, Any] = {}
        if "ids" in criteria:
            columns["id"] = list(criteria["ids"])
        if "author_id" in criteria:
            columns["author_id"] = criteria["author_id"]
        return columns

    @staticmethod
    def _map_rows(rows: Sequence[Any]) -> List[Article]:
        articles = []
        for row in rows:
            try:
                articles.append(article_from_remote(row))
            except MalformedStoredDataError as e:
                logger.warning(
                    f"Skipping malformed article row: {e.message}",
                    extra={"table": ARTICLES_TABLE, "error_code": e.error_code}
                )
        return articles

    async def read(self, entity_id: str) -> Optional[Article]:
        rows = await self.gateway.select(ARTICLES_TABLE, filters={"id": entity_id}, limit=1)
        articles = self._map_rows(rows)
        return articles[0] if articles else None

    async def write(self, entity: Article) -> Article:
        entity = entity.model_copy(update={"updated_at": utc_now()})
        row = await self.gateway.upsert(ARTICLES_TABLE, article_to_remote(entity))
        return article_from_remote(row)

    async def list(self, entity_filter: Optional[ArticleFilter] = None) -> List[Article]:
        if entity_filter is not None and entity_filter.ids is not None and not entity_filter.ids:
            return []
        rows = await self.gateway.select(
            ARTICLES_TABLE, filters=self._columns(entity_filter), order_by="created_at"
        )
        return self._map_rows(rows)

    async def exists(self, entity_filter: ArticleFilter) -> bool:
        return await self.gateway.count(ARTICLES_TABLE, self._columns(entity_filter)) > 0


class RemoteAssetStore(AssetStore):
    """Uploads to the public storage bucket"""

    def __init__(self, gateway: RemoteGateway, bucket: str, cache_control: str = "3600"):
        self.gateway = gateway
        self.bucket = bucket
        self.cache_control = cache_control

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        url = await self.gateway.upload(self.bucket, path, data, content_type, self.cache_control)
        logger.info(f"Asset uploaded to {self.bucket}/{path}", extra={"bytes": len(data)})
        return url
