# 📄 File: freeexperience/modules/marketplace/infrastructure/local/local_repositories.py
#
# 🧭 Purpose (Layman Explanation):
# Saves and loads specialists, companies, projects, applications, articles and pictures in the
# local notebook when no cloud database is configured.
#
# 🧪 Purpose (Technical Summary):
# Local-backend implementations of the marketplace stores over LocalRecords. Specialist
# records are written in the split-name layout and read through the schema reconciler;
# the legacy un-namespaced profile key moves only when its owner claims it. A profile
# write that fails halfway is rolled back. Records that fail shape validation are
# logged and skipped.
#
# 🔗 Dependencies:
# base64, LocalRecords, record mappers, schema reconciler, domain repositories
#
# 🔄 Connected Modules / Calls From:
# DualBackendStore (local backend)

import base64
from typing import Any, Callable, Dict, List, Optional, Sequence

from freeexperience.shared.core.exceptions import FreeExperienceException, MalformedStoredDataError
from freeexperience.shared.utils.helpers import generate_id, normalize_email, utc_now
from freeexperience.shared.utils.logging import get_logger
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
    SpecialistStore,
)
from ...domain.repositories.filters import ApplicationFilter, ArticleFilter, ProjectFilter, SpecialistFilter
from ...domain.services.record_mappers import (
    application_from_local,
    application_to_local,
    article_from_local,
    article_to_local,
    project_from_local,
    project_to_local,
)
from ...domain.services.schema_reconciler import RecordVariant, denormalize, normalize
from .local_records import (
    APPLICATIONS_KEY,
    ARTICLES_KEY,
    LEGACY_PROFILE_KEY,
    PROJECTS_KEY,
    SPECIALISTS_KEY,
    USERS_KEY,
    LocalRecords,
    profile_key,
)

logger = get_logger(__name__)


def _same_id(entity_id: str) -> Callable[[Any], bool]:
    return lambda existing: isinstance(existing, dict) and str(existing.get("id")) == entity_id


def _load_all(records: LocalRecords, key: str, mapper: Callable[[Any], Any]) -> List[Any]:
    entities = []
    for raw in records.read_list(key):
        try:
            entities.append(mapper(raw))
        except MalformedStoredDataError as e:
            logger.warning(
                f"Skipping malformed local record in {key}: {e.message}",
                extra={"key": key, "error_code": e.error_code}
            )
    return entities


class LocalSpecialistStore(SpecialistStore):
    """
    Specialist profiles in the local store.

    Each profile lives under ``specialistProfile:{id}`` and is mirrored in
    the ``specialists`` directory list, which also carries rating counters.
    A profile saved by older clients under the bare ``specialistProfile``
    key stays there until its owner claims it; reads never touch it.
    """

    def __init__(self, records: LocalRecords):
        self.records = records

    async def read(self, entity_id: str) -> Optional[SpecialistProfile]:
        stored = self.records.read_object(profile_key(entity_id)) or None
        listed = self._find_listed(entity_id)

        if stored is None and listed is None:
            return None

        profile = normalize(stored if stored is not None else listed, fallback_id=entity_id)
        if stored is not None and listed is not None:
            counters = normalize(listed, fallback_id=entity_id)
            profile = profile.model_copy(
                update={"rating": counters.rating, "hired_count": counters.hired_count}
            )
        return profile

    async def write(self, entity: SpecialistProfile) -> SpecialistProfile:
        if not entity.id:
            entity = entity.model_copy(update={"id": generate_id()})

        record = denormalize(entity, RecordVariant.LOCAL_SPLIT_NAME)
        key = profile_key(entity.id)
        previous = self.records.snapshot(key)

        self.records.write_json(key, record)
        try:
            self.records.upsert(SPECIALISTS_KEY, record, _same_id(entity.id))
        except FreeExperienceException:
            self.records.restore(key, previous)
            raise

        logger.debug(f"Local specialist profile saved: {entity.id}")
        return entity

    async def claim_legacy_profile(self, owner_id: str) -> Optional[SpecialistProfile]:
        if self.records.read_object(profile_key(owner_id)):
            return None

        legacy = self.records.read_object(LEGACY_PROFILE_KEY)
        if not legacy:
            return None

        profile = normalize(legacy, fallback_id=owner_id).model_copy(update={"id": owner_id})
        profile = await self.write(profile)
        self.records.remove(LEGACY_PROFILE_KEY)
        logger.info(f"Legacy local profile claimed by {owner_id}")
        return profile

    async def list(self, entity_filter: Optional[SpecialistFilter] = None) -> List[SpecialistProfile]:
        profiles = []
        for raw in self.records.read_list(SPECIALISTS_KEY):
            profile = normalize(raw)
            if not profile.id:
                logger.warning("Skipping local specialist record without id", extra={"key": SPECIALISTS_KEY})
                continue
            if entity_filter is None or entity_filter.matches(profile):
                profiles.append(profile)
        return profiles

    def _find_listed(self, specialist_id: str) -> Optional[Dict[str, Any]]:
        for raw in self.records.read_list(SPECIALISTS_KEY):
            if isinstance(raw, dict) and str(raw.get("id")) == specialist_id:
                return raw
        return None


class LocalCompanyStore(CompanyStore):
    """Company names live on the account entries of the ``users`` registry"""

    def __init__(self, records: LocalRecords):
        self.records = records

    async def ensure(self, company_id: str, email: str, company_name: str) -> str:
        users = self.records.read_list(USERS_KEY)
        for account in users:
            if isinstance(account, dict) and account.get("id") == company_id:
                if account.get("companyName"):
                    return account["companyName"]
                account["companyName"] = company_name
                self.records.write_json(USERS_KEY, users)
                return company_name

        users.append({
            "id": company_id,
            "email": normalize_email(email),
            "name": company_name,
            "type": "company",
            "companyName": company_name,
        })
        self.records.write_json(USERS_KEY, users)
        return company_name

    async def read_name(self, company_id: str) -> Optional[str]:
        for account in self.records.read_list(USERS_KEY):
            if isinstance(account, dict) and account.get("id") == company_id:
                return account.get("companyName") or account.get("name") or None
        return None


class LocalProjectStore(ProjectStore):
    """Projects in the ``projects`` list"""

    def __init__(self, records: LocalRecords):
        self.records = records

    async def read(self, entity_id: str) -> Optional[Project]:
        for project in await self.list(ProjectFilter(ids=(entity_id,))):
            return project
        return None

    async def write(self, entity: Project) -> Project:
        updates: Dict[str, Any] = {}
        if not entity.id:
            updates["id"] = generate_id()
        if entity.created_at is None:
            updates["created_at"] = utc_now()
        if updates:
            entity = entity.model_copy(update=updates)

        self.records.upsert(PROJECTS_KEY, project_to_local(entity), _same_id(entity.id))
        logger.debug(f"Local project saved: {entity.id}")
        return entity

    async def list(self, entity_filter: Optional[ProjectFilter] = None) -> List[Project]:
        projects = _load_all(self.records, PROJECTS_KEY, project_from_local)
        return [p for p in projects if entity_filter is None or entity_filter.matches(p)]


class LocalApplicationStore(ApplicationStore):
    """Applications in the ``applications`` list"""

    def __init__(self, records: LocalRecords):
        self.records = records

    async def read(self, entity_id: str) -> Optional[Application]:
        for application in _load_all(self.records, APPLICATIONS_KEY, application_from_local):
            if application.id == entity_id:
                return application
        return None

    async def write(self, entity: Application) -> Application:
        updates: Dict[str, Any] = {}
        if not entity.id:
            updates["id"] = generate_id()
        if entity.created_at is None:
            updates["created_at"] = utc_now()
        if updates:
            entity = entity.model_copy(update=updates)

        self.records.upsert(APPLICATIONS_KEY, application_to_local(entity), _same_id(entity.id))
        logger.debug(f"Local application saved: {entity.id}")
        return entity

    async def list(self, entity_filter: Optional[ApplicationFilter] = None) -> List[Application]:
        applications = _load_all(self.records, APPLICATIONS_KEY, application_from_local)
        return [a for a in applications if entity_filter is None or entity_filter.matches(a)]

    async def count_by_project(self, project_ids: Sequence[str]) -> Dict[str, int]:
        counts = {project_id: 0 for project_id in project_ids}
        for application in await self.list(ApplicationFilter(project_ids=tuple(project_ids))):
            counts[application.project_id] += 1
        return counts


class LocalArticleStore(ArticleStore):
    """Articles in the ``articles`` list"""

    def __init__(self, records: LocalRecords):
        self.records = records

    async def read(self, entity_id: str) -> Optional[Article]:
        for article in await self.list(ArticleFilter(ids=(entity_id,))):
            return article
        return None

    async def write(self, entity: Article) -> Article:
        now = utc_now()
        updates: Dict[str, Any] = {"updated_at": now}
        if not entity.id:
            updates["id"] = generate_id()
        if entity.created_at is None:
            updates["created_at"] = now
        entity = entity.model_copy(update=updates)

        self.records.upsert(ARTICLES_KEY, article_to_local(entity), _same_id(entity.id))
        logger.debug(f"Local article saved: {entity.id}")
        return entity

    async def list(self, entity_filter: Optional[ArticleFilter] = None) -> List[Article]:
        articles = _load_all(self.records, ARTICLES_KEY, article_from_local)
        return [a for a in articles if entity_filter is None or entity_filter.matches(a)]


class LocalAssetStore(AssetStore):
    """Assets are embedded as data URLs; nothing is written to the store itself"""

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        encoded = base64.b64encode(data).decode("ascii")
        logger.debug(f"Local asset inlined: {path}", extra={"bytes": len(data)})
        return f"data:{content_type};base64,{encoded}"
