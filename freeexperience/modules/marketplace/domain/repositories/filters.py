# 📄 File: freeexperience/modules/marketplace/domain/repositories/filters.py
#
# 🧭 Purpose (Layman Explanation):
# Small "search forms" that say which profiles, projects, applications or articles we want back,
# for example "all applications to project 42".
#
# 🧪 Purpose (Technical Summary):
# Immutable filter objects for EntityStore.list/exists. Unset fields do not constrain.
# ``criteria()`` exposes the set fields for column mapping by the remote backend and
# ``matches()`` evaluates the filter in memory for the local backend.
#
# 🔗 Dependencies:
# dataclasses, typing, domain models
#
# 🔄 Connected Modules / Calls From:
# Local and remote repositories, application services

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

from ..models.project import ProjectStatus
from ..models.specialist import Specialization


@dataclass(frozen=True)
class EntityFilter:
    """Base filter: every field left as None matches anything"""

    def criteria(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def matches(self, entity: Any) -> bool:
        for name, expected in self.criteria().items():
            if not self._match_field(entity, name, expected):
                return False
        return True

    def _match_field(self, entity: Any, name: str, expected: Any) -> bool:
        if name == "ids":
            return entity.id in expected
        return getattr(entity, name) == expected


@dataclass(frozen=True)
class SpecialistFilter(EntityFilter):
    ids: Optional[Tuple[str, ...]] = None
    visible_in_search: Optional[bool] = None
    specialization: Optional[Specialization] = None


@dataclass(frozen=True)
class ProjectFilter(EntityFilter):
    ids: Optional[Tuple[str, ...]] = None
    owner_id: Optional[str] = None
    status: Optional[ProjectStatus] = None


@dataclass(frozen=True)
class ApplicationFilter(EntityFilter):
    project_id: Optional[str] = None
    applicant_id: Optional[str] = None
    project_ids: Optional[Tuple[str, ...]] = None

    def _match_field(self, entity: Any, name: str, expected: Any) -> bool:
        if name == "project_ids":
            return entity.project_id in expected
        return super()._match_field(entity, name, expected)


@dataclass(frozen=True)
class ArticleFilter(EntityFilter):
    ids: Optional[Tuple[str, ...]] = None
    author_id: Optional[str] = None
