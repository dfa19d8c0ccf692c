# 📄 File: freeexperience/modules/marketplace/presentation/api/schemas/project_schemas.py
#
# 🧭 Purpose (Layman Explanation):
# Describes the project posting form a company fills in and the project cards the app shows.
#
# 🧪 Purpose (Technical Summary):
# Project board schemas: creation form mapped onto ProjectDraft and canonical project responses.
#
# 🔗 Dependencies:
# - pydantic: Request validation and response serialization
#
# 🔄 Connected Modules / Calls From:
# Projects API router

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ....domain.models.project import Project, ProjectDraft, ProjectStatus


class ProjectCreateRequest(BaseModel):
    title: str = Field(..., max_length=200)
    description: str = Field(..., max_length=1000)
    full_description: str = Field("", max_length=10000)
    specialization: Optional[str] = Field(None, max_length=100)
    skills: List[str] = Field(default_factory=list)
    location: str = ""
    deadline: Optional[date] = None
    budget: Optional[str] = None
    timeline: Optional[str] = None
    requirements: List[str] = Field(default_factory=list)
    deliverables: List[str] = Field(default_factory=list)

    def to_draft(self) -> ProjectDraft:
        return ProjectDraft(**self.model_dump())


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    title: str
    description: str
    full_description: str
    specialization: str
    skills: List[str]
    location: str
    deadline: Optional[date] = None
    budget: Optional[str] = None
    timeline: Optional[str] = None
    requirements: List[str]
    deliverables: List[str]
    status: ProjectStatus
    application_count: int
    company_name: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, project: Project) -> "ProjectResponse":
        return cls.model_validate(project)


class ProjectListResponse(BaseModel):
    items: List[ProjectResponse]
    total: int
