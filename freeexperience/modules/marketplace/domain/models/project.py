# 📄 File: freeexperience/modules/marketplace/domain/models/project.py
#
# 🧭 Purpose (Layman Explanation):
# Describes a task a company posts: what needs doing, by when, what skills help,
# and how many people have already applied.
#
# 🧪 Purpose (Technical Summary):
# Project and ProjectDraft domain models with the project status set; the remote
# ``closed`` value reads as completed and application_count is never negative.
#
# 🔗 Dependencies:
# pydantic, datetime, enum, typing
#
# 🔄 Connected Modules / Calls From:
# ProjectService, project stores, record mappers, API schemas

from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_PROJECT_SPECIALIZATION = "Другое"
FALLBACK_COMPANY_NAME = "Компания"


class ProjectStatus(str, Enum):
    """Project lifecycle"""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: Any) -> "ProjectStatus":
        if isinstance(value, cls):
            return value
        if value == "closed":
            return cls.COMPLETED
        for member in cls:
            if member.value == value:
                return member
        return cls.OPEN


class ProjectDraft(BaseModel):
    """Fields a company submits when posting a project"""
    title: str = ""
    description: str = ""
    full_description: str = ""
    specialization: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    location: str = ""
    deadline: Optional[date] = None
    budget: Optional[str] = None
    timeline: Optional[str] = None
    requirements: List[str] = Field(default_factory=list)
    deliverables: List[str] = Field(default_factory=list)


class Project(BaseModel):
    """
    A task posting.

    ``application_count`` is recomputed from applications whenever a live
    count is available; the stored value is only a fallback.
    """
    id: str
    owner_id: str = ""
    title: str = ""
    description: str = ""
    full_description: str = ""
    specialization: str = DEFAULT_PROJECT_SPECIALIZATION
    skills: List[str] = Field(default_factory=list)
    location: str = ""
    deadline: Optional[date] = None
    budget: Optional[str] = None
    timeline: Optional[str] = None
    requirements: List[str] = Field(default_factory=list)
    deliverables: List[str] = Field(default_factory=list)
    status: ProjectStatus = ProjectStatus.OPEN
    application_count: int = Field(default=0, ge=0)
    company_name: str = FALLBACK_COMPANY_NAME
    created_at: Optional[datetime] = None

    @field_validator('status', mode='before')
    @classmethod
    def validate_status(cls, v):
        return ProjectStatus.parse(v)
