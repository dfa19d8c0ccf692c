# 📄 File: freeexperience/modules/marketplace/domain/models/application.py
#
# 🧭 Purpose (Layman Explanation):
# Describes one specialist's reply to one project, with their message and the date.
#
# 🧪 Purpose (Technical Summary):
# Application domain model and status set. Uniqueness per (project_id, applicant_id)
# is enforced by ApplicationService with a lookup before insert.
#
# 🔗 Dependencies:
# pydantic, datetime, enum, typing
#
# 🔄 Connected Modules / Calls From:
# ApplicationService, application stores, record mappers, API schemas

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ApplicationStatus(str, Enum):
    """Review state, set by the project owner outside this service"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Application(BaseModel):
    """One specialist's application to one project"""
    id: str
    project_id: str
    applicant_id: str
    message: str = Field(..., min_length=1)
    status: ApplicationStatus = ApplicationStatus.PENDING
    applicant_name: Optional[str] = None
    applicant_email: Optional[str] = None
    project_title: Optional[str] = None
    created_at: Optional[datetime] = None
