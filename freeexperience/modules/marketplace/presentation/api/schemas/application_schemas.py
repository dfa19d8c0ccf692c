# 📄 File: freeexperience/modules/marketplace/presentation/api/schemas/application_schemas.py
#
# 🧭 Purpose (Layman Explanation):
# Describes what a specialist sends when applying to a project and what the app sends back.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response models for applications, built from domain Application objects.
#
# 🔗 Dependencies:
# - pydantic: Request validation and response serialization
#
# 🔄 Connected Modules / Calls From:
# Projects API router (applications sub-resource)

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ....domain.models.application import Application, ApplicationStatus


class ApplicationCreateRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=5000, description="Cover message")


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    applicant_id: str
    message: str
    status: ApplicationStatus
    applicant_name: Optional[str] = None
    applicant_email: Optional[str] = None
    project_title: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, application: Application) -> "ApplicationResponse":
        return cls.model_validate(application)


class ApplicationListResponse(BaseModel):
    items: List[ApplicationResponse]
    total: int
    has_applied: bool = Field(False, description="Whether the current actor already applied")
