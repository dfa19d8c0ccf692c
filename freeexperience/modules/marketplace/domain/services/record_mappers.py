# 📄 File: freeexperience/modules/marketplace/domain/services/record_mappers.py
#
# 🧭 Purpose (Layman Explanation):
# Translates projects, applications and articles between how each storage writes them down
# and the one clean shape the rest of the app uses.
#
# 🧪 Purpose (Technical Summary):
# Mapping functions between canonical Project/Application/Article models and the local
# (camelCase JSON) and remote (snake_case row) layouts. Rows that fail validation
# raise MalformedStoredDataError so stores can log and skip them.
#
# 🔗 Dependencies:
# pydantic, typing, domain models, shared exceptions
#
# 🔄 Connected Modules / Calls From:
# Local and remote project, application and article stores

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from freeexperience.shared.core.exceptions import MalformedStoredDataError
from ..models.application import Application
from ..models.article import Article
from ..models.project import DEFAULT_PROJECT_SPECIALIZATION, FALLBACK_COMPANY_NAME, Project


def _optional(value: Any) -> Any:
    return value if value not in ("", None) else None


def _timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _count(value: Any) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


def _first_skill(skills: Any) -> str:
    if isinstance(skills, list) and skills and isinstance(skills[0], str):
        return skills[0]
    return DEFAULT_PROJECT_SPECIALIZATION


def _build(model: type, data: Dict[str, Any], source: str) -> Any:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise MalformedStoredDataError(
            f"Stored {model.__name__.lower()} failed validation",
            key=source,
            details={"errors": e.error_count()}
        ) from e


def _require_mapping(raw: Any, source: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise MalformedStoredDataError(f"Stored record in {source} is not an object", key=source)
    return raw


# =============================================================================
# PROJECTS
# =============================================================================

def project_from_local(raw: Any) -> Project:
    raw = _require_mapping(raw, "projects")
    return _build(Project, {
        "id": str(raw.get("id") or ""),
        "owner_id": raw.get("ownerId") or "",
        "title": raw.get("title") or "",
        "description": raw.get("description") or "",
        "full_description": raw.get("fullDescription") or "",
        "specialization": raw.get("specialization") or _first_skill(raw.get("skills")),
        "skills": raw.get("skills") or [],
        "location": raw.get("location") or "",
        "deadline": _optional(raw.get("deadline")),
        "budget": _optional(raw.get("budget")),
        "timeline": _optional(raw.get("timeline")),
        "requirements": raw.get("requirements") or [],
        "deliverables": raw.get("deliverables") or [],
        "status": raw.get("status") or "open",
        "application_count": _count(raw.get("applicationsCount")),
        "company_name": raw.get("company") or FALLBACK_COMPANY_NAME,
        "created_at": _timestamp(raw.get("createdAt")),
    }, "projects")


def project_to_local(project: Project) -> Dict[str, Any]:
    return {
        "id": project.id,
        "ownerId": project.owner_id,
        "title": project.title,
        "description": project.description,
        "fullDescription": project.full_description,
        "specialization": project.specialization,
        "skills": list(project.skills),
        "location": project.location,
        "deadline": project.deadline.isoformat() if project.deadline else "",
        "budget": project.budget or "",
        "timeline": project.timeline or "",
        "requirements": list(project.requirements),
        "deliverables": list(project.deliverables),
        "status": project.status.value,
        "applicationsCount": project.application_count,
        "company": project.company_name,
        "createdAt": project.created_at.isoformat() if project.created_at else None,
    }


def project_from_remote(row: Any, application_count: Optional[int] = None) -> Project:
    row = _require_mapping(row, "projects")
    company = row.get("companies")
    company_name = company.get("company_name") if isinstance(company, Mapping) else None
    return _build(Project, {
        "id": str(row.get("id") or ""),
        "owner_id": row.get("company_id") or "",
        "title": row.get("title") or "",
        "description": row.get("description") or "",
        "full_description": row.get("full_description") or "",
        "specialization": row.get("specialization") or DEFAULT_PROJECT_SPECIALIZATION,
        "skills": row.get("skills") or [],
        "location": row.get("location") or "",
        "deadline": _optional(row.get("deadline")),
        "budget": _optional(row.get("budget")),
        "timeline": _optional(row.get("timeline")),
        "requirements": row.get("requirements") or [],
        "deliverables": row.get("deliverables") or [],
        "status": row.get("status") or "open",
        "application_count": application_count or 0,
        "company_name": company_name or FALLBACK_COMPANY_NAME,
        "created_at": _timestamp(row.get("created_at")),
    }, "projects")


def project_to_remote(project: Project) -> Dict[str, Any]:
    row = {
        "company_id": project.owner_id,
        "title": project.title,
        "description": project.description,
        "full_description": project.full_description,
        "specialization": project.specialization,
        "skills": list(project.skills),
        "location": project.location,
        "deadline": project.deadline.isoformat() if project.deadline else None,
        "budget": project.budget or "",
        "timeline": project.timeline or "",
        "requirements": list(project.requirements),
        "deliverables": list(project.deliverables),
        "status": project.status.value,
    }
    if project.id:
        row["id"] = project.id
    return row


# =============================================================================
# APPLICATIONS
# =============================================================================

def application_from_local(raw: Any) -> Application:
    raw = _require_mapping(raw, "applications")
    return _build(Application, {
        "id": str(raw.get("id") or ""),
        "project_id": str(raw.get("projectId") or ""),
        "applicant_id": str(raw.get("applicantId") or raw.get("applicantEmail") or ""),
        "message": raw.get("text") or "",
        "status": raw.get("status") or "pending",
        "applicant_name": raw.get("applicantName"),
        "applicant_email": raw.get("applicantEmail"),
        "project_title": raw.get("projectTitle"),
        "created_at": _timestamp(raw.get("date")),
    }, "applications")


def application_to_local(application: Application) -> Dict[str, Any]:
    return {
        "id": application.id,
        "projectId": application.project_id,
        "projectTitle": application.project_title or "",
        "applicantId": application.applicant_id,
        "applicantEmail": application.applicant_email or "",
        "applicantName": application.applicant_name or "",
        "text": application.message,
        "status": application.status.value,
        "date": application.created_at.isoformat() if application.created_at else None,
    }


def application_from_remote(row: Any) -> Application:
    row = _require_mapping(row, "applications")
    return _build(Application, {
        "id": str(row.get("id") or ""),
        "project_id": str(row.get("project_id") or ""),
        "applicant_id": str(row.get("specialist_id") or ""),
        "message": row.get("message") or "",
        "status": row.get("status") or "pending",
        "created_at": _timestamp(row.get("created_at")),
    }, "applications")


def application_to_remote(application: Application) -> Dict[str, Any]:
    row = {
        "project_id": application.project_id,
        "specialist_id": application.applicant_id,
        "message": application.message,
        "status": application.status.value,
    }
    if application.id:
        row["id"] = application.id
    return row


# =============================================================================
# ARTICLES
# =============================================================================

def article_from_local(raw: Any) -> Article:
    raw = _require_mapping(raw, "articles")
    return _build(Article, {
        "id": str(raw.get("id") or ""),
        "author_id": raw.get("authorId") or "",
        "title": raw.get("title") or "",
        "content": raw.get("content") or "",
        "excerpt": raw.get("excerpt") or "",
        "image_url": _optional(raw.get("imageUrl")),
        "created_at": _timestamp(raw.get("createdAt")),
        "updated_at": _timestamp(raw.get("updatedAt")),
    }, "articles")


def article_to_local(article: Article) -> Dict[str, Any]:
    return {
        "id": article.id,
        "authorId": article.author_id,
        "title": article.title,
        "content": article.content,
        "excerpt": article.excerpt,
        "imageUrl": article.image_url,
        "createdAt": article.created_at.isoformat() if article.created_at else None,
        "updatedAt": article.updated_at.isoformat() if article.updated_at else None,
    }


def article_from_remote(row: Any) -> Article:
    row = _require_mapping(row, "articles")
    return _build(Article, {
        "id": str(row.get("id") or ""),
        "author_id": str(row.get("author_id") or ""),
        "title": row.get("title") or "",
        "content": row.get("content") or "",
        "excerpt": row.get("excerpt") or "",
        "image_url": _optional(row.get("image_url")),
        "created_at": _timestamp(row.get("created_at")),
        "updated_at": _timestamp(row.get("updated_at")),
    }, "articles")


def article_to_remote(article: Article) -> Dict[str, Any]:
    row = {
        "author_id": article.author_id,
        "title": article.title,
        "content": article.content,
        "excerpt": article.excerpt,
        "image_url": article.image_url,
    }
    if article.id:
        row["id"] = article.id
    if article.updated_at:
        row["updated_at"] = article.updated_at.isoformat()
    return row
