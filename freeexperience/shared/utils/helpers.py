# 📄 File: freeexperience/shared/utils/helpers.py
#
# 🧭 Purpose (Layman Explanation):
# Small shared tools: making unique IDs, tidying up emails and names,
# and getting the current time in one consistent way.
#
# 🧪 Purpose (Technical Summary):
# General purpose helpers for identifier generation, text normalization and
# timestamps, shared by the stores, reconcilers and application services.
#
# 🔗 Dependencies:
# - uuid: Unique identifier generation
# - re: Whitespace normalization
#
# 🔄 Connected Modules / Calls From:
# Used by: local repositories, SchemaReconciler, AuthService, ProjectService, ApplicationService

import re
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4


def generate_id() -> str:
    """Generate a unique identifier for a locally created record."""
    return str(uuid4())


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def normalize_email(email: Optional[str]) -> str:
    """Trim and lower-case an email address."""
    return (email or "").strip().lower()


def clean_whitespace(text: Optional[str]) -> str:
    """Collapse runs of whitespace into single spaces and strip the ends."""
    if not text:
        return ""

    return re.sub(r'\s+', ' ', text).strip()


def email_local_part(email: Optional[str]) -> str:
    """Part of the address before '@'."""
    return normalize_email(email).split("@", 1)[0]


def is_empty_or_whitespace(value: Any) -> bool:
    """Check if value is None, empty, or only whitespace."""
    if value is None:
        return True

    if isinstance(value, str):
        return not value.strip()

    return False
