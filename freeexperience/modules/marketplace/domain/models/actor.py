# 📄 File: freeexperience/modules/marketplace/domain/models/actor.py
#
# 🧭 Purpose (Layman Explanation):
# Describes "who is using the app right now": their id, email, the name we show on screen,
# whether they are a specialist or a company, and their picture.
#
# 🧪 Purpose (Technical Summary):
# Domain models for the canonical current Actor, the raw IdentityRecord reported by a
# backend, the user role set and the resolution state machine of the session resolver.
#
# 🔗 Dependencies:
# pydantic, enum, typing
#
# 🔄 Connected Modules / Calls From:
# SessionResolver, AuthService, session stores, API dependencies

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

FALLBACK_DISPLAY_NAME = "Пользователь"


class UserRole(str, Enum):
    """Marketplace side an account belongs to"""
    SPECIALIST = "specialist"
    COMPANY = "company"

    @classmethod
    def parse(cls, value: Any) -> "UserRole":
        """Read a stored role, treating anything unknown as specialist."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().lower() == cls.COMPANY.value:
            return cls.COMPANY
        return cls.SPECIALIST


class ResolutionState(str, Enum):
    """Lifecycle of the current-actor resolution"""
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


class IdentityRecord(BaseModel):
    """
    Identity as the session store reports it.

    ``metadata`` carries the provider's user metadata as-is (keys such as
    ``displayName``, ``full_name``, ``name``, ``role``).
    """
    id: str
    email: str = ""
    name: Optional[str] = None
    role: UserRole = UserRole.SPECIALIST
    metadata: Dict[str, Any] = Field(default_factory=dict)
    avatar_url: Optional[str] = None


class Actor(BaseModel):
    """
    Canonical current user.

    ``display_name`` is always derived and never the raw email.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    display_name: str = FALLBACK_DISPLAY_NAME
    role: UserRole = UserRole.SPECIALIST
    avatar_url: Optional[str] = None

    @property
    def is_specialist(self) -> bool:
        return self.role == UserRole.SPECIALIST

    @property
    def is_company(self) -> bool:
        return self.role == UserRole.COMPANY
