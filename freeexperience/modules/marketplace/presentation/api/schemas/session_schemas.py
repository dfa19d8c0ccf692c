# 📄 File: freeexperience/modules/marketplace/presentation/api/schemas/session_schemas.py
#
# 🧭 Purpose (Layman Explanation):
# The shape of the "who am I" answer the app sends back to the screen.
#
# 🧪 Purpose (Technical Summary):
# Response schemas for the session endpoints built from the canonical Actor.
#
# 🔗 Dependencies:
# pydantic, domain Actor model
#
# 🔄 Connected Modules / Calls From:
# Session and auth routers

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ....domain.models.actor import Actor, ResolutionState, UserRole


class ActorResponse(BaseModel):
    """Canonical current user"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    display_name: str
    role: UserRole
    avatar_url: Optional[str] = None


class SessionResponse(BaseModel):
    """Current session: the actor when signed in, null otherwise"""
    authenticated: bool
    state: ResolutionState
    actor: Optional[ActorResponse] = Field(None, description="Resolved actor")

    @classmethod
    def from_actor(cls, actor: Optional[Actor], state: ResolutionState) -> "SessionResponse":
        return cls(
            authenticated=actor is not None,
            state=state,
            actor=ActorResponse.model_validate(actor) if actor is not None else None,
        )
