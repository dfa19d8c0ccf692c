# 📄 File: freeexperience/modules/marketplace/domain/events/identity_events.py
#
# 🧭 Purpose (Layman Explanation):
# Names the moments when "who is logged in" may have changed: signing in, signing out,
# and the login being quietly renewed.
#
# 🧪 Purpose (Technical Summary):
# Identity-provider event types and a factory producing DomainEvents for the event bus.
# Provider event names outside the handled set are ignored.
#
# 🔗 Dependencies:
# enum, typing, shared event bus
#
# 🔄 Connected Modules / Calls From:
# AuthService (local mode), Supabase auth bridge (remote mode), SessionResolver

from enum import Enum
from typing import Any, Optional

from freeexperience.shared.core.event_bus import DomainEvent


class IdentityEvent(str, Enum):
    """Identity-provider events that affect the current actor"""
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"

    @classmethod
    def from_provider(cls, name: Any) -> Optional["IdentityEvent"]:
        """Map a provider event name; unknown names map to None."""
        raw = getattr(name, "value", name)
        for member in cls:
            if member.value == raw:
                return member
        return None


def identity_event(kind: IdentityEvent, user_id: Optional[str] = None, source: str = "local") -> DomainEvent:
    """Build the bus event for an identity change."""
    return DomainEvent(
        event_type=kind.value,
        aggregate_id=user_id,
        user_id=user_id,
        metadata={"source": source},
    )
