# 📄 File: freeexperience/modules/marketplace/domain/services/display_name.py
#
# 🧭 Purpose (Layman Explanation):
# Decides which name to show for the person using the app, trying their profile first and
# never showing their login email.
#
# 🧪 Purpose (Technical Summary):
# The shown name comes from the first candidate in DISPLAY_NAME_CANDIDATES that yields a
# non-empty value which is not the login email. When none does, the literal fallback is used.
#
# 🔗 Dependencies:
# dataclasses, shared helpers, actor and specialist models
#
# 🔄 Connected Modules / Calls From:
# SessionResolver

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from freeexperience.shared.utils.helpers import clean_whitespace, normalize_email
from ..models.actor import FALLBACK_DISPLAY_NAME, IdentityRecord
from ..models.specialist import SpecialistProfile


@dataclass(frozen=True)
class DisplayNameSources:
    identity: IdentityRecord
    profile: Optional[SpecialistProfile] = None


@dataclass(frozen=True)
class DisplayNameCandidate:
    name: str
    resolve: Callable[[DisplayNameSources], Any]


def _metadata(key: str) -> Callable[[DisplayNameSources], Any]:
    return lambda sources: sources.identity.metadata.get(key)


DISPLAY_NAME_CANDIDATES: Sequence[DisplayNameCandidate] = (
    DisplayNameCandidate(
        "profile_full_name",
        lambda sources: sources.profile.full_name if sources.profile else None,
    ),
    DisplayNameCandidate("metadata_display_name", _metadata("displayName")),
    DisplayNameCandidate("metadata_full_name", _metadata("full_name")),
    DisplayNameCandidate("metadata_name", _metadata("name")),
    DisplayNameCandidate("account_name", lambda sources: sources.identity.name),
)


def resolve_display_name(
    sources: DisplayNameSources,
    candidates: Sequence[DisplayNameCandidate] = DISPLAY_NAME_CANDIDATES,
) -> str:
    """
    Pick the display name for an identity.

    Args:
        sources: Identity and its linked profile, if any
        candidates: Ordered resolvers, highest precedence first

    Returns:
        str: The first usable candidate, or the fallback name
    """
    email = normalize_email(sources.identity.email)

    for candidate in candidates:
        value = candidate.resolve(sources)
        if not isinstance(value, str):
            continue
        value = clean_whitespace(value)
        if value and normalize_email(value) != email:
            return value

    return FALLBACK_DISPLAY_NAME
