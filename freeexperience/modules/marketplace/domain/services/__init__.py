# 📄 File: freeexperience/modules/marketplace/domain/services/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Lists the helpers that clean up stored profiles, pick display names and work out who is logged in.
#
# 🧪 Purpose (Technical Summary):
# Exports the reconciler, display name candidates and SessionResolver.
#
# 🔗 Dependencies:
# domain service modules
#
# 🔄 Connected Modules / Calls From:
# Stores, AppContext, application services

"""
Marketplace domain services: record reconciliation, display names and
current-actor resolution.
"""

from .display_name import DISPLAY_NAME_CANDIDATES, DisplayNameCandidate, resolve_display_name
from .schema_reconciler import (
    RecordVariant,
    StoredSpecialistRecord,
    denormalize,
    derive_portfolio_preview,
    normalize,
    split_display_name,
    tag_record,
)
from .session_resolver import SessionResolver

__all__ = [
    "DISPLAY_NAME_CANDIDATES",
    "DisplayNameCandidate",
    "resolve_display_name",
    "RecordVariant",
    "StoredSpecialistRecord",
    "denormalize",
    "derive_portfolio_preview",
    "normalize",
    "split_display_name",
    "tag_record",
    "SessionResolver",
]
