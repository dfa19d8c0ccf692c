# 📄 File: freeexperience/modules/marketplace/domain/events/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Lists the sign-in and sign-out notices the app reacts to.
#
# 🧪 Purpose (Technical Summary):
# Exports identity event types and the event factory.
#
# 🔗 Dependencies:
# identity_events
#
# 🔄 Connected Modules / Calls From:
# SessionResolver, AuthService, AppContext

"""
Identity events delivered on the event bus.
"""

from .identity_events import IdentityEvent, identity_event

__all__ = ["IdentityEvent", "identity_event"]
