# 📄 File: freeexperience/shared/core/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Groups the core tools: named errors, the notice board for sign-in events and password scrambling.
#
# 🧪 Purpose (Technical Summary):
# Exports the exception hierarchy, event bus and password hashing.
#
# 🔗 Dependencies:
# exceptions, event_bus, security
#
# 🔄 Connected Modules / Calls From:
# All layers

"""
Core utilities package for the FreeExperience core.
Provides the exception hierarchy, event bus and password hashing.
"""

from .exceptions import (
    ErrorKind,
    FreeExperienceException,
    NotConfiguredError,
    TransportFailureError,
    StorageQuotaExceededError,
    StorageUnavailableError,
    MalformedStoredDataError,
    DuplicateApplicationError,
    ValidationError,
    AuthenticationError,
    PermissionDeniedError,
    NotFoundError,
    ConflictError,
)

from .event_bus import DomainEvent, EventBus, EventHandler

__all__ = [
    "ErrorKind",
    "FreeExperienceException",
    "NotConfiguredError",
    "TransportFailureError",
    "StorageQuotaExceededError",
    "StorageUnavailableError",
    "MalformedStoredDataError",
    "DuplicateApplicationError",
    "ValidationError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "DomainEvent",
    "EventBus",
    "EventHandler",
]
