# 📄 File: freeexperience/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a package with tools every part of the marketplace uses,
# like settings, error types, logging and the request cache.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package for configuration, exceptions, logging, caching and storage
# infrastructure used by the marketplace module.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - freeexperience.modules.marketplace
# - freeexperience.api

"""
Shared Kernel - Common Utilities and Infrastructure

- Configuration management
- Exception hierarchy and error kinds
- Structured logging
- Keyed async cache
- Local durable key-value store and Supabase storage
"""

__all__ = []
