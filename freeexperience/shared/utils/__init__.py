# 📄 File: freeexperience/shared/utils/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Exposes the logging setup and small text and id helpers.
#
# 🧪 Purpose (Technical Summary):
# Exports structured logging and helper functions.
#
# 🔗 Dependencies:
# logging, helpers
#
# 🔄 Connected Modules / Calls From:
# All layers

"""
Shared utilities: structured logging and small text/identifier helpers.
"""

from .logging import get_logger, log_context, setup_logging

__all__ = ["get_logger", "log_context", "setup_logging"]
