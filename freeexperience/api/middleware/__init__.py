# 📄 File: freeexperience/api/middleware/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Groups the checks every web request passes through.
#
# 🧪 Purpose (Technical Summary):
# Exports the error-handling and request-timing middleware.
#
# 🔗 Dependencies:
# error_handling
#
# 🔄 Connected Modules / Calls From:
# freeexperience.main

"""
HTTP middleware.
"""

from .error_handling import ErrorHandlingMiddleware

__all__ = ["ErrorHandlingMiddleware"]
