# 📄 File: freeexperience/api/v1/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks version 1 of the web API.
#
# 🧪 Purpose (Technical Summary):
# API v1 package: router aggregation and health check.
#
# 🔗 Dependencies:
# router, health
#
# 🔄 Connected Modules / Calls From:
# freeexperience.main

"""
API version 1.
"""

__api_version__ = "v1"
