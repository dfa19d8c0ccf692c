# 📄 File: freeexperience/modules/marketplace/presentation/api/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the folder with the marketplace's web API.
#
# 🧪 Purpose (Technical Summary):
# Marketplace HTTP API package: routers and schemas.
#
# 🔗 Dependencies:
# Python packaging system
#
# 🔄 Connected Modules / Calls From:
# API v1 router

"""
Marketplace HTTP API.
"""
