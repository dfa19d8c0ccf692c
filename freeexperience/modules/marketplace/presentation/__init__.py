# 📄 File: freeexperience/modules/marketplace/presentation/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the folder with the marketplace's web endpoints.
#
# 🧪 Purpose (Technical Summary):
# Marketplace presentation package.
#
# 🔗 Dependencies:
# Python packaging system
#
# 🔄 Connected Modules / Calls From:
# API v1 router

"""
Marketplace presentation layer: FastAPI routers, schemas and dependencies.
"""
