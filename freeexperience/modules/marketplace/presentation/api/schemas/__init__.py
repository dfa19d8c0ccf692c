# 📄 File: freeexperience/modules/marketplace/presentation/api/schemas/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the folder describing what web requests and answers look like.
#
# 🧪 Purpose (Technical Summary):
# Request and response schema package.
#
# 🔗 Dependencies:
# Python packaging system
#
# 🔄 Connected Modules / Calls From:
# Marketplace routers

"""
Request and response schemas for the marketplace API.
"""
