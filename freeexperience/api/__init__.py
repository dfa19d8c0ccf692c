# 📄 File: freeexperience/api/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the folder holding the web address handlers of the app.
#
# 🧪 Purpose (Technical Summary):
# HTTP API package: versioned routers and middleware.
#
# 🔗 Dependencies:
# Python packaging system
#
# 🔄 Connected Modules / Calls From:
# freeexperience.main

"""
FreeExperience HTTP API package.
"""
