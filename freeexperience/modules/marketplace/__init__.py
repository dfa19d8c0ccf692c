# 📄 File: freeexperience/modules/marketplace/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# The marketplace feature: specialists, projects, applications, articles and who is logged in.
#
# 🧪 Purpose (Technical Summary):
# Marketplace module package, layered into domain, infrastructure, application and presentation.
#
# 🔗 Dependencies:
# Python packaging system
#
# 🔄 Connected Modules / Calls From:
# freeexperience.context, API v1 router

"""
Marketplace module: specialists, projects, applications and the current session.
"""
