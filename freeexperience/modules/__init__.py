# 📄 File: freeexperience/modules/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the folder that holds the app's feature areas.
#
# 🧪 Purpose (Technical Summary):
# Feature module package.
#
# 🔗 Dependencies:
# Python packaging system
#
# 🔄 Connected Modules / Calls From:
# freeexperience.context, API routers

"""
Feature modules.
"""
