# 📄 File: freeexperience/modules/marketplace/domain/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the folder with the marketplace's core ideas and rules.
#
# 🧪 Purpose (Technical Summary):
# Marketplace domain package: models, repository interfaces, events and services.
#
# 🔗 Dependencies:
# Python packaging system
#
# 🔄 Connected Modules / Calls From:
# Infrastructure and application layers

"""
Marketplace domain: models, repository interfaces, events and services.
"""
