# 📄 File: freeexperience/modules/marketplace/application/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the folder with the page-level actions of the marketplace.
#
# 🧪 Purpose (Technical Summary):
# Marketplace application layer package.
#
# 🔗 Dependencies:
# Python packaging system
#
# 🔄 Connected Modules / Calls From:
# freeexperience.context

"""
Marketplace application layer.
"""
