# 📄 File: freeexperience/shared/infrastructure/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the folder with shared storage tools: the memory cache and the local notebook.
#
# 🧪 Purpose (Technical Summary):
# Shared infrastructure package.
#
# 🔗 Dependencies:
# Python packaging system
#
# 🔄 Connected Modules / Calls From:
# Marketplace infrastructure, AppContext

"""
Shared infrastructure: async cache and the local durable key-value store.
"""
