# 📄 File: freeexperience/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Holds the settings that tell the marketplace which database to talk to, where to keep
# local data and how long to remember answers.
#
# 🧪 Purpose (Technical Summary):
# Configuration package exporting the pydantic-settings Settings class and its cached
# factory.
#
# 🔗 Dependencies:
# - settings.py (application settings)
#
# 🔄 Connected Modules / Calls From:
# - freeexperience.main
# - freeexperience.context
# - Infrastructure components

from .settings import get_settings, Settings

__all__ = [
    "get_settings",
    "Settings",
]
