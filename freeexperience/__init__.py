# 📄 File: freeexperience/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python that this folder holds the FreeExperience marketplace code and records
# the basic version and package information.
#
# 🧪 Purpose (Technical Summary):
# Package initialization with version metadata for the FreeExperience backend core
# (data access, caching and session resolution for the specialist marketplace).
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - main.py (application entry point)
# - Packaging metadata (pyproject.toml)

"""
FreeExperience - Marketplace for early-career specialists

Backend core connecting specialists with companies that offer unpaid,
experience-building projects: profiles, portfolios, project postings and
applications, stored either in Supabase or in a local durable store.
"""

__version__ = "1.0.0"
__title__ = "FreeExperience API"
__description__ = "Marketplace for early-career specialists and experience projects"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
    "__license__",
]
