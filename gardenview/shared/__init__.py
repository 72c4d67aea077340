# 📄 File: gardenview/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as a package of common tools every part of the
# garden app can use, like settings, logging and cloud storage.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package for configuration, error types, logging,
# storage/media infrastructure and external API clients.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - gardenview.modules.garden_management
# - Test suite

"""
Shared Kernel - Common Utilities and Infrastructure

- Configuration management
- Exceptions and typed results
- Logging utilities
- Media storage, image processing and external API clients
"""
