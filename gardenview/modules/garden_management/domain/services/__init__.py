# 📄 File: gardenview/modules/garden_management/domain/services/__init__.py
# 🧭 Purpose (Layman Explanation):
# Garden rules that are pure calculations, like repeating-task dates.
# 🧪 Purpose (Technical Summary):
# Domain service exports.
# 🔗 Dependencies:
# recurrence.py
# 🔄 Connected Modules / Calls From:
# notebook handlers, tests

from . import recurrence

__all__ = ["recurrence"]
