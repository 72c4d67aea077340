# 📄 File: gardenview/shared/utils/__init__.py
# 🧭 Purpose (Layman Explanation):
# Groups the small tools: logging, validation and general helpers.
# 🧪 Purpose (Technical Summary):
# Utility package exports.
# 🔗 Dependencies:
# logging.py, validators.py, helpers.py
# 🔄 Connected Modules / Calls From:
# All gardenview modules

from .logging import get_logger, setup_logging, log_context
from .validators import ValidationResult

__all__ = ["get_logger", "setup_logging", "log_context", "ValidationResult"]
