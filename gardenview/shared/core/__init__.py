# 📄 File: gardenview/shared/core/__init__.py
# 🧭 Purpose (Layman Explanation):
# Groups the core building blocks: error types, success/failure envelopes and timers.
# 🧪 Purpose (Technical Summary):
# Core package exports for the exception hierarchy, Result type and DeferredTask.
# 🔗 Dependencies:
# exceptions.py, result.py, scheduler.py
# 🔄 Connected Modules / Calls From:
# Every gardenview module

from .exceptions import (
    GardenViewException,
    ValidationError,
    NotFoundError,
    BusinessRuleViolationError,
    InvalidTransitionError,
    BackendError,
    ExternalServiceError,
    StorageError,
    FileTooLargeError,
    InvalidFileTypeError,
    ImageProcessingError,
)
from .result import Result

__all__ = [
    "GardenViewException",
    "ValidationError",
    "NotFoundError",
    "BusinessRuleViolationError",
    "InvalidTransitionError",
    "BackendError",
    "ExternalServiceError",
    "StorageError",
    "FileTooLargeError",
    "InvalidFileTypeError",
    "ImageProcessingError",
    "Result",
]
