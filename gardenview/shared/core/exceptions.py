# 📄 File: gardenview/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# Defines the special error types the garden app uses to say clearly what went
# wrong (bad input, missing table, failed upload, unreachable AI) instead of generic errors.
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy with machine-readable error codes and details.
# Instances are raised for client-side validation and carried inside Result
# values for backend, storage, media and external-service failures.
# 🔗 Dependencies:
# typing
# 🔄 Connected Modules / Calls From:
# Result values, Supabase gateway, media store, media pipeline, navigation,
# controller handlers (failure policy)

from typing import Any, Dict, List, Optional

# Postgres "relation/column does not exist" and the PostgREST schema-cache equivalents.
MISSING_SCHEMA_CODES = frozenset({"42P01", "42703", "PGRST204", "PGRST205"})


def _with_fields(details: Optional[Dict[str, Any]], **fields: Any) -> Dict[str, Any]:
    """Copy of ``details`` plus every field that was actually given."""
    merged = dict(details or {})
    merged.update({key: value for key, value in fields.items() if value is not None and value != ""})
    return merged


class GardenViewException(Exception):
    """
    Base exception class for the GardenView application.

    Subclasses set ``default_code`` and ``default_message``; keyword context passed to
    their constructors lands in ``details``.
    """
    default_code: Optional[str] = None
    default_message = "Unexpected error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message or self.default_message
        self.details = details or {}
        self.error_code = error_code or self.default_code or type(self).__name__.upper()
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, details={self.details!r})"


# =============================================================================
# SESSION & CONFIGURATION
# =============================================================================

class AuthenticationError(GardenViewException):
    """An operation needs a signed-in user."""
    default_code = "AUTHENTICATION_ERROR"
    default_message = "Authentication required"

    def __init__(self, message: Optional[str] = None, user_id: Optional[str] = None):
        super().__init__(message, _with_fields(None, user_id=user_id))


class ConfigurationError(GardenViewException):
    default_code = "CONFIGURATION_ERROR"
    default_message = "Invalid configuration"

    def __init__(self, message: Optional[str] = None, setting: Optional[str] = None):
        super().__init__(message, _with_fields(None, setting=setting))


# =============================================================================
# INPUT & STATE
# =============================================================================

class ValidationError(GardenViewException):
    """
    User input was rejected before any network call was made.

    ``value`` is kept as text so details stay log- and JSON-safe.
    """
    default_code = "VALIDATION_ERROR"
    default_message = "Validation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, _with_fields(
            details,
            field=field,
            value=None if value is None else str(value),
            constraint=constraint,
        ))


class NotFoundError(GardenViewException):
    """The entity (or the profile row) does not exist."""
    default_code = "NOT_FOUND"
    default_message = "Resource not found"

    def __init__(
        self,
        message: Optional[str] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, _with_fields(details, resource_type=resource_type, resource_id=resource_id))


class BusinessRuleViolationError(GardenViewException):
    """A domain rule such as the per-area pin cap would be broken."""
    default_code = "BUSINESS_RULE_VIOLATION"
    default_message = "Business rule violation"

    def __init__(
        self,
        message: Optional[str] = None,
        rule: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, _with_fields(details, rule=rule))


class InvalidTransitionError(GardenViewException):
    default_code = "INVALID_TRANSITION"
    default_message = "Navigation not allowed"

    def __init__(
        self,
        message: Optional[str] = None,
        current_view: Optional[str] = None,
        intent: Optional[str] = None,
        reason: Optional[str] = None
    ):
        super().__init__(message, _with_fields(None, current_view=current_view, intent=intent, reason=reason))


# =============================================================================
# REMOTE SERVICES
# =============================================================================

class BackendError(GardenViewException):
    """
    A PostgREST request failed.

    ``code`` is the backend's own code (SQLSTATE or PGRST...); None for
    transport failures.
    """
    default_code = "BACKEND_ERROR"
    default_message = "Backend request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        operation: Optional[str] = None,
        table: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, _with_fields(details, code=code, operation=operation, table=table))
        self.code = code

    @property
    def is_missing_schema(self) -> bool:
        """True when the table or column is not provisioned yet."""
        return self.code in MISSING_SCHEMA_CODES


class ExternalServiceError(GardenViewException):
    """The AI function or the weather provider could not be used."""
    default_code = "EXTERNAL_SERVICE_ERROR"
    default_message = "External service error"

    def __init__(
        self,
        message: Optional[str] = None,
        service: Optional[str] = None,
        service_response: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, _with_fields(details, service=service, service_response=service_response))


# =============================================================================
# STORAGE & MEDIA
# =============================================================================

class StorageError(GardenViewException):
    """Media store upload, delete or signing failed."""
    default_code = "STORAGE_ERROR"
    default_message = "Storage operation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        operation: Optional[str] = None,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, _with_fields(details, operation=operation, path=path))


class FileTooLargeError(GardenViewException):
    default_code = "FILE_TOO_LARGE"
    default_message = "File too large"

    def __init__(self, message: Optional[str] = None, file_size: Optional[int] = None,
                 max_size: Optional[int] = None):
        super().__init__(message, _with_fields(None, file_size=file_size, max_size=max_size))


class InvalidFileTypeError(GardenViewException):
    default_code = "INVALID_FILE_TYPE"
    default_message = "Invalid file type"

    def __init__(self, message: Optional[str] = None, file_type: Optional[str] = None,
                 allowed_types: Optional[List[str]] = None):
        super().__init__(message, _with_fields(None, file_type=file_type, allowed_types=allowed_types or None))


class ImageProcessingError(GardenViewException):
    """Pillow could not decode, render or encode an image."""
    default_code = "IMAGE_PROCESSING_ERROR"
    default_message = "Image processing failed"

    def __init__(
        self,
        message: Optional[str] = None,
        stage: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, _with_fields(details, stage=stage))


__all__ = [
    "MISSING_SCHEMA_CODES",
    "GardenViewException",
    "AuthenticationError",
    "ConfigurationError",
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
]
