# 📄 File: gardenview/shared/utils/validators.py
# 🧭 Purpose (Layman Explanation):
# Checks that what the user typed makes sense (a plant name that is not too long,
# a comment without odd hidden characters) before anything is sent to the cloud.
# 🧪 Purpose (Technical Summary):
# Reusable client-side validation functions returning ValidationResult objects;
# handlers turn failed results into ValidationError before any network call.
# 🔗 Dependencies:
# re, typing, pydantic (model errors)
# 🔄 Connected Modules / Calls From:
# Command models (plant, log and notebook drafts), social comments

import re
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from gardenview.shared.core.exceptions import ValidationError

# Control characters never belong in user-facing text fields.
CONTROL_CHAR_PATTERN = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')

PLANT_NAME_MAX_LENGTH = 100
TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 5000
COMMENT_MAX_LENGTH = 1000


class ValidationResult:
    """Result object for validation operations"""
    def __init__(self, is_valid: bool, errors: List[str] = None):
        self.is_valid = is_valid
        self.errors = errors or []

    def add_error(self, error: str):
        """Add validation error"""
        self.errors.append(error)
        self.is_valid = False

    @property
    def first_error(self) -> Optional[str]:
        return self.errors[0] if self.errors else None


# ==============================================================================
# TEXT VALIDATION
# ==============================================================================

def validate_plant_name(name: Optional[str], required: bool = False) -> ValidationResult:
    """
    Validate plant name format and content

    Blank names are allowed unless ``required`` is set; callers substitute a
    default display name for them.

    Args:
        name: Plant name to validate
        required: Whether a blank name is an error

    Returns:
        ValidationResult with validation status and errors
    """
    result = ValidationResult(True)

    if name is not None and not isinstance(name, str):
        result.add_error("Plant name must be text")
        return result

    name = (name or "").strip()

    if not name:
        if required:
            result.add_error("Plant name is required")
        return result

    if len(name) > PLANT_NAME_MAX_LENGTH:
        result.add_error(f"Plant name must be at most {PLANT_NAME_MAX_LENGTH} characters")

    if CONTROL_CHAR_PATTERN.search(name):
        result.add_error("Plant name contains invalid characters")

    return result


def validate_text_content(content: Optional[str], field_name: str = "text",
                          min_length: int = 0, max_length: int = DESCRIPTION_MAX_LENGTH) -> ValidationResult:
    """
    Validate free text (titles, descriptions, comments)

    Args:
        content: Text to validate
        field_name: Field name used in error messages
        min_length: Minimum stripped length (0 allows blank)
        max_length: Maximum length

    Returns:
        ValidationResult with validation status and errors
    """
    result = ValidationResult(True)
    text = (content or "").strip()

    if len(text) < min_length:
        if min_length == 1:
            result.add_error(f"{field_name} is required")
        else:
            result.add_error(f"{field_name} must be at least {min_length} characters")
    if len(text) > max_length:
        result.add_error(f"{field_name} must be at most {max_length} characters")
    if CONTROL_CHAR_PATTERN.search(text):
        result.add_error(f"{field_name} contains invalid characters")

    return result



# ==============================================================================
# MODEL ERRORS
# ==============================================================================

def validation_error_from(error: PydanticValidationError, message: Optional[str] = None) -> ValidationError:
    """
    Turn a pydantic model error into the package ValidationError.

    The first failing field becomes ``field``; every error message is kept in details.
    """
    errors = error.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())) or None
    text = first.get("msg", "Invalid input")
    if text.startswith("Value error, "):
        text = text[len("Value error, "):]
    return ValidationError(
        message or text,
        field=field,
        details={"errors": [f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in errors]},
    )
