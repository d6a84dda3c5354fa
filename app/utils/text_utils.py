# app/utils/text_utils.py

from app.constants.error_codes import ErrorCode
from app.core.exceptions import ValidationError


def clean_optional(value: str | None) -> str | None:
    """Strip whitespace, empty strings become None."""
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def require_text(value: str | None, message: str, error_code: ErrorCode) -> str:
    cleaned = clean_optional(value)
    if cleaned is None:
        raise ValidationError(message, error_code)
    return cleaned
