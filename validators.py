"""
Input Validation & Sanitization Utilities
Provides validation for records written through the repositories
"""
import re
from datetime import date, datetime
from typing import Dict, Any, List, Optional, Tuple, Type
from enum import Enum
import logging

from errors import ValidationError

logger = logging.getLogger(__name__)

# Regex patterns
EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
PHONE_PATTERN = re.compile(r'^\+?\d{8,15}$')
ISO_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> Tuple[bool, Optional[str]]:
    """
    Validate that all required fields are present in the data

    Args:
        data: Dictionary of input data
        required_fields: List of required field names

    Returns:
        Tuple of (is_valid, error_message)
    """
    missing_fields = [
        field for field in required_fields
        if field not in data or data[field] is None
        or (isinstance(data[field], str) and not data[field].strip())
    ]

    if missing_fields:
        return False, f"Missing required fields: {', '.join(missing_fields)}"

    return True, None


def validate_email(email: str) -> Tuple[bool, Optional[str]]:
    """
    Validate email format

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not email or not isinstance(email, str):
        return False, "Email must be a non-empty string"

    if not EMAIL_PATTERN.match(email):
        return False, "Invalid email format"

    if len(email) > 254:  # RFC 5321
        return False, "Email address too long"

    return True, None


def validate_phone(phone: str) -> Tuple[bool, Optional[str]]:
    """
    Validate phone number format

    Args:
        phone: Phone number to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not phone or not isinstance(phone, str):
        return False, "Phone must be a non-empty string"

    # Remove common separators
    cleaned_phone = re.sub(r'[\s\-\(\)\.]', '', phone)

    if not PHONE_PATTERN.match(cleaned_phone):
        return False, "Invalid phone number format"

    return True, None


def validate_iso_date(value: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a calendar date stored as ISO YYYY-MM-DD

    Args:
        value: Date string to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        return False, "Date must be in YYYY-MM-DD format"

    try:
        datetime.strptime(value, '%Y-%m-%d')
    except ValueError:
        return False, "Date does not exist"

    return True, None


def validate_number_range(value: float, min_value: Optional[float] = None, max_value: Optional[float] = None) -> Tuple[bool, Optional[str]]:
    """
    Validate number is within acceptable range

    Args:
        value: Number to validate
        min_value: Minimum allowed value
        max_value: Maximum allowed value

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False, "Value must be a number"

    if min_value is not None and value < min_value:
        return False, f"Value too small (minimum {min_value})"

    if max_value is not None and value > max_value:
        return False, f"Value too large (maximum {max_value})"

    return True, None


def sanitize_string(value: str, max_length: int = 1000) -> str:
    """
    Sanitize string input by removing null bytes and surrounding whitespace

    Args:
        value: String to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized string
    """
    if not isinstance(value, str):
        return str(value)

    sanitized = value.replace('\x00', '').strip()

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


def to_iso_date(value) -> str:
    """Normalize a date/datetime/ISO string to YYYY-MM-DD."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


# =============================================================================
# Raising helpers used at the repository boundary
# =============================================================================

def require_fields(data: Dict[str, Any], required_fields: List[str]) -> None:
    for field in required_fields:
        is_valid, error = validate_required_fields(data, [field])
        if not is_valid:
            raise ValidationError(error, field=field)


def require_date(data: Dict[str, Any], field: str, optional: bool = False) -> None:
    value = data.get(field)
    if optional and not value:
        return
    is_valid, error = validate_iso_date(value)
    if not is_valid:
        raise ValidationError(f"{field}: {error}", field=field)


def require_non_negative(data: Dict[str, Any], field: str) -> None:
    value = data.get(field)
    if value is None:
        return
    is_valid, error = validate_number_range(value, min_value=0)
    if not is_valid:
        raise ValidationError(f"{field}: {error}", field=field)


def require_positive(data: Dict[str, Any], field: str) -> None:
    value = data.get(field)
    is_valid, error = validate_number_range(value)
    if not is_valid or value <= 0:
        raise ValidationError(f"{field}: {error or 'Value must be greater than zero'}", field=field)


def require_email(data: Dict[str, Any], field: str = 'email') -> None:
    """Email is optional; when present it must be well formed."""
    value = data.get(field)
    if not value:
        return
    is_valid, error = validate_email(value)
    if not is_valid:
        raise ValidationError(error, field=field)


def coerce_enum(enum_cls: Type[Enum], value, field: str = 'status'):
    """Accept an enum member or its value; reject anything else."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ', '.join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {field} '{value}'. Allowed: {allowed}", field=field)
