"""Input validation helpers shared by the core modules.

Functions:
- is_missing(value) -> bool: True for None, empty strings and empty lists
- require_fields(message, **fields): Raise ValidationError if any is missing
- parse_positive_int(value, field_name) -> int
"""

from typing import Any

from examdesk.core.errors import ValidationError


def is_missing(value: Any) -> bool:
    """Check whether a request value counts as not supplied.

    Mirrors JavaScript truthiness for the values a JSON body can carry,
    except that 0 and False are treated as present.
    """
    if value is None:
        return True
    if isinstance(value, str) and value == "":
        return True
    if isinstance(value, (list, tuple, dict)) and len(value) == 0:
        return True
    return False


def require_fields(message: str, **fields: Any) -> None:
    """Raise ValidationError(message) if any keyword value is missing.

    Args:
        message: Error message reported to the client
        **fields: Field name -> supplied value

    Raises:
        ValidationError: If at least one field is missing
    """
    missing = [name for name, value in fields.items() if is_missing(value)]
    if missing:
        raise ValidationError(message)


def parse_positive_int(value: Any, field_name: str) -> int:
    """Coerce value to an int >= 1.

    Raises:
        ValidationError: If value is not a whole number or is below 1
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive integer")

    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field_name} must be a positive integer")
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValidationError(f"{field_name} must be a positive integer")

    if not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field_name} must be a positive integer")

    return value
