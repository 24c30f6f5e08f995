# exercise_tracker/parsing.py
"""
Explicit parsers for the loosely typed values clients send in request
bodies (JSON or form fields). Each returns a typed value or raises
ValidationError. Query strings are typed through the annotated aliases at
the bottom and validated by FastAPI.
"""

from datetime import date, datetime
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator

from exercise_tracker.errors import ValidationError

# Largest value an INTEGER column holds on every supported store
MAX_INT = 2**31 - 1


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def parse_duration(value: Any) -> int:
    """
    Duration in whole minutes; accepts ints and digit strings like "30".
    """
    # bool is an int subclass, "true" is not a duration
    if isinstance(value, bool):
        raise ValidationError("Invalid duration")

    if isinstance(value, int):
        duration = value
    elif isinstance(value, float) and value.is_integer():
        duration = int(value)
    elif isinstance(value, str):
        try:
            duration = int(value.strip())
        except ValueError:
            raise ValidationError("Invalid duration")
    else:
        raise ValidationError("Invalid duration")

    if not 0 < duration <= MAX_INT:
        raise ValidationError("Invalid duration")
    return duration


def parse_date(value: Any) -> Optional[date]:
    """
    ISO date ("2023-06-15") or ISO datetime, of which only the calendar
    date is kept. Blank values give None so callers can apply a default.
    """
    if is_blank(value):
        return None
    if not isinstance(value, str):
        raise ValidationError("Invalid date")

    value = value.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        raise ValidationError("Invalid date")


def to_date_string(value: date) -> str:
    # e.g. "Mon Jan 01 2024"; years always four digits
    return f"{value:%a %b %d} {value.year:04d}"


def blank_to_none(value: Any) -> Any:
    return None if is_blank(value) else value


# Query parameters where "?from=" means the same as leaving it out
OptionalDate = Annotated[Optional[date], BeforeValidator(blank_to_none)]
OptionalInt = Annotated[Optional[int], BeforeValidator(blank_to_none)]
