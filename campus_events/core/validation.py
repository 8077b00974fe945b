"""Event proposal validation.

Collects every problem with a proposal into one field -> message map so
the caller can show them all at once.
"""

import math
from datetime import date, datetime, time
from typing import Any, Dict, Optional

from campus_events.core.errors import ValidationError
from campus_events.db.models.event import EVENT_CATEGORIES

REQUIRED_FIELDS = {
    "title": "Event title is required",
    "description": "Event description is required",
    "date": "Event date is required",
    "start_time": "Start time is required",
    "end_time": "End time is required",
    "venue": "Venue is required",
    "category": "Event category is required",
}

TEXT_FIELDS = ("title", "description", "venue", "category", "requirements")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


def _parse_time(value: Any) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value).strip())


def _parse_number(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{value!r} is not a finite number")
    return number


def validate_proposal(
    data: Dict[str, Any],
    *,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Validate an event proposal.

    Args:
        data: Raw proposal fields
        today: Reference date for the past-date check (defaults to today)

    Returns:
        Cleaned values: stripped strings, parsed date/times and numbers

    Raises:
        ValidationError: With one message per offending field
    """
    today = today or date.today()
    errors: Dict[str, str] = {}
    cleaned: Dict[str, Any] = {}

    for field, message in REQUIRED_FIELDS.items():
        if _is_blank(data.get(field)):
            errors[field] = message

    for field in TEXT_FIELDS:
        if field in data and field not in errors:
            value = data[field]
            cleaned[field] = value.strip() if isinstance(value, str) else value

    if cleaned.get("category") and cleaned["category"] not in EVENT_CATEGORIES:
        errors["category"] = f"Unknown category: {cleaned['category']}"

    if "date" in data and "date" not in errors:
        try:
            cleaned["date"] = _parse_date(data["date"])
        except ValueError:
            errors["date"] = "Event date must be a valid date (YYYY-MM-DD)"
        else:
            if cleaned["date"] < today:
                errors["date"] = "Event date cannot be in the past"

    for field in ("start_time", "end_time"):
        if field in data and field not in errors:
            try:
                cleaned[field] = _parse_time(data[field])
            except ValueError:
                errors[field] = "Time must be a valid time (HH:MM)"

    start, end = cleaned.get("start_time"), cleaned.get("end_time")
    if start is not None and end is not None and end <= start:
        errors["end_time"] = "End time must be after start time"

    if "budget" in data:
        if _is_blank(data["budget"]):
            cleaned["budget"] = None
        else:
            try:
                cleaned["budget"] = _parse_number(data["budget"])
            except (TypeError, ValueError):
                errors["budget"] = "Budget must be a valid number"
            else:
                if cleaned["budget"] < 0:
                    errors["budget"] = "Budget cannot be negative"

    if "expected_attendees" in data:
        value = data["expected_attendees"]
        if _is_blank(value):
            cleaned["expected_attendees"] = None
        else:
            try:
                number = _parse_number(value)
            except (TypeError, ValueError):
                number = None
            if number is None or number < 1 or not number.is_integer():
                errors["expected_attendees"] = "Expected attendees must be a positive number"
            else:
                cleaned["expected_attendees"] = int(number)

    if errors:
        raise ValidationError(errors)

    return cleaned
