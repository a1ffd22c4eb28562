"""
Derived values for assessment records.

BMI, age, best-of-two-trials and display dates. All metric units (cm, kg,
seconds).
"""

import math
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Union


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a numeric input.

    Args:
        value: int, float or numeric string from a form

    Returns:
        The value as float, or None if it is missing or not numeric
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer input; fractional values are truncated."""
    number = parse_number(value)
    if number is None:
        return None
    return int(number)


def coerce_number(value: Any) -> float:
    """Parse an optional numeric field, defaulting to 0."""
    number = parse_number(value)
    return 0.0 if number is None else number


def coerce_int(
    value: Any, minimum: Optional[int] = None, maximum: Optional[int] = None
) -> int:
    """
    Parse an optional integer field, defaulting to 0.

    Args:
        value: Raw input
        minimum: Lower bound the result is clamped to, if given
        maximum: Upper bound the result is clamped to, if given
    """
    number = parse_int(value)
    if number is None:
        number = 0
    if minimum is not None:
        number = max(minimum, number)
    if maximum is not None:
        number = min(maximum, number)
    return number


def calculate_bmi(height_cm: float, weight_kg: float) -> float:
    """
    Calculate Body Mass Index.

    BMI = weight (kg) / height (m)^2, rounded to 2 decimals.

    Raises:
        ValueError: If height is not positive
    """
    if height_cm <= 0:
        raise ValueError("Height must be a positive value")

    height_m = height_cm / 100.0
    return round(weight_kg / (height_m * height_m), 2)


def calculate_age(birth_date: date, today: Optional[date] = None) -> int:
    """
    Age in whole years on ``today`` (defaults to the current date).

    One year less when this year's birthday has not been reached yet.
    """
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def calculate_best_value(
    first: Any, second: Any, lower_is_better: bool = False
) -> float:
    """
    Best of two trial readings.

    Args:
        first: First trial reading
        second: Second trial reading
        lower_is_better: True for timed tests, False for distances/counts

    Returns:
        min or max of the two readings; the valid reading if only one is
        numeric; 0 if neither is
    """
    first_value = parse_number(first)
    second_value = parse_number(second)

    if first_value is None and second_value is None:
        return 0
    if first_value is None:
        return second_value
    if second_value is None:
        return first_value

    if lower_is_better:
        return min(first_value, second_value)
    return max(first_value, second_value)


def build_paired_trial(
    raw: Optional[Mapping[str, Any]], lower_is_better: bool
) -> Dict[str, float]:
    """
    Build the stored {first, second, best} value for a paired metric.

    Invalid trials are stored as 0, but the best value is derived from the
    raw readings so a missing trial never wins a "lower is better" contest.
    """
    raw = raw or {}
    first = raw.get("first")
    second = raw.get("second")
    return {
        "first": coerce_number(first),
        "second": coerce_number(second),
        "best": float(calculate_best_value(first, second, lower_is_better)),
    }


def format_date(value: Union[date, datetime, str]) -> str:
    """Format a date as YYYY/M/D without zero padding."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{value.year}/{value.month}/{value.day}"
