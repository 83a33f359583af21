"""Field rules for candidate markers.

Pure functions only. ``validate_marker`` checks every rule and returns all
violations in a fixed order, so clients can fix their input in one pass.
"""

import math
from typing import Any, List, Optional

from ecoquest.models.domain import LAT_RANGE, LNG_RANGE, MarkerType

VALID_TYPES = [t.value for t in MarkerType]


def to_number(value: Any) -> Optional[float]:
    """Coerce ``value`` to a finite float.

    Accepts ints, floats and numeric strings. Booleans, NaN, infinities
    and anything else give None.
    """
    if isinstance(value, bool):
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
    if not math.isfinite(number):
        return None
    return number


def normalize_type(value: Any) -> Optional[str]:
    """Lower-cased type tag, or None if ``value`` is not a known type."""
    if not isinstance(value, str):
        return None
    tag = value.strip().lower()
    return tag if tag in VALID_TYPES else None


def _is_non_empty_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _check_coordinate(value: Any, name: str, bounds: tuple) -> Optional[str]:
    number = to_number(value)
    if number is None:
        return f"{name} must be a number"
    low, high = bounds
    if not low <= number <= high:
        return f"{name} must be between {low:g} and {high:g}"
    return None


def validate_marker(
    type: Any,
    description: Any,
    lat: Any,
    lng: Any,
    user: Any,
    photo_url: Any = None,
) -> List[str]:
    """Check a candidate marker's fields.

    Args:
        type: Marker type tag (tree, cleanup or school, any case)
        description: Free text describing the action
        lat: Latitude in degrees
        lng: Longitude in degrees
        user: Author display name or email
        photo_url: Optional image reference (string or None)

    Returns:
        Violation messages in rule order; empty if the candidate is valid
    """
    errors = []

    if normalize_type(type) is None:
        errors.append(f"Type must be one of: {', '.join(VALID_TYPES)}")

    if not _is_non_empty_text(description):
        errors.append("Description is required and must be a non-empty string")

    for value, name, bounds in ((lat, "Latitude", LAT_RANGE), (lng, "Longitude", LNG_RANGE)):
        error = _check_coordinate(value, name, bounds)
        if error:
            errors.append(error)

    if not _is_non_empty_text(user):
        errors.append("User is required and must be a non-empty string")

    if photo_url is not None and not isinstance(photo_url, str):
        errors.append("Photo URL must be a string or null")

    return errors
