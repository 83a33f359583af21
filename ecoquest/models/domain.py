"""Domain entities - internal representation (framework-agnostic)."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class MarkerType(str, Enum):
    """Kinds of environmental action a marker can log."""
    TREE = "tree"
    CLEANUP = "cleanup"
    SCHOOL = "school"


LAT_RANGE = (-90.0, 90.0)
LNG_RANGE = (-180.0, 180.0)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2026-01-02T03:04:05.678Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _required_text(data: Dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    if not value.strip():
        raise ValueError(f"{key} must not be empty")
    return value


def _optional_text(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{key} must be a string or null, got {type(value).__name__}")
    return value


def _coordinate(data: Dict[str, Any], key: str, bounds: tuple) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} must be a number, got {type(value).__name__}")
    low, high = bounds
    if not math.isfinite(value) or not low <= value <= high:
        raise ValueError(f"{key} {value!r} is outside [{low:g}, {high:g}]")
    return float(value)


@dataclass
class Marker:
    """Marker domain entity."""
    id: str
    type: MarkerType
    description: str
    lat: float
    lng: float
    user: str
    photo_url: Optional[str]
    timestamp: str
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the field names used on disk and over HTTP."""
        data = {
            "id": self.id,
            "type": self.type.value,
            "description": self.description,
            "lat": self.lat,
            "lng": self.lng,
            "user": self.user,
            "photoUrl": self.photo_url,
            "timestamp": self.timestamp,
        }
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Marker":
        """Build a marker from its serialized form.

        Stored records are checked against the same invariants as new ones,
        so a hand-edited or legacy file cannot put a broken marker in play.

        Raises:
            KeyError: If a required field is missing
            TypeError: If a field has the wrong type
            ValueError: If type, text or coordinates are not valid values
        """
        return cls(
            id=_required_text(data, "id"),
            type=MarkerType(data["type"]),
            description=_required_text(data, "description"),
            lat=_coordinate(data, "lat", LAT_RANGE),
            lng=_coordinate(data, "lng", LNG_RANGE),
            user=_required_text(data, "user"),
            photo_url=_optional_text(data, "photoUrl"),
            timestamp=_required_text(data, "timestamp"),
            updated_at=_optional_text(data, "updatedAt"),
        )


@dataclass
class MarkerCollection:
    """The full, insertion-ordered set of markers; the unit of load/save."""
    markers: List[Marker] = field(default_factory=list)

    def find(self, marker_id: str) -> Optional[Marker]:
        """Return the marker with ``marker_id`` or None."""
        for marker in self.markers:
            if marker.id == marker_id:
                return marker
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"markers": [m.to_dict() for m in self.markers]}
