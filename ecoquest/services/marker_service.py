"""Marker service - business logic for marker management."""

import logging
import uuid
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from ecoquest.errors import MarkerNotFoundError, MarkerStorageError, MarkerValidationError
from ecoquest.models.domain import Marker, MarkerType, utc_timestamp
from ecoquest.models.dto import (
    MarkerCreateRequest,
    MarkerDTO,
    MarkerUpdateRequest,
    StatsResponse,
    TypeCounts,
)
from ecoquest.repositories.base import MarkerRepository
from ecoquest.services.validation import normalize_type, to_number, validate_marker

logger = logging.getLogger(__name__)

# Field of TypeCounts incremented for each marker type
_COUNT_FIELDS = {
    MarkerType.TREE: "trees",
    MarkerType.CLEANUP: "cleanups",
    MarkerType.SCHOOL: "schools",
}

_UPDATABLE_FIELDS = ("type", "description", "lat", "lng", "user", "photoUrl")


def _new_marker_id() -> str:
    return str(uuid.uuid4())


class MarkerService:
    """
    Service for marker business logic.

    Responsibilities:
    - Validate candidate markers before any write
    - Normalize accepted input (type case, trimmed text, numeric coordinates)
    - Own server-assigned fields (id, timestamp, updatedAt)
    - Filter, sort and aggregate the collection

    Does NOT:
    - Handle HTTP requests (that's API layer)
    - Touch the backing file directly (that's repository layer)

    Every call loads the collection fresh and, for writes, saves it back.
    There is no locking between concurrent writers.
    """

    def __init__(
        self,
        marker_repo: MarkerRepository,
        clock: Callable[[], str] = utc_timestamp,
        id_factory: Callable[[], str] = _new_marker_id,
    ):
        self.marker_repo = marker_repo
        self.clock = clock
        self.id_factory = id_factory

    def list_markers(
        self,
        type: Optional[str] = None,
        user: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[MarkerDTO]:
        """
        List markers, most recent first.

        Filters:
        - type: exact match on the (lower-cased) type tag
        - user: case-insensitive substring of the marker's user
        - limit: keep only the first N after sorting

        Ordering is by timestamp string, descending. Markers sharing a
        timestamp come back in reverse insertion order, so the most recently
        appended one is still first.
        """
        markers = self.marker_repo.load().markers

        if type:
            wanted = type.strip().lower()
            markers = [m for m in markers if m.type.value == wanted]

        if user:
            needle = user.lower()
            markers = [m for m in markers if needle in m.user.lower()]

        markers = sorted(reversed(markers), key=lambda m: m.timestamp, reverse=True)

        if limit is not None:
            markers = markers[:max(limit, 0)]

        return [self._to_dto(m) for m in markers]

    def get_marker(self, marker_id: str) -> MarkerDTO:
        """Get marker by id."""
        marker = self.marker_repo.load().find(marker_id)

        if not marker:
            raise MarkerNotFoundError(marker_id)

        return self._to_dto(marker)

    def create_marker(self, request: MarkerCreateRequest) -> MarkerDTO:
        """
        Log a new marker.

        Business rules:
        - All field rules must pass; otherwise nothing is written
        - id and timestamp are always assigned here, never by the client
        - photoUrl defaults to null
        """
        violations = validate_marker(
            request.type, request.description, request.lat, request.lng, request.user,
            photo_url=request.photoUrl,
        )
        if violations:
            raise MarkerValidationError(violations)

        marker = Marker(
            id=self.id_factory(),
            type=MarkerType(normalize_type(request.type)),
            description=request.description.strip(),
            lat=to_number(request.lat),
            lng=to_number(request.lng),
            user=request.user.strip(),
            photo_url=request.photoUrl or None,
            timestamp=self.clock(),
        )

        collection = self.marker_repo.load()
        collection.markers.append(marker)

        if not self.marker_repo.save(collection):
            logger.error("Failed to save new marker %s", marker.id)
            raise MarkerStorageError("Failed to save marker")

        logger.info("Created %s marker %s by %s", marker.type.value, marker.id, marker.user)
        return self._to_dto(marker)

    def update_marker(self, marker_id: str, request: MarkerUpdateRequest) -> MarkerDTO:
        """
        Apply a partial update to an existing marker.

        Business rules:
        - Marker must exist
        - The merge of stored and provided fields must pass all field rules
        - id and timestamp never change, whatever the payload says
        - updatedAt is stamped on every successful update
        """
        collection = self.marker_repo.load()
        existing = collection.find(marker_id)
        if not existing:
            raise MarkerNotFoundError(marker_id)

        merged = self._merge(existing, request.model_dump(exclude_unset=True))

        violations = validate_marker(
            merged["type"], merged["description"], merged["lat"], merged["lng"], merged["user"],
            photo_url=merged["photoUrl"],
        )
        if violations:
            raise MarkerValidationError(violations)

        updated = replace(
            existing,
            type=MarkerType(normalize_type(merged["type"])),
            description=merged["description"].strip(),
            lat=to_number(merged["lat"]),
            lng=to_number(merged["lng"]),
            user=merged["user"].strip(),
            photo_url=merged["photoUrl"] or None,
            updated_at=self.clock(),
        )

        collection.markers = [
            updated if m.id == marker_id else m for m in collection.markers
        ]

        if not self.marker_repo.save(collection):
            logger.error("Failed to save update of marker %s", marker_id)
            raise MarkerStorageError("Failed to update marker")

        logger.info("Updated marker %s", marker_id)
        return self._to_dto(updated)

    def delete_marker(self, marker_id: str) -> None:
        """Delete a marker. Raises MarkerNotFoundError if it is not there."""
        collection = self.marker_repo.load()
        initial_length = len(collection.markers)

        collection.markers = [m for m in collection.markers if m.id != marker_id]

        if len(collection.markers) == initial_length:
            raise MarkerNotFoundError(marker_id)

        if not self.marker_repo.save(collection):
            logger.error("Failed to save deletion of marker %s", marker_id)
            raise MarkerStorageError("Failed to delete marker")

        logger.info("Deleted marker %s", marker_id)

    def get_stats(self) -> StatsResponse:
        """Per-type counts overall and per user."""
        markers = self.marker_repo.load().markers

        global_stats = TypeCounts()
        user_stats: Dict[str, TypeCounts] = {}

        for marker in markers:
            counts = user_stats.setdefault(marker.user, TypeCounts())
            field_name = _COUNT_FIELDS[marker.type]
            for bucket in (global_stats, counts):
                setattr(bucket, field_name, getattr(bucket, field_name) + 1)
                bucket.total += 1

        return StatsResponse(
            globalStats=global_stats,
            userStats=user_stats,
            totalUsers=len(user_stats),
            totalMarkers=len(markers),
        )

    @staticmethod
    def _merge(existing: Marker, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Stored fields overlaid with the updatable fields present in ``changes``."""
        merged = {
            "type": existing.type.value,
            "description": existing.description,
            "lat": existing.lat,
            "lng": existing.lng,
            "user": existing.user,
            "photoUrl": existing.photo_url,
        }
        for key in _UPDATABLE_FIELDS:
            if key in changes:
                merged[key] = changes[key]
        return merged

    @staticmethod
    def _to_dto(marker: Marker) -> MarkerDTO:
        """Convert domain entity to DTO."""
        return MarkerDTO(**marker.to_dict())
