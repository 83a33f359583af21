"""Data Transfer Objects - API contracts."""

from pydantic import BaseModel, ConfigDict, model_serializer
from typing import Any, Dict, List, Optional
from ecoquest.models.domain import MarkerType


class MarkerDTO(BaseModel):
    """Marker data for API responses."""
    id: str
    type: MarkerType
    description: str
    lat: float
    lng: float
    user: str
    photoUrl: Optional[str] = None
    timestamp: str
    updatedAt: Optional[str] = None

    @model_serializer(mode="wrap")
    def omit_missing_update(self, handler):
        """Leave updatedAt out entirely until the marker has been edited."""
        data = handler(self)
        if data.get("updatedAt") is None:
            data.pop("updatedAt", None)
        return data


class MarkerCreateRequest(BaseModel):
    """Request to log a new marker.

    Fields are deliberately loose: rule checking happens in
    ``ecoquest.services.validation`` so every violation is reported at once.
    """
    type: Optional[Any] = None
    description: Optional[Any] = None
    lat: Optional[Any] = None
    lng: Optional[Any] = None
    user: Optional[Any] = None
    photoUrl: Optional[Any] = None

    model_config = ConfigDict(extra="ignore")


class MarkerUpdateRequest(BaseModel):
    """Partial update; only fields present in the payload are applied.

    ``id`` and ``timestamp`` are accepted so clients may echo a full record
    back, but they are never applied.
    """
    id: Optional[Any] = None
    timestamp: Optional[Any] = None
    type: Optional[Any] = None
    description: Optional[Any] = None
    lat: Optional[Any] = None
    lng: Optional[Any] = None
    user: Optional[Any] = None
    photoUrl: Optional[Any] = None

    model_config = ConfigDict(extra="ignore")


class MarkerMutationResponse(BaseModel):
    """Response after creating or updating a marker."""
    success: bool
    marker: MarkerDTO
    message: str


class DeleteResponse(BaseModel):
    """Response after deleting a marker."""
    success: bool
    message: str


class TypeCounts(BaseModel):
    """Marker counts broken down by type."""
    trees: int = 0
    cleanups: int = 0
    schools: int = 0
    total: int = 0


class StatsResponse(BaseModel):
    """Aggregate statistics over the whole collection."""
    globalStats: TypeCounts
    userStats: Dict[str, TypeCounts]
    totalUsers: int
    totalMarkers: int


class HealthResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    details: Optional[List[str]] = None
    message: Optional[str] = None
    availableRoutes: Optional[List[str]] = None
