"""REST API endpoints for the EcoQuest marker service."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ecoquest.config import get_settings
from ecoquest.models.domain import utc_timestamp
from ecoquest.models.dto import (
    DeleteResponse,
    HealthResponse,
    MarkerCreateRequest,
    MarkerDTO,
    MarkerMutationResponse,
    MarkerUpdateRequest,
)
from ecoquest.repositories.marker_repository import JsonMarkerRepository
from ecoquest.services.marker_service import MarkerService

router = APIRouter()

AVAILABLE_ROUTES = [
    "GET /health",
    "GET /markers",
    "GET /markers/:id",
    "POST /markers",
    "PUT /markers/:id",
    "DELETE /markers/:id",
    "GET /stats",
]

_marker_repo = None
_marker_service = None


def get_marker_repo() -> JsonMarkerRepository:
    """Get marker repository instance."""
    global _marker_repo
    if _marker_repo is None:
        settings = get_settings()
        _marker_repo = JsonMarkerRepository(settings.data_file, seed_samples=settings.seed_samples)
    return _marker_repo


def get_marker_service(
    marker_repo: JsonMarkerRepository = Depends(get_marker_repo)
) -> MarkerService:
    """Get marker service instance."""
    global _marker_service
    if _marker_service is None:
        _marker_service = MarkerService(marker_repo)
    return _marker_service


def _marker_body(marker: MarkerDTO) -> dict:
    """Serialized marker; MarkerDTO itself leaves out updatedAt until an edit."""
    return marker.model_dump(mode="json")


@router.get("/health")
def health():
    """Liveness check."""
    return HealthResponse(
        status="ok",
        timestamp=utc_timestamp(),
        version=get_settings().version,
    ).model_dump()


@router.get("/markers")
def list_markers(
    type: Optional[str] = Query(None, description="Exact marker type (tree, cleanup, school)"),
    user: Optional[str] = Query(None, description="Case-insensitive substring of the author"),
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of markers returned"),
    marker_service: MarkerService = Depends(get_marker_service),
):
    """List markers, most recent first."""
    if limit is not None:
        limit = min(limit, get_settings().max_list_limit)

    markers = marker_service.list_markers(type=type, user=user, limit=limit)
    return [_marker_body(m) for m in markers]


@router.get("/markers/{marker_id}")
def get_marker(
    marker_id: str,
    marker_service: MarkerService = Depends(get_marker_service),
):
    """Get a single marker."""
    return _marker_body(marker_service.get_marker(marker_id))


@router.post("/markers", status_code=status.HTTP_201_CREATED)
def create_marker(
    request: MarkerCreateRequest,
    marker_service: MarkerService = Depends(get_marker_service),
):
    """Log a new marker."""
    marker = marker_service.create_marker(request)
    return MarkerMutationResponse(
        success=True,
        marker=marker,
        message="Marker created successfully",
    ).model_dump(mode="json")


@router.put("/markers/{marker_id}")
def update_marker(
    marker_id: str,
    request: MarkerUpdateRequest,
    marker_service: MarkerService = Depends(get_marker_service),
):
    """Update some fields of an existing marker."""
    marker = marker_service.update_marker(marker_id, request)
    return MarkerMutationResponse(
        success=True,
        marker=marker,
        message="Marker updated successfully",
    ).model_dump(mode="json")


@router.delete("/markers/{marker_id}")
def delete_marker(
    marker_id: str,
    marker_service: MarkerService = Depends(get_marker_service),
):
    """Delete a marker."""
    marker_service.delete_marker(marker_id)
    return DeleteResponse(success=True, message="Marker deleted successfully").model_dump()


@router.get("/stats")
def get_stats(
    marker_service: MarkerService = Depends(get_marker_service),
):
    """Aggregate counts per type and per user."""
    return marker_service.get_stats().model_dump()
