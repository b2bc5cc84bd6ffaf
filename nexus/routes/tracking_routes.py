"""
Mastery and progress endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from nexus.config import get_db
from nexus.schemas.tracking_schemas import (
    MasteryResponse,
    MasteryUpdateRequest,
    ProgressResponse,
    ProgressUpdateRequest,
)
from nexus.services.store import EntityStore
from nexus.services.tracking_service import TrackingService

mastery_routes = APIRouter()
progress_routes = APIRouter()


def get_tracking_service(db: Session = Depends(get_db)) -> TrackingService:
    return TrackingService(EntityStore(db))


@mastery_routes.post("/update", response_model=MasteryResponse)
def update_mastery(
    req: MasteryUpdateRequest,
    service: TrackingService = Depends(get_tracking_service),
) -> MasteryResponse:
    return MasteryResponse.model_validate(service.update_mastery(req.user_id, req.topic, req.score_delta))


@mastery_routes.get("/{user_id}", response_model=list[MasteryResponse])
def list_mastery(
    user_id: str,
    service: TrackingService = Depends(get_tracking_service),
) -> list[MasteryResponse]:
    return [MasteryResponse.model_validate(m) for m in service.list_mastery(user_id)]


@progress_routes.post("/update", response_model=ProgressResponse)
def update_progress(
    req: ProgressUpdateRequest,
    service: TrackingService = Depends(get_tracking_service),
) -> ProgressResponse:
    """Add xpDelta; every 100 accumulated XP is a level."""
    return ProgressResponse.model_validate(service.update_progress(req.user_id, req.xp_delta))


@progress_routes.get("/{user_id}", response_model=ProgressResponse)
def get_progress(
    user_id: str,
    service: TrackingService = Depends(get_tracking_service),
) -> ProgressResponse:
    """Progress for a user, created with defaults on first read."""
    return ProgressResponse.model_validate(service.get_progress(user_id))
