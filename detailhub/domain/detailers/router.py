"""Detailer router - FastAPI endpoints for detailer profiles"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_detailer
from ...database import get_db
from ...models import Detailer
from .schemas import (
    DetailerProfileResponse,
    DetailerProfileUpdate,
    ProfileCompletionResponse,
    PublicDetailerResponse,
)
from .service import (
    DetailerService,
    build_completion,
    to_profile_response,
    to_public_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/detailers", tags=["Detailers"])


def get_detailer_service(db: Session = Depends(get_db)) -> DetailerService:
    """Dependency injection for DetailerService"""
    return DetailerService(db)


# ============================================================================
# PUBLIC
# ============================================================================


@router.get("/search", response_model=list[PublicDetailerResponse])
async def search_detailers(
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    q: Optional[str] = Query(None, max_length=100),
    service: DetailerService = Depends(get_detailer_service),
):
    """Search listed detailers (only complete profiles are visible)"""
    return [to_public_response(d) for d in service.search_public(city=city, state=state, query=q)]


@router.get("/{detailer_id}/public", response_model=PublicDetailerResponse)
async def get_public_detailer(
    detailer_id: int,
    service: DetailerService = Depends(get_detailer_service),
):
    return to_public_response(service.get_public(detailer_id))


# ============================================================================
# DASHBOARD
# ============================================================================


@router.get("/me", response_model=DetailerProfileResponse)
async def get_my_profile(current_detailer: Detailer = Depends(get_current_detailer)):
    return to_profile_response(current_detailer)


@router.patch("/me", response_model=DetailerProfileResponse)
async def update_my_profile(
    data: DetailerProfileUpdate,
    current_detailer: Detailer = Depends(get_current_detailer),
    service: DetailerService = Depends(get_detailer_service),
):
    """Update profile fields; phone numbers are stored in E.164"""
    detailer = service.update_profile(current_detailer, data)
    return to_profile_response(detailer)


@router.get("/me/profile-completion", response_model=ProfileCompletionResponse)
async def get_profile_completion(current_detailer: Detailer = Depends(get_current_detailer)):
    """Onboarding checklist: per-check status, percentage and next step"""
    return build_completion(current_detailer)
