"""
Time controls API endpoints.

Usage reporting for playback clients, access checks before playback starts,
and the parent dashboard views.
"""

import threading
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from ...core.config import Config
from ...core.logging import set_request_context
from ...features.time_controls import TimeControlService, create_time_control_service

router = APIRouter(prefix="/api/v1/time-controls", tags=["Time Controls"])


# Pydantic models for API
class AddUsageRequest(BaseModel):
    """Request model for reporting elapsed playback minutes."""

    minutes: float = Field(..., description="Minutes elapsed since the last report")


class AddUsageResponse(BaseModel):
    """Response model for a usage report."""

    kid_profile_id: str = Field(..., description="Kid profile identifier")
    total_minutes_used: float = Field(..., description="Minutes used today so far")


class UsageTodayResponse(BaseModel):
    """Response model for today's usage."""

    date: str = Field(..., description="Local calendar day, YYYY-MM-DD")
    total_minutes_used: float = Field(..., description="Minutes used today")
    last_updated_at: Optional[float] = Field(
        None, description="Epoch seconds of the last update"
    )


class UsageHistoryResponse(BaseModel):
    """Response model for usage history."""

    kid_profile_id: str = Field(..., description="Kid profile identifier")
    days: int = Field(..., description="Lookback in days")
    records: List[Dict[str, Any]] = Field(..., description="Daily records, newest first")


class FleetStatusResponse(BaseModel):
    """Response model for the parent dashboard summary."""

    user_id: str = Field(..., description="Parent account identifier")
    kids: List[Dict[str, Any]] = Field(..., description="One entry per kid profile")


# Lazy singleton to avoid import-time side effects
_service: Optional[TimeControlService] = None
_service_lock = threading.Lock()


def get_time_control_service() -> TimeControlService:
    """Dependency to get the time control service instance."""
    global _service
    with _service_lock:
        if _service is None:
            _service = create_time_control_service(Config.from_env())
    return _service


# Handlers are plain functions so FastAPI runs the blocking SQLite and file
# I/O in its threadpool, off the event loop.
@router.post("/usage/{kid_profile_id}", response_model=AddUsageResponse)
def add_usage(
    kid_profile_id: str,
    request: AddUsageRequest,
    service: TimeControlService = Depends(get_time_control_service),
) -> AddUsageResponse:
    """Add elapsed minutes to the kid's counter for today."""
    set_request_context(kid_profile_id=kid_profile_id)
    total = service.add_usage(kid_profile_id, request.minutes)
    return AddUsageResponse(kid_profile_id=kid_profile_id, total_minutes_used=total)


@router.get("/usage/{kid_profile_id}/today", response_model=UsageTodayResponse)
def get_usage_today(
    kid_profile_id: str,
    service: TimeControlService = Depends(get_time_control_service),
) -> UsageTodayResponse:
    """Get today's usage for a kid."""
    set_request_context(kid_profile_id=kid_profile_id)
    usage = service.get_usage_today(kid_profile_id)
    return UsageTodayResponse(**usage.to_dict())


@router.post("/usage/{kid_profile_id}/reset", response_model=Dict[str, str])
def reset_daily_usage(
    kid_profile_id: str,
    service: TimeControlService = Depends(get_time_control_service),
) -> Dict[str, str]:
    """Zero today's usage for a kid."""
    set_request_context(kid_profile_id=kid_profile_id)
    service.reset_daily_usage(kid_profile_id)
    return {
        "status": "success",
        "message": f"Daily usage reset for kid profile {kid_profile_id}",
    }


@router.get("/usage/{kid_profile_id}/history", response_model=UsageHistoryResponse)
def get_usage_history(
    kid_profile_id: str,
    days: Optional[int] = Query(None, description="Number of past days to include"),
    service: TimeControlService = Depends(get_time_control_service),
) -> UsageHistoryResponse:
    """Get daily usage records, newest first."""
    set_request_context(kid_profile_id=kid_profile_id)
    if days is None:
        days = service.config.time_controls.history_default_days
    records = service.get_usage_history(kid_profile_id, days)
    return UsageHistoryResponse(
        kid_profile_id=kid_profile_id,
        days=days,
        records=[record.to_dict() for record in records],
    )


@router.get("/access/{kid_profile_id}", response_model=Dict[str, Any])
def check_access(
    kid_profile_id: str,
    service: TimeControlService = Depends(get_time_control_service),
) -> Dict[str, Any]:
    """Decide whether the kid may consume content right now."""
    set_request_context(kid_profile_id=kid_profile_id)
    return service.check_access(kid_profile_id).to_dict()


@router.get("/settings/{kid_profile_id}", response_model=Dict[str, Any])
def get_time_limit_settings(
    kid_profile_id: str,
    service: TimeControlService = Depends(get_time_control_service),
) -> Dict[str, Any]:
    """Get the kid's time-limit configuration and today's standing."""
    set_request_context(kid_profile_id=kid_profile_id)
    return service.get_time_limit_settings(kid_profile_id)


@router.get("/fleet/{user_id}", response_model=FleetStatusResponse)
def get_fleet_status(
    user_id: str,
    service: TimeControlService = Depends(get_time_control_service),
) -> FleetStatusResponse:
    """Get the access status of every kid under a parent account."""
    set_request_context(user_id=user_id)
    entries = service.get_fleet_status(user_id)
    return FleetStatusResponse(
        user_id=user_id, kids=[entry.to_dict() for entry in entries]
    )
