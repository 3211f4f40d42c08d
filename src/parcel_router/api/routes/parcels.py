"""Parcel status endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import StatusTransitionRequest, StatusTransitionResponse
from ...services.parcels.status import ACTIVE_STATUSES, TRANSITIONS, can_transition, is_active, parse_status

router = APIRouter(prefix="/parcels", tags=["parcels"])


@router.get("/statuses", status_code=status.HTTP_200_OK)
def list_statuses() -> dict:
    return {
        "statuses": [current.value for current in TRANSITIONS],
        "active": sorted(active.value for active in ACTIVE_STATUSES),
        "transitions": {
            current.value: sorted(target.value for target in targets) for current, targets in TRANSITIONS.items()
        },
    }


@router.post("/status/transition", response_model=StatusTransitionResponse, status_code=status.HTTP_200_OK)
def check_transition(payload: StatusTransitionRequest) -> StatusTransitionResponse:
    try:
        current = parse_status(payload.current)
        target = parse_status(payload.target)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return StatusTransitionResponse(
        current=current.value,
        target=target.value,
        allowed=can_transition(current, target),
        active=is_active(target),
    )
