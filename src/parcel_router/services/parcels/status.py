"""Canonical parcel status machine."""

from __future__ import annotations

from enum import Enum

from ..errors import InvalidStatusTransition


class ParcelStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({ParcelStatus.DELIVERED, ParcelStatus.CANCELLED})
ACTIVE_STATUSES = frozenset(status for status in ParcelStatus if status not in TERMINAL_STATUSES)

TRANSITIONS: dict[ParcelStatus, frozenset[ParcelStatus]] = {
    ParcelStatus.PENDING: frozenset({ParcelStatus.ASSIGNED, ParcelStatus.CANCELLED}),
    ParcelStatus.ASSIGNED: frozenset({ParcelStatus.PICKED_UP, ParcelStatus.PENDING, ParcelStatus.CANCELLED}),
    ParcelStatus.PICKED_UP: frozenset({ParcelStatus.IN_TRANSIT, ParcelStatus.CANCELLED}),
    ParcelStatus.IN_TRANSIT: frozenset({ParcelStatus.OUT_FOR_DELIVERY, ParcelStatus.CANCELLED}),
    # A failed attempt sends the parcel back into transit.
    ParcelStatus.OUT_FOR_DELIVERY: frozenset(
        {ParcelStatus.DELIVERED, ParcelStatus.IN_TRANSIT, ParcelStatus.CANCELLED}
    ),
    ParcelStatus.DELIVERED: frozenset(),
    ParcelStatus.CANCELLED: frozenset(),
}


def parse_status(value: str | ParcelStatus) -> ParcelStatus:
    if isinstance(value, ParcelStatus):
        return value
    normalized = (value or "").strip().lower()
    try:
        return ParcelStatus(normalized)
    except ValueError as exc:
        allowed = ", ".join(status.value for status in ParcelStatus)
        raise ValueError(f"Unknown parcel status '{value}'. Expected one of: {allowed}") from exc


def is_active(status: str | ParcelStatus) -> bool:
    """True when a parcel in ``status`` still needs to be delivered."""
    return parse_status(status) in ACTIVE_STATUSES


def can_transition(current: str | ParcelStatus, target: str | ParcelStatus) -> bool:
    return parse_status(target) in TRANSITIONS[parse_status(current)]


def validate_transition(current: str | ParcelStatus, target: str | ParcelStatus) -> ParcelStatus:
    current_status = parse_status(current)
    target_status = parse_status(target)
    if target_status not in TRANSITIONS[current_status]:
        raise InvalidStatusTransition(current_status.value, target_status.value)
    return target_status
