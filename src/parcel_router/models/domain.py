"""Domain models for addresses, delivery stops and computed routes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from ..config import settings
from ..services.errors import MalformedAddress

REQUIRED_ADDRESS_FIELDS = ("street", "city", "state", "zip_code")


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lng: float

    def as_pair(self) -> tuple[float, float]:
        return (self.lat, self.lng)


@dataclass(frozen=True, slots=True)
class Address:
    """Postal address of a parcel origin or destination."""

    street: str
    city: str
    state: str
    zip_code: str
    country: str = field(default_factory=lambda: settings.default_country)

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_ADDRESS_FIELDS if not (getattr(self, name) or "").strip()]

    def validate(self, reference: str | None = None) -> None:
        """Raise :class:`MalformedAddress` if a required field is blank."""

        missing = self.missing_fields()
        if missing:
            raise MalformedAddress(missing, reference=reference)

    def label(self) -> str:
        return f"{self.street}, {self.city}, {self.state}"

    def search_key(self) -> str:
        """Lowercased, whitespace-free concatenation of street, city, state and zip code."""

        raw = f"{self.street}{self.city}{self.state}{self.zip_code}"
        return "".join(raw.lower().split())


@dataclass(frozen=True, slots=True)
class StopMetadata:
    """Parcel and customer details carried through to the itinerary."""

    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    special_instructions: Optional[str] = None
    weight: Optional[float] = None
    dimensions: Optional[str] = None
    payment_type: Optional[str] = None
    cod_amount: Optional[float] = None


@dataclass(slots=True)
class DeliveryStop:
    """One pending delivery, built per request from an active parcel."""

    identifier: str
    destination: Address
    status: str
    metadata: StopMetadata = field(default_factory=StopMetadata)
    resolved_point: Optional[GeoPoint] = None
    approximate: bool = False


@dataclass(slots=True)
class LegMatrix:
    """Pairwise leg costs; index 0 is the origin, index i + 1 is stop i."""

    distances_km: list[list[float]]
    durations_min: list[list[int]]
    source: str


@dataclass(slots=True)
class OptimizedSequence:
    ordered_stops: list[DeliveryStop]
    leg_distances_km: list[float]
    leg_durations_min: list[int]
    points: list[GeoPoint]
    optimized: bool


WaypointType = Literal["origin", "delivery"]


@dataclass(slots=True)
class Waypoint:
    point: GeoPoint
    address: str
    type: WaypointType
    distance_from_previous_km: float
    duration_from_previous_min: int
    identifier: str
    status: str
    stop_metadata: Optional[StopMetadata] = None


@dataclass(slots=True)
class RouteResult:
    waypoints: list[Waypoint]
    total_distance_km: float
    total_duration_min: int
    polyline: list[GeoPoint]
    optimized: bool
    summary: str
    metadata: dict = field(default_factory=dict)
