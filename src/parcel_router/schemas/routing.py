"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..config import settings


class AddressPayload(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = Field(default_factory=lambda: settings.default_country)


class CustomerPayload(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class ParcelPayload(BaseModel):
    """A parcel assigned to the requesting agent."""

    tracking_number: str = Field(..., min_length=1)
    status: str
    destination: AddressPayload
    origin: Optional[AddressPayload] = Field(
        default=None,
        description="Where the parcel was collected; the first active parcel's origin stands in for the agent depot.",
    )
    customer: Optional[CustomerPayload] = None
    weight: Optional[float] = Field(default=None, gt=0)
    dimensions: Optional[str] = None
    payment_type: Optional[Literal["prepaid", "cod"]] = None
    cod_amount: Optional[float] = Field(default=None, ge=0)
    special_instructions: Optional[str] = Field(default=None, max_length=500)


class OptimizedRouteRequest(BaseModel):
    parcels: List[ParcelPayload] = Field(default_factory=list)
    origin: Optional[AddressPayload] = Field(
        default=None,
        description="Agent start location. Defaults to the origin recorded on the first active parcel.",
    )
    include_road_geometry: bool = Field(
        default=False,
        description="Also return the street-following path between waypoints from the route provider.",
    )


class ParcelDataModel(BaseModel):
    weight: Optional[float] = None
    dimensions: Optional[str] = None
    payment_type: Optional[str] = None
    cod_amount: Optional[float] = None
    special_instructions: Optional[str] = None


class WaypointModel(BaseModel):
    sequence: int
    type: Literal["origin", "delivery"]
    address: str
    lat: float
    lng: float
    tracking_number: str
    status: str
    distance_from_previous_km: float
    duration_from_previous_min: int
    distance_from_previous: str
    duration_from_previous: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    parcel_data: Optional[ParcelDataModel] = None


class OptimizedRouteResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    waypoints: List[WaypointModel]
    distance: str
    duration: str
    total_distance_km: float
    total_duration_min: int
    optimized: bool
    summary: Optional[str] = None
    polyline: List[List[float]]
    road_geometry: Optional[List[List[float]]] = None
    parcels: List[ParcelPayload] = Field(default_factory=list)
    metadata: dict = Field(default_factory=dict)


class StatusTransitionRequest(BaseModel):
    current: str
    target: str


class StatusTransitionResponse(BaseModel):
    current: str
    target: str
    allowed: bool
    active: bool
