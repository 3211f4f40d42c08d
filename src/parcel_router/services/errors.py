"""Exceptions raised by the routing subsystem."""

from __future__ import annotations

from typing import Sequence


class RoutingError(Exception):
    """Base class for route computation failures."""


class MalformedAddress(RoutingError, ValueError):
    """An address is missing fields required to place it on the map."""

    def __init__(self, missing_fields: Sequence[str], reference: str | None = None) -> None:
        self.missing_fields = tuple(missing_fields)
        self.reference = reference
        target = f"Address for '{reference}'" if reference else "Address"
        super().__init__(f"{target} is missing required fields: {', '.join(self.missing_fields)}")


class GeocodingUnavailable(RoutingError):
    """The geocoding backend could not place an address."""


class InvalidStatusTransition(RoutingError, ValueError):
    """A parcel status change is not permitted by the status machine."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move parcel from '{current}' to '{target}'.")
