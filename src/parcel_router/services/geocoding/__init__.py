"""Address geocoding backends."""

from .anchor import AnchorTableResolver
from .base import CachedResolver, GeoResolver, Resolution
from .nominatim import NominatimResolver

__all__ = [
    "GeoResolver",
    "Resolution",
    "CachedResolver",
    "AnchorTableResolver",
    "NominatimResolver",
]
