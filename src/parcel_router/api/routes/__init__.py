"""Route group exports."""

from . import health, parcels, routes

__all__ = ["routes", "parcels", "health"]
