"""Travel domain - Trips, passenger notifications and the trip calendar"""

from .router import router

__all__ = ["router"]
