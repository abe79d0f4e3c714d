from typing import Any, Protocol
from urllib.parse import urlencode

from ..core.delivery_visibility import RouteEndpoints


class RouteRenderer(Protocol):
    def render(self, endpoints: RouteEndpoints) -> Any:
        ...


class DirectionsLinkRenderer:
    """Hands the route to Google Maps as a directions link"""

    BASE_URL = "https://www.google.com/maps/dir/"

    def __init__(self, travel_mode: str = "driving"):
        self.travel_mode = travel_mode

    def render(self, endpoints: RouteEndpoints) -> dict:
        source = endpoints.source_coordinates
        destination = endpoints.destination_coordinates
        params = {
            "api": 1,
            "origin": f"{source.latitude},{source.longitude}",
            "destination": f"{destination.latitude},{destination.longitude}",
            "travelmode": self.travel_mode,
        }
        return {
            "provider": "google_maps",
            "url": f"{self.BASE_URL}?{urlencode(params)}",
        }
