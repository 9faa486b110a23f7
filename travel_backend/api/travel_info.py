"""
Upstream travel info: the shared cartes.io trip map, its markers, and a
weather lookup.

All calls go through one httpx.Client owned by the ServerContext so tests can
swap in a MockTransport. Any network error, non-2xx status or unexpected
payload is logged and raised as InfrastructureFault.
"""
import logging
from typing import Any, Optional

import httpx

from .errors import InfrastructureFault, ServiceUnavailable

logger = logging.getLogger("travel_notes.travel_info")

DEFAULT_TIMEOUT = 10.0


def make_http_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.Client:
    # A handful of redirects is plenty for known public APIs.
    return httpx.Client(timeout=timeout, follow_redirects=True, max_redirects=3)


# PUBLIC_INTERFACE
class TravelInfoClient:
    def __init__(self, http: httpx.Client, map_url: str, markers_url: str, weather_url: Optional[str] = None):
        self.http = http
        self.map_url = map_url
        self.markers_url = markers_url
        self.weather_url = weather_url

    def _get_json(self, url: str, what: str, params: Optional[dict] = None) -> Any:
        try:
            resp = self.http.get(url, params=params)
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("%s fetch failed: %s", what, e)
            raise InfrastructureFault(f"Could not fetch {what}")

    def fetch_map(self) -> Any:
        return self._get_json(self.map_url, "map")

    def fetch_markers(self) -> Any:
        return self._get_json(self.markers_url, "map markers")

    def weather_description(self, city: str) -> str:
        """Returns the first forecast entry's description for `city`."""
        if not self.weather_url:
            raise ServiceUnavailable("Weather lookup is not configured")
        data = self._get_json(self.weather_url, "weather", params={"q": city})
        try:
            return data["list"][0]["weather"][0]["description"]
        except (KeyError, IndexError, TypeError):
            logger.warning("Unexpected weather payload for %s", city)
            raise InfrastructureFault("Could not fetch weather")

    def close(self):
        self.http.close()
