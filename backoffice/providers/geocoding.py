# backoffice/providers/geocoding.py
import math

import requests

from backoffice.providers.base import DistanceProvider
from backoffice.utils.retry import http_retry
from backoffice.utils.settings import GEOCODER_URL, GEOCODER_TIMEOUT, GEOCODER_USER_AGENT
from backoffice.utils.logging import get_logger

logger = get_logger(__name__)

EARTH_RADIUS_KM = 6371.0


class GeocodingError(RuntimeError):
    pass


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


class GeocodingDistanceProvider(DistanceProvider):
    """
    Geokodowanie przez API zgodne z Nominatim (GET /search?q=...&format=json)
    i odległość po kole wielkim.
    """

    def __init__(self, base_url: str | None = None, timeout: int | None = None):
        self.base_url = (base_url or GEOCODER_URL).rstrip("/")
        self.timeout = timeout or GEOCODER_TIMEOUT
        self.session = requests.Session()
        self.session.headers["User-Agent"] = GEOCODER_USER_AGENT

    @http_retry()
    def geocode(self, address: str) -> tuple[float, float]:
        url = f"{self.base_url}/search"
        logger.info(f"Geocoder GET {url} q={address!r}")

        resp = self.session.get(
            url,
            params={"q": address, "format": "json", "limit": 1},
            timeout=self.timeout,
        )
        resp.raise_for_status()

        results = resp.json()
        if not results:
            raise GeocodingError(f"Address not found: {address}")
        return float(results[0]["lat"]), float(results[0]["lon"])

    def distance_km(self, origin: str, destination: str) -> float:
        lat1, lon1 = self.geocode(origin)
        lat2, lon2 = self.geocode(destination)
        return round(haversine_km(lat1, lon1, lat2, lon2), 1)
