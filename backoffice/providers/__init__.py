from backoffice.providers.base import DistanceProvider
from backoffice.providers.static import StaticDistanceProvider, FixedDistanceProvider
from backoffice.providers.geocoding import GeocodingDistanceProvider
from backoffice.utils.settings import DISTANCE_PROVIDER


def get_distance_provider(kind: str | None = None) -> DistanceProvider:
    kind = (kind or DISTANCE_PROVIDER).lower()
    if kind == "geocoding":
        return GeocodingDistanceProvider()
    if kind == "static":
        return StaticDistanceProvider()
    raise ValueError(f"Unknown distance provider: {kind}")


__all__ = [
    "DistanceProvider",
    "StaticDistanceProvider",
    "FixedDistanceProvider",
    "GeocodingDistanceProvider",
    "get_distance_provider",
]
