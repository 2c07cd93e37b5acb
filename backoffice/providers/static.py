"""Deterministic distance provider, no network."""

from backoffice.providers.base import DistanceProvider


class StaticDistanceProvider(DistanceProvider):
    """
    Dystans wyliczany z różnicy długości adresów, zawsze 50..999 km.
    Tylko do developmentu i testów.
    """

    def distance_km(self, origin: str, destination: str) -> float:
        spread = abs(len(origin) - len(destination)) * 100
        return float(50 + spread % 950)


class FixedDistanceProvider(DistanceProvider):
    """Zawsze ten sam dystans."""

    def __init__(self, km: float):
        self.km = km

    def distance_km(self, origin: str, destination: str) -> float:
        return self.km
