"""Distance provider interface."""

from abc import ABC, abstractmethod


class DistanceProvider(ABC):
    """Abstract distance provider."""

    @abstractmethod
    def distance_km(self, origin: str, destination: str) -> float:
        """Distance in kilometres between two free-form addresses."""
        raise NotImplementedError
