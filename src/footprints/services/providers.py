"""Interfaces for device location and camera providers."""

from typing import Protocol

from footprints.domain.records import Address, Coordinates


class LocationProvider(Protocol):
    """Interface for device positioning and reverse geocoding."""

    async def request_permission(self) -> bool:
        """Return True when location access is granted."""

    async def get_current_coordinates(self) -> Coordinates:
        """Return the current position or raise DeviceUnavailableError."""

    async def reverse_geocode(
        self, latitude: float, longitude: float
    ) -> Address | None:
        """Return the best-effort address for a position."""


class CameraProvider(Protocol):
    """Interface for taking a photo."""

    async def request_permission(self) -> bool:
        """Return True when camera access is granted."""

    async def capture_photo(self) -> str | None:
        """Return a photo reference, or None if the user canceled."""


class Geocoder(Protocol):
    """Interface for reverse geocoding services."""

    async def reverse(self, latitude: float, longitude: float) -> Address | None:
        """Return the address for a position, if one is known."""
