"""Domain models for geotagged photo records."""

from dataclasses import dataclass, field, replace
from datetime import datetime

from footprints.domain.errors import ValidationError


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair."""

    latitude: float
    longitude: float
    extra: dict[str, object] = field(default_factory=dict, compare=False, repr=False)

    def label(self) -> str:
        """Render coordinates with six decimal places."""
        return f"{self.latitude:.6f}, {self.longitude:.6f}"


@dataclass(frozen=True)
class Address:
    """Reverse-geocoded address; every part is optional."""

    name: str | None = None
    street: str | None = None
    street_number: str | None = None
    district: str | None = None
    city: str | None = None
    subregion: str | None = None
    region: str | None = None
    postal_code: str | None = None
    country: str | None = None
    iso_country_code: str | None = None
    extra: dict[str, object] = field(default_factory=dict, compare=False, repr=False)

    def label(self) -> str:
        """Render a short street and city label."""
        parts = [part for part in (self.street, self.city) if part]
        return " ".join(parts)


@dataclass(frozen=True)
class RecordDraft:
    """Finalized candidate handed to the store for creation."""

    coords: Coordinates
    name: str
    address: Address | None = None
    photo_ref: str | None = None


@dataclass(frozen=True)
class LocationRecord:
    """Represents a persisted footprint."""

    id: str
    coords: Coordinates
    address: Address | None
    name: str
    photo_ref: str | None
    created_at: datetime
    extra: dict[str, object] = field(default_factory=dict, compare=False, repr=False)

    def with_name(self, name: str) -> "LocationRecord":
        """Return a copy with a new display name."""
        return replace(self, name=require_name(name))

    def with_photo_ref(self, photo_ref: str | None) -> "LocationRecord":
        """Return a copy pointing at a different photo."""
        return replace(self, photo_ref=photo_ref)


def require_name(name: str) -> str:
    """Return the stripped name or raise if it is blank."""
    cleaned = name.strip() if name else ""
    if not cleaned:
        raise ValidationError("Theme must not be empty")
    return cleaned
