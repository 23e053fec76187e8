"""Pydantic models for the footprints HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from footprints.domain.capture import CaptureSnapshot
from footprints.domain.records import Address, Coordinates, LocationRecord


class CoordinatesPayload(BaseModel):
    """Coordinates with a display label."""

    latitude: float
    longitude: float
    label: str

    @classmethod
    def from_domain(cls, coords: Coordinates) -> "CoordinatesPayload":
        return cls(
            latitude=coords.latitude,
            longitude=coords.longitude,
            label=coords.label(),
        )


class AddressPayload(BaseModel):
    """Reverse-geocoded address with a display label."""

    street: str | None = None
    city: str | None = None
    region: str | None = None
    postal_code: str | None = None
    country: str | None = None
    label: str

    @classmethod
    def from_domain(cls, address: Address | None) -> "AddressPayload | None":
        if address is None:
            return None
        return cls(
            street=address.street,
            city=address.city,
            region=address.region,
            postal_code=address.postal_code,
            country=address.country,
            label=address.label(),
        )


class RecordPayload(BaseModel):
    """A footprint as shown in the list."""

    id: str
    name: str
    coords: CoordinatesPayload
    address: AddressPayload | None = None
    photo_ref: str | None = None
    created_at: datetime

    @classmethod
    def from_domain(cls, record: LocationRecord) -> "RecordPayload":
        return cls(
            id=record.id,
            name=record.name,
            coords=CoordinatesPayload.from_domain(record.coords),
            address=AddressPayload.from_domain(record.address),
            photo_ref=record.photo_ref,
            created_at=record.created_at,
        )


class RecordList(BaseModel):
    """Footprints, newest first."""

    records: list[RecordPayload]

    @classmethod
    def from_domain(cls, records: list[LocationRecord]) -> "RecordList":
        return cls(records=[RecordPayload.from_domain(record) for record in records])


class CapturePayload(BaseModel):
    """Capture workflow state and candidate."""

    state: str
    session_id: UUID | None = None
    coords: CoordinatesPayload | None = None
    address: AddressPayload | None = None
    photo_ref: str | None = None

    @classmethod
    def from_domain(cls, snapshot: CaptureSnapshot) -> "CapturePayload":
        return cls(
            state=snapshot.state.value,
            session_id=snapshot.session_id,
            coords=(
                CoordinatesPayload.from_domain(snapshot.coords)
                if snapshot.coords
                else None
            ),
            address=AddressPayload.from_domain(snapshot.address),
            photo_ref=snapshot.photo_ref,
        )


class FetchResult(BaseModel):
    """Result of a location or photo fetch."""

    applied: bool
    capture: CapturePayload


class CommitRequest(BaseModel):
    """Theme supplied when saving a footprint."""

    theme: str = ""


class ThemeUpdate(BaseModel):
    """New theme for an existing footprint."""

    theme: str


class PhotoUpdate(BaseModel):
    """New photo reference for an existing footprint."""

    photo_ref: str | None
