"""Pydantic models for the persisted record collection.

Keys this module does not model (device fields such as ``altitude`` or
``formattedAddress`` written by the mobile app) are kept in ``extra`` on the
domain objects and written back unchanged.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from footprints.domain.records import Address, Coordinates, LocationRecord


class StoredCoordinates(BaseModel):
    """Persisted coordinates."""

    model_config = ConfigDict(extra="allow")

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class StoredAddress(BaseModel):
    """Persisted reverse-geocoded address."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

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


class StoredLocation(BaseModel):
    """Persisted footprint entry.

    ``name`` may be blank here: the mobile app stored themes unchecked, and
    blank names are only rejected when a record is created or renamed.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    coords: StoredCoordinates
    address: StoredAddress | None = None
    name: str = ""
    photo: str | None = None
    timestamp: datetime

    @classmethod
    def from_record(cls, record: LocationRecord) -> "StoredLocation":
        address = None
        if record.address is not None:
            address = StoredAddress(
                **_address_fields(record.address), **record.address.extra
            )
        return cls(
            id=record.id,
            coords=StoredCoordinates(
                latitude=record.coords.latitude,
                longitude=record.coords.longitude,
                **record.coords.extra,
            ),
            address=address,
            name=record.name,
            photo=record.photo_ref,
            timestamp=record.created_at,
            **record.extra,
        )

    def to_record(self) -> LocationRecord:
        address = None
        if self.address is not None:
            address = Address(
                **{
                    name: getattr(self.address, name)
                    for name in StoredAddress.model_fields
                },
                extra=dict(self.address.model_extra or {}),
            )
        return LocationRecord(
            id=self.id,
            coords=Coordinates(
                latitude=self.coords.latitude,
                longitude=self.coords.longitude,
                extra=dict(self.coords.model_extra or {}),
            ),
            address=address,
            name=self.name,
            photo_ref=self.photo,
            created_at=self.timestamp,
            extra=dict(self.model_extra or {}),
        )


STORED_COLLECTION = TypeAdapter(list[StoredLocation])


def encode_records(records: list[LocationRecord]) -> str:
    """Serialize the whole collection into a JSON array."""
    payload = [StoredLocation.from_record(record) for record in records]
    return STORED_COLLECTION.dump_json(payload, by_alias=True).decode("utf-8")


def decode_records(raw: str) -> list[LocationRecord]:
    """Parse a JSON array into records; raises pydantic.ValidationError."""
    return [item.to_record() for item in STORED_COLLECTION.validate_json(raw)]


def _address_fields(address: Address) -> dict[str, str | None]:
    return {
        "name": address.name,
        "street": address.street,
        "street_number": address.street_number,
        "district": address.district,
        "city": address.city,
        "subregion": address.subregion,
        "region": address.region,
        "postal_code": address.postal_code,
        "country": address.country,
        "iso_country_code": address.iso_country_code,
    }
