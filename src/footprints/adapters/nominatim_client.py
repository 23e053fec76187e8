"""Nominatim reverse geocoding client."""

import logging
from dataclasses import dataclass

import httpx

from footprints.domain.records import Address
from footprints.services.providers import Geocoder

logger = logging.getLogger(__name__)


@dataclass
class HttpxNominatimClient(Geocoder):
    """Best-effort reverse geocoder backed by a Nominatim endpoint."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, user_agent: str) -> "HttpxNominatimClient":
        """Create a geocoder with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            user_agent=user_agent,
            http_client=httpx.AsyncClient(),
        )

    async def reverse(self, latitude: float, longitude: float) -> Address | None:
        """Return the address for a position, or None if unknown."""
        try:
            response = await self.http_client.get(
                f"{self.base_url}/reverse",
                params={
                    "lat": latitude,
                    "lon": longitude,
                    "format": "jsonv2",
                    "addressdetails": 1,
                },
                headers={"User-Agent": self.user_agent},
                timeout=10,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError):
            logger.warning("Reverse geocoding failed for %s,%s", latitude, longitude)
            return None
        if not isinstance(payload, dict) or "error" in payload:
            return None
        return _to_address(payload)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _to_address(payload: dict[str, object]) -> Address | None:
    details = payload.get("address")
    if not isinstance(details, dict):
        return None
    city = (
        details.get("city")
        or details.get("town")
        or details.get("village")
        or details.get("hamlet")
    )
    return Address(
        name=_str_or_none(payload.get("name")),
        street=_str_or_none(details.get("road")),
        street_number=_str_or_none(details.get("house_number")),
        district=_str_or_none(details.get("suburb") or details.get("city_district")),
        city=_str_or_none(city),
        subregion=_str_or_none(details.get("county")),
        region=_str_or_none(details.get("state")),
        postal_code=_str_or_none(details.get("postcode")),
        country=_str_or_none(details.get("country")),
        iso_country_code=_str_or_none(details.get("country_code"), upper=True),
    )


def _str_or_none(value: object, upper: bool = False) -> str | None:
    if value is None or value == "":
        return None
    text = str(value)
    return text.upper() if upper else text
