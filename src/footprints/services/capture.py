"""Capture state machine staging a footprint before commit."""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import TypeVar

from footprints.domain.capture import CaptureSession, CaptureSnapshot, CaptureState
from footprints.domain.errors import (
    CaptureTimeoutError,
    FootprintError,
    InvalidStateError,
    PermissionDeniedError,
    ValidationError,
)
from footprints.domain.records import LocationRecord, RecordDraft
from footprints.services.providers import CameraProvider, LocationProvider
from footprints.services.records import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FETCH_STATES = {CaptureState.STAGING, CaptureState.READY}


@dataclass
class CaptureWorkflow:
    """State machine for staging a location and photo into a record."""

    store: RecordStore
    location_provider: LocationProvider
    camera_provider: CameraProvider
    fallback_theme: str | None = "Untitled footprint"
    timeout_seconds: float | None = 30.0
    _state: CaptureState = field(default=CaptureState.IDLE, init=False)
    _session: CaptureSession | None = field(default=None, init=False)

    @property
    def state(self) -> CaptureState:
        return self._state

    def snapshot(self) -> CaptureSnapshot:
        """Return the current state and candidate."""
        session = self._session
        if session is None:
            return CaptureSnapshot(state=self._state)
        return CaptureSnapshot(
            state=self._state,
            session_id=session.id,
            coords=session.coords,
            address=session.address,
            photo_ref=session.photo_ref,
        )

    def begin_capture(self) -> CaptureSnapshot:
        """Start a fresh capture session, dropping any stale candidate."""
        if self._state is CaptureState.COMMITTING:
            raise InvalidStateError("A footprint is being saved")
        self._session = CaptureSession()
        self._state = CaptureState.STAGING
        logger.info("Capture session %s started", self._session.id)
        return self.snapshot()

    async def request_location(self) -> CaptureSnapshot | None:
        """Fetch the device position into the candidate.

        Returns None when the session that issued the fetch was canceled or
        committed before the result arrived.
        """
        session = self._require_fetchable()
        provider = self.location_provider
        if not await self._bounded(provider.request_permission(), "location"):
            raise PermissionDeniedError("Location permission is required")
        coords = await self._bounded(provider.get_current_coordinates(), "location")
        try:
            address = await self._bounded(
                provider.reverse_geocode(coords.latitude, coords.longitude),
                "geocoder",
            )
        except Exception:
            logger.warning(
                "Reverse geocoding failed for %s", coords.label(), exc_info=True
            )
            address = None
        if not self._is_current(session):
            logger.info("Discarding location for stale session %s", session.id)
            return None
        session.coords = coords
        session.address = address
        self._refresh_readiness()
        return self.snapshot()

    async def request_photo(self) -> CaptureSnapshot | None:
        """Take a photo into the candidate; a canceled camera is not an error."""
        session = self._require_fetchable()
        provider = self.camera_provider
        if not await self._bounded(provider.request_permission(), "camera"):
            raise PermissionDeniedError("Camera permission is required")
        photo_ref = await self._bounded(provider.capture_photo(), "camera")
        if not self._is_current(session):
            logger.info("Discarding photo for stale session %s", session.id)
            return None
        if photo_ref is None:
            return self.snapshot()
        session.photo_ref = photo_ref
        self._refresh_readiness()
        return self.snapshot()

    async def commit(self, theme: str) -> list[LocationRecord]:
        """Save the staged candidate and return the refreshed collection."""
        session = self._session
        if (
            self._state is not CaptureState.READY
            or session is None
            or session.coords is None
        ):
            raise InvalidStateError("Location and photo are both required")
        name = theme.strip() if theme else ""
        if not name:
            name = (self.fallback_theme or "").strip()
        if not name:
            raise ValidationError("Theme must not be empty")
        draft = RecordDraft(
            coords=session.coords,
            address=session.address,
            name=name,
            photo_ref=session.photo_ref,
        )
        self._state = CaptureState.COMMITTING
        try:
            records = await self.store.create(draft)
        except FootprintError:
            self._state = CaptureState.READY
            raise
        self._session = None
        self._state = CaptureState.IDLE
        logger.info("Capture session %s committed", session.id)
        return records

    async def retake_photo(self, record_id: str) -> list[LocationRecord]:
        """Replace the photo of a stored record; a canceled camera changes nothing."""
        records = await self.store.load()
        if not any(record.id == record_id for record in records):
            return records
        provider = self.camera_provider
        if not await self._bounded(provider.request_permission(), "camera"):
            raise PermissionDeniedError("Camera permission is required")
        photo_ref = await self._bounded(provider.capture_photo(), "camera")
        if photo_ref is None:
            return records
        return await self.store.update_photo(record_id, photo_ref)

    def cancel(self) -> CaptureSnapshot:
        """Discard the candidate without touching the store."""
        if self._state is CaptureState.COMMITTING:
            raise InvalidStateError("A footprint is being saved")
        if self._session is not None:
            logger.info("Capture session %s canceled", self._session.id)
        self._session = None
        self._state = CaptureState.IDLE
        return self.snapshot()

    def _require_fetchable(self) -> CaptureSession:
        if self._state not in _FETCH_STATES or self._session is None:
            raise InvalidStateError(f"Cannot fetch while {self._state.value}")
        return self._session

    def _is_current(self, session: CaptureSession) -> bool:
        return self._session is session and self._state in _FETCH_STATES

    def _refresh_readiness(self) -> None:
        if self._session is not None and self._session.is_complete:
            self._state = CaptureState.READY

    async def _bounded(self, awaitable: Awaitable[T], source: str) -> T:
        if self.timeout_seconds is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, self.timeout_seconds)
        except TimeoutError as exc:
            raise CaptureTimeoutError(f"The {source} did not respond in time") from exc
