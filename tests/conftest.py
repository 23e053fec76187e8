"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from footprints.config import Settings
from footprints.containers import AppContainer
from footprints.domain.errors import DeviceUnavailableError
from footprints.domain.records import Address, Coordinates
from footprints.services.capture import CaptureWorkflow
from footprints.services.providers import CameraProvider, LocationProvider
from footprints.services.records import BlobStorage, RecordStore

PARK = Coordinates(latitude=37.421, longitude=-122.084)
PARK_ADDRESS = Address(street="Amphitheatre Pkwy", city="Mountain View")


@dataclass
class InMemoryBlobStorage(BlobStorage):
    """In-memory storage that yields to the loop on every call."""

    items: dict[str, str] = field(default_factory=dict)
    fail_reads: bool = False
    fail_writes: bool = False
    writes: int = 0

    async def get_item(self, key: str) -> str | None:
        await asyncio.sleep(0)
        if self.fail_reads:
            raise OSError("disk unavailable")
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        if self.fail_writes:
            raise OSError("disk full")
        self.items[key] = value
        self.writes += 1


@dataclass
class FakeLocationProvider(LocationProvider):
    """Location provider returning a fixed fix, optionally after a gate."""

    coords: Coordinates | None = PARK
    address: Address | None = PARK_ADDRESS
    granted: bool = True
    gate: asyncio.Event | None = None
    geocode_error: Exception | None = None
    calls: int = 0

    async def request_permission(self) -> bool:
        return self.granted

    async def get_current_coordinates(self) -> Coordinates:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.coords is None:
            raise DeviceUnavailableError("no fix")
        return self.coords

    async def reverse_geocode(
        self, latitude: float, longitude: float
    ) -> Address | None:
        if self.geocode_error is not None:
            raise self.geocode_error
        return self.address


@dataclass
class FakeCameraProvider(CameraProvider):
    """Camera provider returning queued photo references."""

    photos: list[str | None] = field(default_factory=lambda: ["file:///photo-1.jpg"])
    granted: bool = True
    gate: asyncio.Event | None = None

    async def request_permission(self) -> bool:
        return self.granted

    async def capture_photo(self) -> str | None:
        if self.gate is not None:
            await self.gate.wait()
        if not self.photos:
            return None
        return self.photos.pop(0)


@dataclass
class SteppingClock:
    """Clock that stays on one instant unless advanced."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        storage_dir=tmp_path / "store",
        photo_inbox_dir=tmp_path / "inbox",
        photo_library_dir=tmp_path / "photos",
        device_latitude=37.421,
        device_longitude=-122.084,
        geocoder_base_url=None,
    )


@pytest.fixture
def storage() -> InMemoryBlobStorage:
    return InMemoryBlobStorage()


@pytest.fixture
def store(storage: InMemoryBlobStorage) -> RecordStore:
    return RecordStore(storage, clock=SteppingClock())


@pytest.fixture
def location_provider() -> FakeLocationProvider:
    return FakeLocationProvider()


@pytest.fixture
def camera_provider() -> FakeCameraProvider:
    return FakeCameraProvider()


@pytest.fixture
def workflow(
    store: RecordStore,
    location_provider: FakeLocationProvider,
    camera_provider: FakeCameraProvider,
) -> CaptureWorkflow:
    return CaptureWorkflow(
        store=store,
        location_provider=location_provider,
        camera_provider=camera_provider,
    )


@pytest.fixture
def container(
    settings: Settings,
    store: RecordStore,
    workflow: CaptureWorkflow,
    location_provider: FakeLocationProvider,
    camera_provider: FakeCameraProvider,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        record_store=store,
        capture_workflow=workflow,
        location_provider=location_provider,
        camera_provider=camera_provider,
        close_resources=close_resources,
    )
