"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from footprints.adapters.device_providers import (
    FixedLocationProvider,
    InboxCameraProvider,
)
from footprints.adapters.file_storage import JsonFileStorage
from footprints.adapters.nominatim_client import HttpxNominatimClient
from footprints.adapters.supabase_blob_storage import SupabaseBlobStorage
from footprints.config import Settings
from footprints.services.capture import CaptureWorkflow
from footprints.services.providers import CameraProvider, LocationProvider
from footprints.services.records import BlobStorage, RecordStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    record_store: RecordStore
    capture_workflow: CaptureWorkflow
    location_provider: LocationProvider
    camera_provider: CameraProvider
    close_resources: Callable[[], Awaitable[None]]


def build_storage(settings: Settings) -> BlobStorage:
    """Create the configured storage backend."""
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase storage requires a URL and service key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseBlobStorage(client, table=settings.supabase_table)
    return JsonFileStorage(settings.storage_dir)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    record_store = RecordStore(
        build_storage(resolved_settings), key=resolved_settings.storage_key
    )
    geocoder = None
    if resolved_settings.geocoder_base_url:
        geocoder = HttpxNominatimClient.create(
            base_url=resolved_settings.geocoder_base_url,
            user_agent=resolved_settings.geocoder_user_agent,
        )
    location_provider = FixedLocationProvider(
        latitude=resolved_settings.device_latitude,
        longitude=resolved_settings.device_longitude,
        geocoder=geocoder,
    )
    camera_provider = InboxCameraProvider(
        inbox_dir=resolved_settings.photo_inbox_dir,
        library_dir=resolved_settings.photo_library_dir,
    )
    capture_workflow = CaptureWorkflow(
        store=record_store,
        location_provider=location_provider,
        camera_provider=camera_provider,
        fallback_theme=resolved_settings.fallback_theme,
        timeout_seconds=resolved_settings.provider_timeout_seconds,
    )

    async def close_resources() -> None:
        if geocoder is not None:
            await geocoder.close()

    return AppContainer(
        settings=resolved_settings,
        record_store=record_store,
        capture_workflow=capture_workflow,
        location_provider=location_provider,
        camera_provider=camera_provider,
        close_resources=close_resources,
    )
