"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from footprints.api.models import (
    CapturePayload,
    CommitRequest,
    FetchResult,
    PhotoUpdate,
    RecordList,
    ThemeUpdate,
)
from footprints.app_logging import configure_logging
from footprints.containers import AppContainer
from footprints.domain.errors import (
    CaptureTimeoutError,
    DeviceUnavailableError,
    FootprintError,
    InvalidStateError,
    PermissionDeniedError,
    StorageError,
    ValidationError,
)

_ERROR_STATUS: list[tuple[type[FootprintError], int]] = [
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (DeviceUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (CaptureTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ValidationError, 422),
    (InvalidStateError, status.HTTP_409_CONFLICT),
]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.record_store.load()
        except StorageError:
            logger.exception("Failed to load footprints on startup")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(FootprintError)
    async def footprint_error_handler(
        request: Request, exc: FootprintError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        logger.warning("%s: %s", type(exc).__name__, exc)
        return JSONResponse(
            status_code=status_code,
            content={"error": type(exc).__name__, "detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/records")
    async def list_records(request: Request) -> RecordList:
        """Return the stored footprints, newest first."""
        state_container: AppContainer = request.app.state.container
        records = await state_container.record_store.load()
        return RecordList.from_domain(records)

    @app.delete("/records/{record_id}")
    async def delete_record(record_id: str, request: Request) -> RecordList:
        """Delete a footprint; unknown ids are ignored."""
        state_container: AppContainer = request.app.state.container
        records = await state_container.record_store.delete(record_id)
        return RecordList.from_domain(records)

    @app.patch("/records/{record_id}/theme")
    async def update_theme(
        record_id: str, body: ThemeUpdate, request: Request
    ) -> RecordList:
        """Rename a footprint."""
        state_container: AppContainer = request.app.state.container
        records = await state_container.record_store.update_theme(
            record_id, body.theme
        )
        return RecordList.from_domain(records)

    @app.patch("/records/{record_id}/photo")
    async def update_photo(
        record_id: str, body: PhotoUpdate, request: Request
    ) -> RecordList:
        """Point a footprint at a different photo."""
        state_container: AppContainer = request.app.state.container
        records = await state_container.record_store.update_photo(
            record_id, body.photo_ref
        )
        return RecordList.from_domain(records)

    @app.post("/records/{record_id}/photo/retake")
    async def retake_photo(record_id: str, request: Request) -> RecordList:
        """Take a new photo for a footprint; a canceled camera changes nothing."""
        state_container: AppContainer = request.app.state.container
        records = await state_container.capture_workflow.retake_photo(record_id)
        return RecordList.from_domain(records)

    @app.get("/capture")
    async def capture_state(request: Request) -> CapturePayload:
        """Return the capture state and candidate."""
        state_container: AppContainer = request.app.state.container
        return CapturePayload.from_domain(state_container.capture_workflow.snapshot())

    @app.post("/capture")
    async def begin_capture(request: Request) -> CapturePayload:
        """Start a new capture session."""
        state_container: AppContainer = request.app.state.container
        snapshot = state_container.capture_workflow.begin_capture()
        return CapturePayload.from_domain(snapshot)

    @app.post("/capture/location")
    async def request_location(request: Request) -> FetchResult:
        """Fetch the device location into the candidate."""
        workflow = request.app.state.container.capture_workflow
        snapshot = await workflow.request_location()
        return FetchResult(
            applied=snapshot is not None,
            capture=CapturePayload.from_domain(snapshot or workflow.snapshot()),
        )

    @app.post("/capture/photo")
    async def request_photo(request: Request) -> FetchResult:
        """Take a photo into the candidate."""
        workflow = request.app.state.container.capture_workflow
        snapshot = await workflow.request_photo()
        return FetchResult(
            applied=snapshot is not None,
            capture=CapturePayload.from_domain(snapshot or workflow.snapshot()),
        )

    @app.post("/capture/commit")
    async def commit_capture(body: CommitRequest, request: Request) -> RecordList:
        """Save the staged footprint."""
        state_container: AppContainer = request.app.state.container
        records = await state_container.capture_workflow.commit(body.theme)
        return RecordList.from_domain(records)

    @app.delete("/capture")
    async def cancel_capture(request: Request) -> CapturePayload:
        """Discard the staged footprint."""
        state_container: AppContainer = request.app.state.container
        snapshot = state_container.capture_workflow.cancel()
        return CapturePayload.from_domain(snapshot)

    return app


def _status_for(exc: FootprintError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST
