"""Domain models for the capture workflow."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID, uuid4

from footprints.domain.records import Address, Coordinates


class CaptureState(str, Enum):
    """Capture workflow states."""

    IDLE = "IDLE"
    STAGING = "STAGING"
    READY = "READY"
    COMMITTING = "COMMITTING"


@dataclass
class CaptureSession:
    """Ephemeral candidate being assembled before commit."""

    id: UUID = field(default_factory=uuid4)
    coords: Coordinates | None = None
    address: Address | None = None
    photo_ref: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.coords is not None and self.photo_ref is not None


@dataclass(frozen=True)
class CaptureSnapshot:
    """Read-only view of the workflow for the presentation layer."""

    state: CaptureState
    session_id: UUID | None = None
    coords: Coordinates | None = None
    address: Address | None = None
    photo_ref: str | None = None
