"""Error taxonomy for footprint capture and storage."""


class FootprintError(Exception):
    """Base class for recoverable footprint errors."""


class PermissionDeniedError(FootprintError):
    """Location or camera permission was refused."""


class DeviceUnavailableError(FootprintError):
    """No location fix or camera hardware available."""


class StorageError(FootprintError):
    """Reading, writing or parsing the persisted collection failed."""


class ValidationError(FootprintError):
    """A value that must be non-empty was empty."""


class InvalidStateError(FootprintError):
    """An intent was issued in a capture state that does not allow it."""


class CaptureTimeoutError(FootprintError, TimeoutError):
    """A device provider did not answer within the configured timeout."""
