"""Domain exceptions raised by scheduler services."""


class SchedulerError(Exception):
    """Base class for recoverable scheduler failures."""


class AppointmentValidationError(SchedulerError):
    """Raised when a record is missing a required field."""


class NotFoundError(SchedulerError):
    """Raised when a referenced record does not exist."""


class ImportFormatError(SchedulerError):
    """Raised when an import document cannot be reconciled."""


class EmptySnapshotError(SchedulerError):
    """Raised when a backup would overwrite the remote copy with nothing."""
