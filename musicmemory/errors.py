"""
Error types for musicmemory.

Every failure is an expected, reportable condition. Core functions raise
these; only the CLI turns them into user-facing messages.
"""

from typing import Optional


class MusicMemoryError(Exception):
    """Base class for all musicmemory errors."""


class EmptyLibraryError(MusicMemoryError):
    """Raised when a library query yields no songs."""

    def __init__(self, message: str = "No songs found in music library"):
        super().__init__(message)


class SerializationError(MusicMemoryError):
    """Raised when a snapshot cannot be encoded as JSON or CSV."""

    def __init__(self, message: str, fmt: Optional[str] = None):
        super().__init__(message)
        self.fmt = fmt


class ConfigurationError(MusicMemoryError):
    """Raised when configuration loading or parsing fails."""

    def __init__(self, message: str, config_path: Optional[str] = None):
        super().__init__(message)
        self.config_path = config_path


# Library source failures


class LibrarySourceError(MusicMemoryError):
    """Base class for failures reported by a library source."""


class Unauthorized(LibrarySourceError):
    """The library exists but may not be read."""


class NoData(LibrarySourceError):
    """There is no library to read."""


class UnknownSourceError(LibrarySourceError):
    """The library could not be read for any other reason."""


# Export sink failures


class ExportSinkError(MusicMemoryError):
    """Base class for failures reported by an export sink."""


class StorageUnavailable(ExportSinkError):
    """The export location cannot be used."""


class WriteFailed(ExportSinkError):
    """The export file could not be written."""
