"""
musicmemory - Export play counts from your music library.

Features:
- Read an Apple Music / iTunes library XML or a previous export
- Library statistics (total, played, top played songs)
- Export as JSON or CSV with deterministic output
- Cleanup of old export files
"""

import logging

from .errors import EmptyLibraryError, SerializationError
from .exporter import LibraryExporter
from .models import RawTrack, TrackRecord
from .serializers import ExportFormat, to_csv, to_json
from .snapshot import LibrarySnapshot, build_snapshot

__all__ = [
    "EmptyLibraryError",
    "ExportFormat",
    "LibraryExporter",
    "LibrarySnapshot",
    "RawTrack",
    "SerializationError",
    "TrackRecord",
    "build_snapshot",
    "to_csv",
    "to_json",
]

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
