"""Source that re-reads a previous JSON or CSV export."""

import csv
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..errors import NoData, Unauthorized, UnknownSourceError
from ..models import RawTrack
from ..serializers import ExportFormat, from_csv, from_json
from .base import BaseLibrarySource


class ExportFileSource(BaseLibrarySource):
    """Loads tracks from a music_play_counts_* export file."""

    def __init__(
        self,
        path: Union[str, Path],
        progress_callback: Optional[Callable[[str], None]] = None,
        show_progress: bool = False,
    ):
        super().__init__(progress_callback, show_progress)
        self.path = Path(path).expanduser()
        try:
            self.format = ExportFormat.parse(self.path.suffix)
        except ValueError as e:
            raise UnknownSourceError(str(e)) from e

    def _read(self) -> List[RawTrack]:
        self._log_progress(f"Reading export file: {self.path}")
        try:
            # Decode bytes directly so line endings reach the decoder untranslated
            text = self.path.read_bytes().decode("utf-8")
        except FileNotFoundError as e:
            raise NoData(f"Export file not found: {self.path}") from e
        except PermissionError as e:
            raise Unauthorized(f"Not authorized to read export file: {self.path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise UnknownSourceError(f"Could not read export file {self.path}: {e}") from e

        decode = from_json if self.format is ExportFormat.JSON else from_csv
        try:
            records = decode(text)
        except (ValueError, TypeError, AttributeError, csv.Error) as e:
            raise UnknownSourceError(f"Could not parse export file {self.path}: {e}") from e

        self._log_progress(f"Found {len(records)} songs")
        return [
            RawTrack(
                id=r.id,
                title=r.title,
                artist=r.artist,
                album=r.album,
                play_count=r.play_count,
            )
            for r in records
        ]
