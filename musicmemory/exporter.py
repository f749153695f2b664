"""LibraryExporter: query a library source and export it through a sink."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Union

from .errors import EmptyLibraryError
from .serializers import ExportFormat, export_basename, serialize
from .snapshot import LibrarySnapshot, build_snapshot

if TYPE_CHECKING:
    from .logging_utils import ExportLogger
    from .sinks import ExportSink
    from .sources import LibrarySource

logger = logging.getLogger(__name__)


class LibraryExporter:
    """
    Runs one load or export action at a time.

    Holds the most recent snapshot. A new load replaces it wholesale;
    exports always serialize whatever snapshot is current.
    """

    def __init__(
        self,
        source: "LibrarySource",
        sink: "ExportSink",
        logger: Optional["ExportLogger"] = None,
        sanitize_formulas: bool = False,
    ):
        self.source = source
        self.sink = sink
        self.logger = logger
        self.sanitize_formulas = sanitize_formulas
        self.snapshot: Optional[LibrarySnapshot] = None

    def _progress(self, message: str):
        logger.debug(message)
        if self.logger:
            self.logger.progress(message)

    async def load(self) -> LibrarySnapshot:
        """Query the source and build a fresh snapshot."""
        self._progress("Loading music library...")
        raw_tracks = await self.source.query_library()
        snapshot = build_snapshot(raw_tracks)
        self.snapshot = snapshot
        logger.info(
            f"Loaded {snapshot.total_count} tracks ({snapshot.played_count} played)"
        )
        return snapshot

    async def export(
        self,
        fmt: Union[ExportFormat, str] = ExportFormat.JSON,
        timestamp: Optional[Union[int, str]] = None,
    ) -> Path:
        """Serialize the current snapshot and hand it to the sink once."""
        if self.snapshot is None:
            raise EmptyLibraryError("No data to export")

        fmt = ExportFormat.parse(fmt)
        if timestamp is None:
            timestamp = int(time.time())

        text = serialize(self.snapshot, fmt, sanitize_formulas=self.sanitize_formulas)
        self._progress(f"Exporting {self.snapshot.total_count} tracks as {fmt.extension.upper()}...")
        return await self.sink.persist_and_offer(text, export_basename(timestamp), fmt.extension)

    async def export_all(
        self,
        formats: Iterable[Union[ExportFormat, str]],
        timestamp: Optional[Union[int, str]] = None,
    ) -> Dict[str, Path]:
        """Export once per format, all sharing one timestamp."""
        if timestamp is None:
            timestamp = int(time.time())
        results: Dict[str, Path] = {}
        for fmt in formats:
            fmt = ExportFormat.parse(fmt)
            results[fmt.extension] = await self.export(fmt, timestamp)
        return results

    def get_stats(self) -> dict:
        if self.snapshot is None:
            return {"total_tracks": 0, "played_tracks": 0, "unplayed_tracks": 0, "total_plays": 0}
        return self.snapshot.get_stats()
