"""JSON and CSV encoding of library snapshots.

Both formats carry only the track records, never the derived statistics.
Output is deterministic: JSON keys are sorted and CSV columns are fixed.
"""

from __future__ import annotations

import csv
import io
import json
from enum import Enum
from typing import Any, Callable, Dict, List, Union

from .errors import SerializationError
from .models import TrackRecord
from .snapshot import LibrarySnapshot

EXPORT_PREFIX = "music_play_counts_"

CSV_FIELDS: Dict[str, Callable[[TrackRecord], Any]] = {
    "id": lambda t: t.id,
    "title": lambda t: t.title,
    "artist": lambda t: t.artist,
    "album": lambda t: t.album,
    "play_count": lambda t: t.play_count,
}

_CSV_SPECIAL = (",", '"', "\n")
_FORMULA_TRIGGERS = ("=", "+", "-", "@")


class ExportFormat(Enum):
    """Supported export formats as (extension, MIME type)."""

    JSON = ("json", "application/json")
    CSV = ("csv", "text/csv")

    @property
    def extension(self) -> str:
        return self.value[0]

    @property
    def mime_type(self) -> str:
        return self.value[1]

    @classmethod
    def parse(cls, name: Union[str, "ExportFormat"]) -> "ExportFormat":
        if isinstance(name, cls):
            return name
        for fmt in cls:
            if fmt.extension == str(name).lower().lstrip("."):
                return fmt
        raise ValueError(f"Unsupported export format: {name}")


def export_basename(timestamp: Union[int, str]) -> str:
    return f"{EXPORT_PREFIX}{timestamp}"


def suggested_filename(timestamp: Union[int, str], fmt: ExportFormat) -> str:
    """Full export file name, e.g. music_play_counts_1700000000.csv."""
    return f"{export_basename(timestamp)}.{fmt.extension}"


def _ensure_encodable(text: str, fmt: ExportFormat) -> str:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise SerializationError(
            f"Failed to encode {fmt.extension.upper()} export: {e}", fmt=fmt.extension
        ) from e
    return text


def to_json(snapshot: LibrarySnapshot) -> str:
    """Encode all tracks as a pretty-printed JSON array with sorted keys."""
    try:
        text = json.dumps(
            [t.to_dict() for t in snapshot.tracks],
            indent=2,
            sort_keys=True,
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Failed to encode JSON export: {e}", fmt="json") from e
    return _ensure_encodable(text, ExportFormat.JSON)


def escape_csv_field(value: Any) -> str:
    """Quote a field only if it contains a comma, a double quote or a newline."""
    text = str(value)
    if any(c in text for c in _CSV_SPECIAL):
        return '"' + text.replace('"', '""') + '"'
    return text


def _sanitize_csv_cell(value: Any) -> Any:
    """Mitigate CSV/Excel formula injection."""
    if not isinstance(value, str):
        return value
    stripped = value.lstrip()
    if stripped and stripped[0] in _FORMULA_TRIGGERS:
        return "'" + value
    return value


def to_csv(snapshot: LibrarySnapshot, sanitize_formulas: bool = False) -> str:
    """
    Encode all tracks as CSV.

    The header is always ``id,title,artist,album,play_count`` and every line,
    the header included, ends with a single ``\\n``.

    Args:
        snapshot: Snapshot to encode
        sanitize_formulas: Prefix text cells that a spreadsheet would treat
            as a formula with a single quote
    """
    lines = [",".join(CSV_FIELDS.keys())]
    for track in snapshot.tracks:
        row: List[str] = []
        for extractor in CSV_FIELDS.values():
            value = extractor(track)
            if sanitize_formulas:
                value = _sanitize_csv_cell(value)
            row.append(escape_csv_field(value))
        lines.append(",".join(row))
    return _ensure_encodable("".join(line + "\n" for line in lines), ExportFormat.CSV)


def serialize(
    snapshot: LibrarySnapshot, fmt: ExportFormat, sanitize_formulas: bool = False
) -> str:
    if fmt is ExportFormat.JSON:
        return to_json(snapshot)
    return to_csv(snapshot, sanitize_formulas=sanitize_formulas)


def from_json(text: str) -> List[TrackRecord]:
    """Decode a JSON export back into track records."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("JSON export must be an array of tracks")
    return [TrackRecord.from_dict(item) for item in data]


def from_csv(text: str) -> List[TrackRecord]:
    """
    Decode a CSV export back into track records.

    Every row must have exactly as many fields as the header. A bare ``\\r``
    inside an unquoted field ends the row for the csv module, so such files
    are rejected rather than split into made-up tracks.
    """
    reader = csv.reader(io.StringIO(text, newline=""))
    header = next(reader, [])
    missing = set(CSV_FIELDS) - set(header)
    if missing:
        raise ValueError(f"CSV export is missing columns: {', '.join(sorted(missing))}")

    records: List[TrackRecord] = []
    for row in reader:
        if not row:
            continue
        if len(row) != len(header):
            raise ValueError(
                f"CSV export line {reader.line_num} has {len(row)} fields, "
                f"expected {len(header)}"
            )
        records.append(TrackRecord.from_dict(dict(zip(header, row))))
    return records
