"""Library snapshots and the statistics derived from them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

from .errors import EmptyLibraryError
from .models import RawTrack, TrackRecord

logger = logging.getLogger(__name__)

TOP_TRACKS_LIMIT = 10


@dataclass(frozen=True)
class LibrarySnapshot:
    """
    Point-in-time, immutable view of a library.

    Tracks keep the order the library source returned them in. Statistics
    are derived on every access so they always match ``tracks``.
    """

    tracks: Tuple[TrackRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.tracks)

    def __iter__(self) -> Iterator[TrackRecord]:
        return iter(self.tracks)

    @property
    def total_count(self) -> int:
        return len(self.tracks)

    @property
    def played_count(self) -> int:
        return sum(1 for t in self.tracks if t.play_count > 0)

    @property
    def total_plays(self) -> int:
        return sum(t.play_count for t in self.tracks)

    @property
    def top_tracks(self) -> List[TrackRecord]:
        return self.top(TOP_TRACKS_LIMIT)

    def top(self, limit: int = TOP_TRACKS_LIMIT) -> List[TrackRecord]:
        """Most played tracks, ties kept in library order."""
        if limit <= 0:
            return []
        played = [t for t in self.tracks if t.play_count > 0]
        # sorted() is stable, so equal play counts keep their original order
        return sorted(played, key=lambda t: t.play_count, reverse=True)[:limit]

    def get_stats(self) -> dict:
        return {
            "total_tracks": self.total_count,
            "played_tracks": self.played_count,
            "unplayed_tracks": self.total_count - self.played_count,
            "total_plays": self.total_plays,
        }


def build_snapshot(raw_records: Iterable[RawTrack]) -> LibrarySnapshot:
    """
    Build a snapshot from the records returned by one library query.

    Raises:
        EmptyLibraryError: if there are no records at all.
    """
    tracks: List[TrackRecord] = []
    seen: set[str] = set()

    for raw in raw_records:
        record = TrackRecord.from_raw(raw)
        if record.id in seen:
            logger.warning(f"Dropping duplicate track id {record.id!r} ({record.title})")
            continue
        seen.add(record.id)
        tracks.append(record)

    if not tracks:
        raise EmptyLibraryError()

    logger.debug(f"Built snapshot with {len(tracks)} tracks")
    return LibrarySnapshot(tracks=tuple(tracks))
