"""
Data models for library entries.

Uses dataclasses for clean, minimal definitions. Missing source values are
resolved once, in TrackRecord.from_raw, before a record exists.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"


def _text_or(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value)
    return text if text else default


def _play_count(value: Any) -> int:
    if value is None or value == "":
        return 0
    count = int(value)
    return count if count > 0 else 0


@dataclass(frozen=True)
class RawTrack:
    """A library entry as handed over by a library source.

    Every field except ``id`` may be absent (None).
    """

    id: str
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    play_count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "RawTrack":
        """Create from a dictionary using export field names."""
        play_count = data.get("play_count")
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title"),
            artist=data.get("artist"),
            album=data.get("album"),
            play_count=int(play_count) if play_count not in (None, "") else None,
        )


@dataclass(frozen=True)
class TrackRecord:
    """One song in a library snapshot.

    Two records are the same track when their ids match, whatever the
    other fields say.
    """

    id: str
    title: str = field(default=UNKNOWN_TITLE, compare=False)
    artist: str = field(default=UNKNOWN_ARTIST, compare=False)
    album: str = field(default=UNKNOWN_ALBUM, compare=False)
    play_count: int = field(default=0, compare=False)

    @classmethod
    def from_raw(cls, raw: RawTrack) -> "TrackRecord":
        """Resolve absent fields to their sentinels."""
        return cls(
            id=str(raw.id),
            title=_text_or(raw.title, UNKNOWN_TITLE),
            artist=_text_or(raw.artist, UNKNOWN_ARTIST),
            album=_text_or(raw.album, UNKNOWN_ALBUM),
            play_count=_play_count(raw.play_count),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "TrackRecord":
        """Create from dictionary."""
        return cls.from_raw(RawTrack.from_dict(data))

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "play_count": self.play_count,
        }

    def same_fields(self, other: "TrackRecord") -> bool:
        """Compare every field, not just the id."""
        return self.to_dict() == other.to_dict()
