"""Source for Apple Music / iTunes "Library.xml" exports."""

import logging
import plistlib
from pathlib import Path
from typing import Callable, List, Optional, Union
from xml.parsers.expat import ExpatError

from tqdm import tqdm

from ..errors import NoData, Unauthorized, UnknownSourceError
from ..models import RawTrack
from .base import BaseLibrarySource

logger = logging.getLogger(__name__)

# Entries flagged with any of these keys are not songs
NON_SONG_FLAGS = ("Podcast", "Movie", "TV Show", "Music Video", "iTunesU", "Audiobook")


def is_song(entry: dict) -> bool:
    if any(entry.get(flag) for flag in NON_SONG_FLAGS):
        return False
    kind = (entry.get("Kind") or "").lower()
    return "audiobook" not in kind and "video" not in kind


def raw_track_from_entry(key: str, entry: dict) -> RawTrack:
    """Map one plist track dict to a RawTrack.

    The persistent id is stable across library exports, the numeric track
    id is only a fallback.
    """
    track_id = entry.get("Persistent ID") or entry.get("Track ID") or key
    return RawTrack(
        id=str(track_id),
        title=entry.get("Name"),
        artist=entry.get("Artist"),
        album=entry.get("Album"),
        play_count=entry.get("Play Count"),
    )


class ITunesLibrarySource(BaseLibrarySource):
    """
    Reads songs from an Apple Music / iTunes library XML file.

    Music.app writes this file via File > Library > Export Library, older
    iTunes versions keep it next to the library as "iTunes Library.xml".
    """

    def __init__(
        self,
        path: Union[str, Path],
        progress_callback: Optional[Callable[[str], None]] = None,
        show_progress: bool = False,
    ):
        super().__init__(progress_callback, show_progress)
        self.path = Path(path).expanduser()

    def _load_plist(self) -> dict:
        try:
            with open(self.path, "rb") as f:
                data = plistlib.load(f)
        except FileNotFoundError as e:
            raise NoData(f"Music library not found: {self.path}") from e
        except PermissionError as e:
            raise Unauthorized(f"Not authorized to read music library: {self.path}") from e
        except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
            raise UnknownSourceError(f"Could not parse music library {self.path}: {e}") from e
        except OSError as e:
            raise UnknownSourceError(f"Could not read music library {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise UnknownSourceError(f"Unexpected music library format in {self.path}")
        return data

    def _read(self) -> List[RawTrack]:
        self._log_progress(f"Reading music library: {self.path}")
        data = self._load_plist()

        entries = data.get("Tracks")
        if entries is None:
            raise NoData(f"No tracks section in music library: {self.path}")
        if not isinstance(entries, dict):
            raise UnknownSourceError(f"Unexpected tracks section in {self.path}")

        tracks: List[RawTrack] = []
        skipped = 0
        items = tqdm(
            entries.items(),
            desc="Reading library",
            total=len(entries),
            disable=not self.show_progress,
        )
        for key, entry in items:
            if not isinstance(entry, dict) or not is_song(entry):
                skipped += 1
                continue
            tracks.append(raw_track_from_entry(key, entry))

        if skipped:
            logger.debug(f"Skipped {skipped} non-song entries")
        self._log_progress(f"Found {len(tracks)} songs")
        return tracks
