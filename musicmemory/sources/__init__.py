"""Library sources for reading music libraries from disk."""

from pathlib import Path
from typing import Callable, Optional, Union

from .base import BaseLibrarySource, LibrarySource
from .export_file import ExportFileSource
from .itunes import ITunesLibrarySource


def open_library_source(
    path: Union[str, Path],
    progress_callback: Optional[Callable[[str], None]] = None,
    show_progress: bool = False,
) -> BaseLibrarySource:
    """Pick a source adapter from the file extension.

    ``.json`` and ``.csv`` files are treated as previous exports, anything
    else as an Apple Music / iTunes library XML.
    """
    path = Path(path).expanduser()
    if path.suffix.lower() in (".json", ".csv"):
        return ExportFileSource(path, progress_callback, show_progress)
    return ITunesLibrarySource(path, progress_callback, show_progress)


__all__ = [
    "BaseLibrarySource",
    "ExportFileSource",
    "ITunesLibrarySource",
    "LibrarySource",
    "open_library_source",
]
