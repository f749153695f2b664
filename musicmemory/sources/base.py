"""Library source contract shared by all adapters."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Protocol

from ..models import RawTrack

logger = logging.getLogger(__name__)


class LibrarySource(Protocol):
    """Supplies the raw tracks of one library.

    Implementations raise Unauthorized, NoData or UnknownSourceError and
    must not block the event loop.
    """

    async def query_library(self) -> List[RawTrack]:
        """Return every song in the library, in library order."""
        ...


class BaseLibrarySource(ABC):
    """Common plumbing for file-backed sources.

    Subclasses implement the blocking ``_read``; ``query_library`` runs it
    in a worker thread.
    """

    def __init__(
        self,
        progress_callback: Optional[Callable[[str], None]] = None,
        show_progress: bool = False,
    ):
        """
        Args:
            progress_callback: Optional callback for progress messages
            show_progress: If True, show a tqdm progress bar while reading
        """
        self._progress_callback = progress_callback
        self.show_progress = show_progress

    def _log_progress(self, message: str):
        """Report progress if callback is available."""
        logger.debug(message)
        if self._progress_callback:
            self._progress_callback(message)

    @abstractmethod
    def _read(self) -> List[RawTrack]:
        """Read the whole library synchronously."""

    async def query_library(self) -> List[RawTrack]:
        return await asyncio.to_thread(self._read)
