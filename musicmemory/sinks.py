"""
Export sinks: persist serialized text and offer it to the user.
"""

import asyncio
import datetime
import logging
import os
import tempfile
import webbrowser
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Union

from .errors import StorageUnavailable, WriteFailed
from .serializers import EXPORT_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 3


class ExportSink(Protocol):
    """Persists export text once per export action."""

    async def persist_and_offer(
        self, text: str, suggested_name: str, file_extension: str
    ) -> Path:
        """Store ``text`` and hand it to the user. Returns where it was stored."""
        ...


def ensure_dir(path: Path) -> Path:
    """Ensure directory exists."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def _default_opener(path: Path) -> bool:
    return webbrowser.open(path.resolve().as_uri())


class DirectoryExportSink:
    """
    Writes exports into a directory and optionally opens them.

    For CLI: the exported file is logged and, with ``open_after_export``,
    opened with the desktop's default application.
    """

    def __init__(
        self,
        export_dir: Union[str, Path],
        open_after_export: bool = False,
        opener: Optional[Callable[[Path], bool]] = None,
    ):
        self.export_dir = Path(export_dir).expanduser()
        self.open_after_export = open_after_export
        self._opener = opener or _default_opener

    def _prepare_dir(self) -> Path:
        try:
            ensure_dir(self.export_dir)
        except OSError as e:
            raise StorageUnavailable(
                f"Could not access export directory {self.export_dir}: {e}"
            ) from e
        if not self.export_dir.is_dir():
            raise StorageUnavailable(f"Export location is not a directory: {self.export_dir}")
        return self.export_dir

    def _target_path(self, suggested_name: str, file_extension: str) -> Path:
        extension = file_extension.lstrip(".")
        name = Path(suggested_name).name
        if name.endswith(f".{extension}"):
            name = name[: -(len(extension) + 1)]
        return self.export_dir / f"{name}.{extension}"

    def _write(self, text: str, suggested_name: str, file_extension: str) -> Path:
        self._prepare_dir()
        filepath = self._target_path(suggested_name, file_extension)
        tmp_path: Optional[Path] = None
        try:
            # Hidden temp file in the same directory, renamed into place once complete
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{filepath.name}.", suffix=".tmp", dir=self.export_dir
            )
            os.close(fd)
            tmp_path = Path(tmp_name)
            # mkstemp creates owner-only files; exports are meant to be shared
            os.chmod(tmp_path, 0o644)
            with open(tmp_path, "w", newline="", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, filepath)
        except (OSError, UnicodeEncodeError) as e:
            raise WriteFailed(f"Failed to create export file {filepath}: {e}") from e
        finally:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()

        if not filepath.exists():
            raise WriteFailed(f"Failed to create export file {filepath}")
        logger.info(f"Exported {filepath}")
        return filepath

    def _offer(self, filepath: Path):
        if not self.open_after_export:
            return
        try:
            opened = self._opener(filepath)
        except Exception as e:
            logger.warning(f"Could not open {filepath}: {e}")
            return
        if not opened:
            logger.warning(f"No application available to open {filepath}")

    async def persist_and_offer(
        self, text: str, suggested_name: str, file_extension: str
    ) -> Path:
        filepath = await asyncio.to_thread(self._write, text, suggested_name, file_extension)
        self._offer(filepath)
        return filepath

    def cleanup_old_exports(self, max_age_days: float = DEFAULT_RETENTION_DAYS) -> List[Path]:
        """
        Remove export files older than ``max_age_days``.

        Only files named music_play_counts_* are touched. Errors are logged,
        never raised; returns the removed paths.
        """
        removed: List[Path] = []
        if not self.export_dir.is_dir():
            return removed

        cutoff = datetime.datetime.now() - datetime.timedelta(days=max_age_days)
        try:
            candidates = sorted(self.export_dir.glob(f"{EXPORT_PREFIX}*"))
        except OSError as e:
            logger.warning(f"Error cleaning up old exports: {e}")
            return removed

        for path in candidates:
            if not path.is_file():
                continue
            try:
                modified = datetime.datetime.fromtimestamp(path.stat().st_mtime)
                if modified < cutoff:
                    path.unlink()
                    removed.append(path)
                    logger.info(f"Removed old export file: {path.name}")
            except OSError as e:
                logger.warning(f"Error removing old export {path.name}: {e}")
        return removed
