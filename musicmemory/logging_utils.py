"""
User-facing output for musicmemory.

ExportLogger prints colored lines in the terminal. In "ui" mode it appends
entries to a caller-owned mapping instead, so a UI layer can render them.
"""

import sys
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, MutableMapping, Optional

UI_LOG_KEY = "export_logs"


class LogLevel(Enum):
    """Severity with its label, icon and ANSI color."""

    DEBUG = ("DEBUG", "🔍", "\033[90m")
    INFO = ("INFO", "ℹ️", "\033[94m")
    SUCCESS = ("SUCCESS", "✓", "\033[92m")
    WARNING = ("WARNING", "⚠️", "\033[93m")
    ERROR = ("ERROR", "❌", "\033[91m")
    PROGRESS = ("PROGRESS", "→", "\033[96m")

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def icon(self) -> str:
        return self.value[1]

    @property
    def color(self) -> str:
        return self.value[2]


RESET = "\033[0m"


@dataclass
class LogEntry:
    level: LogLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    def render(self, use_color: bool = True) -> str:
        stamp = self.timestamp.strftime("%H:%M:%S")
        if use_color:
            return f"{self.level.color}[{stamp}] {self.level.icon} {self.message}{RESET}"
        return f"[{stamp}] [{self.level.label}] {self.message}"


class ExportLogger:
    """
    Reports export progress to the user.

    Usage:
        logger = ExportLogger(verbose=True)
        logger.progress("Reading library...")

        state = {}
        logger = ExportLogger(mode="ui", ui_state=state)
        logger.success("Exported CSV")  # lands in state["export_logs"]

    ``quiet`` keeps only errors, ``verbose`` adds debug lines. ``on_log`` is
    called with every entry that passes those filters.
    """

    def __init__(
        self,
        mode: str = "cli",
        ui_state: Optional[MutableMapping] = None,
        verbose: bool = False,
        quiet: bool = False,
        use_color: bool = True,
        on_log: Optional[Callable[[LogEntry], None]] = None,
    ):
        self.mode = mode
        self.ui_state = ui_state
        self.verbose = verbose
        self.quiet = quiet
        self.use_color = use_color and sys.stdout.isatty()
        self.on_log = on_log
        self._counts: Counter = Counter()

        if mode == "ui" and ui_state is not None:
            ui_state.setdefault(UI_LOG_KEY, [])

    def _emit(self, level: LogLevel, message: str):
        self._counts[level] += 1
        if self.quiet and level is not LogLevel.ERROR:
            return
        if level is LogLevel.DEBUG and not self.verbose:
            return

        entry = LogEntry(level, message)
        if self.mode == "cli":
            print(entry.render(self.use_color))
        elif self.ui_state is not None:
            self.ui_state[UI_LOG_KEY].append(entry)

        if self.on_log:
            self.on_log(entry)

    def debug(self, message: str):
        self._emit(LogLevel.DEBUG, message)

    def info(self, message: str):
        self._emit(LogLevel.INFO, message)

    def success(self, message: str):
        self._emit(LogLevel.SUCCESS, message)

    def warning(self, message: str):
        self._emit(LogLevel.WARNING, message)

    def error(self, message: str):
        self._emit(LogLevel.ERROR, message)

    def progress(self, message: str):
        self._emit(LogLevel.PROGRESS, message)

    def get_ui_entries(self) -> list[LogEntry]:
        if self.ui_state is None:
            return []
        return list(self.ui_state.get(UI_LOG_KEY, []))

    def format_summary(self) -> str:
        """One line tally of successes, warnings and errors so far."""
        tallies = [
            (LogLevel.SUCCESS, "done"),
            (LogLevel.WARNING, "warning(s)"),
            (LogLevel.ERROR, "error(s)"),
        ]
        parts = [
            f"{level.icon} {self._counts[level]} {noun}"
            for level, noun in tallies
            if self._counts[level]
        ]
        return "Summary: " + (" | ".join(parts) if parts else "nothing to report")


class UserErrors:
    """Error messages with a hint on what to do next."""

    @staticmethod
    def unauthorized(original_error: str) -> str:
        return (
            f"❌ Music library access denied: {original_error}\n\n"
            "💡 Try these steps:\n"
            "   1. Check the file permissions of your library file\n"
            "   2. Grant your terminal access to the Music folder in system settings"
        )

    @staticmethod
    def no_data(original_error: str) -> str:
        return (
            f"❌ No music library found: {original_error}\n\n"
            "💡 In the Music app use File > Library > Export Library...\n"
            "   and pass the exported XML file with --library."
        )

    @staticmethod
    def empty_library() -> str:
        return (
            "⚠️ No songs found in music library.\n\n"
            "💡 Add some music to your library, export it again and retry."
        )

    @staticmethod
    def source_error(original_error: str) -> str:
        return (
            f"❌ Could not read music library: {original_error}\n\n"
            "💡 Make sure the file is a Music/iTunes library XML or a previous export.\n"
            "   Use --verbose for more details."
        )

    @staticmethod
    def serialization_failed(original_error: str) -> str:
        return (
            f"❌ Failed to convert data for export: {original_error}\n\n"
            "💡 Nothing was written. Try the other export format."
        )

    @staticmethod
    def storage_unavailable(original_error: str) -> str:
        return (
            f"❌ Could not access export directory: {original_error}\n\n"
            "💡 Pick a writable location with --export-dir."
        )

    @staticmethod
    def write_failed(original_error: str) -> str:
        return (
            f"❌ Failed to create export file: {original_error}\n\n"
            "💡 Check free disk space and permissions, then try again."
        )

    @staticmethod
    def config_not_found(path: str) -> str:
        return (
            f"❌ Configuration file not found: {path}\n\n"
            "💡 Create a config.yml file or drop --config to use the defaults.\n"
            "   See config.example.yml for the supported keys."
        )

    @staticmethod
    def config_invalid(path: str, original_error: str) -> str:
        return (
            f"❌ Invalid configuration in {path}: {original_error}\n\n"
            "💡 See config.example.yml for the supported keys."
        )
