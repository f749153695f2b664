"""
Command-line interface for musicmemory.

Loads a music library, shows its statistics and exports it as JSON or CSV.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List

import yaml

from .errors import (
    ConfigurationError,
    EmptyLibraryError,
    MusicMemoryError,
    NoData,
    SerializationError,
    StorageUnavailable,
    Unauthorized,
    UnknownSourceError,
    WriteFailed,
)
from .exporter import LibraryExporter
from .logging_utils import ExportLogger, UserErrors
from .serializers import ExportFormat
from .sinks import DEFAULT_RETENTION_DAYS, DirectoryExportSink
from .snapshot import TOP_TRACKS_LIMIT, LibrarySnapshot
from .sources import open_library_source

DEFAULT_CONFIG = "config.yml"
DEFAULT_LIBRARY_PATH = "~/Music/iTunes/iTunes Library.xml"
DEFAULT_EXPORT_DIR = "./exports"
FORMAT_CHOICES = ("json", "csv", "both")


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file."""
    path = Path(config_path)
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(str(e), config_path=config_path) from e
    if not isinstance(data, dict):
        raise ConfigurationError("top level must be a mapping", config_path=config_path)
    return data


def config_section(config: dict, name: str, config_path: str) -> dict:
    """Return a mapping section of the config, empty if absent."""
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'{name}' must be a mapping", config_path=config_path)
    return section


def resolve_formats(name: str) -> List[ExportFormat]:
    if str(name).lower() == "both":
        return [ExportFormat.JSON, ExportFormat.CSV]
    return [ExportFormat.parse(name)]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all CLI options."""
    parser = argparse.ArgumentParser(
        description="Export play counts from your music library",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  music-memory --library Library.xml             # Export as JSON
  music-memory --library Library.xml -f csv      # Export as CSV
  music-memory --library Library.xml -f both     # Export JSON and CSV
  music-memory --library Library.xml --stats     # Only show statistics
  music-memory --library music_play_counts_1700000000.json -f csv

Tips:
  Create Library.xml in the Music app via File > Library > Export Library...
  Use --cleanup to delete exports older than the retention period
""",
    )

    parser.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG,
        help=f"Path to config file (default: {DEFAULT_CONFIG})",
    )
    parser.add_argument(
        "--library",
        "-l",
        help="Music/iTunes library XML, or a previous JSON/CSV export",
    )
    parser.add_argument(
        "--format",
        "-f",
        choices=FORMAT_CHOICES,
        default=None,
        help="Export format (default: json)",
    )
    parser.add_argument(
        "--export-dir",
        "-o",
        default=None,
        help=f"Directory for export files (default: {DEFAULT_EXPORT_DIR})",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show library statistics without exporting",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=TOP_TRACKS_LIMIT,
        metavar="N",
        help=f"Number of top played songs to show (default: {TOP_TRACKS_LIMIT})",
    )
    parser.add_argument(
        "--open",
        action="store_true",
        dest="open_after_export",
        help="Open the exported file with the default application",
    )
    parser.add_argument(
        "--cleanup",
        action="store_true",
        help="Delete old export files before exporting",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose debug output"
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Quiet mode - only show errors",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    return parser


def print_header(logger: ExportLogger):
    """Print a styled header."""
    logger.info("━" * 50)
    logger.info("🎵 Music Library Exporter")
    logger.info("━" * 50)


def print_library_stats(snapshot: LibrarySnapshot, logger: ExportLogger, top: int):
    """Show library statistics and the most played songs."""
    logger.info("")
    logger.info("📊 Library Statistics")
    logger.info(f"   Total songs:  {snapshot.total_count}")
    logger.info(f"   Played songs: {snapshot.played_count}")
    logger.info(f"   Total plays:  {snapshot.total_plays}")

    top_tracks = snapshot.top(top)
    if top_tracks:
        logger.info("")
        logger.info("🔥 Top Played Songs")
        for rank, track in enumerate(top_tracks, 1):
            logger.info(
                f"   {rank:>2}. {track.title} - {track.artist} ({track.play_count} plays)"
            )
    logger.info("━" * 50)


def describe_error(error: MusicMemoryError) -> str:
    """Map an error to its user-facing message."""
    if isinstance(error, Unauthorized):
        return UserErrors.unauthorized(str(error))
    if isinstance(error, NoData):
        return UserErrors.no_data(str(error))
    if isinstance(error, UnknownSourceError):
        return UserErrors.source_error(str(error))
    if isinstance(error, EmptyLibraryError):
        return UserErrors.empty_library()
    if isinstance(error, SerializationError):
        return UserErrors.serialization_failed(str(error))
    if isinstance(error, StorageUnavailable):
        return UserErrors.storage_unavailable(str(error))
    if isinstance(error, WriteFailed):
        return UserErrors.write_failed(str(error))
    if isinstance(error, ConfigurationError):
        return UserErrors.config_invalid(error.config_path or "config", str(error))
    return f"❌ {error}"


def main():
    parser = create_parser()
    args = parser.parse_args()

    logger = ExportLogger(
        mode="cli",
        verbose=args.verbose,
        quiet=args.quiet,
        use_color=not args.no_color,
    )

    print_header(logger)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        logger.error(describe_error(e))
        sys.exit(1)

    if not config and not Path(args.config).exists():
        if args.config != DEFAULT_CONFIG:
            # User specified a config file that doesn't exist
            logger.error(UserErrors.config_not_found(args.config))
            sys.exit(1)
        else:
            logger.debug("No config.yml found, using defaults")

    try:
        library_config = config_section(config, "library", args.config)
        export_config = config_section(config, "export", args.config)
        formats = resolve_formats(args.format or export_config.get("format", "json"))
        cleanup_days = float(export_config.get("cleanup_days", DEFAULT_RETENTION_DAYS))
    except ConfigurationError as e:
        logger.error(describe_error(e))
        sys.exit(1)
    except (TypeError, ValueError) as e:
        logger.error(UserErrors.config_invalid(args.config, str(e)))
        sys.exit(1)

    library_path = args.library or library_config.get("path") or DEFAULT_LIBRARY_PATH
    export_dir = args.export_dir or export_config.get("dir") or DEFAULT_EXPORT_DIR

    source = open_library_source(
        library_path,
        progress_callback=logger.debug,
        show_progress=not args.quiet,
    )
    sink = DirectoryExportSink(
        export_dir,
        open_after_export=args.open_after_export
        or bool(export_config.get("open_after_export", False)),
    )
    exporter = LibraryExporter(
        source,
        sink,
        logger=logger,
        sanitize_formulas=bool(export_config.get("sanitize_formulas", False)),
    )

    if args.cleanup:
        removed = sink.cleanup_old_exports(max_age_days=cleanup_days)
        logger.info(f"Removed {len(removed)} export(s) older than {cleanup_days:g} days")

    async def run_export():
        snapshot = await exporter.load()
        logger.success(f"Loaded {snapshot.total_count} songs from {library_path}")
        print_library_stats(snapshot, logger, args.top)

        if args.stats:
            return {}
        return await exporter.export_all(formats)

    try:
        exported = asyncio.run(run_export())
    except KeyboardInterrupt:
        logger.warning("Export cancelled by user")
        sys.exit(1)
    except MusicMemoryError as e:
        logger.error(describe_error(e))
        sys.exit(1)

    for fmt, path in exported.items():
        logger.success(f"Exported {fmt.upper()}: {path}")

    logger.info(logger.format_summary())


if __name__ == "__main__":
    main()
