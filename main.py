"""
------------------------------------------------------------------------------
Project:        ArticleShelf
File:           main.py
Version:        1.0.0
Description:    Command line entry point for library maintenance. Sets up
                configuration and logging, resolves the storage root and runs
                one maintenance command against the library.
------------------------------------------------------------------------------
"""

import argparse
import sys
from typing import List, Optional

from PyQt6.QtCore import QCoreApplication

from core.config import AppConfig
from core.exceptions import ArticleShelfError
from core.library import ArticleLibrary
from core.logger import get_logger, setup_logging
from core.models.reports import CopyReport
from core.paths import RunMode, StoragePaths, detect_run_mode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="articleshelf", description="ArticleShelf - Research Article Library")
    parser.add_argument("-P", "--profile", type=str, help="Application profile for isolation (e.g. 'dev', 'test')")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--dev", dest="run_mode", action="store_const", const=RunMode.DEV,
                      help="Use ./storage below the working directory")
    mode.add_argument("--packaged", dest="run_mode", action="store_const", const=RunMode.PACKAGED,
                      help="Use the per-user application data directory")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("paths", help="Show the resolved storage locations")
    commands.add_parser("stats", help="Show library statistics")
    commands.add_parser("migrate-names", help="Rename legacy '{id}.ext' files to '{id} - {title}.ext'")
    copy_cmd = commands.add_parser("copy-external", help="Copy existing documents into an external folder")
    copy_cmd.add_argument("path")
    relocate_cmd = commands.add_parser("relocate", help="Copy the whole storage tree to a new root")
    relocate_cmd.add_argument("path")
    return parser


def _print_copy_report(report: CopyReport) -> None:
    print(f"Copied {report.copied_count} files from {report.source} to {report.destination}")
    if report.skipped:
        print(f"Skipped {len(report.skipped)} existing files")
    for error in report.errors:
        print(f"  ERROR: {error}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    ArticleShelf Entry Point.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)

    app_id = AppConfig.APP_ID
    if args.profile:
        app_id = f"{AppConfig.APP_ID}-{args.profile}"
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    QCoreApplication.setApplicationName(app_id)

    app_config = AppConfig(profile=args.profile)

    setup_logging(
        level=app_config.get_log_level(),
        log_file=str(app_config.get_log_file_path()),
        component_levels=app_config.get_log_components()
    )
    logger = get_logger("core")
    logger.info(f"ArticleShelf started (Profile: {args.profile or 'default'})")

    run_mode = args.run_mode or detect_run_mode(app_config)
    paths = StoragePaths(run_mode, config=app_config)

    if args.command == "paths":
        print(f"Run mode: {paths.run_mode.value}")
        print(f"Root:     {paths.root}")
        print(f"Database: {paths.database_file}")
        print(f"PDFs:     {paths.pdfs}")
        print(f"Notes:    {paths.notes}")
        return 0

    try:
        library = ArticleLibrary.open(paths)
    except ArticleShelfError as e:
        print(f"Cannot open library: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == "stats":
            for key, value in library.statistics().items():
                print(f"{key:>15}: {value}")
        elif args.command == "migrate-names":
            report = library.migrate_naming_scheme()
            print(f"Articles: {report.total_articles}, migrated PDFs: {report.migrated_pdfs}, "
                  f"migrated notes: {report.migrated_notes}")
            for error in report.errors:
                print(f"  ERROR: {error}")
            return 0 if report.success else 2
        elif args.command == "copy-external":
            report = library.storage.copy_existing_to_external(args.path)
            _print_copy_report(report)
            return 0 if report.success else 2
        elif args.command == "relocate":
            report = library.storage.relocate_root(args.path)
            _print_copy_report(report)
            if report.success:
                print("Storage copied. Restart ArticleShelf to use the new location.")
            return 0 if report.success else 2
    except ArticleShelfError as e:
        logger.error(f"Command '{args.command}' failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        library.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
