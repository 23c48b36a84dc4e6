from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from loader.model import LoaderSettings
from mdx_compat.core.managers.config_manager import config_manager
from mdx_compat.core.managers.report_manager import ReportManager
from mdx_compat.core.utils.configure_logging import configure_logger
from mdx_compat.core.utils.path_utils import PathUtils
from transformer.controllers.run_controller import RunController
from transformer.model import TransformerSettings

logger = logging.getLogger(__name__)

SILENCED_LOGGERS = {"markdown_it": "WARNING"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdx-compat",
        description="Make markdown documents safe for an MDX renderer (dry-run by default).",
    )
    parser.add_argument("-a", "--apply", action="store_true", help="Write modified documents back to disk.")
    parser.add_argument("--no-backup", action="store_true", help="Do not create backup files when applying.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Trace every rewritten node.")
    parser.add_argument(
        "--root", action="append", default=None, metavar="DIR",
        help="Document root to scan (repeatable). Defaults to the configured roots.",
    )
    parser.add_argument("--export", type=str, default=None, metavar="PATH", help="Save all warnings to a CSV file.")
    return parser


def _setup_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else config_manager.get_nested("debug.level", "WARNING")
    configure_logger(level, silenced_loggers=SILENCED_LOGGERS)


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for the 'mdx-compat' command."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    _setup_logging(args.verbose)

    try:
        settings = TransformerSettings.from_config()
        loader_settings = LoaderSettings.from_config()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e, exc_info=True)
        print(f"❌ Invalid configuration: {e}")
        return 1

    base_dir = PathUtils.get_invocation_root()
    root_names = args.root or loader_settings.roots
    roots = PathUtils.resolve_roots(root_names, base_dir)
    backup = not args.no_backup

    report = ReportManager(
        apply=args.apply,
        backup=backup,
        preview_limit=settings.warning_preview_limit,
        base_dir=base_dir,
    )

    try:
        controller = RunController(
            roots=roots,
            apply=args.apply,
            backup=backup,
            settings=settings,
            loader_settings=loader_settings,
            on_document=report.on_document,
            show_progress=not args.verbose and sys.stderr.isatty(),
            base_dir=base_dir,
        )

        report.print_banner(settings.backup_suffix)
        documents = controller.discover()
        if not documents:
            print(f"❌ No {loader_settings.extension} files found in {', '.join(f'{r}/' for r in root_names)}")
            return 1

        report.print_found(len(documents))
        summary = controller.run(documents)
    except Exception as e:
        logger.error("Run aborted: %s", e, exc_info=True)
        print(f"❌ Run aborted: {e}")
        return 1

    report.print_summary(summary)

    if args.export:
        report.export_warnings(summary, args.export)

    return 0


if __name__ == "__main__":
    sys.exit(main())
