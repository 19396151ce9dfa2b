"""Build WebP derivatives and the photos.json sidecar from a source folder.

Usage: python main.py [--variant derivatives|single] [--source DIR] ...
Workflow: drop originals into photos-source/, run this script, commit the output.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from loguru import logger

from app.photo_batch import PhotoBatch
from infrastructure.logging import find_latest_log_file, init_logging
from infrastructure.settings import VARIANTS, JsonSettings, PipelineConfig

BASE_DIR = Path(__file__).parent


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate WebP derivatives and a JSON metadata sidecar for photos."
    )
    parser.add_argument("--settings", help="Path to settings.json (default: bundled file)")
    parser.add_argument("--source", dest="source_dir", help="Folder with original photos")
    parser.add_argument("--output-dir", help="Root folder for generated WebP files")
    parser.add_argument("--output-file", help="Path of the JSON sidecar to write")
    parser.add_argument("--web-root", help="URL prefix used for image paths in the JSON")
    parser.add_argument("--variant", choices=VARIANTS, help="Which derivatives to produce")
    parser.add_argument("--log-dir", help="Also write rotating log files here")
    parser.add_argument("--verbose", action="store_true", help="Show debug output")
    return parser.parse_args(argv)


def _load_settings(explicit: str | None) -> JsonSettings:
    if explicit:
        return JsonSettings(explicit)
    default_path = BASE_DIR / "settings.json"
    return JsonSettings(default_path if default_path.exists() else None)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    # Console only until the settings are known
    init_logging(None, "DEBUG" if args.verbose else "INFO")

    try:
        settings = _load_settings(args.settings)
        config = PipelineConfig.from_settings(
            settings,
            source_dir=args.source_dir,
            output_dir=args.output_dir,
            output_file=args.output_file,
            web_root=args.web_root,
            variant=args.variant,
            log_dir=args.log_dir,
            log_level="DEBUG" if args.verbose else None,
        )
        init_logging(config.log_dir, config.log_level)
        logger.debug("Settings: {}", settings.path or "built-in defaults")

        result = PhotoBatch(config).run()
    except Exception:  # pylint: disable=broad-exception-caught
        logger.exception("Fatal error")
        return 1

    if result.failed:
        logger.warning("{} file(s) skipped because of errors", len(result.failed))
    if config.log_dir is not None:
        logger.debug("Log file: {}", find_latest_log_file(config.log_dir))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
