from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Optional

from ..image_processing.catalog import DEFAULT_CATALOG, load_catalog
from ..image_processing.errors import ConfigurationError
from ..image_processing.pipeline import DerivativePipeline
from ..image_processing.raster import create_raster_tool
from ..models import BatchReport
from ..utils import format_size


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SITE_ROOT_ENV = "HOOKMOUNTAIN_SITE_ROOT"


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate resized WebP/JPEG/PNG derivatives for the site")
    parser.add_argument(
        "--site-root",
        type=Path,
        default=None,
        help=f"Site root directory (defaults to ${SITE_ROOT_ENV}, then .env, then the current directory)",
    )
    parser.add_argument("--input", type=Path, default=None, help="Source images (default: <root>/images)")
    parser.add_argument(
        "--output", type=Path, default=None, help="Derivative output (default: <root>/images-optimized)"
    )
    parser.add_argument(
        "--catalog", type=Path, default=None, help="Optional JSON derivative table replacing the built-in one"
    )
    parser.add_argument(
        "--backend", choices=("pillow", "magick"), default="pillow", help="Raster tool implementation"
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="Per-invocation timeout (seconds) for the magick backend"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def resolve_site_root(explicit: Path | None) -> Path:
    if explicit is not None:
        root = explicit
    else:
        root = Path(_load_env_value(SITE_ROOT_ENV) or ".")
    if not root.is_dir():
        raise ConfigurationError(f"Site root is not a directory: {root}")
    return root


def _load_env_value(key: str) -> Optional[str]:
    env_value = os.getenv(key)
    if env_value:
        value = env_value.strip()
        if value:
            return value

    env_path = Path(".env")
    if not env_path.exists():
        return None

    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if "=" not in stripped:
                continue
            name, raw_value = stripped.split("=", 1)
            if name.strip() == key:
                value = raw_value.strip().strip('"').strip("'")
                return value or None
    except OSError:
        logger.debug("Unable to read .env file for %s", key, exc_info=True)
    return None


def log_report(report: BatchReport) -> None:
    logger.info(
        "Optimization complete: %s done, %s skipped, %s failed",
        len(report.done),
        len(report.skipped),
        len(report.failed),
    )
    logger.info("Output summary:")
    for directory, count in report.file_counts.items():
        logger.info("  %s/: %s files", directory, count)
    logger.info("Size comparison:")
    logger.info("  Original:  %s", format_size(report.input_bytes))
    logger.info("  Optimized: %s", format_size(report.output_bytes))
    logger.info("  Saved:     %s", format_size(report.saved_bytes))


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        root = resolve_site_root(args.site_root)
        input_dir = args.input or root / "images"
        output_dir = args.output or root / "images-optimized"
        catalog = load_catalog(args.catalog) if args.catalog else DEFAULT_CATALOG
        tool = create_raster_tool(args.backend, timeout=args.timeout)
        pipeline = DerivativePipeline(tool=tool, input_dir=input_dir, output_dir=output_dir)
    except (ConfigurationError, ValueError, RuntimeError, OSError) as exc:
        logger.error("Configuration failed: %s", exc)
        raise SystemExit(1) from exc

    logger.info("Input:  %s", input_dir)
    logger.info("Output: %s", output_dir)
    report = pipeline.process_catalog(catalog)
    log_report(report)
    if report.failed:
        raise SystemExit(2)


if __name__ == "__main__":
    main()
