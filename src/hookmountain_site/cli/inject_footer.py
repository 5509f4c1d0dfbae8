from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from ..image_processing.errors import ConfigurationError
from ..site.footer import FooterInjector
from .optimize_images import resolve_site_root


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inject the shared footer into static HTML pages")
    parser.add_argument("pages", nargs="*", type=Path, help="Pages to update (default: every .html under the root)")
    parser.add_argument("--site-root", type=Path, default=None, help="Site root directory")
    return parser.parse_args(argv)


def collect_pages(root: Path, explicit: List[Path]) -> List[Path]:
    if explicit:
        return explicit
    return sorted(path for path in root.rglob("*.html") if path.is_file())


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    try:
        root = resolve_site_root(args.site_root)
    except ConfigurationError as exc:
        logger.error("Configuration failed: %s", exc)
        raise SystemExit(1) from exc

    injector = FooterInjector()
    pages = collect_pages(root, args.pages)
    for page in pages:
        try:
            injector.inject_file(page, root)
        except ValueError as exc:
            logger.error("Page %s is outside the site root %s: %s", page, root, exc)
            raise SystemExit(1) from exc
    logger.info("Updated %s pages", len(pages))


if __name__ == "__main__":
    main()
