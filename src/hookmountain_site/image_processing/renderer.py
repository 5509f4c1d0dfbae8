from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..models import DerivativeOutput
from .raster import RasterTool

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RenderConfig:
    target_ratio: float = 0.75
    modern_format: str = "webp"
    modern_quality: int = 80
    legacy_format: str = "jpg"
    legacy_quality: int = 82
    logo_quality: int = 90
    favicon_sizes: Tuple[int, ...] = (16, 32, 180)


def _validate_widths(widths: Sequence[int]) -> None:
    if not widths:
        raise ValueError("At least one target width is required")
    for width in widths:
        if width <= 0:
            raise ValueError(f"Target width must be positive, got {width}")


class DerivativeRenderer:
    def __init__(self, tool: RasterTool, config: RenderConfig | None = None) -> None:
        self.tool = tool
        self.config = config or RenderConfig()

    def target_height(self, width: int) -> int:
        return int(width / self.config.target_ratio)

    def render(
        self, source: Path, output_dir: Path, widths: Sequence[int], name: str
    ) -> List[DerivativeOutput]:
        """Cover-resize *source* to every width and emit the modern and legacy encodings."""

        _validate_widths(widths)
        encodings = (
            (self.config.modern_format, self.config.modern_quality),
            (self.config.legacy_format, self.config.legacy_quality),
        )
        outputs: List[DerivativeOutput] = []
        for width in widths:
            height = self.target_height(width)
            for fmt, quality in encodings:
                target = output_dir / f"{name}-{width}w.{fmt}"
                self.tool.render_cover_crop(source, target, (width, height), quality)
                outputs.append(DerivativeOutput(name, width, height, fmt, target))
            logger.info(
                "Created: %s-%sw.%s/.%s",
                name,
                width,
                self.config.modern_format,
                self.config.legacy_format,
            )
        return outputs

    def render_logo(
        self, source: Path, output_dir: Path, widths: Sequence[int], name: str
    ) -> List[DerivativeOutput]:
        _validate_widths(widths)
        outputs: List[DerivativeOutput] = []
        for width in widths:
            target = output_dir / f"{name}-{width}w.png"
            actual_width, height = self.tool.resize_to_width(
                source, target, width, self.config.logo_quality
            )
            outputs.append(DerivativeOutput(name, actual_width, height, "png", target))
            logger.info("Created: %s", target.name)
        return outputs

    def render_favicon(
        self, source: Path, output_dir: Path, sizes: Optional[Sequence[int]] = None
    ) -> List[DerivativeOutput]:
        sizes = tuple(sizes) if sizes else self.config.favicon_sizes
        _validate_widths(sizes)
        outputs: List[DerivativeOutput] = []
        for size in sizes:
            target = output_dir / f"favicon-{size}.png"
            self.tool.resize_exact(source, target, (size, size))
            outputs.append(DerivativeOutput("favicon", size, size, "png", target))
            logger.info("Created: %s", target.name)
        return outputs
