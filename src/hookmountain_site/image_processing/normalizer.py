from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Tuple

from ..models import ImageAsset
from .raster import RasterTool

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NormalizerConfig:
    target_ratio: float = 0.75
    threshold: float = 0.85
    band_height: int = 20


class ShapeNormalizer:
    """Pads near-square sources onto a canvas of the target aspect ratio."""

    def __init__(
        self,
        tool: RasterTool,
        config: NormalizerConfig | None = None,
        temp_dir: Optional[Path] = None,
    ) -> None:
        self.tool = tool
        self.config = config or NormalizerConfig()
        self.temp_dir = temp_dir

    def inspect(self, path: Path) -> ImageAsset:
        width, height = self.tool.measure(path)
        return ImageAsset(path=path, width=width, height=height)

    def needs_extension(self, asset: ImageAsset) -> bool:
        return asset.ratio > self.config.threshold

    def canvas_size(self, asset: ImageAsset) -> Tuple[int, int]:
        return asset.width, int(asset.width / self.config.target_ratio)

    @contextmanager
    def normalized(self, asset: ImageAsset) -> Iterator[Path]:
        """Yield a path to work from; the temporary canvas never outlives the block."""

        if not self.needs_extension(asset):
            yield asset.path
            return

        logger.info(
            "Square image detected (%s x %s, ratio=%.3f)", asset.width, asset.height, asset.ratio
        )
        edge_color = self.tool.sample_edge_color(asset.path, self.config.band_height)
        logger.info("Edge color: %s", edge_color.hex)
        size = self.canvas_size(asset)

        if self.temp_dir is not None:
            self.temp_dir.mkdir(parents=True, exist_ok=True)
        fd, raw_path = tempfile.mkstemp(prefix="canvas_", suffix=".png", dir=self.temp_dir)
        os.close(fd)
        canvas = Path(raw_path)
        try:
            self.tool.extend_canvas(asset.path, canvas, size, edge_color)
            logger.info("Extended to: %s x %s", size[0], size[1])
            yield canvas
        finally:
            canvas.unlink(missing_ok=True)
