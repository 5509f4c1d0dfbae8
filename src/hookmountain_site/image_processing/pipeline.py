from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List

from ..models import BatchReport, Category, DerivativeOutput, DerivativeSpec, EntryResult, EntryState
from .errors import (
    ConfigurationError,
    EdgeSampleError,
    MissingSourceError,
    ToolInvocationError,
    UnreadableDimensionsError,
)
from .normalizer import ShapeNormalizer
from .raster import RasterTool
from .renderer import DerivativeRenderer

logger = logging.getLogger(__name__)

SUMMARY_DIRECTORIES = ("patterns", "categories", "featured", "logo")


def directory_size(path: Path) -> int:
    if not path.is_dir():
        return 0
    return sum(item.stat().st_size for item in path.rglob("*") if item.is_file())


class DerivativePipeline:
    """Runs the derivative table entry by entry against one input directory."""

    def __init__(
        self,
        tool: RasterTool,
        input_dir: Path,
        output_dir: Path,
        normalizer: ShapeNormalizer | None = None,
        renderer: DerivativeRenderer | None = None,
    ) -> None:
        if not input_dir.is_dir():
            raise ConfigurationError(f"Input directory does not exist: {input_dir}")
        self.tool = tool
        self.input_dir = input_dir
        self.output_dir = output_dir
        self.normalizer = normalizer or ShapeNormalizer(tool)
        self.renderer = renderer or DerivativeRenderer(tool)
        output_dir.mkdir(parents=True, exist_ok=True)

    def process_catalog(self, catalog: Iterable[DerivativeSpec]) -> BatchReport:
        results: List[EntryResult] = []
        for spec in catalog:
            logger.info("Processing %s: %s", spec.category.value, spec.name)
            results.append(self.process_entry(spec))
        return self.summarize(results)

    def process_entry(self, spec: DerivativeSpec) -> EntryResult:
        result = EntryResult(spec=spec)
        source = self.input_dir / spec.source
        try:
            if not source.is_file():
                raise MissingSourceError(source)
            result.outputs = self._process_source(spec, source, result)
        except (MissingSourceError, UnreadableDimensionsError, EdgeSampleError) as exc:
            logger.warning("[SKIP] %s", exc)
            result.state = EntryState.SKIPPED
            result.error = str(exc)
            return result
        except ToolInvocationError as exc:
            logger.error("[ERROR] %s", exc)
            result.state = EntryState.FAILED
            result.error = str(exc)
            return result

        result.state = EntryState.DONE
        logger.info("Finished %s (%s files)", spec.name, len(result.outputs))
        return result

    def _process_source(
        self, spec: DerivativeSpec, source: Path, result: EntryResult
    ) -> List[DerivativeOutput]:
        target_dir = self.output_dir / spec.category.directory
        if not spec.category.normalized:
            result.state = EntryState.RENDERING
            if spec.category is Category.FAVICON:
                return self.renderer.render_favicon(source, target_dir, spec.widths)
            return self.renderer.render_logo(source, target_dir, spec.widths, spec.name)

        result.state = EntryState.NORMALIZING
        asset = self.normalizer.inspect(source)
        with self.normalizer.normalized(asset) as working:
            result.state = EntryState.RENDERING
            return self.renderer.render(working, target_dir, spec.widths, spec.name)

    def summarize(self, results: List[EntryResult]) -> BatchReport:
        counts: Dict[str, int] = {}
        for name in SUMMARY_DIRECTORIES:
            directory = self.output_dir / name
            counts[name] = (
                sum(1 for item in directory.iterdir() if item.is_file()) if directory.is_dir() else 0
            )
        return BatchReport(
            results=results,
            file_counts=counts,
            input_bytes=directory_size(self.input_dir),
            output_bytes=directory_size(self.output_dir),
        )
