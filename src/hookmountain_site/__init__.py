from .image_processing.catalog import DEFAULT_CATALOG, load_catalog
from .image_processing.normalizer import NormalizerConfig, ShapeNormalizer
from .image_processing.pipeline import DerivativePipeline
from .image_processing.raster import MagickRasterTool, PillowRasterTool, RasterTool
from .image_processing.renderer import DerivativeRenderer, RenderConfig
from .models import (
    BatchReport,
    Category,
    DerivativeOutput,
    DerivativeSpec,
    EdgeColor,
    EntryResult,
    EntryState,
    ImageAsset,
)
from .site.footer import DEFAULT_LINK_MAP, FooterInjector, FooterLinkMap

__all__ = [
    "DEFAULT_CATALOG",
    "load_catalog",
    "NormalizerConfig",
    "ShapeNormalizer",
    "DerivativePipeline",
    "MagickRasterTool",
    "PillowRasterTool",
    "RasterTool",
    "DerivativeRenderer",
    "RenderConfig",
    "BatchReport",
    "Category",
    "DerivativeOutput",
    "DerivativeSpec",
    "EdgeColor",
    "EntryResult",
    "EntryState",
    "ImageAsset",
    "DEFAULT_LINK_MAP",
    "FooterInjector",
    "FooterLinkMap",
]
