from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple


class Category(str, enum.Enum):
    """Semantic image groups; each maps to an output directory."""

    PATTERNS = "patterns"
    CATEGORIES = "categories"
    FEATURED = "featured"
    LOGO = "logo"
    FAVICON = "favicon"

    @property
    def directory(self) -> str:
        if self is Category.FAVICON:
            return Category.LOGO.value
        return self.value

    @property
    def normalized(self) -> bool:
        return self in (Category.PATTERNS, Category.CATEGORIES, Category.FEATURED)


class EntryState(str, enum.Enum):
    PENDING = "pending"
    NORMALIZING = "normalizing"
    RENDERING = "rendering"
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ImageAsset:
    """A source raster file and its measured dimensions."""

    path: Path
    width: int
    height: int

    @property
    def ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True, slots=True)
class EdgeColor:
    red: int
    green: int
    blue: int

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    @property
    def hex(self) -> str:
        return "#{:02x}{:02x}{:02x}".format(self.red, self.green, self.blue)


@dataclass(frozen=True, slots=True)
class DerivativeSpec:
    """One row of the derivative table: what to produce for a source file."""

    category: Category
    source: str
    name: str
    widths: Tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.widths:
            raise ValueError(f"Derivative {self.name!r} has no target widths")
        for width in self.widths:
            if not isinstance(width, int) or isinstance(width, bool) or width <= 0:
                raise ValueError(f"Derivative {self.name!r} has invalid width {width!r}")


@dataclass(frozen=True, slots=True)
class DerivativeOutput:
    """A file written by the renderer."""

    name: str
    width: int
    height: int
    format: str
    path: Path


@dataclass(slots=True)
class EntryResult:
    spec: DerivativeSpec
    state: EntryState = EntryState.PENDING
    outputs: List[DerivativeOutput] = field(default_factory=list)
    error: Optional[str] = None


@dataclass(slots=True)
class BatchReport:
    """Outcome of a full batch run plus the output summary."""

    results: List[EntryResult]
    file_counts: Dict[str, int]
    input_bytes: int
    output_bytes: int

    @property
    def done(self) -> List[EntryResult]:
        return [result for result in self.results if result.state is EntryState.DONE]

    @property
    def skipped(self) -> List[EntryResult]:
        return [result for result in self.results if result.state is EntryState.SKIPPED]

    @property
    def failed(self) -> List[EntryResult]:
        return [result for result in self.results if result.state is EntryState.FAILED]

    @property
    def saved_bytes(self) -> int:
        return self.input_bytes - self.output_bytes
