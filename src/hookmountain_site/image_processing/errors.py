from __future__ import annotations

from pathlib import Path


class DerivativeError(RuntimeError):
    """Base class for per-entry pipeline failures."""

    def __init__(self, path: Path | str, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class MissingSourceError(DerivativeError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(path, "File not found")


class UnreadableDimensionsError(DerivativeError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(path, "Could not read dimensions")


class EdgeSampleError(DerivativeError, ValueError):
    def __init__(self, path: Path | str, height: int, band_height: int) -> None:
        self.height = height
        self.band_height = band_height
        super().__init__(
            path,
            f"Image height {height}px is smaller than the {band_height}px edge sample band",
        )


class ToolInvocationError(DerivativeError):
    def __init__(self, path: Path | str, detail: str) -> None:
        self.detail = detail
        super().__init__(path, f"Raster tool failed ({detail})")


class ConfigurationError(RuntimeError):
    """Raised once at startup when the site layout is unusable."""
