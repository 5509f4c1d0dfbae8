from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Sequence, Tuple

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..models import EdgeColor
from .errors import EdgeSampleError, ToolInvocationError, UnreadableDimensionsError

logger = logging.getLogger(__name__)

Size = Tuple[int, int]

_PILLOW_FORMATS = {
    ".webp": "WEBP",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
}

_FX_RGB_FORMAT = ",".join(f"%[fx:int(255*{channel}+0.5)]" for channel in ("r", "g", "b"))


class RasterTool(Protocol):
    """Raster operations the derivative pipeline relies on.

    Encoding is selected from the target suffix (``.webp``, ``.jpg`` or
    ``.png``); ``quality`` follows ImageMagick's meaning for each format.
    """

    def measure(self, source: Path) -> Size:
        ...

    def sample_edge_color(self, source: Path, band_height: int) -> EdgeColor:
        ...

    def extend_canvas(self, source: Path, target: Path, size: Size, background: EdgeColor) -> None:
        ...

    def render_cover_crop(self, source: Path, target: Path, size: Size, quality: int) -> None:
        ...

    def resize_to_width(self, source: Path, target: Path, width: int, quality: int) -> Size:
        ...

    def resize_exact(self, source: Path, target: Path, size: Size) -> None:
        ...


class PillowRasterTool:
    """In-process implementation backed by Pillow and numpy."""

    def measure(self, source: Path) -> Size:
        try:
            with Image.open(source) as opened:
                width, height = opened.size
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise UnreadableDimensionsError(source) from exc
        if width <= 0 or height <= 0:
            raise UnreadableDimensionsError(source)
        return width, height

    def sample_edge_color(self, source: Path, band_height: int) -> EdgeColor:
        image = self._open(source).convert("RGB")
        height = image.size[1]
        if band_height <= 0 or height < band_height:
            raise EdgeSampleError(source, height, band_height)
        pixels = np.asarray(image, dtype=np.float64)
        bands = np.concatenate((pixels[:band_height], pixels[height - band_height :]), axis=0)
        red, green, blue = (int(round(channel)) for channel in bands.reshape(-1, 3).mean(axis=0))
        return EdgeColor(red, green, blue)

    def extend_canvas(self, source: Path, target: Path, size: Size, background: EdgeColor) -> None:
        logger.debug("Extending %s to %sx%s with %s", source, size[0], size[1], background.hex)
        image = self._open(source)
        canvas = Image.new("RGBA", size, background.rgb + (255,))
        offset = ((size[0] - image.width) // 2, (size[1] - image.height) // 2)
        canvas.paste(image, offset, image)
        self._save(canvas, target, quality=90)

    def render_cover_crop(self, source: Path, target: Path, size: Size, quality: int) -> None:
        image = self._open(source)
        fitted = ImageOps.fit(image, size, method=Image.Resampling.LANCZOS, centering=(0.5, 0.5))
        self._save(fitted, target, quality=quality)

    def resize_to_width(self, source: Path, target: Path, width: int, quality: int) -> Size:
        image = self._open(source)
        height = max(1, round(image.height * width / image.width))
        resized = image.resize((width, height), Image.Resampling.LANCZOS)
        self._save(resized, target, quality=quality)
        return width, height

    def resize_exact(self, source: Path, target: Path, size: Size) -> None:
        image = self._open(source)
        resized = image.resize(size, Image.Resampling.LANCZOS)
        self._save(resized, target, quality=None)

    def _open(self, source: Path) -> Image.Image:
        try:
            with Image.open(source) as opened:
                return opened.convert("RGBA")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise ToolInvocationError(source, f"unable to decode: {exc}") from exc

    def _save(self, image: Image.Image, target: Path, quality: Optional[int]) -> None:
        fmt = _PILLOW_FORMATS.get(target.suffix.lower())
        if fmt is None:
            raise ToolInvocationError(target, f"unsupported output format {target.suffix!r}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if fmt == "JPEG":
                image.convert("RGB").save(target, format=fmt, quality=quality or 75, optimize=True)
            elif fmt == "WEBP":
                image.save(target, format=fmt, quality=quality or 75)
            else:
                # ImageMagick reads the tens digit of a PNG quality as the zlib level.
                level = min((quality or 75) // 10, 9)
                image.save(target, format=fmt, compress_level=level)
        except (OSError, ValueError) as exc:
            raise ToolInvocationError(target, f"unable to encode: {exc}") from exc


@dataclass(frozen=True, slots=True)
class MagickRasterTool:
    """ImageMagick command-line implementation.

    ``timeout`` bounds every invocation; a hung process is reported as a
    :class:`ToolInvocationError` for the entry being processed.
    """

    convert: Tuple[str, ...]
    identify: Tuple[str, ...]
    timeout: Optional[float] = None

    @classmethod
    def detect(cls, timeout: Optional[float] = None) -> "MagickRasterTool":
        magick = shutil.which("magick")
        if magick:
            return cls(convert=(magick,), identify=(magick, "identify"), timeout=timeout)
        convert = shutil.which("convert")
        identify = shutil.which("identify")
        if convert and identify:
            return cls(convert=(convert,), identify=(identify,), timeout=timeout)
        raise RuntimeError("missing ImageMagick (need `magick` or both `convert` + `identify`)")

    def measure(self, source: Path) -> Size:
        cmd = [*self.identify, "-ping", "-format", "%wx%h\n", str(source)]
        try:
            raw = self._run(cmd, source)
        except ToolInvocationError as exc:
            raise UnreadableDimensionsError(source) from exc
        lines = raw.strip().splitlines()
        if not lines:
            raise UnreadableDimensionsError(source)
        # multi-frame inputs report one line per frame
        width, _, height = lines[0].partition("x")
        try:
            size = int(width), int(height)
        except ValueError as exc:
            raise UnreadableDimensionsError(source) from exc
        if size[0] <= 0 or size[1] <= 0:
            raise UnreadableDimensionsError(source)
        return size

    def sample_edge_color(self, source: Path, band_height: int) -> EdgeColor:
        height = self.measure(source)[1]
        if band_height <= 0 or height < band_height:
            raise EdgeSampleError(source, height, band_height)
        band = f"x{band_height}+0+0"
        cmd = [
            *self.convert,
            str(source),
            "(", "-clone", "0", "-gravity", "North", "-crop", band, "+repage", ")",
            "(", "-clone", "0", "-gravity", "South", "-crop", band, "+repage", ")",
            "-delete", "0",
            "-append",
            "-colorspace", "sRGB",
            "-scale", "1x1!",
            # fx channels are normalized to 0..1 whatever the source depth
            "-format", _FX_RGB_FORMAT,
            "info:",
        ]
        raw = self._run(cmd, source).strip()
        try:
            red, green, blue = (int(part) for part in raw.split(","))
        except ValueError as exc:
            raise ToolInvocationError(source, f"unexpected color output {raw!r}") from exc
        return EdgeColor(red, green, blue)

    def extend_canvas(self, source: Path, target: Path, size: Size, background: EdgeColor) -> None:
        cmd = [
            *self.convert,
            str(source),
            "-background", background.hex,
            "-gravity", "center",
            "-extent", f"{size[0]}x{size[1]}",
            str(target),
        ]
        self._write(cmd, target)

    def render_cover_crop(self, source: Path, target: Path, size: Size, quality: int) -> None:
        geometry = f"{size[0]}x{size[1]}"
        cmd = [
            *self.convert,
            str(source),
            "-resize", f"{geometry}^",
            "-gravity", "center",
            "-extent", geometry,
            "-quality", str(quality),
            str(target),
        ]
        self._write(cmd, target)

    def resize_to_width(self, source: Path, target: Path, width: int, quality: int) -> Size:
        cmd = [*self.convert, str(source), "-resize", f"{width}x", "-quality", str(quality), str(target)]
        self._write(cmd, target)
        return self.measure(target)

    def resize_exact(self, source: Path, target: Path, size: Size) -> None:
        cmd = [*self.convert, str(source), "-resize", f"{size[0]}x{size[1]}!", str(target)]
        self._write(cmd, target)

    def _write(self, cmd: Sequence[str], target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        self._run(cmd, target)
        if not target.exists():
            raise ToolInvocationError(target, "produced no output")

    def _run(self, cmd: Sequence[str], path: Path) -> str:
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(list(cmd), text=True, capture_output=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as exc:
            raise ToolInvocationError(path, f"timed out after {self.timeout}s") from exc
        except OSError as exc:
            raise ToolInvocationError(path, str(exc)) from exc
        if proc.returncode != 0:
            raise ToolInvocationError(path, proc.stderr.strip() or f"exit status {proc.returncode}")
        return proc.stdout


def create_raster_tool(backend: str = "pillow", timeout: Optional[float] = None) -> RasterTool:
    if backend == "pillow":
        return PillowRasterTool()
    if backend == "magick":
        return MagickRasterTool.detect(timeout=timeout)
    raise ValueError(f"Unknown raster backend: {backend}")
