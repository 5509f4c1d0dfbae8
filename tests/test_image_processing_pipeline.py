from __future__ import annotations

import logging
from pathlib import Path

import pytest
from PIL import Image

from hookmountain_site.image_processing.errors import ConfigurationError, ToolInvocationError
from hookmountain_site.image_processing.normalizer import ShapeNormalizer
from hookmountain_site.image_processing.pipeline import DerivativePipeline
from hookmountain_site.image_processing.raster import PillowRasterTool
from hookmountain_site.models import Category, DerivativeSpec, EdgeColor, EntryState


class FakeRasterTool:
    """Records every call and writes placeholder files instead of pixels."""

    def __init__(self, sizes: dict[str, tuple[int, int]] | None = None, fail_names=()) -> None:
        self.sizes = sizes or {}
        self.fail_names = set(fail_names)
        self.calls: list[tuple[str, str]] = []

    def measure(self, source: Path) -> tuple[int, int]:
        self.calls.append(("measure", source.name))
        return self.sizes.get(source.name, (300, 400))

    def sample_edge_color(self, source: Path, band_height: int) -> EdgeColor:
        self.calls.append(("sample_edge_color", source.name))
        return EdgeColor(1, 2, 3)

    def extend_canvas(self, source: Path, target: Path, size, background: EdgeColor) -> None:
        self.calls.append(("extend_canvas", source.name))
        target.write_bytes(b"canvas")

    def render_cover_crop(self, source: Path, target: Path, size, quality: int) -> None:
        self.calls.append(("render_cover_crop", target.name))
        if any(target.name.startswith(f"{name}-") for name in self.fail_names):
            raise ToolInvocationError(target, "exit status 1")
        self._touch(target)

    def resize_to_width(self, source: Path, target: Path, width: int, quality: int) -> tuple[int, int]:
        self.calls.append(("resize_to_width", target.name))
        self._touch(target)
        return width, width // 4

    def resize_exact(self, source: Path, target: Path, size) -> None:
        self.calls.append(("resize_exact", target.name))
        self._touch(target)

    def _touch(self, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(b"x")


def _write_sources(input_dir: Path, names: list[str], size=(300, 400)) -> None:
    input_dir.mkdir(parents=True, exist_ok=True)
    for name in names:
        Image.new("RGB", size, (120, 90, 60)).save(input_dir / name)


def _pattern_specs(count: int) -> list[DerivativeSpec]:
    return [
        DerivativeSpec(Category.PATTERNS, f"upload-{index}.png", f"pattern-{index}", (320, 640))
        for index in range(count)
    ]


def test_missing_source_is_skipped_and_batch_continues(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    input_dir = tmp_path / "images"
    specs = _pattern_specs(5)
    _write_sources(input_dir, [spec.source for spec in specs if spec.name != "pattern-2"])
    pipeline = DerivativePipeline(PillowRasterTool(), input_dir, tmp_path / "optimized")

    with caplog.at_level(logging.WARNING):
        report = pipeline.process_catalog(specs)

    assert [result.state for result in report.results] == [
        EntryState.DONE,
        EntryState.DONE,
        EntryState.SKIPPED,
        EntryState.DONE,
        EntryState.DONE,
    ]
    skips = [record for record in caplog.records if "[SKIP]" in record.getMessage()]
    assert len(skips) == 1
    assert "upload-2.png" in skips[0].getMessage()
    assert report.file_counts["patterns"] == 4 * 4
    assert report.output_bytes > 0


def test_rerun_produces_identical_filenames(tmp_path: Path) -> None:
    input_dir = tmp_path / "images"
    output_dir = tmp_path / "optimized"
    specs = _pattern_specs(2)
    _write_sources(input_dir, [spec.source for spec in specs], size=(200, 200))
    pipeline = DerivativePipeline(PillowRasterTool(), input_dir, output_dir)

    pipeline.process_catalog(specs)
    first = sorted(path.name for path in output_dir.rglob("*") if path.is_file())
    pipeline.process_catalog(specs)
    second = sorted(path.name for path in output_dir.rglob("*") if path.is_file())

    assert first == second
    assert "pattern-0-640w.webp" in first


def test_end_to_end_outputs_match_target_ratio(tmp_path: Path) -> None:
    input_dir = tmp_path / "images"
    _write_sources(input_dir, ["square.png"], size=(240, 240))
    spec = DerivativeSpec(Category.FEATURED, "square.png", "about-portrait", (350, 700))
    pipeline = DerivativePipeline(PillowRasterTool(), input_dir, tmp_path / "optimized")

    result = pipeline.process_entry(spec)

    assert result.state is EntryState.DONE
    assert len(result.outputs) == 4
    for output in result.outputs:
        assert output.path.parent == tmp_path / "optimized" / "featured"
        with Image.open(output.path) as rendered:
            assert rendered.size == (output.width, int(output.width / 0.75))


def test_logo_and_favicon_skip_normalization(tmp_path: Path) -> None:
    input_dir = tmp_path / "images"
    input_dir.mkdir()
    for name in ("logo.png", "icon.png", "square.png"):
        (input_dir / name).write_bytes(b"raw")
    tool = FakeRasterTool(sizes={"square.png": (500, 500)})
    catalog = [
        DerivativeSpec(Category.LOGO, "logo.png", "logo", (120, 240, 300)),
        DerivativeSpec(Category.FAVICON, "icon.png", "favicon", (16, 32, 180)),
        DerivativeSpec(Category.CATEGORIES, "square.png", "sweaters", (400, 800)),
    ]
    pipeline = DerivativePipeline(tool, input_dir, tmp_path / "optimized")

    report = pipeline.process_catalog(catalog)

    assert len(report.done) == 3
    normalizing_calls = ("measure", "sample_edge_color", "extend_canvas")
    normalized_sources = [name for call, name in tool.calls if call in normalizing_calls]
    assert normalized_sources == ["square.png", "square.png", "square.png"]
    assert report.file_counts == {"patterns": 0, "categories": 4, "featured": 0, "logo": 6}
    logo_result = report.results[0]
    assert [(output.width, output.height) for output in logo_result.outputs] == [(120, 30), (240, 60), (300, 75)]


def test_tool_failure_marks_entry_failed_and_cleans_canvas(tmp_path: Path) -> None:
    input_dir = tmp_path / "images"
    input_dir.mkdir()
    for name in ("a.png", "b.png"):
        (input_dir / name).write_bytes(b"raw")
    tool = FakeRasterTool(sizes={"a.png": (400, 400)}, fail_names={"broken"})
    temp_dir = tmp_path / "tmp"
    pipeline = DerivativePipeline(
        tool,
        input_dir,
        tmp_path / "optimized",
        normalizer=ShapeNormalizer(tool, temp_dir=temp_dir),
    )

    report = pipeline.process_catalog(
        [
            DerivativeSpec(Category.PATTERNS, "a.png", "broken", (320, 640)),
            DerivativeSpec(Category.PATTERNS, "b.png", "fine", (320, 640)),
        ]
    )

    assert [result.state for result in report.results] == [EntryState.FAILED, EntryState.DONE]
    assert "exit status 1" in (report.results[0].error or "")
    assert list(temp_dir.iterdir()) == []


def test_unreadable_source_is_skipped(tmp_path: Path) -> None:
    input_dir = tmp_path / "images"
    input_dir.mkdir()
    (input_dir / "broken.jpg").write_bytes(b"not an image")
    pipeline = DerivativePipeline(PillowRasterTool(), input_dir, tmp_path / "optimized")

    result = pipeline.process_entry(DerivativeSpec(Category.PATTERNS, "broken.jpg", "broken", (320,)))

    assert result.state is EntryState.SKIPPED
    assert "Could not read dimensions" in (result.error or "")


def test_missing_input_directory_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        DerivativePipeline(PillowRasterTool(), tmp_path / "missing", tmp_path / "optimized")


def test_oversized_source_does_not_abort_batch(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 2000)
    input_dir = tmp_path / "images"
    input_dir.mkdir()
    Image.new("1", (100, 100)).save(input_dir / "huge.png")
    Image.new("RGB", (30, 40), "green").save(input_dir / "ok.png")
    pipeline = DerivativePipeline(PillowRasterTool(), input_dir, tmp_path / "optimized")

    report = pipeline.process_catalog(
        [
            DerivativeSpec(Category.PATTERNS, "huge.png", "huge", (320,)),
            DerivativeSpec(Category.PATTERNS, "ok.png", "ok", (320,)),
        ]
    )

    assert [result.state for result in report.results] == [EntryState.SKIPPED, EntryState.DONE]
    assert (tmp_path / "optimized" / "patterns" / "ok-320w.webp").exists()


def test_encoder_value_error_fails_only_that_entry(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    input_dir = tmp_path / "images"
    _write_sources(input_dir, ["a.png"])
    original_save = Image.Image.save

    def fake_save(self, fp, *args, **kwargs):
        if str(fp).endswith(".webp"):
            raise ValueError("encoder rejected image")
        return original_save(self, fp, *args, **kwargs)

    monkeypatch.setattr(Image.Image, "save", fake_save)
    pipeline = DerivativePipeline(PillowRasterTool(), input_dir, tmp_path / "optimized")

    result = pipeline.process_entry(DerivativeSpec(Category.PATTERNS, "a.png", "a", (320,)))

    assert result.state is EntryState.FAILED
    assert "encoder rejected image" in (result.error or "")
