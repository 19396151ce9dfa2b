from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

from loguru import logger
from PIL import Image
import pytest

from infrastructure.settings import PipelineConfig


@pytest.fixture(autouse=True)
def _reset_loguru() -> Iterator[None]:
    yield
    logger.remove()


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru output as "LEVEL|message" strings."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda m: messages.append(str(m).rstrip("\n")), level="DEBUG", format="{level}|{message}"
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """Write a solid-colour image to disk and return its path."""

    def _make(
        path: Path,
        size: tuple[int, int] = (64, 48),
        mode: str = "RGB",
        fmt: str | None = None,
        exif: bytes | None = None,
        **save_kwargs,
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        colors = {"RGB": (200, 120, 40), "RGBA": (200, 120, 40, 128), "CMYK": (10, 60, 90, 0)}
        im = Image.new(mode, size, colors.get(mode, 128))
        if exif is not None:
            save_kwargs["exif"] = exif
        im.save(path, format=fmt, **save_kwargs)
        return path

    return _make


@pytest.fixture
def canon_exif() -> bytes:
    exif = Image.Exif()
    exif[271] = "Canon"
    exif[272] = "EOS R5"
    exif[306] = "2021:06:15 10:30:00"
    return exif.tobytes()


@pytest.fixture
def config_factory(tmp_path: Path) -> Callable[..., PipelineConfig]:
    """Build a `PipelineConfig` rooted in the test's temporary directory."""

    def _make(**overrides) -> PipelineConfig:
        values = {
            "source_dir": tmp_path / "photos-source",
            "output_dir": tmp_path / "public" / "assets" / "img" / "photography",
            "output_file": tmp_path / "src" / "data" / "photos.json",
        }
        values.update(overrides)
        return PipelineConfig(**values)

    return _make
