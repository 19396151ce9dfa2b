from __future__ import annotations

import json
import os
import sys

from PIL import Image
import pytest

from app.photo_batch import PhotoBatch
from core.services.sort_service import SortService


class RecordingSorter(SortService):
    """Keeps the pre-sort order so scan order can be asserted."""

    def __init__(self) -> None:
        self.seen: list[str] = []

    def sort(self, records):
        records = list(records)
        self.seen = [r.alt for r in records]
        return super().sort(records)


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_missing_source_dir_is_created_and_empty_json_written(config_factory):
    config = config_factory()
    result = PhotoBatch(config).run()
    assert config.source_dir.is_dir()
    assert config.output_file.read_text(encoding="utf-8") == "[]"
    assert result.records == []
    assert result.summary is None


def test_source_without_images_writes_empty_json(config_factory, make_image):
    config = config_factory()
    config.source_dir.mkdir(parents=True)
    (config.source_dir / "notes.txt").write_text("hi", encoding="utf-8")
    config.output_file.parent.mkdir(parents=True)
    config.output_file.write_text('[{"old": true}]', encoding="utf-8")
    PhotoBatch(config).run()
    assert config.output_file.read_text(encoding="utf-8") == "[]"
    assert not config.thumb_dir.exists()


def test_derivatives_variant(config_factory, make_image, canon_exif):
    config = config_factory()
    make_image(config.source_dir / "big_city-night.jpg", size=(2400, 1200), exif=canon_exif)
    make_image(config.source_dir / "small.png", size=(300, 200))

    result = PhotoBatch(config).run()

    data = _read(config.output_file)
    assert [item["alt"] for item in data] == ["big city night", "small"]
    first = data[0]
    assert first["thumb"] == "/assets/img/photography/thumbs/big_city-night.webp"
    assert first["display"] == "/assets/img/photography/display/big_city-night.webp"
    assert first["date"] == "2021-06-15"
    assert first["camera"] == "Canon EOS R5"
    assert first["exif"]["width"] == 2400
    assert first["exif"]["height"] == 1200
    assert first["caption"] == "" and first["tags"] == []

    with Image.open(config.thumb_dir / "big_city-night.webp") as im:
        assert im.size == (800, 400)
    with Image.open(config.display_dir / "big_city-night.webp") as im:
        assert im.size == (1920, 960)
    with Image.open(config.thumb_dir / "small.webp") as im:
        assert im.size == (300, 200)

    assert result.failed == []
    assert result.summary is not None
    assert result.summary.thumb_bytes == sum(
        (config.thumb_dir / n).stat().st_size for n in ("big_city-night.webp", "small.webp")
    )
    assert result.summary.original_bytes == sum(
        p.stat().st_size for p in config.source_dir.iterdir()
    )


def test_single_variant(config_factory, make_image):
    config = config_factory(variant="single", web_root="/photos/")
    make_image(config.source_dir / "a-b.jpg", size=(2500, 1000))

    PhotoBatch(config).run()

    data = _read(config.output_file)
    assert list(data[0]) == ["src", "alt", "caption", "date", "camera", "tags", "exif"]
    assert data[0]["src"] == "/photos/a-b.webp"
    assert data[0]["exif"]["width"] == 2500
    with Image.open(config.output_dir / "a-b.webp") as im:
        assert im.size == (1920, 768)
    assert not config.thumb_dir.exists()


def test_corrupt_file_is_skipped_and_batch_continues(config_factory, make_image, log_messages):
    config = config_factory()
    make_image(config.source_dir / "a.jpg")
    (config.source_dir / "b.jpg").write_bytes(b"\xff\xd8 corrupt")
    make_image(config.source_dir / "c.jpg")
    sorter = RecordingSorter()

    result = PhotoBatch(config, sorter=sorter).run()

    assert sorter.seen == ["a", "c"]
    assert [r.alt for r in result.records] == ["a", "c"]
    assert len(_read(config.output_file)) == 2
    assert [name for name, _ in result.failed] == ["b.jpg"]
    assert any(m.startswith("ERROR|") and "b.jpg" in m for m in log_messages)
    assert not (config.thumb_dir / "b.webp").exists()


def test_dated_records_sorted_first(config_factory, make_image):
    config = config_factory()
    stamps = [("a.jpg", None), ("b.jpg", "2019:01:01 00:00:00"), ("c.jpg", "2022:03:04 05:06:07")]
    for name, stamp in stamps:
        exif = None
        if stamp:
            tags = Image.Exif()
            tags[306] = stamp
            exif = tags.tobytes()
        make_image(config.source_dir / name, exif=exif)

    PhotoBatch(config).run()

    data = _read(config.output_file)
    assert [(d["alt"], d["date"]) for d in data] == [
        ("c", "2022-03-04"),
        ("b", "2019-01-01"),
        ("a", ""),
    ]


def test_rerun_is_byte_identical(config_factory, make_image):
    config = config_factory()
    make_image(config.source_dir / "x.jpg")
    make_image(config.source_dir / "y.png")
    PhotoBatch(config).run()
    first = config.output_file.read_bytes()
    PhotoBatch(config).run()
    assert config.output_file.read_bytes() == first


def test_progress_and_summary_logged(config_factory, make_image, log_messages):
    config = config_factory()
    make_image(config.source_dir / "x.jpg", size=(40, 30))
    PhotoBatch(config).run()
    assert any("x.jpg: 40x30 | - | original" in m for m in log_messages)
    assert "INFO|--- Summary ---" in log_messages
    assert any("smaller for initial page load" in m for m in log_messages)


@pytest.mark.skipif(
    sys.platform != "linux", reason="needs a filesystem that accepts non-UTF-8 names"
)
def test_undecodable_file_name_is_kept_and_sidecar_replaced(config_factory, make_image):
    config = config_factory()
    make_image(config.source_dir / "good.jpg")
    make_image(config.source_dir / os.fsdecode(b"caf\xe9.jpg"))
    config.output_file.parent.mkdir(parents=True)
    config.output_file.write_text('[{"old": 1}]', encoding="utf-8")

    result = PhotoBatch(config).run()

    assert result.failed == []
    data = _read(config.output_file)
    assert [d["alt"] for d in data] == ["caf�", "good"]
    assert data[0]["thumb"] == "/assets/img/photography/thumbs/caf�.webp"
    assert (config.thumb_dir / "caf�.webp").is_file()
    assert not config.output_file.with_name("photos.json.tmp").exists()
