"""Batch orchestration: scan, transcode, extract, build, sort, and write."""

from __future__ import annotations

from loguru import logger

from core.models import PhotoRecord
from core.services.exif_scanner import scan_exif
from core.services.interfaces import BatchResult, BatchSummary, IImageService
from core.services.record_builder import (
    build_derivative_record,
    build_single_record,
    join_web_path,
    web_safe_name,
    webp_name,
)
from core.services.sort_service import SortService
from infrastructure.file_scanner import list_source_images
from infrastructure.image_service import ImageService
from infrastructure.json_repository import JsonPhotoRepository
from infrastructure.settings import VARIANT_DERIVATIVES, PipelineConfig
from infrastructure.utils import file_size, format_bytes, percent_smaller


class PhotoBatch:
    """Runs the sidecar pipeline once over the configured source directory.

    Files are handled one at a time; an error in one file is logged and that
    file is left out of the collection.
    """

    def __init__(
        self,
        config: PipelineConfig,
        image_service: IImageService | None = None,
        repo: JsonPhotoRepository | None = None,
        sorter: SortService | None = None,
    ) -> None:
        """Create a PhotoBatch.

        Args:
            config: Resolved run configuration.
            image_service: Imaging capability (defaults to Pillow `ImageService`).
            repo: JSON writer (defaults to `JsonPhotoRepository`).
            sorter: Ordering service (defaults to `SortService`).
        """
        self._config = config
        self._images = image_service or ImageService()
        self._repo = repo or JsonPhotoRepository()
        self._sorter = sorter or SortService()

    def run(self) -> BatchResult:
        """Process every eligible file and write the JSON collection."""
        cfg = self._config
        if not cfg.source_dir.exists():
            logger.info("Source directory not found: {}", cfg.source_dir)
            logger.info("Creating directory...")
            cfg.source_dir.mkdir(parents=True, exist_ok=True)
            return self._write_empty(
                f"Drop your photos into {cfg.source_dir.name}/ and run again."
            )

        files = list_source_images(cfg.source_dir, cfg.extensions)
        if not files:
            logger.info("No image files found in {}", cfg.source_dir)
            return self._write_empty("")

        logger.info("Found {} image(s) in {}", len(files), cfg.source_dir)
        if cfg.variant == VARIANT_DERIVATIVES:
            cfg.thumb_dir.mkdir(parents=True, exist_ok=True)
            cfg.display_dir.mkdir(parents=True, exist_ok=True)
        else:
            cfg.output_dir.mkdir(parents=True, exist_ok=True)

        summary = BatchSummary()
        records: list[PhotoRecord] = []
        failed: list[tuple[str, str]] = []
        for name in files:
            summary.original_bytes += file_size(cfg.source_dir / name)
            try:
                records.append(self.process_file(name, summary))
            except Exception as ex:  # pylint: disable=broad-exception-caught
                logger.error("  Error processing {}: {}", web_safe_name(name), ex)
                failed.append((name, str(ex)))

        ordered = self._sorter.sort(records)
        count = self._repo.save(cfg.output_file, ordered)
        logger.info("")
        logger.info("Wrote {} photo(s) to {}", count, cfg.output_file)
        self._log_summary(summary)
        return BatchResult(
            records=ordered, failed=failed, output_file=cfg.output_file, summary=summary
        )

    def process_file(self, name: str, summary: BatchSummary | None = None) -> PhotoRecord:
        """Transcode one source file and return its record.

        Raises whatever the imaging layer raises; `run` turns that into a
        skipped file.
        """
        cfg = self._config
        source = cfg.source_dir / name
        decoded = self._images.decode_metadata(source)
        meta = scan_exif(decoded.exif)
        label = web_safe_name(name)
        out_name = webp_name(label)
        original_size = file_size(source)

        if cfg.variant == VARIANT_DERIVATIVES:
            thumb = self._images.resize_and_encode(source, cfg.thumb_dir / out_name, cfg.thumb)
            display = self._images.resize_and_encode(
                source, cfg.display_dir / out_name, cfg.display
            )
            record = build_derivative_record(
                label,
                thumb=join_web_path(cfg.web_root, "thumbs", out_name),
                display=join_web_path(cfg.web_root, "display", out_name),
                decoded=decoded,
                meta=meta,
            )
            produced = thumb.size_bytes + display.size_bytes
            sizes = (
                f"thumb {format_bytes(thumb.size_bytes)} + "
                f"display {format_bytes(display.size_bytes)}"
            )
            if summary is not None:
                summary.thumb_bytes += thumb.size_bytes
                summary.display_bytes += display.size_bytes
        else:
            single = self._images.resize_and_encode(
                source, cfg.output_dir / out_name, cfg.display
            )
            record = build_single_record(
                label, src=join_web_path(cfg.web_root, out_name), decoded=decoded, meta=meta
            )
            produced = single.size_bytes
            sizes = f"webp {format_bytes(single.size_bytes)}"
            if summary is not None:
                summary.single_bytes += single.size_bytes

        logger.info(
            "  {}: {}x{} | {} | original {} -> {} ({}% smaller)",
            label,
            decoded.width,
            decoded.height,
            meta.camera or "-",
            format_bytes(original_size),
            sizes,
            percent_smaller(original_size, produced),
        )
        return record

    def _write_empty(self, hint: str) -> BatchResult:
        output_file = self._config.output_file
        self._repo.save(output_file, [])
        logger.info("Wrote empty {}", output_file.name)
        if hint:
            logger.info(hint)
        return BatchResult(records=[], output_file=output_file)

    def _log_summary(self, summary: BatchSummary) -> None:
        original = summary.original_bytes
        logger.info("")
        logger.info("--- Summary ---")
        logger.info("  Originals:     {}", format_bytes(original))
        if self._config.variant == VARIANT_DERIVATIVES:
            thumbs = summary.thumb_bytes
            logger.info("  Thumbnails:    {} (grid view)", format_bytes(thumbs))
            logger.info("  Display:       {} (lightbox)", format_bytes(summary.display_bytes))
            logger.info(
                "  Page load:     {} (was {})", format_bytes(thumbs), format_bytes(original)
            )
            logger.info(
                "  Reduction:     {}% smaller for initial page load",
                percent_smaller(original, thumbs),
            )
        else:
            logger.info("  WebP:          {}", format_bytes(summary.single_bytes))
            logger.info(
                "  Reduction:     {}% smaller", percent_smaller(original, summary.single_bytes)
            )
