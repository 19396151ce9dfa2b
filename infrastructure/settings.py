"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any

from core.services.interfaces import ResizeTarget
from infrastructure.file_scanner import DEFAULT_EXTENSIONS

VARIANT_SINGLE = "single"
VARIANT_DERIVATIVES = "derivatives"
VARIANTS = (VARIANT_SINGLE, VARIANT_DERIVATIVES)


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path | None = None) -> None:
        self._path = Path(settings_path) if settings_path is not None else None
        self._data: dict[str, Any] = {}
        if self._path is None:
            return
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    @property
    def path(self) -> Path | None:
        """Location the settings were read from, if any."""
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node


def _target(settings: JsonSettings, prefix: str, width: int, quality: int) -> ResizeTarget:
    try:
        return ResizeTarget(
            width=int(settings.get(f"{prefix}.width", width)),
            quality=int(settings.get(f"{prefix}.quality", quality)),
        )
    except (TypeError, ValueError) as ex:
        raise ValueError(f"Invalid resize target '{prefix}': {ex}") from ex


@dataclass
class PipelineConfig:
    """Resolved configuration for one batch run."""

    source_dir: Path = Path("photos-source")
    output_dir: Path = Path("public/assets/img/photography")
    output_file: Path = Path("src/data/photos.json")
    web_root: str = "/assets/img/photography"
    variant: str = VARIANT_DERIVATIVES
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    thumb: ResizeTarget = field(default_factory=lambda: ResizeTarget(800, 80))
    display: ResizeTarget = field(default_factory=lambda: ResizeTarget(1920, 85))
    log_dir: Path | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.variant not in VARIANTS:
            raise ValueError(f"Unknown variant '{self.variant}', expected one of {VARIANTS}")

    @property
    def thumb_dir(self) -> Path:
        """Directory for thumbnail derivatives."""
        return self.output_dir / "thumbs"

    @property
    def display_dir(self) -> Path:
        """Directory for display derivatives."""
        return self.output_dir / "display"

    @classmethod
    def from_settings(cls, settings: JsonSettings, **overrides: Any) -> PipelineConfig:
        """Build a config from `settings`, letting non-None `overrides` win.

        Relative paths are resolved against the current working directory.
        """
        defaults = cls()
        values: dict[str, Any] = {
            "source_dir": settings.get("paths.source_dir", defaults.source_dir),
            "output_dir": settings.get("paths.output_dir", defaults.output_dir),
            "output_file": settings.get("paths.output_file", defaults.output_file),
            "web_root": settings.get("paths.web_root", defaults.web_root),
            "variant": settings.get("variant", defaults.variant),
            "log_dir": settings.get("logging.dir", defaults.log_dir),
            "log_level": settings.get("logging.level", defaults.log_level),
        }
        for key, value in overrides.items():
            if value is not None:
                values[key] = value

        extensions = settings.get("scan.extensions", list(defaults.extensions))
        if not isinstance(extensions, list) or not extensions:
            raise ValueError("scan.extensions must be a non-empty list")

        log_dir = values["log_dir"]
        return cls(
            source_dir=Path(values["source_dir"]).resolve(),
            output_dir=Path(values["output_dir"]).resolve(),
            output_file=Path(values["output_file"]).resolve(),
            web_root=str(values["web_root"]),
            variant=str(values["variant"]),
            extensions=tuple(str(e).lower() for e in extensions),
            thumb=_target(
                settings, "derivatives.thumb", defaults.thumb.width, defaults.thumb.quality
            ),
            display=_target(
                settings, "derivatives.display", defaults.display.width, defaults.display.quality
            ),
            log_dir=Path(log_dir).resolve() if log_dir else None,
            log_level=str(values["log_level"]).upper(),
        )
