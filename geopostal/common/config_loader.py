"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from geopostal.common.constants import DEFAULT_EARTH_RADII
from geopostal.common.errors import ConfigError
from geopostal.common.fs import read_yaml
from geopostal.common.schema import validate_settings_config

SETTINGS_FILENAME = "settings.yml"


@dataclass(frozen=True)
class Settings:
    dataset_path: Path | None = None
    country: str | None = None
    early_exit: bool = True
    earth_radius: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_EARTH_RADII))
    log_level: str = "INFO"


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    return _deep_merge(base, overlay)


def load_settings(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> Settings:
    path = config_dir / SETTINGS_FILENAME
    if not path.exists():
        if overlay_config_dir is not None and (overlay_config_dir / SETTINGS_FILENAME).exists():
            raise ConfigError(f"Overlay given but base config is missing: {path}")
        return Settings()

    overlay_path = overlay_config_dir / SETTINGS_FILENAME if overlay_config_dir is not None else None
    cfg = validate_settings_config(_load_yaml_with_overlay(path, overlay_path), allow_unknown=allow_unknown)

    dataset = cfg["dataset"]
    radii = dict(DEFAULT_EARTH_RADII)
    for unit, value in (cfg.get("earth_radius") or {}).items():
        if unit in radii and value is not None:
            radii[unit] = float(value)

    return Settings(
        dataset_path=Path(dataset["path"]),
        country=dataset.get("country"),
        early_exit=dataset.get("early_exit", True),
        earth_radius=radii,
        log_level=str((cfg.get("logging") or {}).get("level", "INFO")).upper(),
    )
