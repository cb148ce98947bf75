"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from geopostal.common.constants import UNITS
from geopostal.common.errors import ConfigError

LOG_LEVELS = {"DEBUG", "INFO", "WARN", "WARNING", "ERROR"}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_mapping(obj: object, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def validate_country_code(country: object, ctx: str = "dataset.country") -> str | None:
    if country is None:
        return None
    if not isinstance(country, str) or len(country) != 2:
        raise ConfigError(f"{ctx} must be a 2 character ISO country code")
    return country


def validate_settings_config(cfg: object, *, allow_unknown: bool = False) -> dict:
    cfg = _assert_mapping(cfg, "settings")
    top_known = {"dataset", "earth_radius", "logging"}
    _assert_required_keys(cfg, {"dataset"}, "settings")
    _assert_no_unknown_keys(cfg, top_known, "settings", allow_unknown)

    dataset = _assert_mapping(cfg["dataset"], "dataset")
    _assert_required_keys(dataset, {"path"}, "dataset")
    _assert_no_unknown_keys(dataset, {"path", "country", "early_exit"}, "dataset", allow_unknown)
    if not isinstance(dataset["path"], str) or not dataset["path"]:
        raise ConfigError("dataset.path must be a non-empty string")
    validate_country_code(dataset.get("country"))
    if not isinstance(dataset.get("early_exit", True), bool):
        raise ConfigError("dataset.early_exit must be a boolean")

    radii = _assert_mapping(cfg.get("earth_radius") or {}, "earth_radius")
    _assert_no_unknown_keys(radii, set(UNITS), "earth_radius", allow_unknown)
    for unit in UNITS:
        value = radii.get(unit)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigError(f"earth_radius.{unit} must be a positive number")

    logging_cfg = _assert_mapping(cfg.get("logging") or {}, "logging")
    _assert_no_unknown_keys(logging_cfg, {"level"}, "logging", allow_unknown)
    level = logging_cfg.get("level", "INFO")
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of: {', '.join(sorted(LOG_LEVELS))}")

    return cfg
