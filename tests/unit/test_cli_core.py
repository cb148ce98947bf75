from pathlib import Path

import pytest

from geopostal.cli import parse_args, resolve_settings
from geopostal.common.errors import ConfigError


def test_parse_args_defaults():
    args = parse_args(["lookup", "01945"])
    assert args.command == "lookup"
    assert args.code == "01945"
    assert args.config_dir == "./config"
    assert args.overlay_config_dir is None
    assert args.full_scan is False


def test_parse_args_radius_with_unit():
    args = parse_args(["radius", "01945", "50", "--unit", "mi", "--country", "DE"])
    assert args.radius == 50.0
    assert args.unit == "mi"
    assert args.country == "DE"


def test_parse_args_rejects_unknown_unit():
    with pytest.raises(SystemExit):
        parse_args(["distance", "01945", "03058", "--unit", "ft"])


def test_resolve_settings_prefers_cli_flags(tmp_path: Path):
    args = parse_args(
        [
            "lookup",
            "01945",
            "--config-dir",
            str(tmp_path),
            "--dataset",
            "DE.txt",
            "--country",
            "de",
            "--full-scan",
        ]
    )

    settings = resolve_settings(args)

    assert settings.dataset_path == Path("DE.txt")
    assert settings.country == "de"
    assert settings.early_exit is False


def test_resolve_settings_requires_a_dataset(tmp_path: Path):
    args = parse_args(["lookup", "01945", "--config-dir", str(tmp_path)])
    with pytest.raises(ConfigError):
        resolve_settings(args)
