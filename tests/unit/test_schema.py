import copy

import pytest

from geopostal.common.errors import ConfigError
from geopostal.common.schema import validate_country_code, validate_settings_config

BASE_SETTINGS = {
    "dataset": {"path": "data/allCountries.txt", "country": None, "early_exit": True},
    "earth_radius": {"km": 6371, "mi": 3958},
    "logging": {"level": "INFO"},
}


def _settings():
    return copy.deepcopy(BASE_SETTINGS)


def test_validate_settings_accepts_valid_shape():
    validated = validate_settings_config(_settings())
    assert validated["dataset"]["path"] == "data/allCountries.txt"


def test_validate_settings_only_requires_dataset_path():
    validate_settings_config({"dataset": {"path": "x.txt"}})


def test_validate_settings_rejects_missing_dataset():
    with pytest.raises(ConfigError, match="Missing keys in settings: dataset"):
        validate_settings_config({"logging": {"level": "INFO"}})


def test_validate_settings_rejects_unknown_key_by_default():
    bad = _settings()
    bad["unexpected"] = True
    with pytest.raises(ConfigError, match="unexpected"):
        validate_settings_config(bad)


def test_validate_settings_allows_unknown_when_enabled():
    okay = _settings()
    okay["extra"] = 1
    okay["dataset"]["extra"] = 2
    validate_settings_config(okay, allow_unknown=True)


@pytest.mark.parametrize("value", [0, -1, "6371", True])
def test_validate_settings_rejects_bad_earth_radius(value):
    bad = _settings()
    bad["earth_radius"]["km"] = value
    with pytest.raises(ConfigError, match="earth_radius.km"):
        validate_settings_config(bad)


def test_validate_settings_rejects_non_boolean_early_exit():
    bad = _settings()
    bad["dataset"]["early_exit"] = "yes"
    with pytest.raises(ConfigError):
        validate_settings_config(bad)


def test_validate_settings_rejects_bad_log_level():
    bad = _settings()
    bad["logging"]["level"] = "LOUD"
    with pytest.raises(ConfigError):
        validate_settings_config(bad)


def test_validate_settings_rejects_non_mapping():
    with pytest.raises(ConfigError):
        validate_settings_config(None)


def test_validate_country_code():
    assert validate_country_code(None) is None
    assert validate_country_code("us") == "us"
    with pytest.raises(ConfigError):
        validate_country_code("U")
    with pytest.raises(ConfigError):
        validate_country_code(49)
