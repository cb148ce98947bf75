import json
import logging
from pathlib import Path

from geopostal.common.errors import (
    ConfigError,
    ConfigurationError,
    GeoPostalError,
    MultipleMatchesWarning,
    NumericFormatError,
)
from geopostal.common.fs import write_json
from geopostal.common.logging import JsonLineFormatter, build_logger, close_logger, generate_run_id, log_event
from geopostal.common.models import PostalIndex, PostalRecord, PostalRecords, is_multi


def _record(code: str, lat: float = 51.0) -> PostalRecord:
    return PostalRecord(code, "Place", "Admin", "AD", lat, 13.0)


def test_postal_index_groups_by_code_in_insertion_order():
    index = PostalIndex()
    index.add(_record("B"))
    index.add(_record("A", 52.0))
    index.add(_record("B", 53.0))

    assert list(index) == ["B", "A"]
    assert len(index) == 2
    assert index.record_count == 3
    assert [record.latitude for record in index.iter_records()] == [51.0, 53.0, 52.0]
    assert index.get("missing") is None
    assert "A" in index


def test_is_multi():
    assert is_multi(PostalRecords([_record("A"), _record("A", 52.0)]))
    assert not is_multi(PostalRecords([_record("A")]))


def test_record_to_dict():
    assert _record("A").to_dict() == {
        "code": "A",
        "place_name": "Place",
        "admin_name": "Admin",
        "state_code": "AD",
        "latitude": 51.0,
        "longitude": 13.0,
    }


def test_error_hierarchy_and_codes():
    assert issubclass(ConfigError, ConfigurationError)
    assert issubclass(ConfigurationError, GeoPostalError)
    assert NumericFormatError("x", "Latitude").error_code == "NUMERIC_FORMAT"
    warning = MultipleMatchesWarning("01968", 2)
    assert isinstance(warning, UserWarning)
    assert not isinstance(warning, GeoPostalError)
    assert str(warning) == "postal code 01968 has 2 lat/lon coordinates"


def test_generate_run_id_prefix():
    assert generate_run_id().startswith("run-")


def test_write_json_creates_parent_dirs(tmp_path: Path):
    target = tmp_path / "nested" / "out.json"
    write_json(target, {"b": 1, "a": "Düsseldorf"})

    assert json.loads(target.read_text(encoding="utf-8")) == {"a": "Düsseldorf", "b": 1}


def test_json_line_formatter_has_stable_fields():
    record = logging.makeLogRecord({"msg": "loaded %s", "args": ("ok",), "levelname": "INFO", "event": "LOAD_END"})

    payload = json.loads(JsonLineFormatter().format(record))

    assert payload["message"] == "loaded ok"
    assert payload["event"] == "LOAD_END"
    assert payload["rows_out"] is None
    assert payload["level"] == "INFO"
    assert "timestamp" in payload


def test_build_logger_writes_jsonl_file(tmp_path: Path):
    logger = build_logger("run-test", log_dir=tmp_path, level="INFO")
    log_event(logger, "hello", stage="load", rows_out=3)
    close_logger(logger)

    lines = (tmp_path / "run-test.log.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["stage"] == "load"
    assert payload["rows_out"] == 3
