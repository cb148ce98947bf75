"""GeoNames postal code dataset loader.

The source is the tab-delimited GeoNames postal code export: one record per
line, 12 fields, UTF-8. Any bad line rejects the whole dataset.
"""

from __future__ import annotations

import math
import re
from pathlib import Path
from typing import Iterable

from geopostal.common.constants import (
    FIELD_ADMIN_CODE1,
    FIELD_ADMIN_NAME1,
    FIELD_COUNT,
    FIELD_COUNTRY_CODE,
    FIELD_DELIMITER,
    FIELD_LATITUDE,
    FIELD_LONGITUDE,
    FIELD_PLACE_NAME,
    FIELD_POSTAL_CODE,
)
from geopostal.common.errors import (
    ConfigurationError,
    DatasetIOError,
    MalformedRecordError,
    NumericFormatError,
)
from geopostal.common.models import PostalIndex, PostalRecord

DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def _normalise_country(country: str | None) -> str | None:
    if country is None:
        return None
    if len(country) != 2:
        raise ConfigurationError("country must be a 2 character ISO Country Code")
    return country.upper()


def _parse_coordinate(value: str, field_name: str) -> float:
    if not DECIMAL_RE.fullmatch(value):
        raise NumericFormatError(value, field_name)
    parsed = float(value)
    if not math.isfinite(parsed):
        raise NumericFormatError(value, field_name)
    return parsed


def _strip_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def _split_line(line: str, line_number: int) -> list[str]:
    fields = _strip_line_ending(line).split(FIELD_DELIMITER)
    if len(fields) != FIELD_COUNT:
        raise MalformedRecordError(
            f"line {line_number} does not have {FIELD_COUNT} fields (got {len(fields)})"
        )
    return fields


def _to_record(fields: list[str]) -> PostalRecord:
    return PostalRecord(
        code=fields[FIELD_POSTAL_CODE],
        place_name=fields[FIELD_PLACE_NAME],
        admin_name=fields[FIELD_ADMIN_NAME1],
        state_code=fields[FIELD_ADMIN_CODE1],
        latitude=_parse_coordinate(fields[FIELD_LATITUDE], "Latitude"),
        longitude=_parse_coordinate(fields[FIELD_LONGITUDE], "Longitude"),
    )


def parse_lines(lines: Iterable[str], country: str | None = None, *, early_exit: bool = True) -> PostalIndex:
    """Build an index from dataset lines in a single pass.

    With a country filter, non-matching lines are skipped. When
    ``early_exit`` is set the scan stops at the first non-matching line after
    a matching block, which assumes the source is grouped by country.
    """
    wanted = _normalise_country(country)
    in_country = False
    index = PostalIndex()

    for line_number, line in enumerate(lines, start=1):
        fields = _split_line(line, line_number)

        if wanted is not None and fields[FIELD_COUNTRY_CODE] != wanted:
            if in_country and early_exit:
                break
            continue

        in_country = True
        index.add(_to_record(fields))

    return index


def load_dataset(source_path: str | Path, country: str | None = None, *, early_exit: bool = True) -> PostalIndex:
    wanted = _normalise_country(country)
    path = Path(source_path)
    try:
        with path.open("r", encoding="utf-8", newline="\n") as f:
            return parse_lines(f, wanted, early_exit=early_exit)
    except (OSError, UnicodeDecodeError) as exc:
        raise DatasetIOError(f"error while reading dataset {path}: {exc}") from exc


def load_all(source_path: str | Path) -> PostalIndex:
    return load_dataset(source_path)


def load_by_country(source_path: str | Path, country: str, *, early_exit: bool = True) -> PostalIndex:
    if country is None:
        raise ConfigurationError("country must be a 2 character ISO Country Code")
    return load_dataset(source_path, country, early_exit=early_exit)
