"""Lookup, distance and radius queries over a loaded postal index."""

from __future__ import annotations

from dataclasses import dataclass

from geopostal.common.constants import EARTH_RADIUS_KM, EARTH_RADIUS_MI
from geopostal.common.errors import MultipleMatchesWarning, NotFoundError
from geopostal.common.geometry import distance_between_points
from geopostal.common.models import PostalIndex, PostalRecord, PostalRecords


@dataclass(frozen=True)
class LookupResult:
    records: PostalRecords
    warning: MultipleMatchesWarning | None = None

    @property
    def is_ambiguous(self) -> bool:
        return self.warning is not None


def lookup(index: PostalIndex, code: str) -> LookupResult:
    """Return every record for ``code``.

    A code with several locations still succeeds; the result carries a
    ``MultipleMatchesWarning`` that callers should check before using only
    the first record.
    """
    records = index.get(code)
    if records is None:
        raise NotFoundError(code)
    if records.is_multi:
        return LookupResult(records=records, warning=MultipleMatchesWarning(code, len(records)))
    return LookupResult(records=records)


def calculate_distance(a: PostalRecord, b: PostalRecord, radius: float) -> float:
    return distance_between_points(a.latitude, a.longitude, b.latitude, b.longitude, radius)


def distance_km(a: PostalRecord, b: PostalRecord) -> float:
    return calculate_distance(a, b, EARTH_RADIUS_KM)


def distance_mi(a: PostalRecord, b: PostalRecord) -> float:
    return calculate_distance(a, b, EARTH_RADIUS_MI)


def distance_km_to_point(record: PostalRecord, latitude: float, longitude: float) -> float:
    return distance_between_points(record.latitude, record.longitude, latitude, longitude, EARTH_RADIUS_KM)


def distance_mi_to_point(record: PostalRecord, latitude: float, longitude: float) -> float:
    return distance_between_points(record.latitude, record.longitude, latitude, longitude, EARTH_RADIUS_MI)


def find_codes_within_radius(
    index: PostalIndex,
    origin: PostalRecord,
    max_radius: float,
    earth_radius: float,
) -> list[str]:
    """Codes of all records strictly closer than ``max_radius`` to ``origin``.

    Records sharing the origin's code are excluded. Output follows index
    order and is not deduplicated.
    """
    codes: list[str] = []
    for record in index.iter_records():
        if record.code == origin.code:
            continue
        if calculate_distance(origin, record, earth_radius) < max_radius:
            codes.append(record.code)
    return codes


def within_km_radius(index: PostalIndex, origin: PostalRecord, radius_km: float) -> list[str]:
    return find_codes_within_radius(index, origin, radius_km, EARTH_RADIUS_KM)


def within_mi_radius(index: PostalIndex, origin: PostalRecord, radius_mi: float) -> list[str]:
    return find_codes_within_radius(index, origin, radius_mi, EARTH_RADIUS_MI)
