"""Data models for the in-memory postal code index."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterator


@dataclass(frozen=True)
class PostalRecord:
    code: str
    place_name: str
    admin_name: str
    state_code: str
    latitude: float
    longitude: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class PostalRecords(list):
    """Records sharing one postal code, in source-file order."""

    @property
    def is_multi(self) -> bool:
        return len(self) > 1


def is_multi(records: PostalRecords) -> bool:
    return records.is_multi


class PostalIndex:
    """Postal code -> records mapping, populated once by the loader.

    Codes keep the order in which they first appear in the source, so
    iteration (and radius search output) follows the dataset.
    """

    def __init__(self) -> None:
        self._records: dict[str, PostalRecords] = {}

    def add(self, record: PostalRecord) -> None:
        self._records.setdefault(record.code, PostalRecords()).append(record)

    def get(self, code: str) -> PostalRecords | None:
        return self._records.get(code)

    def codes(self) -> list[str]:
        return list(self._records)

    def iter_records(self) -> Iterator[PostalRecord]:
        for records in self._records.values():
            yield from records

    @property
    def record_count(self) -> int:
        return sum(len(records) for records in self._records.values())

    def __contains__(self, code: object) -> bool:
        return code in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)
