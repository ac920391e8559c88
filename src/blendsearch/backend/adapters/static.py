from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import structlog

from blendsearch.backend.backend import AbstractBackend, RetrieveBatchCapable
from blendsearch.backend.errors import BackendError
from blendsearch.backend.types import Collection, Params, Query, Record
from blendsearch.util import load_yaml_data

_logger = structlog.get_logger()


class StaticBackend(AbstractBackend, RetrieveBatchCapable):
    """In-memory index over a fixed, pre-ranked list of records.

    Matching is plain term containment: every whitespace separated term of
    ``query.text`` must occur (case-insensitively) in the title or a field
    value, and every filter must equal the stringified field value. Matches
    keep the order of the underlying list, which acts as the ranking.
    """

    def __init__(self, identifier: str, records: Iterable[Record]) -> None:
        super().__init__(identifier)
        self._records: list[Record] = list(records)
        self._by_id: dict[str, Record] = {record.id: record for record in self._records}

    @classmethod
    def from_file(cls, identifier: str, path: Path) -> "StaticBackend":
        raw = load_yaml_data(path)
        if isinstance(raw, Mapping):
            raw = raw.get("records", [])
        if not isinstance(raw, list):
            raise ValueError(f"Expected a list of records in {path}")

        records = [_parse_record(identifier, entry) for entry in raw]
        _logger.debug("static_backend_loaded", backend=identifier, path=str(path), records=len(records))
        return cls(identifier, records)

    def search(
        self,
        query: Query,
        offset: int,
        limit: int,
        params: Params | None = None,
    ) -> Collection:
        if offset < 0 or limit < 0:
            raise BackendError(self.identifier, f"invalid window offset={offset} limit={limit}")

        matches = [record for record in self._records if _matches(record, query)]
        return Collection(records=tuple(matches[offset : offset + limit]), total=len(matches))

    def retrieve(self, record_id: str, params: Params | None = None) -> Collection:
        record = self._by_id.get(record_id)
        if record is None:
            return Collection()
        return Collection(records=(record,), total=1)

    def retrieve_batch(self, ids: list[str], params: Params | None = None) -> Collection:
        found = tuple(self._by_id[record_id] for record_id in ids if record_id in self._by_id)
        return Collection(records=found, total=len(found))


def _parse_record(identifier: str, entry: Any) -> Record:
    if not isinstance(entry, Mapping) or "id" not in entry:
        raise ValueError(f"Record entries need an 'id' key, got: {entry!r}")

    return Record(
        id=str(entry["id"]),
        source=identifier,
        title=str(entry.get("title", "")),
        fields=dict(entry.get("fields") or {}),
    )


def _matches(record: Record, query: Query) -> bool:
    for key, expected in query.filters.items():
        if str(record.fields.get(key, "")) != expected:
            return False

    terms = query.text.lower().split()
    if not terms:
        return True

    haystack = " ".join([record.title, *(str(value) for value in record.fields.values())]).lower()
    return all(term in haystack for term in terms)
