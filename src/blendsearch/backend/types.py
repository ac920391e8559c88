from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol, TypeAlias


class BackendSource(StrEnum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class Query:
    text: str = ""
    filters: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Record:
    id: str
    source: str  # identifier of the backend that returned it
    title: str = ""
    fields: Mapping[str, Any] = field(default_factory=dict)


class RecordCollection(Protocol):
    """Read-only view of one page of results shared by every backend's ``search``."""

    @property
    def records(self) -> Sequence[Record]: ...

    @property
    def total(self) -> int: ...

    def __len__(self) -> int: ...

    def __iter__(self) -> Iterator[Record]: ...


@dataclass(frozen=True)
class Collection:
    records: tuple[Record, ...] = ()
    total: int = 0  # hit count reported by the backend, may exceed len(records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    @property
    def ids(self) -> list[str]:
        return [record.id for record in self.records]


Params: TypeAlias = dict[str, Any]
