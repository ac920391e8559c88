from collections.abc import Iterator

from blendsearch.backend.types import BackendSource, Record, RecordCollection
from blendsearch.blender import planner


class BlendedCollection:
    """Merged page of records from the primary and secondary backends.

    ``records`` holds the page in display order and ``sources`` the backend
    each position came from. ``offset`` is the merged position of the first
    record.
    """

    def __init__(self) -> None:
        self.records: list[Record] = []
        self.sources: list[BackendSource] = []
        self.offset = 0
        self.primary_total = 0
        self.secondary_total = 0
        self.source_identifier = ""

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    @property
    def total(self) -> int:
        return max(self.primary_total, self.secondary_total)

    def get_total(self) -> int:
        return self.total

    @property
    def ids(self) -> list[str]:
        return [record.id for record in self.records]

    def init_blended(
        self,
        primary: RecordCollection | None,
        secondary: RecordCollection | None,
        offset: int,
        limit: int,
        block_size: int,
    ) -> int:
        """Set totals and stage the window records already present in the
        initial collections.

        A missing collection (failed backend) counts as having no hits, so
        the schedule falls through to the other backend. Staging stops at the
        first position whose record was not part of the initial fetch; the
        caller fills the rest. Returns the number of staged records.
        """
        self.records.clear()
        self.sources.clear()
        self.offset = offset
        self.primary_total = primary.total if primary is not None else 0
        self.secondary_total = secondary.total if secondary is not None else 0

        primary_records = primary.records if primary is not None else ()
        secondary_records = secondary.records if secondary is not None else ()
        primary_offset, secondary_offset = planner.source_offsets(
            offset, block_size, self.primary_total, self.secondary_total
        )

        for pos in range(offset, offset + limit):
            source = planner.pick_source(
                pos,
                block_size,
                primary_offset,
                secondary_offset,
                self.primary_total,
                self.secondary_total,
            )
            if source is BackendSource.PRIMARY and primary_offset < len(primary_records):
                self.add(primary_records[primary_offset], source)
                primary_offset += 1
            elif source is BackendSource.SECONDARY and secondary_offset < len(secondary_records):
                self.add(secondary_records[secondary_offset], source)
                secondary_offset += 1
            else:
                break

        return len(self.records)

    def is_primary_at_offset(self, pos: int, block_size: int) -> bool:
        return planner.is_primary_at_position(pos, block_size)

    def add(self, record: Record, source: BackendSource) -> None:
        self.records.append(record)
        self.sources.append(source)

    def count_from(self, source: BackendSource) -> int:
        return sum(1 for s in self.sources if s is source)

    def source_at(self, pos: int) -> BackendSource | None:
        """Backend of the record at merged position ``pos`` if it is on this page."""
        index = pos - self.offset
        if 0 <= index < len(self.sources):
            return self.sources[index]
        return None
