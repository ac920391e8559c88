import contextvars
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TypeAlias

import structlog

from blendsearch.backend.backend import AbstractBackend, RetrieveBatchCapable
from blendsearch.backend.types import BackendSource, Collection, Params, Query, Record, RecordCollection
from blendsearch.blender import planner
from blendsearch.blender.collection import BlendedCollection
from blendsearch.blender.config import BlendConfig
from blendsearch.blender.translator import IdentityTranslator, QueryTranslator

_logger = structlog.get_logger()

SECONDARY_PARAMS_KEY = "secondary_backend"


@dataclass(frozen=True)
class NotAttempted:
    pass


@dataclass(frozen=True)
class Fetched:
    collection: RecordCollection


@dataclass(frozen=True)
class Failed:
    error: Exception


FetchOutcome: TypeAlias = NotAttempted | Fetched | Failed


def combine_outcomes(
    primary: FetchOutcome,
    secondary: FetchOutcome,
) -> tuple[RecordCollection | None, RecordCollection | None]:
    """Reduce the two initial fetches to the collections that survived.

    At least one success is enough. When nothing succeeded the primary
    backend's error wins over the secondary's.
    """
    match primary, secondary:
        case Fetched(collection=p), Fetched(collection=s):
            return p, s
        case Fetched(collection=p), _:
            return p, None
        case _, Fetched(collection=s):
            return None, s
        case Failed(error=error), _:
            raise error
        case _, Failed(error=error):
            raise error
        case _:
            raise RuntimeError("Neither backend was queried")


def split_params(params: Params | None) -> tuple[Params | None, Params | None]:
    """Separate the secondary backend's parameters from the primary's."""
    if params is None:
        return None, None
    primary = dict(params)
    secondary = primary.pop(SECONDARY_PARAMS_KEY, None)
    return primary, secondary


@dataclass(frozen=True)
class _BlockCache:
    collection_offset: int
    records: tuple[Record, ...]

    @classmethod
    def seed(cls, initial: RecordCollection | None) -> "_BlockCache":
        return cls(0, tuple(initial.records) if initial is not None else ())

    def get(self, offset: int) -> Record | None:
        index = offset - self.collection_offset
        if 0 <= index < len(self.records):
            return self.records[index]
        return None


@dataclass
class _Lane:
    """Read position of one backend while filling a window."""

    backend: AbstractBackend
    query: Query
    params: Params | None
    total: int
    offset: int
    cache: _BlockCache


class BlenderBackend(AbstractBackend, RetrieveBatchCapable):
    """Interleaves two backends into a single ranked, paginated result list.

    Merged positions are assigned to the backends in alternating blocks of
    ``block_size`` (see :mod:`blendsearch.blender.planner`). Windows that
    start within ``blend_limit`` are served from pages fetched up front;
    anything beyond is read block by block from whichever backend owns the
    position.
    """

    def __init__(
        self,
        primary: AbstractBackend,
        secondary: AbstractBackend,
        config: BlendConfig | None = None,
        translator: QueryTranslator | None = None,
        identifier: str = "blender",
    ) -> None:
        super().__init__(identifier)
        self.primary = primary
        self.secondary = secondary
        self.config = config or BlendConfig()
        self.translator = translator or IdentityTranslator()
        self.blend_limit = self.config.blend_limit
        self.block_size = self.config.block_size

    def search(
        self,
        query: Query,
        offset: int,
        limit: int,
        params: Params | None = None,
    ) -> BlendedCollection:
        primary_params, secondary_params = split_params(params)
        secondary_query = self.translator.translate(query)

        fetch_size = planner.initial_fetch_size(offset, limit, self.blend_limit)
        primary_outcome, secondary_outcome = self._fetch_initial(
            query, secondary_query, fetch_size, primary_params, secondary_params
        )
        primary, secondary = combine_outcomes(primary_outcome, secondary_outcome)

        blended = BlendedCollection()
        staged = blended.init_blended(primary, secondary, offset, limit, self.block_size)

        if staged < limit:
            primary_start, secondary_start = planner.source_offsets(
                offset, self.block_size, blended.primary_total, blended.secondary_total
            )
            lanes = {
                BackendSource.PRIMARY: _Lane(
                    backend=self.primary,
                    query=query,
                    params=primary_params,
                    total=blended.primary_total,
                    offset=primary_start + blended.count_from(BackendSource.PRIMARY),
                    cache=_BlockCache.seed(primary),
                ),
                BackendSource.SECONDARY: _Lane(
                    backend=self.secondary,
                    query=secondary_query,
                    params=secondary_params,
                    total=blended.secondary_total,
                    offset=secondary_start + blended.count_from(BackendSource.SECONDARY),
                    cache=_BlockCache.seed(secondary),
                ),
            }
            self._fill(blended, lanes, offset + staged, offset + limit)

        blended.source_identifier = self.identifier

        _logger.debug(
            "blend_search",
            offset=offset,
            limit=limit,
            fetch_size=fetch_size,
            staged=staged,
            returned=len(blended),
            total=blended.total,
            from_primary=blended.count_from(BackendSource.PRIMARY),
            from_secondary=blended.count_from(BackendSource.SECONDARY),
        )
        return blended

    def retrieve(self, record_id: str, params: Params | None = None) -> Collection:
        primary_params, secondary_params = split_params(params)
        result = self.primary.retrieve(record_id, primary_params)
        if len(result) == 0:
            result = self.secondary.retrieve(record_id, secondary_params)
        return result

    def retrieve_batch(self, ids: list[str], params: Params | None = None) -> Collection:
        primary_params, secondary_params = split_params(params)

        records = list(_retrieve_many(self.primary, ids, primary_params))
        found = {record.id for record in records}
        missing = [record_id for record_id in dict.fromkeys(ids) if record_id not in found]

        if missing:
            for record in _retrieve_many(self.secondary, missing, secondary_params):
                if record.id not in found:
                    found.add(record.id)
                    records.append(record)

        _logger.debug(
            "blend_retrieve_batch",
            requested=len(ids),
            missing_from_primary=len(missing),
            returned=len(records),
        )
        return Collection(records=tuple(records), total=len(records))

    def _fetch_initial(
        self,
        query: Query,
        secondary_query: Query,
        fetch_size: int,
        primary_params: Params | None,
        secondary_params: Params | None,
    ) -> tuple[FetchOutcome, FetchOutcome]:
        if not self.config.parallel:
            return (
                _attempt(self.primary, query, fetch_size, primary_params),
                _attempt(self.secondary, secondary_query, fetch_size, secondary_params),
            )

        # A Context can only be entered by one thread at a time, so each worker gets its own copy.
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="blend") as pool:
            primary_future = pool.submit(
                contextvars.copy_context().run, _attempt, self.primary, query, fetch_size, primary_params
            )
            secondary_future = pool.submit(
                contextvars.copy_context().run, _attempt, self.secondary, secondary_query, fetch_size, secondary_params
            )
            return primary_future.result(), secondary_future.result()

    def _fill(
        self,
        blended: BlendedCollection,
        lanes: dict[BackendSource, _Lane],
        start: int,
        end: int,
    ) -> None:
        primary = lanes[BackendSource.PRIMARY]
        secondary = lanes[BackendSource.SECONDARY]

        pos = start
        while pos < end:
            source = planner.pick_source(
                pos, self.block_size, primary.offset, secondary.offset, primary.total, secondary.total
            )
            if source is None:
                break

            lane = lanes[source]
            try:
                record = self._read(lane)
            except Exception as e:
                _logger.warning(
                    "blend_block_fetch_failed",
                    backend=lane.backend.identifier,
                    offset=lane.offset,
                    error=str(e),
                    exc_info=True,
                )
                record = None

            if record is None:
                # Treat the backend as exhausted so the position is redirected
                # and the backend is not asked again in this request.
                lane.total = lane.offset
                continue

            blended.add(record, source)
            lane.offset += 1
            pos += 1

    def _read(self, lane: _Lane) -> Record | None:
        record = lane.cache.get(lane.offset)
        if record is not None:
            return record

        collection = lane.backend.search(lane.query, lane.offset, self.block_size, lane.params)
        lane.cache = _BlockCache(lane.offset, tuple(collection.records))
        _logger.debug(
            "blend_block_fetch",
            backend=lane.backend.identifier,
            offset=lane.offset,
            received=len(collection),
        )
        return lane.cache.get(lane.offset)


def _attempt(
    backend: AbstractBackend,
    query: Query,
    limit: int,
    params: Params | None,
) -> FetchOutcome:
    try:
        return Fetched(backend.search(query, 0, limit, params))
    except Exception as e:
        _logger.warning(
            "blend_backend_failed",
            backend=backend.identifier,
            error=str(e),
            exc_info=True,
        )
        return Failed(e)


def _retrieve_many(backend: AbstractBackend, ids: list[str], params: Params | None) -> tuple[Record, ...]:
    if isinstance(backend, RetrieveBatchCapable):
        return backend.retrieve_batch(ids, params).records

    # No batch support: one call per id.
    records: list[Record] = []
    for record_id in ids:
        result = backend.retrieve(record_id, params)
        if len(result):
            records.append(result.records[0])
    return tuple(records)
