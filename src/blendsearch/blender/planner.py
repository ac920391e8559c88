"""Interleaving schedule and fetch sizing for the blender.

Positions are grouped into blocks of ``block_size``. Even blocks belong to
the primary backend and odd blocks to the secondary one. When a backend runs
out of hits, the other backend takes over its positions.
"""

from blendsearch.backend.types import BackendSource

MIN_BLEND_LIMIT = 20


def compute_blend_limit(boost_position: int, boost_count: int) -> int:
    return max(MIN_BLEND_LIMIT, boost_position + boost_count)


def is_primary_at_position(pos: int, block_size: int) -> bool:
    return (pos // block_size) % 2 == 0


def initial_fetch_size(offset: int, limit: int, blend_limit: int) -> int:
    """Number of records to request from each backend, starting at 0.

    Windows that start inside the blend zone oversample both backends up to
    the window end (capped at ``blend_limit``). Windows starting past it only
    probe the totals.
    """
    if limit == 0 or offset > blend_limit:
        return 0
    return min(blend_limit, offset + limit)


def primary_slots_before(pos: int, block_size: int) -> int:
    """Count the schedule's primary positions in ``[0, pos)``."""
    period = 2 * block_size
    full_periods, remainder = divmod(pos, period)
    return full_periods * block_size + min(remainder, block_size)


def source_offsets(
    offset: int,
    block_size: int,
    primary_total: int,
    secondary_total: int,
) -> tuple[int, int]:
    """Per-backend read offsets at merged position ``offset``.

    Equivalent to walking the positions before ``offset`` with
    :func:`pick_source` and counting what each backend contributed.
    """
    primary_slots = primary_slots_before(offset, block_size)
    secondary_slots = offset - primary_slots

    # Each backend gets its scheduled slots, plus whatever the other one
    # could not fill, bounded by its own total.
    primary_offset = min(primary_total, max(primary_slots, offset - secondary_total))
    secondary_offset = min(secondary_total, max(secondary_slots, offset - primary_total))
    return primary_offset, secondary_offset


def pick_source(
    pos: int,
    block_size: int,
    primary_offset: int,
    secondary_offset: int,
    primary_total: int,
    secondary_total: int,
) -> BackendSource | None:
    """Backend serving merged position ``pos``, or None once both are exhausted."""
    primary_left = primary_offset < primary_total
    secondary_left = secondary_offset < secondary_total

    if is_primary_at_position(pos, block_size):
        if primary_left:
            return BackendSource.PRIMARY
        return BackendSource.SECONDARY if secondary_left else None

    if secondary_left:
        return BackendSource.SECONDARY
    return BackendSource.PRIMARY if primary_left else None
