"""Chunk planning for client-driven multipart uploads."""

from typing import List, NamedTuple
from .exceptions import InvalidArgument


class ChunkPlanEntry(NamedTuple):
    """One planned part of a multipart upload."""

    part_number: int
    chunk_size: int


def _require_positive(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgument(f"{name} must be a positive integer, got {value!r}")


def plan_chunks(total_size: int, chunk_size: int) -> List[ChunkPlanEntry]:
    """
    Partition total_size into parts of at most chunk_size bytes.

    Parts are numbered from 1; only the last part may be smaller than
    chunk_size.
    """
    _require_positive("total_size", total_size)
    _require_positive("chunk_size", chunk_size)

    entries = []
    part_number = 1
    remaining = total_size
    while remaining > 0:
        current = min(remaining, chunk_size)
        entries.append(ChunkPlanEntry(part_number=part_number, chunk_size=current))
        remaining -= current
        part_number += 1
    return entries
