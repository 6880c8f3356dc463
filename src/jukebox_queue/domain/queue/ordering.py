"""Ordering Engine.

Pure functions over a session's items. Orders are recomputed on every read.

- Display order (``by_position``): ``base_priority`` asc, then ``created_at`` asc.
  Votes never move an item in the displayed list.
- Playback order (``by_votes``): ``base_priority`` asc, then ``vote_score`` desc,
  then ``created_at`` asc.

Both are stable sorts, so items with identical keys keep their input order
(repositories return items by id).
"""

from __future__ import annotations

from collections.abc import Iterable

from jukebox_queue.domain.queue.entities import QueueItem


def pending(items: Iterable[QueueItem]) -> list[QueueItem]:
    """Items still waiting to be played."""
    return [item for item in items if item.is_pending]


def by_position(items: Iterable[QueueItem]) -> list[QueueItem]:
    return sorted(items, key=lambda item: (item.base_priority, item.created_at))


def by_votes(items: Iterable[QueueItem]) -> list[QueueItem]:
    return sorted(items, key=lambda item: (item.base_priority, -item.vote_score, item.created_at))


def next_up(items: Iterable[QueueItem]) -> QueueItem | None:
    """Head of the playback order among pending items, if any."""
    ordered = by_votes(pending(items))
    return ordered[0] if ordered else None


def display_position(item_id: int, items: Iterable[QueueItem]) -> int | None:
    """1-based position of ``item_id`` in the displayed pending list."""
    for index, item in enumerate(by_position(pending(items)), start=1):
        if item.id == item_id:
            return index
    return None
