"""Domain services for queue item placement."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from jukebox_queue.domain.queue import ordering
from jukebox_queue.domain.queue.entities import QueueItem
from jukebox_queue.domain.queue.value_objects import DesiredPosition


@dataclass(frozen=True)
class Placement:
    """Where a purchased item lands in the displayed queue.

    ``shifted_item_ids`` are the items ahead of the slot whose priority must
    drop by one to make room; they keep their relative order.
    """

    position: int
    base_priority: int
    shifted_item_ids: tuple[int, ...] = ()


class QueueDomainService:
    """Stateless rules for where a submitted item lands."""

    ORGANIC_PRIORITY = 0

    @staticmethod
    def purchased_count(items: Iterable[QueueItem]) -> int:
        """Number of pending items holding a purchased tier."""
        return sum(1 for item in ordering.pending(items) if item.is_purchased)

    @classmethod
    def resolve_position(
        cls, desired: DesiredPosition | int | str, items: Iterable[QueueItem]
    ) -> int:
        """Resolve a desired position to the slot a purchase actually receives.

        Shorthand resolves against the pending count. Purchases always land
        ahead of every organic item, so the result is clamped to the first
        slot after the purchased items.

        Raises:
            InvalidPositionError: For non-positive or malformed input.
        """
        if not isinstance(desired, DesiredPosition):
            desired = DesiredPosition.parse(desired)
        waiting = ordering.pending(items)
        return min(desired.resolve(len(waiting)), cls.purchased_count(waiting) + 1)

    @classmethod
    def place_purchase(cls, position: int, items: Iterable[QueueItem]) -> Placement:
        """Priority tier that puts a new purchase at ``position`` in display order.

        The new item goes directly in front of the item currently holding
        ``position``. When the items on either side share a tier, everything
        ahead of the slot moves one tier earlier first.
        """
        ordered = ordering.by_position(ordering.pending(items))
        purchased = cls.purchased_count(ordered)
        position = max(1, min(position, purchased + 1))

        if position > purchased:
            tail = ordered[purchased - 1].base_priority if purchased else cls.ORGANIC_PRIORITY
            return Placement(position, min(tail, cls.ORGANIC_PRIORITY - 1))

        target = ordered[position - 1].base_priority
        ahead = ordered[: position - 1]
        if not ahead or ahead[-1].base_priority < target:
            return Placement(position, target - 1)
        return Placement(position, target - 1, tuple(item.id for item in ahead))

    @staticmethod
    def was_bumped(item: QueueItem, items: list[QueueItem]) -> bool:
        """Whether later purchases pushed a guaranteed item behind the position it bought."""
        if not item.position_guaranteed or item.inserted_at_position is None or item.id is None:
            return False
        current = ordering.display_position(item.id, items)
        return current is not None and current > item.inserted_at_position
