"""Immutable value objects for the queue bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, ClassVar

from pydantic import PlainSerializer, PlainValidator

from jukebox_queue.domain.shared.exceptions import InvalidPositionError
from jukebox_queue.domain.shared.serialization import CamelModel
from jukebox_queue.domain.shared.types import (
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeInt,
    TrackTitleStr,
)


class SessionStatus(Enum):
    """Session lifecycle with enforced transitions.

    State transitions:
    - ACTIVE -> PAUSED (pause)
    - PAUSED -> ACTIVE (resume)
    - ACTIVE -> ENDED, PAUSED -> ENDED (end)
    - ENDED is terminal
    """

    ACTIVE = "active"
    PAUSED = "paused"
    ENDED = "ended"

    def can_transition_to(self, target: SessionStatus) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            SessionStatus.ACTIVE: {SessionStatus.PAUSED, SessionStatus.ENDED},
            SessionStatus.PAUSED: {SessionStatus.ACTIVE, SessionStatus.ENDED},
            SessionStatus.ENDED: set(),
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_open(self) -> bool:
        return self is not SessionStatus.ENDED


class ItemStatus(Enum):
    PENDING = "pending"
    PLAYING = "playing"
    PLAYED = "played"


@dataclass(frozen=True)
class DesiredPosition:
    """A requested queue position, absolute or relative to the next free slot.

    Relative positions come from the shorthand ``"next"``, ``"next_plus_1"``
    and ``"next_plus_2"`` and are resolved against the unplayed item count at
    submission time.
    """

    absolute: int | None = None
    offset: int | None = None

    SHORTHANDS: ClassVar[dict[str, int]] = {
        "next": 0,
        "next_plus_1": 1,
        "next+1": 1,
        "next_plus_2": 2,
        "next+2": 2,
    }

    def __post_init__(self) -> None:
        if (self.absolute is None) == (self.offset is None):
            raise InvalidPositionError(self)
        if self.absolute is not None and self.absolute < 1:
            raise InvalidPositionError(self.absolute)

    @classmethod
    def parse(cls, value: int | str) -> DesiredPosition:
        """Parse an int, a digit string, or a shorthand keyword."""
        if isinstance(value, bool):
            raise InvalidPositionError(value)
        if isinstance(value, int):
            return cls(absolute=value)
        if isinstance(value, str):
            key = value.strip().lower()
            if key in cls.SHORTHANDS:
                return cls(offset=cls.SHORTHANDS[key])
            if key.lstrip("-").isdigit():
                return cls(absolute=int(key))
        raise InvalidPositionError(value)

    def __str__(self) -> str:
        if self.absolute is not None:
            return str(self.absolute)
        return "next" if not self.offset else f"next_plus_{self.offset}"

    def resolve(self, unplayed_count: int) -> int:
        """Absolute 1-based position given the current number of unplayed items."""
        if self.absolute is not None:
            return self.absolute
        return unplayed_count + 1 + (self.offset or 0)


# Pydantic-compatible field type: accepts ints, digit strings and shorthand,
# serializes back to the shorthand/number string.
DesiredPositionField = Annotated[
    DesiredPosition,
    PlainValidator(lambda v: v if isinstance(v, DesiredPosition) else DesiredPosition.parse(v)),
    PlainSerializer(str, return_type=str),
]


class CatalogTrack(CamelModel):
    """Track metadata as returned by the external catalog search."""

    external_id: NonEmptyStr
    title: TrackTitleStr
    artist: NonEmptyStr | None = None
    cover_url: HttpUrlStr | None = None
    duration_ms: NonNegativeInt | None = None
    preview_url: HttpUrlStr | None = None
