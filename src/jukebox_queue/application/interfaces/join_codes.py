"""Join code registry interface.

Join codes are how guests find a session; the core only needs to allocate
one when a session is created and to map a code back to a session.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

_JOIN_CODE_PATTERN = re.compile(r"^\d{6}$")


class JoinCodeRegistry(ABC):
    """Port for allocating and resolving six-digit session join codes."""

    @staticmethod
    def is_valid_format(code: str) -> bool:
        return bool(_JOIN_CODE_PATTERN.match(code or ""))

    @abstractmethod
    async def generate(self) -> str:
        """Allocate a code not used by any session that has not ended.

        Returns:
            A six-digit numeric string.
        """
        ...

    @abstractmethod
    async def resolve(self, code: str) -> int | None:
        """Map a code to the id of the open session using it.

        Args:
            code: The join code typed by a guest.

        Returns:
            The session id, or None when the code is malformed or unused.
        """
        ...
