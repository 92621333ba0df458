"""Session-scoped identifier generation for new and duplicated elements."""

import itertools
import time
from typing import Optional


class IdentifierGenerator:
    """Produces identifiers that never repeat within one editing session.

    The counter is seeded once from the nanosecond clock, so identifiers from
    different sessions are unlikely to meet, and then only ever increases, so
    two calls in the same clock tick still get different values.
    """

    def __init__(self, seed: Optional[int] = None):
        self._counter = itertools.count(time.time_ns() if seed is None else seed)

    def next_suffix(self) -> str:
        return str(next(self._counter))

    def new_element(self) -> str:
        """Identifier for a freshly added element"""
        return f"new_element_{self.next_suffix()}"

    def copy_of(self, identifier: str) -> str:
        """Identifier for a duplicate of the element called `identifier`"""
        return f"{identifier}_copy_{self.next_suffix()}"
