"""
Monotonic identifier sequences.

Each aggregate owns the sequences it draws from and receives them at
construction: the registry owns one per role, the catalog owns the section
reference numbers and every course owns its section numbers.
"""

import threading
from typing import Optional


class Sequence:
    """Strictly increasing counter starting just above ``seed``.

    Values are never handed out twice, even if whatever they identified is
    later deleted.
    """

    def __init__(self, seed: int = 0, width: Optional[int] = None):
        if seed < 0:
            raise ValueError("Sequence seed cannot be negative")
        self._seed = seed
        self._last = seed
        self._width = width
        self._lock = threading.Lock()

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def last(self) -> int:
        """Most recently issued value, or the seed if none was issued."""
        return self._last

    def next(self) -> int:
        with self._lock:
            self._last += 1
            return self._last

    def next_formatted(self) -> str:
        """Next value as a string, zero-padded to ``width`` when set."""
        value = self.next()
        if self._width:
            return str(value).zfill(self._width)
        return str(value)

    def __repr__(self) -> str:
        return f"Sequence(seed={self._seed}, last={self._last}, width={self._width})"
