"""Id generation for blocks, cells and documents.

Every operation that creates an identity takes an ``ids`` callable so
tests can swap the random generator for a sequential one and assert
exact ids.
"""

from __future__ import annotations

import itertools
import secrets
from typing import Callable, Optional

IdGenerator = Callable[[], str]


class RandomIds:
    """Random url-safe ids, the default for interactive sessions."""

    def __init__(self, nbytes: int = 12):
        self._nbytes = nbytes

    def __call__(self) -> str:
        return secrets.token_urlsafe(self._nbytes)


class SequentialIds:
    """Predictable ids: ``prefix1``, ``prefix2``, ..."""

    def __init__(self, prefix: str = "", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"


_default = RandomIds()


def resolve(ids: Optional[IdGenerator]) -> IdGenerator:
    """Return ``ids`` or the module-wide random generator."""
    return ids if ids is not None else _default


def from_strategy(strategy: str, prefix: str = "") -> IdGenerator:
    """Build a generator from a settings value ('random' or 'sequential')."""
    if strategy == "sequential":
        return SequentialIds(prefix)
    if strategy == "random":
        return RandomIds()
    raise ValueError(f"Unknown id strategy: {strategy}")
