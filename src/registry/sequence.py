"""Sequence counter and block height source

Two monotonic values feed the registry:
- SequenceCounter: highest content id assigned so far. Owned by the
  RegistryService and advanced only by a successful create.
- BlockHeight: the host's "current height", stamped onto records at
  creation. The real value comes from the ledger the registry runs on;
  BlockHeight is the in-process stand-in used by the runner and tests.

Both fail loud if asked to move backwards.
"""

from __future__ import annotations

from typing import Protocol

from .constants import INITIAL_SEQUENCE


class HeightSource(Protocol):
    """Anything that can report the current host height."""

    def current(self) -> int: ...


class SequenceCounter:
    """Monotonic generator of content ids.

    Thread-safety: NOT thread-safe on its own. peek() and advance() are
    only called under the service lock, so allocation and record insertion
    form one unit.
    """

    _value: int

    def __init__(self, start: int = INITIAL_SEQUENCE) -> None:
        if start < INITIAL_SEQUENCE:
            raise ValueError(f"Sequence cannot start below {INITIAL_SEQUENCE}, got {start}")
        self._value = start

    @property
    def value(self) -> int:
        """Highest id assigned so far (0 before the first create)."""
        return self._value

    def peek(self) -> int:
        """The id the next create will receive."""
        return self._value + 1

    def advance(self) -> int:
        """Advance by exactly one and return the new value."""
        self._value += 1
        return self._value


class BlockHeight:
    """In-process monotonic height source.

    Usage:
        height = BlockHeight()
        height.advance()      # 1
        height.set(10)        # 10
        height.set(5)         # ValueError
    """

    _height: int

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"Height cannot be negative, got {start}")
        self._height = start

    def current(self) -> int:
        return self._height

    def advance(self, blocks: int = 1) -> int:
        """Move forward by `blocks` (must be >= 0)."""
        if blocks < 0:
            raise ValueError(f"Height cannot move backwards (advance by {blocks})")
        self._height += blocks
        return self._height

    def set(self, height: int) -> int:
        """Jump to an absolute height not lower than the current one."""
        if height < self._height:
            raise ValueError(
                f"Height is non-decreasing: current {self._height}, requested {height}"
            )
        self._height = height
        return self._height
