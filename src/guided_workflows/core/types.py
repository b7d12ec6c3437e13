"""Core type definitions for guided-workflows.

This module defines the fundamental enums and type aliases used throughout
the workflow engine.
"""

from __future__ import annotations

import sys
from enum import Enum, auto
from typing import Any, TypeAlias, TypeVar

# StrEnum backport for Python < 3.11
if sys.version_info >= (3, 11):
    from enum import StrEnum
else:

    class StrEnum(str, Enum):
        """String enumeration compatibility for Python < 3.11."""

        @staticmethod
        def _generate_next_value_(name: str, start: int, count: int, last_values: list[Any]) -> str:
            return name.lower()

        def __str__(self) -> str:
            return str(self.value)


__all__ = [
    "EntryState",
    "Params",
    "SizeHint",
    "StrEnum",
    "T",
]


class EntryState(StrEnum):
    """Lifecycle state of a single workflow entry on the stack.

    Attributes:
        INITIALIZING: ``initialize(params)`` is running.
        ACTIVE: The entry is on top of the stack and receives user input.
        SUSPENDED: The entry is paused beneath another entry.
        TERMINATING: A terminal call was accepted and is being processed.
        REMOVED: The entry left the stack and its result future is resolved.
    """

    INITIALIZING = auto()
    ACTIVE = auto()
    SUSPENDED = auto()
    TERMINATING = auto()
    REMOVED = auto()

    @property
    def is_live(self) -> bool:
        """Whether an entry in this state is still on the stack awaiting its terminal call."""
        return self in (EntryState.INITIALIZING, EntryState.ACTIVE, EntryState.SUSPENDED)


Params: TypeAlias = dict[str, Any]
"""Type alias for the parameters passed to ``initialize``."""

SizeHint: TypeAlias = str
"""Preferred modal width, e.g. ``"500px"`` or ``"800px"``."""

T = TypeVar("T")
"""Generic type variable for result payloads."""
