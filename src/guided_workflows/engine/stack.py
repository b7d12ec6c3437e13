"""Last-in-first-out stack of workflow entries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from guided_workflows.exceptions import OrphanedChildError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from guided_workflows.engine.entry import WorkflowEntry

__all__ = ["WorkflowStack"]


class WorkflowStack:
    """Ordered collection of live workflow entries.

    The top of the stack is the only entry that may be active. A nested entry
    is always pushed directly above its parent, and an entry cannot be
    removed while any of its descendants is still on the stack.

    The stack is only ever mutated by the manager.
    """

    def __init__(self) -> None:
        """Initialize an empty stack."""
        self._entries: list[WorkflowEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[WorkflowEntry]:
        return iter(self._entries)

    def __contains__(self, entry: object) -> bool:
        return any(candidate is entry for candidate in self._entries)

    @property
    def top(self) -> WorkflowEntry | None:
        """The most recently pushed entry, or None when the stack is empty."""
        return self._entries[-1] if self._entries else None

    def push(self, entry: WorkflowEntry) -> None:
        """Push an entry on top of the stack.

        Args:
            entry: The entry to push.

        Raises:
            ValueError: If the entry is already on the stack or its parent is not the current top.
        """
        if entry in self:
            msg = f"{entry!r} is already on the stack"
            raise ValueError(msg)
        if entry.parent is not None and entry.parent is not self.top:
            msg = f"Parent of {entry!r} must be the top of the stack"
            raise ValueError(msg)
        self._entries.append(entry)

    def descendants_of(self, entry: WorkflowEntry) -> list[WorkflowEntry]:
        """Return the live descendants of an entry, outermost first.

        Args:
            entry: The ancestor.

        Returns:
            Entries whose parent chain contains ``entry``, in stack order.
        """
        return [candidate for candidate in self._entries if candidate.is_descendant_of(entry)]

    def remove(self, entry: WorkflowEntry) -> None:
        """Remove an entry that has no live descendants.

        Args:
            entry: The entry to remove.

        Raises:
            OrphanedChildError: If a descendant of ``entry`` is still on the stack.
            ValueError: If the entry is not on the stack.
        """
        children = self.descendants_of(entry)
        if children:
            raise OrphanedChildError(entry.id, entry.workflow_id, [child.workflow_id for child in children])

        for index, candidate in enumerate(self._entries):
            if candidate is entry:
                del self._entries[index]
                return

        msg = f"{entry!r} is not on the stack"
        raise ValueError(msg)

    def root_of(self, entry: WorkflowEntry) -> WorkflowEntry:
        """Return the outermost ancestor of an entry (the entry itself for roots).

        Args:
            entry: Any entry.

        Returns:
            The root entry of ``entry``'s nested chain.
        """
        while entry.parent is not None:
            entry = entry.parent
        return entry
