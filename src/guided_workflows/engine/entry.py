"""Workflow entry bookkeeping.

This module provides the record the manager keeps for every running workflow
instance. The entry doubles as the host handed to the workflow, so every call
a workflow makes is routed through the manager with the entry attached.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from guided_workflows.core.models import PresentationState, PresentationUpdate
from guided_workflows.core.types import EntryState

if TYPE_CHECKING:
    import asyncio

    from guided_workflows.core.definition import WorkflowDefinition
    from guided_workflows.core.models import WorkflowResult
    from guided_workflows.core.protocols import Workflow
    from guided_workflows.core.types import Params, SizeHint
    from guided_workflows.engine.manager import WorkflowManager

__all__ = ["WorkflowEntry"]


@dataclass(eq=False)
class WorkflowEntry:
    """One live execution of a workflow on the manager's stack.

    Entries are created by the manager when a workflow id is started, mutated
    only by the workflow (through the host methods below) and by the manager,
    and released once their terminal call has been processed.

    Attributes:
        manager: The manager owning this entry.
        definition: The registry definition the entry was started from.
        workflow: The object satisfying the workflow contract. Released on removal.
        pending_result: Future resolved exactly once with the terminal result.
        params: Parameters passed to ``initialize``.
        parent: The entry that started this one as a nested workflow, or None for a root.
        state: Current lifecycle state.
        presentation: Presentation state retained across suspension.
        buffered: Presentation updates issued while suspended, in issue order.
        id: Unique identifier of this entry.
        started_at: Timestamp when the entry was created.
        completed_at: Timestamp when the entry was removed.
    """

    manager: WorkflowManager
    definition: WorkflowDefinition
    workflow: Workflow | None
    pending_result: asyncio.Future[WorkflowResult]
    params: Params = field(default_factory=dict)
    parent: WorkflowEntry | None = None
    state: EntryState = EntryState.INITIALIZING
    presentation: PresentationState = field(default_factory=PresentationState)
    buffered: list[PresentationUpdate] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    @property
    def workflow_id(self) -> str:
        """Registry id of the running workflow."""
        return self.definition.id

    @property
    def is_root(self) -> bool:
        """Whether the entry was started by external code rather than by another workflow."""
        return self.parent is None

    @property
    def depth(self) -> int:
        """Number of ancestors of this entry."""
        depth = 0
        ancestor = self.parent
        while ancestor is not None:
            depth += 1
            ancestor = ancestor.parent
        return depth

    def is_descendant_of(self, other: WorkflowEntry) -> bool:
        """Check whether ``other`` is an ancestor of this entry.

        Args:
            other: The candidate ancestor.

        Returns:
            True if ``other`` appears in this entry's parent chain.
        """
        ancestor = self.parent
        while ancestor is not None:
            if ancestor is other:
                return True
            ancestor = ancestor.parent
        return False

    def update_title(self, title: str) -> None:
        """Set the modal title."""
        self.manager.relay(self, PresentationUpdate("set_title", (title,)))

    def update_footer(self, visible: bool, primary_label: str | None = None) -> None:
        """Show or hide the footer and label the primary action."""
        self.manager.relay(self, PresentationUpdate("set_footer", (visible, primary_label)))

    def notify_validation(self, is_valid: bool, message: str | None = None) -> None:
        """Report whether the primary action is currently allowed."""
        self.manager.relay(self, PresentationUpdate("set_validation", (is_valid, message)))

    def set_modal_width(self, size_hint: SizeHint) -> None:
        """Request a preferred modal width."""
        self.manager.relay(self, PresentationUpdate("set_preferred_width", (size_hint,)))

    async def complete(self, success: bool = True, data: Any = None, message: str | None = None) -> None:
        """Terminate this entry with a result."""
        await self.manager.complete(self, success, data, message)

    async def cancel(self, message: str | None = None) -> None:
        """Terminate this entry unsuccessfully, cancelling live nested workflows first."""
        await self.manager.cancel(self, message)

    async def start_nested(self, workflow_id: str, params: Params | None = None) -> asyncio.Future[WorkflowResult]:
        """Suspend this entry and start a nested workflow on top of it."""
        return await self.manager.start_nested(self, workflow_id, params)

    def __repr__(self) -> str:
        return f"<WorkflowEntry {self.workflow_id} {self.state} id={self.id}>"
