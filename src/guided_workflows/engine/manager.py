"""Stack based workflow manager.

This module provides the in-process orchestrator that runs workflows, lets a
running workflow start a nested one while it is suspended, and resumes the
caller with the nested result once the nested workflow terminates.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, TypeVar

from guided_workflows.core.models import PresentationState, WorkflowResult
from guided_workflows.core.types import EntryState
from guided_workflows.engine.entry import WorkflowEntry
from guided_workflows.engine.registry import WorkflowRegistry
from guided_workflows.engine.stack import WorkflowStack
from guided_workflows.exceptions import (
    DoubleTerminationError,
    OrphanedChildError,
    ResultSchemaError,
    WorkflowInitializationError,
    WorkflowLoadError,
    WorkflowNotActiveError,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from guided_workflows.core.models import PresentationUpdate
    from guided_workflows.core.protocols import EventBus, PresentationSurface
    from guided_workflows.core.types import Params

__all__ = ["WorkflowManager", "WorkflowManagerConfig", "create_manager"]

logger = logging.getLogger(__name__)

R = TypeVar("R")

_PRESENTING = (EntryState.INITIALIZING, EntryState.ACTIVE)


async def _maybe_await(value: Awaitable[R] | R) -> R:
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass
class WorkflowManagerConfig:
    """Configuration for the WorkflowManager.

    Attributes:
        dismiss_message: Result message used when the shell dismisses the active workflow.
        cancel_message: Result message used when ``cancel`` is called without one.
        cascade_message: Result message delivered to nested workflows cancelled
            because an ancestor was cancelled.
        teardown_message: Result message used by ``close``.
        duplicate_message: Result message of a rejected duplicate start.
        initialize_failure_message: Result message of an entry whose ``initialize`` raised.
        default_modal_width: Modal width every new entry starts with.
        prevent_duplicate_start: Reject starting a root workflow whose id is
            already the active workflow.
    """

    dismiss_message: str = "Workflow dismissed by user"
    cancel_message: str = "Workflow cancelled"
    cascade_message: str = "Parent workflow cancelled"
    teardown_message: str = "Workflow host closed"
    duplicate_message: str = "Workflow already active"
    initialize_failure_message: str = "Workflow failed to initialize"
    default_modal_width: str = "500px"
    prevent_duplicate_start: bool = True


class WorkflowManager:
    """In-memory orchestrator for nested, resumable workflows.

    The manager owns a stack of entries. The top entry is the only one that
    receives user input and whose presentation updates reach the attached
    surface; every entry below it is suspended. Each entry owns a future that
    is resolved exactly once by its terminal call.

    All operations must run on the event loop thread; the stack is never
    touched from anywhere else, so no locking is needed.

    Attributes:
        registry: The workflow registry for resolving ids.
        config: Manager configuration.
        event_bus: Optional event bus for emitting lifecycle events.
        _stack: The live entries, bottom first.
        _tasks: Primary action tasks that have not finished yet.
    """

    def __init__(
        self,
        registry: WorkflowRegistry,
        config: WorkflowManagerConfig | None = None,
        surface: PresentationSurface | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize the workflow manager.

        Args:
            registry: The workflow registry.
            config: Optional configuration, defaults to ``WorkflowManagerConfig()``.
            surface: Optional presentation surface to relay the active entry to.
            event_bus: Optional event bus implementing ``emit``.
        """
        self.registry = registry
        self.config = config or WorkflowManagerConfig()
        self.event_bus = event_bus
        self._surface = surface
        self._stack = WorkflowStack()
        self._tasks: set[asyncio.Task[None]] = set()

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def surface(self) -> PresentationSurface | None:
        """The attached presentation surface, if any."""
        return self._surface

    @property
    def entries(self) -> list[WorkflowEntry]:
        """Snapshot of the live entries, bottom of the stack first."""
        return list(self._stack)

    @property
    def active_entry(self) -> WorkflowEntry | None:
        """The entry currently receiving user input, if any."""
        top = self._stack.top
        if top is not None and top.state is EntryState.ACTIVE:
            return top
        return None

    def has_active_workflow(self) -> bool:
        """Check if any workflow is on the stack.

        Returns:
            True if the stack is not empty.
        """
        return len(self._stack) > 0

    def current_workflow_id(self) -> str | None:
        """Get the id of the workflow on top of the stack.

        Returns:
            The workflow id, or None when the stack is empty.
        """
        top = self._stack.top
        return top.workflow_id if top is not None else None

    def attach_surface(self, surface: PresentationSurface) -> None:
        """Attach a presentation surface and show the top entry on it.

        Args:
            surface: The shell to relay to.
        """
        self._surface = surface
        top = self._stack.top
        if top is not None and top.state in _PRESENTING:
            top.presentation.restore(surface)

    def detach_surface(self) -> None:
        """Stop relaying presentation updates."""
        self._surface = None

    # -------------------------------------------------------------------------
    # Starting workflows
    # -------------------------------------------------------------------------

    async def start(self, workflow_id: str, params: Params | None = None) -> asyncio.Future[WorkflowResult]:
        """Start a root workflow.

        Resolves and loads the workflow, pushes a new root entry, and awaits its
        ``initialize``. The returned future resolves when the workflow makes its
        terminal call; the caller is not blocked while the workflow runs.

        Args:
            workflow_id: Registry id of the workflow.
            params: Parameters for ``initialize``.

        Returns:
            Future resolving to the workflow's result.

        Raises:
            WorkflowNotRegisteredError: If the id is unknown. No entry is created.
            WorkflowLoadError: If the implementation cannot be loaded or constructed.
            WorkflowInitializationError: If ``initialize`` raised.

        Example:
            >>> future = await manager.start("loan", {"amount": 10_000})
            >>> result = await future
        """
        return await self._start(workflow_id, params, parent=None)

    async def start_nested(
        self,
        parent: WorkflowEntry,
        workflow_id: str,
        params: Params | None = None,
    ) -> asyncio.Future[WorkflowResult]:
        """Suspend ``parent`` and start a nested workflow above it.

        When the nested workflow terminates, ``parent.resume(result)`` runs
        before the returned future resolves, so code awaiting the future always
        observes the resumed state.

        Args:
            parent: The calling entry; must be the top of the stack.
            workflow_id: Registry id of the nested workflow.
            params: Parameters for the nested workflow's ``initialize``.

        Returns:
            Future resolving to the nested workflow's result.

        Raises:
            WorkflowNotActiveError: If ``parent`` is not the active top of the stack.
        """
        self._ensure_presenting(parent)
        return await self._start(workflow_id, params, parent=parent)

    async def _start(
        self,
        workflow_id: str,
        params: Params | None,
        parent: WorkflowEntry | None,
    ) -> asyncio.Future[WorkflowResult]:
        definition = self.registry.resolve(workflow_id)
        factory = await self.registry.load_implementation(definition)
        loop = asyncio.get_running_loop()

        # Loading may have yielded to other tasks, so the stack is checked afterwards
        top = self._stack.top
        if parent is not None:
            self._ensure_presenting(parent)
        elif self._is_duplicate(workflow_id, top):
            logger.warning("Workflow '%s' is already active, rejecting duplicate start", workflow_id)
            rejected: asyncio.Future[WorkflowResult] = loop.create_future()
            rejected.set_result(WorkflowResult(success=False, message=self.config.duplicate_message))
            return rejected

        try:
            workflow = factory()
        except Exception as e:
            raise WorkflowLoadError(workflow_id, e) from e

        entry = WorkflowEntry(
            manager=self,
            definition=definition,
            workflow=workflow,
            pending_result=loop.create_future(),
            params=dict(params or {}),
            parent=parent,
            presentation=PresentationState(modal_width=self.config.default_modal_width),
        )
        workflow.attach_host(entry)

        suspended = top if top is not None and top.state.is_live else None
        if suspended is not None:
            suspended.state = EntryState.SUSPENDED
        self._stack.push(entry)
        if self._surface is not None:
            entry.presentation.restore(self._surface)

        logger.debug(
            "Started workflow '%s' (%s), parent=%s, stack=%s",
            workflow_id,
            entry.id,
            parent.workflow_id if parent else None,
            [e.workflow_id for e in self._stack],
        )
        if suspended is not None:
            await self._emit("workflow.suspended", suspended)
        await self._emit("workflow.started", entry, parent_id=parent.id if parent else None)

        try:
            await _maybe_await(workflow.initialize(entry.params))
        except Exception as e:
            logger.exception("Workflow '%s' failed to initialize", workflow_id)
            await self._discard(entry, e)
            raise WorkflowInitializationError(workflow_id, e) from e

        if entry.state is EntryState.INITIALIZING:
            entry.state = EntryState.ACTIVE

        return entry.pending_result

    def _is_duplicate(self, workflow_id: str, top: WorkflowEntry | None) -> bool:
        return (
            self.config.prevent_duplicate_start
            and top is not None
            and top.workflow_id == workflow_id
            and top.state in _PRESENTING
        )

    def _ensure_presenting(self, entry: WorkflowEntry) -> None:
        if self._stack.top is not entry or entry.state not in _PRESENTING:
            raise WorkflowNotActiveError(entry.id, entry.workflow_id, str(entry.state))

    # -------------------------------------------------------------------------
    # Terminal calls
    # -------------------------------------------------------------------------

    async def complete(
        self,
        entry: WorkflowEntry,
        success: bool = True,
        data: Any = None,
        message: str | None = None,
    ) -> None:
        """Terminate an entry with a result.

        Args:
            entry: The terminating entry.
            success: Whether the workflow reached its goal.
            data: Optional payload for the caller.
            message: Optional outcome message.

        Raises:
            DoubleTerminationError: If the entry already terminated.
            OrphanedChildError: If the entry still has live nested workflows.
            ResultSchemaError: If the definition declares a ``result_type`` and a
                successful result carries data of another type.
        """
        self._ensure_live(entry)
        result_type = entry.definition.result_type
        if success and data is not None and result_type is not None and not isinstance(data, result_type):
            raise ResultSchemaError(entry.workflow_id, result_type, type(data))
        children = self._stack.descendants_of(entry)
        if children:
            raise OrphanedChildError(entry.id, entry.workflow_id, [child.workflow_id for child in children])

        entry.state = EntryState.TERMINATING
        await self._terminate(
            entry,
            WorkflowResult(success=success, data=data, message=message),
            event="workflow.completed",
        )

    async def cancel(self, entry: WorkflowEntry, message: str | None = None) -> None:
        """Terminate an entry unsuccessfully.

        Live descendants are cancelled first, innermost first, without resuming
        their parents; then the entry itself is cancelled and its own parent,
        if any, is resumed with the cancellation result.

        Args:
            entry: The entry to cancel.
            message: Optional cancellation reason.

        Raises:
            DoubleTerminationError: If the entry already terminated.
        """
        self._ensure_live(entry)
        entry.state = EntryState.TERMINATING

        descendants = list(reversed(self._stack.descendants_of(entry)))
        for descendant in descendants:
            descendant.state = EntryState.TERMINATING
        for descendant in descendants:
            await self._terminate(
                descendant,
                WorkflowResult(success=False, message=self.config.cascade_message),
                event="workflow.canceled",
                resume_parent=False,
                reactivate=False,
            )

        await self._terminate(
            entry,
            WorkflowResult(success=False, message=message or self.config.cancel_message),
            event="workflow.canceled",
        )

    def _ensure_live(self, entry: WorkflowEntry) -> None:
        if not entry.state.is_live:
            raise DoubleTerminationError(entry.id, entry.workflow_id, str(entry.state))

    async def _terminate(
        self,
        entry: WorkflowEntry,
        result: WorkflowResult,
        *,
        event: str,
        resume_parent: bool = True,
        reactivate: bool = True,
    ) -> None:
        was_top = self._stack.top is entry
        self._stack.remove(entry)
        entry.buffered.clear()
        logger.debug(
            "Workflow '%s' (%s) terminated, success=%s, stack=%s",
            entry.workflow_id,
            entry.id,
            result.success,
            [e.workflow_id for e in self._stack],
        )

        parent = entry.parent
        resumed: WorkflowEntry | None = None
        try:
            if resume_parent and parent is not None and parent.state.is_live:
                if self._stack.top is parent:
                    self._activate(parent)
                resumed = parent
                await self._resume(parent, result)
            elif reactivate and was_top:
                resumed = self._reactivate_top()
        finally:
            entry.state = EntryState.REMOVED
            entry.completed_at = datetime.now(timezone.utc)
            entry.workflow = None
            entry.pending_result.set_result(result)

            if not self._stack and self._surface is not None:
                self._surface.close()

            await self._emit(event, entry, result=result)
            if resumed is not None:
                await self._emit("workflow.resumed", resumed)

    async def _discard(self, entry: WorkflowEntry, error: Exception) -> None:
        if not entry.state.is_live:
            return

        entry.state = EntryState.TERMINATING
        descendants = list(reversed(self._stack.descendants_of(entry)))
        for descendant in descendants:
            descendant.state = EntryState.TERMINATING
        for descendant in descendants:
            await self._terminate(
                descendant,
                WorkflowResult(success=False, message=self.config.cascade_message),
                event="workflow.canceled",
                resume_parent=False,
                reactivate=False,
            )

        await self._terminate(
            entry,
            WorkflowResult(success=False, message=f"{self.config.initialize_failure_message}: {error}"),
            event="workflow.canceled",
            resume_parent=False,
        )

    async def _resume(self, entry: WorkflowEntry, result: WorkflowResult) -> None:
        resume = getattr(entry.workflow, "resume", None)
        if resume is None:
            logger.debug("Workflow '%s' has no resume hook", entry.workflow_id)
            return

        try:
            await _maybe_await(resume(result))
        except Exception:
            logger.exception("Workflow '%s' failed to resume", entry.workflow_id)
            raise

    def _reactivate_top(self) -> WorkflowEntry | None:
        top = self._stack.top
        if top is None or top.state is not EntryState.SUSPENDED:
            return None
        self._activate(top)
        return top

    # -------------------------------------------------------------------------
    # Presentation relay
    # -------------------------------------------------------------------------

    def relay(self, entry: WorkflowEntry, update: PresentationUpdate) -> None:
        """Route a presentation update issued by an entry.

        Updates from the top entry reach the surface immediately. Updates from
        a suspended entry are buffered and replayed, in order, when the entry
        becomes active again. Updates from terminated entries are dropped.

        Args:
            entry: The entry that issued the update.
            update: The update.
        """
        if entry.state is EntryState.SUSPENDED:
            entry.buffered.append(update)
            return

        if not entry.state.is_live:
            logger.debug("Dropping %s from terminated workflow '%s'", update.method, entry.workflow_id)
            return

        update.apply(entry.presentation)
        if self._surface is not None and self._stack.top is entry:
            update.send(self._surface)

    def _activate(self, entry: WorkflowEntry) -> None:
        entry.state = EntryState.ACTIVE
        buffered, entry.buffered = entry.buffered, []

        if self._surface is not None:
            entry.presentation.restore(self._surface)
        for update in buffered:
            update.apply(entry.presentation)
            if self._surface is not None:
                update.send(self._surface)

    # -------------------------------------------------------------------------
    # Shell inbound
    # -------------------------------------------------------------------------

    def dispatch_primary_action(self) -> asyncio.Task[None] | None:
        """Forward the shell's primary action to the active entry.

        The handler runs as a task, like a UI event handler, so it may await a
        nested workflow without blocking the shell. An exception raised by the
        handler is logged and does not propagate out of the task; the entry
        remains on the stack.

        Returns:
            The task running ``handle_primary_action``, or None when no entry is active.
        """
        entry = self.active_entry
        if entry is None:
            logger.debug("Primary action ignored, no active workflow")
            return None

        task = asyncio.get_running_loop().create_task(
            self._run_primary_action(entry),
            name=f"primary-action:{entry.workflow_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_primary_action(self, entry: WorkflowEntry) -> None:
        workflow = entry.workflow
        if workflow is None:
            return

        try:
            await _maybe_await(workflow.handle_primary_action())
        except Exception:
            logger.exception("Primary action of workflow '%s' failed", entry.workflow_id)

    async def dismiss(self) -> WorkflowResult | None:
        """Cancel the top entry because the user dismissed it.

        Returns:
            The cancellation result, or None when the stack is empty.
        """
        entry = self._stack.top
        if entry is None or not entry.state.is_live:
            logger.debug("Dismiss ignored, no active workflow")
            return None

        await self.cancel(entry, self.config.dismiss_message)
        return entry.pending_result.result()

    async def close(self, message: str | None = None) -> None:
        """Force-cancel every entry, descendants first, until the stack is empty.

        Args:
            message: Optional cancellation reason, defaults to the configured teardown message.
        """
        message = message or self.config.teardown_message

        while (top := self._stack.top) is not None:
            root = self._stack.root_of(top)
            if not root.state.is_live:
                logger.warning("Workflow '%s' is already terminating, leaving it to finish", root.workflow_id)
                break
            await self.cancel(root, message)

    async def _emit(self, event_type: str, entry: WorkflowEntry, **kwargs: Any) -> None:
        if self.event_bus:
            await self.event_bus.emit(event_type, entry_id=entry.id, workflow_id=entry.workflow_id, **kwargs)


def create_manager(
    registry: WorkflowRegistry | None = None,
    config: WorkflowManagerConfig | None = None,
    surface: PresentationSurface | None = None,
    event_bus: EventBus | None = None,
) -> WorkflowManager:
    """Create a workflow manager with its own registry unless one is given.

    Args:
        registry: Optional registry to share.
        config: Optional manager configuration.
        surface: Optional presentation surface.
        event_bus: Optional event bus.

    Returns:
        A new WorkflowManager.
    """
    return WorkflowManager(registry or WorkflowRegistry(), config=config, surface=surface, event_bus=event_bus)
