"""Core protocols for guided-workflows.

This module defines the Protocol-based interfaces at the engine's seams: the
contract every workflow implementation satisfies, the host a workflow talks
to, the presentation surface (shell) the engine relays to, and the optional
event bus. Using Protocol allows duck typing while maintaining type safety.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Awaitable

    from guided_workflows.core.models import WorkflowResult
    from guided_workflows.core.types import Params, SizeHint


__all__ = ["EventBus", "PresentationSurface", "Workflow", "WorkflowHost"]


@runtime_checkable
class WorkflowHost(Protocol):
    """Protocol for the handle a workflow uses to talk to the manager.

    The manager creates one host per running workflow (its stack entry) and
    attaches it before ``initialize`` is called.

    Example:
        >>> class Greeter:
        ...     def attach_host(self, host: WorkflowHost) -> None:
        ...         self.host = host
        ...
        ...     async def initialize(self, params: dict) -> None:
        ...         self.host.update_title(f"Hello {params['name']}")
        ...
        ...     async def handle_primary_action(self) -> None:
        ...         await self.host.complete(True)
    """

    def update_title(self, title: str) -> None:
        """Set the modal title.

        Args:
            title: New title text.
        """
        ...

    def update_footer(self, visible: bool, primary_label: str | None = None) -> None:
        """Show or hide the footer and label the primary action.

        Args:
            visible: Whether the footer is shown.
            primary_label: Optional primary button label.
        """
        ...

    def notify_validation(self, is_valid: bool, message: str | None = None) -> None:
        """Report whether the primary action is currently allowed.

        Args:
            is_valid: Whether the primary action is enabled.
            message: Optional explanation for an invalid state.
        """
        ...

    def set_modal_width(self, size_hint: SizeHint) -> None:
        """Request a preferred modal width.

        Args:
            size_hint: Width hint such as ``"800px"``.
        """
        ...

    async def complete(self, success: bool = True, data: Any = None, message: str | None = None) -> None:
        """Terminate the workflow with a result.

        Args:
            success: Whether the workflow reached its goal.
            data: Optional payload for the caller.
            message: Optional outcome message.
        """
        ...

    async def cancel(self, message: str | None = None) -> None:
        """Terminate the workflow unsuccessfully.

        Args:
            message: Optional cancellation reason.
        """
        ...

    async def start_nested(self, workflow_id: str, params: Params | None = None) -> asyncio.Future[WorkflowResult]:
        """Suspend this workflow and start a nested one.

        Args:
            workflow_id: Id of the nested workflow.
            params: Parameters passed to the nested workflow's ``initialize``.

        Returns:
            Future resolving to the nested workflow's result.
        """
        ...


@runtime_checkable
class Workflow(Protocol):
    """Protocol defining the contract every workflow implementation satisfies.

    ``resume(result)`` is optional: it is required only by workflows that
    start nested workflows. Every workflow must eventually make exactly one
    terminal call (``complete`` or ``cancel``) through its host.
    """

    def attach_host(self, host: WorkflowHost) -> None:
        """Receive the host handle from the manager.

        Args:
            host: The host bound to this workflow's stack entry.
        """
        ...

    def initialize(self, params: Params) -> Awaitable[None] | None:
        """One-time setup, may be asynchronous.

        Args:
            params: Parameters passed by the starter.
        """
        ...

    def handle_primary_action(self) -> Awaitable[None] | None:
        """React to the shell's default affirmative action."""
        ...


@runtime_checkable
class PresentationSurface(Protocol):
    """Protocol for the shell that renders the active workflow.

    Only calls made on behalf of the currently active entry reach the surface.
    """

    def set_title(self, text: str) -> None:
        """Render a new title."""
        ...

    def set_footer(self, visible: bool, primary_label: str | None = None) -> None:
        """Show or hide the footer and label the primary button."""
        ...

    def set_validation(self, is_valid: bool, message: str | None = None) -> None:
        """Enable or disable the primary action affordance."""
        ...

    def set_preferred_width(self, size_hint: SizeHint) -> None:
        """Resize the modal."""
        ...

    def close(self) -> None:
        """Hide the shell because no workflow is left on the stack."""
        ...


class EventBus(Protocol):
    """Protocol for an optional lifecycle event sink.

    Example:
        >>> class PrintingBus:
        ...     async def emit(self, event_type: str, **kwargs: Any) -> None:
        ...         print(event_type, kwargs)
    """

    async def emit(self, event_type: str, **kwargs: Any) -> None:
        """Emit a lifecycle event.

        Args:
            event_type: Dotted event name such as ``"workflow.completed"``.
            **kwargs: Event payload.
        """
        ...
