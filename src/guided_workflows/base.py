"""Base class for workflow implementations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from guided_workflows.exceptions import WorkflowNotAttachedError

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from guided_workflows.core.models import WorkflowResult
    from guided_workflows.core.protocols import WorkflowHost
    from guided_workflows.core.types import Params, SizeHint

__all__ = ["BaseWorkflow"]

D = TypeVar("D")


class BaseWorkflow:
    """Base class for workflows.

    Inherit from this class to create a new workflow. The manager attaches a
    host before ``initialize`` runs; the helpers below forward to it, so
    subclasses never need to touch the host directly.

    Example:
        >>> class Signing(BaseWorkflow):
        ...     async def initialize(self, params: dict) -> None:
        ...         self.update_title("Sign the contract")
        ...         self.update_footer(True, "Sign")
        ...
        ...     async def handle_primary_action(self) -> None:
        ...         await self.complete(True, data=SigningResult(signature="abc"))
    """

    _host: WorkflowHost | None = None
    _terminated = False

    @property
    def host(self) -> WorkflowHost:
        """The host attached by the manager.

        Raises:
            WorkflowNotAttachedError: If the workflow has not been started by a manager.
        """
        if self._host is None:
            raise WorkflowNotAttachedError(type(self).__name__)
        return self._host

    @property
    def terminated(self) -> bool:
        """Whether the host accepted this workflow's terminal call."""
        return self._terminated

    def attach_host(self, host: WorkflowHost) -> None:
        """Store the host handed over by the manager.

        Args:
            host: The host of this workflow's stack entry.
        """
        self._host = host

    async def initialize(self, params: Params) -> None:
        """Prepare the first screen.

        Args:
            params: Parameters passed to ``start``/``start_nested``.
        """

    async def handle_primary_action(self) -> None:
        """Handle the shell's primary action button. Completes successfully by default."""
        await self.complete(True)

    def update_title(self, title: str) -> None:
        self.host.update_title(title)

    def update_footer(self, visible: bool, primary_label: str | None = None) -> None:
        self.host.update_footer(visible, primary_label)

    def notify_validation(self, is_valid: bool, message: str | None = None) -> None:
        self.host.notify_validation(is_valid, message)

    def set_modal_width(self, size_hint: SizeHint) -> None:
        self.host.set_modal_width(size_hint)

    async def complete(self, success: bool = True, data: Any = None, message: str | None = None) -> None:
        """Terminate this workflow with a result.

        Args:
            success: Whether the workflow reached its goal.
            data: Optional payload for the caller.
            message: Optional outcome message.
        """
        await self._terminal_call(self.host.complete(success, data, message))

    async def cancel(self, message: str | None = None) -> None:
        """Terminate this workflow unsuccessfully.

        Args:
            message: Optional cancellation reason.
        """
        await self._terminal_call(self.host.cancel(message))

    async def _terminal_call(self, call: Awaitable[None]) -> None:
        # The host may accept the call and still raise afterwards, e.g. when the caller's resume fails
        try:
            await call
        finally:
            state = getattr(self._host, "state", None)
            self._terminated = self._terminated or state is None or not state.is_live

    async def run_nested(
        self,
        workflow_id: str,
        params: Params | None = None,
        expect: type[D] | None = None,
    ) -> WorkflowResult[D]:
        """Start a nested workflow and wait for its result.

        This workflow is suspended while the nested one runs, and its
        ``resume`` hook (if any) has already run when this returns.

        Args:
            workflow_id: Registry id of the nested workflow.
            params: Parameters for the nested workflow.
            expect: Optional payload type; a successful result carrying data of
                another type raises.

        Returns:
            The nested workflow's result.

        Raises:
            ResultSchemaError: If ``expect`` is given and the payload does not match it.
        """
        future = await self.host.start_nested(workflow_id, params)
        result = await future
        if expect is not None and result.success:
            result.data_as(expect, workflow_id)
        return result
