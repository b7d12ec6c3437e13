"""Exception hierarchy for guided-workflows."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

__all__ = (
    "DoubleTerminationError",
    "OrphanedChildError",
    "ResultSchemaError",
    "WorkflowInitializationError",
    "WorkflowLoadError",
    "WorkflowNotActiveError",
    "WorkflowNotAttachedError",
    "WorkflowNotRegisteredError",
    "WorkflowsError",
)


class WorkflowsError(Exception):
    """Base exception for all guided-workflows errors.

    All exceptions raised by guided-workflows inherit from this class.
    Every subclass signals a broken implementation contract (a misconfigured
    catalog or a misbehaving workflow), never a user-facing failure. User
    facing failures travel in ``WorkflowResult(success=False)`` instead.
    """


class WorkflowNotRegisteredError(WorkflowsError):
    """Raised when a workflow id is not present in the registry.

    Attributes:
        workflow_id: The id that could not be resolved.
    """

    def __init__(self, workflow_id: str) -> None:
        """Initialize the exception with the unknown id.

        Args:
            workflow_id: The id that could not be resolved.
        """
        self.workflow_id = workflow_id
        super().__init__(f"Workflow '{workflow_id}' is not registered")


class WorkflowLoadError(WorkflowsError):
    """Raised when the implementation of a registered workflow cannot be loaded.

    Attributes:
        workflow_id: The id of the workflow whose loader failed.
        cause: The underlying exception, if any.
    """

    def __init__(self, workflow_id: str, cause: Exception | None = None) -> None:
        """Initialize the exception with loader details.

        Args:
            workflow_id: The id of the workflow whose loader failed.
            cause: The underlying exception, if any.
        """
        self.workflow_id = workflow_id
        self.cause = cause
        msg = f"Failed to load workflow '{workflow_id}'"
        if cause:
            msg += f": {cause}"
        super().__init__(msg)


class WorkflowInitializationError(WorkflowsError):
    """Raised when a workflow's ``initialize`` hook raises.

    The entry has already been discarded from the stack when this is raised.

    Attributes:
        workflow_id: The id of the workflow that failed to initialize.
        cause: The exception raised by ``initialize``.
    """

    def __init__(self, workflow_id: str, cause: Exception) -> None:
        """Initialize the exception with initialization details.

        Args:
            workflow_id: The id of the workflow that failed to initialize.
            cause: The exception raised by ``initialize``.
        """
        self.workflow_id = workflow_id
        self.cause = cause
        super().__init__(f"Workflow '{workflow_id}' failed to initialize: {cause}")


class DoubleTerminationError(WorkflowsError):
    """Raised when an entry calls ``complete``/``cancel`` after already terminating.

    Attributes:
        entry_id: The id of the offending entry.
        workflow_id: The workflow id of the offending entry.
        state: The state the entry was in when the second call arrived.
    """

    def __init__(self, entry_id: str | UUID, workflow_id: str, state: str) -> None:
        """Initialize the exception with entry details.

        Args:
            entry_id: The id of the offending entry.
            workflow_id: The workflow id of the offending entry.
            state: The state the entry was in when the second call arrived.
        """
        self.entry_id = entry_id
        self.workflow_id = workflow_id
        self.state = state
        super().__init__(f"Workflow '{workflow_id}' ({entry_id}) already terminated (state: {state})")


class OrphanedChildError(WorkflowsError):
    """Raised when removing an entry that still has live nested children.

    Attributes:
        entry_id: The id of the entry that was about to be removed.
        workflow_id: The workflow id of that entry.
        children: Workflow ids of the live children, innermost last.
    """

    def __init__(self, entry_id: str | UUID, workflow_id: str, children: list[str]) -> None:
        """Initialize the exception with the live children.

        Args:
            entry_id: The id of the entry that was about to be removed.
            workflow_id: The workflow id of that entry.
            children: Workflow ids of the live children, innermost last.
        """
        self.entry_id = entry_id
        self.workflow_id = workflow_id
        self.children = children
        super().__init__(
            f"Workflow '{workflow_id}' ({entry_id}) cannot be removed while nested workflows are live: "
            f"{', '.join(children)}"
        )


class WorkflowNotActiveError(WorkflowsError):
    """Raised when an entry that is not the active top of the stack tries to start a nested workflow.

    Attributes:
        entry_id: The id of the calling entry.
        workflow_id: The workflow id of the calling entry.
        state: The state of the calling entry.
    """

    def __init__(self, entry_id: str | UUID, workflow_id: str, state: str) -> None:
        """Initialize the exception with caller details.

        Args:
            entry_id: The id of the calling entry.
            workflow_id: The workflow id of the calling entry.
            state: The state of the calling entry.
        """
        self.entry_id = entry_id
        self.workflow_id = workflow_id
        self.state = state
        super().__init__(f"Workflow '{workflow_id}' ({entry_id}) is not active (state: {state})")


class WorkflowNotAttachedError(WorkflowsError):
    """Raised when a workflow uses its host before the manager attached one."""

    def __init__(self, workflow: str) -> None:
        """Initialize the exception.

        Args:
            workflow: Name of the workflow class.
        """
        self.workflow = workflow
        super().__init__(f"Workflow '{workflow}' is not attached to a workflow manager")


class ResultSchemaError(WorkflowsError):
    """Raised when a nested workflow delivers a payload of an unexpected type.

    Attributes:
        workflow_id: The nested workflow that produced the result.
        expected: The payload type the caller expected.
        actual: The payload type that was delivered.
    """

    def __init__(self, workflow_id: str, expected: type, actual: type) -> None:
        """Initialize the exception with the mismatching types.

        Args:
            workflow_id: The nested workflow that produced the result.
            expected: The payload type the caller expected.
            actual: The payload type that was delivered.
        """
        self.workflow_id = workflow_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Workflow '{workflow_id}' returned {actual.__name__} data, expected {expected.__name__}"
        )
