"""Concrete data models for guided-workflows.

This module provides the dataclasses that cross the engine's boundaries: the
terminal result of a workflow and the presentation state relayed to the shell.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic

from guided_workflows.core.types import T
from guided_workflows.exceptions import ResultSchemaError

if TYPE_CHECKING:
    from guided_workflows.core.protocols import PresentationSurface


__all__ = ["PresentationState", "PresentationUpdate", "WorkflowResult"]


@dataclass(frozen=True)
class WorkflowResult(Generic[T]):
    """Terminal value of a workflow.

    The manager transports results between entries but never inspects them;
    what a failed result means is decided by whatever started the workflow.

    Attributes:
        success: Whether the workflow reached its goal.
        data: Optional payload produced by the workflow for its caller.
        message: Optional human readable outcome, used both for success
            annotations and cancellation or failure reasons.

    Example:
        >>> result = WorkflowResult(success=True, data={"signature": "abc"})
        >>> result.success
        True
    """

    success: bool
    data: T | None = None
    message: str | None = None

    def data_as(self, expected: type[T], workflow_id: str = "<unknown>") -> T | None:
        """Return the payload after checking it against the expected type.

        Args:
            expected: The payload type the caller expects.
            workflow_id: The workflow that produced the result, for error reporting.

        Returns:
            The payload, or None when the workflow delivered no data.

        Raises:
            ResultSchemaError: If the payload is not an instance of ``expected``.
        """
        if self.data is None:
            return None
        if not isinstance(self.data, expected):
            raise ResultSchemaError(workflow_id, expected, type(self.data))
        return self.data


@dataclass(frozen=True)
class PresentationUpdate:
    """A single outbound presentation call issued by a workflow.

    Attributes:
        method: Name of the ``PresentationSurface`` method to call.
        args: Positional arguments for that method.
    """

    method: str
    args: tuple[Any, ...] = ()

    def apply(self, state: PresentationState) -> None:
        """Fold this update into a presentation state.

        Args:
            state: The state to mutate.
        """
        if self.method == "set_title":
            (state.title,) = self.args
        elif self.method == "set_footer":
            state.footer_visible, state.footer_label = self.args
        elif self.method == "set_validation":
            state.is_valid, state.validation_message = self.args
        elif self.method == "set_preferred_width":
            (state.modal_width,) = self.args
        else:
            msg = f"Unknown presentation method '{self.method}'"
            raise ValueError(msg)

    def send(self, surface: PresentationSurface) -> None:
        """Forward this update to a presentation surface.

        Args:
            surface: The attached shell.
        """
        getattr(surface, self.method)(*self.args)


@dataclass
class PresentationState:
    """Presentation state owned by one workflow entry.

    The state is retained while the entry is suspended so it can be restored
    verbatim when the entry becomes active again.

    Attributes:
        title: Modal title.
        footer_visible: Whether the shell shows its footer.
        footer_label: Label of the primary action button.
        is_valid: Whether the primary action is enabled.
        validation_message: Optional message explaining an invalid state.
        modal_width: Preferred modal width.
    """

    title: str = ""
    footer_visible: bool = True
    footer_label: str | None = None
    is_valid: bool = True
    validation_message: str | None = None
    modal_width: str = "500px"

    def restore(self, surface: PresentationSurface) -> None:
        """Push the complete state to a presentation surface.

        Args:
            surface: The attached shell.
        """
        surface.set_title(self.title)
        surface.set_footer(self.footer_visible, self.footer_label)
        surface.set_validation(self.is_valid, self.validation_message)
        surface.set_preferred_width(self.modal_width)
