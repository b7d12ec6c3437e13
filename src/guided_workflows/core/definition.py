"""Workflow definition structure.

This module provides the registry entry describing a workflow: display
metadata plus a lazily resolved reference to its implementation.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from guided_workflows.core.protocols import Workflow

__all__ = ["SearchCondition", "WorkflowDefinition", "WorkflowFactory", "WorkflowLoader"]

WorkflowFactory: TypeAlias = "Callable[[], Workflow]"
"""Zero-argument callable (usually a class) producing a fresh workflow object."""

WorkflowLoader: TypeAlias = "str | Callable[[], WorkflowFactory | Awaitable[WorkflowFactory]]"
"""Import locator ``"package.module:Attribute"`` or a callable returning the factory."""

SearchCondition: TypeAlias = "Callable[[], bool | Awaitable[bool]]"
"""Callable returning True when a workflow must be hidden from search."""


@dataclass(frozen=True)
class WorkflowDefinition:
    """Registry entry for one workflow.

    Definitions are immutable; registering a new definition under the same
    id replaces the previous one.

    Attributes:
        id: Stable workflow identifier used to start the workflow.
        name: Display name.
        description: Display description.
        load: Import locator string or callable returning the implementation
            factory. Resolved lazily on the first start.
        icon: Optional display icon.
        searchable: Whether the workflow may be offered by search surfaces.
        popular: Whether search surfaces should highlight the workflow.
        keywords: Search keywords.
        search_disabled_condition: Optional callable, sync or async, returning
            True when the workflow must currently be hidden from search.
        result_type: Type of the ``data`` payload the workflow delivers on
            success, if it declares one.

    Example:
        >>> definition = WorkflowDefinition(
        ...     id="signing",
        ...     name="Sign Document",
        ...     description="Sign documents or transactions",
        ...     load="examples.banking.workflows:SigningWorkflow",
        ...     searchable=True,
        ...     keywords=("sign", "signature"),
        ... )
    """

    id: str
    name: str
    description: str
    load: WorkflowLoader
    icon: str | None = None
    searchable: bool = False
    popular: bool = False
    keywords: tuple[str, ...] = ()
    search_disabled_condition: SearchCondition | None = None
    result_type: type[Any] | None = None

    @property
    def locator(self) -> str:
        """Human readable description of the implementation reference."""
        if isinstance(self.load, str):
            return self.load
        return getattr(self.load, "__qualname__", repr(self.load))
