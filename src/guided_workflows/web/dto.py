"""Data Transfer Objects for the workflow web API.

This module defines DTOs for serializing and deserializing workflow data
in REST API requests and responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

if TYPE_CHECKING:
    from guided_workflows.core.definition import WorkflowDefinition
    from guided_workflows.core.models import PresentationState, WorkflowResult
    from guided_workflows.engine.entry import WorkflowEntry
    from guided_workflows.engine.manager import WorkflowManager

__all__ = [
    "PresentationDTO",
    "SessionDTO",
    "StartWorkflowDTO",
    "WorkflowDefinitionDTO",
    "WorkflowEntryDTO",
    "WorkflowResultDTO",
]


@dataclass
class StartWorkflowDTO:
    """DTO for starting a root workflow.

    Attributes:
        workflow_id: Registry id of the workflow to start.
        params: Parameters passed to the workflow's ``initialize``.
    """

    workflow_id: str
    params: dict[str, Any] | None = None


@dataclass
class WorkflowDefinitionDTO:
    """DTO for workflow definition metadata.

    Attributes:
        id: Stable workflow id.
        name: Display name.
        description: Human-readable description.
        icon: Optional icon name.
        searchable: Whether search surfaces may offer the workflow.
        popular: Whether the workflow is highlighted.
        keywords: Search keywords.
        loaded: Whether the implementation has been loaded.
    """

    id: str
    name: str
    description: str
    icon: str | None
    searchable: bool
    popular: bool
    keywords: list[str]
    loaded: bool

    @classmethod
    def from_definition(cls, definition: WorkflowDefinition, loaded: bool = False) -> WorkflowDefinitionDTO:
        return cls(
            id=definition.id,
            name=definition.name,
            description=definition.description,
            icon=definition.icon,
            searchable=definition.searchable,
            popular=definition.popular,
            keywords=list(definition.keywords),
            loaded=loaded,
        )


@dataclass
class PresentationDTO:
    """DTO for the presentation state of the active workflow.

    Attributes:
        title: Modal title.
        footer_visible: Whether the footer is shown.
        footer_label: Primary action label.
        is_valid: Whether the primary action is enabled.
        validation_message: Optional validation message.
        modal_width: Preferred modal width.
    """

    title: str
    footer_visible: bool
    footer_label: str | None
    is_valid: bool
    validation_message: str | None
    modal_width: str

    @classmethod
    def from_state(cls, state: PresentationState) -> PresentationDTO:
        return cls(
            title=state.title,
            footer_visible=state.footer_visible,
            footer_label=state.footer_label,
            is_valid=state.is_valid,
            validation_message=state.validation_message,
            modal_width=state.modal_width,
        )


@dataclass
class WorkflowEntryDTO:
    """DTO for a live stack entry.

    Attributes:
        id: Entry id.
        workflow_id: Registry id of the running workflow.
        state: Lifecycle state.
        depth: Number of ancestors.
        parent_id: Id of the parent entry, for nested workflows.
        started_at: When the entry was created.
    """

    id: UUID
    workflow_id: str
    state: str
    depth: int
    parent_id: UUID | None
    started_at: datetime

    @classmethod
    def from_entry(cls, entry: WorkflowEntry) -> WorkflowEntryDTO:
        return cls(
            id=entry.id,
            workflow_id=entry.workflow_id,
            state=entry.state.value,
            depth=entry.depth,
            parent_id=entry.parent.id if entry.parent else None,
            started_at=entry.started_at,
        )


@dataclass
class SessionDTO:
    """DTO for the manager's current stack.

    Attributes:
        active: The top entry, if any.
        presentation: Presentation state of the top entry, if any.
        stack: All live entries, bottom first.
    """

    active: WorkflowEntryDTO | None = None
    presentation: PresentationDTO | None = None
    stack: list[WorkflowEntryDTO] = field(default_factory=list)

    @classmethod
    def from_manager(cls, manager: WorkflowManager) -> SessionDTO:
        entries = manager.entries
        if not entries:
            return cls()
        top = entries[-1]
        return cls(
            active=WorkflowEntryDTO.from_entry(top),
            presentation=PresentationDTO.from_state(top.presentation),
            stack=[WorkflowEntryDTO.from_entry(entry) for entry in entries],
        )


@dataclass
class WorkflowResultDTO:
    """DTO for a terminal workflow result.

    Attributes:
        success: Whether the workflow reached its goal.
        message: Optional outcome message.
        data: Optional payload.
    """

    success: bool
    message: str | None = None
    data: Any = None

    @classmethod
    def from_result(cls, result: WorkflowResult) -> WorkflowResultDTO:
        return cls(success=result.success, message=result.message, data=result.data)
