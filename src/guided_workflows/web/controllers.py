"""REST API controllers for workflow management.

This module provides two controller classes:
- WorkflowDefinitionController: Browse the workflow catalog
- WorkflowSessionController: Start, drive and dismiss workflows on the manager's stack
"""

from __future__ import annotations

from typing import ClassVar

from litestar import Controller, get, post
from litestar.exceptions import NotFoundException
from litestar.status_codes import HTTP_200_OK, HTTP_202_ACCEPTED

from guided_workflows.engine.manager import WorkflowManager  # noqa: TC001 - needed for DI
from guided_workflows.engine.registry import WorkflowRegistry  # noqa: TC001 - needed for DI
from guided_workflows.web.dto import (
    SessionDTO,
    StartWorkflowDTO,
    WorkflowDefinitionDTO,
    WorkflowResultDTO,
)

__all__ = [
    "WorkflowDefinitionController",
    "WorkflowSessionController",
]


class WorkflowDefinitionController(Controller):
    """API controller for workflow definitions.

    Tags: Workflow Definitions
    """

    path = "/definitions"
    tags: ClassVar[list[str]] = ["Workflow Definitions"]

    @get("/")
    async def list_definitions(self, workflow_registry: WorkflowRegistry) -> list[WorkflowDefinitionDTO]:
        """List all registered workflow definitions.

        Args:
            workflow_registry: Injected workflow registry.

        Returns:
            List of workflow definition DTOs.
        """
        return [
            WorkflowDefinitionDTO.from_definition(definition, loaded=workflow_registry.is_loaded(definition.id))
            for definition in workflow_registry.list_definitions()
        ]

    @get("/searchable")
    async def list_searchable(self, workflow_registry: WorkflowRegistry) -> list[WorkflowDefinitionDTO]:
        """List the definitions a search surface may currently offer.

        Args:
            workflow_registry: Injected workflow registry.

        Returns:
            List of workflow definition DTOs.
        """
        return [
            WorkflowDefinitionDTO.from_definition(definition, loaded=workflow_registry.is_loaded(definition.id))
            for definition in await workflow_registry.searchable_definitions()
        ]

    @get("/{workflow_id:str}")
    async def get_definition(self, workflow_id: str, workflow_registry: WorkflowRegistry) -> WorkflowDefinitionDTO:
        """Get a specific workflow definition by id.

        Args:
            workflow_id: The workflow id.
            workflow_registry: Injected workflow registry.

        Returns:
            Workflow definition DTO.

        Raises:
            WorkflowNotRegisteredError: If the id is unknown.
        """
        definition = workflow_registry.resolve(workflow_id)
        return WorkflowDefinitionDTO.from_definition(definition, loaded=workflow_registry.is_loaded(workflow_id))


class WorkflowSessionController(Controller):
    """API controller for the manager's workflow stack.

    The session is the shell side of the manager: it shows the active
    workflow's presentation and forwards the shell's inbound actions.

    Tags: Workflow Session
    """

    path = "/session"
    tags: ClassVar[list[str]] = ["Workflow Session"]

    @get("/")
    async def get_session(self, workflow_manager: WorkflowManager) -> SessionDTO:
        """Get the live stack and the active workflow's presentation.

        Args:
            workflow_manager: Injected workflow manager.

        Returns:
            Session DTO.
        """
        return SessionDTO.from_manager(workflow_manager)

    @post("/start")
    async def start_workflow(self, data: StartWorkflowDTO, workflow_manager: WorkflowManager) -> SessionDTO:
        """Start a root workflow.

        Args:
            data: Workflow start parameters.
            workflow_manager: Injected workflow manager.

        Returns:
            Session DTO after the workflow initialized.

        Raises:
            WorkflowNotRegisteredError: If the workflow id is unknown.
        """
        await workflow_manager.start(data.workflow_id, data.params)
        return SessionDTO.from_manager(workflow_manager)

    @post("/primary-action", status_code=HTTP_202_ACCEPTED)
    async def primary_action(self, workflow_manager: WorkflowManager) -> SessionDTO:
        """Forward the primary action to the active workflow.

        The action runs in the background; poll the session for its effect.

        Args:
            workflow_manager: Injected workflow manager.

        Returns:
            Session DTO at dispatch time.

        Raises:
            NotFoundException: If no workflow is active.
        """
        if workflow_manager.dispatch_primary_action() is None:
            raise NotFoundException(detail="No active workflow")
        return SessionDTO.from_manager(workflow_manager)

    @post("/dismiss", status_code=HTTP_200_OK)
    async def dismiss(self, workflow_manager: WorkflowManager) -> WorkflowResultDTO:
        """Dismiss the workflow on top of the stack.

        Args:
            workflow_manager: Injected workflow manager.

        Returns:
            The cancellation result delivered to the dismissed workflow's caller.

        Raises:
            NotFoundException: If the stack is empty.
        """
        result = await workflow_manager.dismiss()
        if result is None:
            raise NotFoundException(detail="No active workflow")
        return WorkflowResultDTO.from_result(result)
