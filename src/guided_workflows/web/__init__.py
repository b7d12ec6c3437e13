"""Web plugin for guided-workflows.

This module provides REST API controllers for browsing the workflow catalog
and driving the manager's workflow stack over HTTP. The REST API is
automatically enabled when using WorkflowPlugin with enable_api=True (the default).

Example:
    Basic usage with WorkflowPlugin (API enabled by default)::

        from litestar import Litestar
        from guided_workflows import WorkflowPlugin, WorkflowPluginConfig

        app = Litestar(
            plugins=[
                WorkflowPlugin(
                    config=WorkflowPluginConfig(
                        enable_api=True,  # Default
                        api_path_prefix="/workflows",
                    )
                ),
            ],
        )

    With authentication guards::

        config = WorkflowPluginConfig(
            api_path_prefix="/api/v1/workflows",
            api_guards=[require_auth_guard],
        )
"""

from __future__ import annotations

from guided_workflows.web.controllers import WorkflowDefinitionController, WorkflowSessionController
from guided_workflows.web.dto import (
    PresentationDTO,
    SessionDTO,
    StartWorkflowDTO,
    WorkflowDefinitionDTO,
    WorkflowEntryDTO,
    WorkflowResultDTO,
)
from guided_workflows.web.exceptions import workflow_error_handler, workflow_not_registered_handler

__all__ = [
    "PresentationDTO",
    "SessionDTO",
    "StartWorkflowDTO",
    "WorkflowDefinitionController",
    "WorkflowDefinitionDTO",
    "WorkflowEntryDTO",
    "WorkflowResultDTO",
    "WorkflowSessionController",
    "workflow_error_handler",
    "workflow_not_registered_handler",
]
