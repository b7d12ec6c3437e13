"""Guided Workflows - Nested, resumable UI workflows for Litestar.

This package provides a registry and a stack based manager for multi-step,
user-facing workflows that run inside a host-provided modal shell.

Key Features:
    - Lazy loading of workflow implementations by stable id
    - Nested workflows that suspend their caller and resume it with a typed result
    - Presentation relay with buffering for suspended workflows
    - Cascading cancellation and orderly teardown
    - Litestar plugin with dependency injection and a REST API

Example:
    >>> from guided_workflows import BaseWorkflow, WorkflowDefinition, create_manager
    >>>
    >>> class Signing(BaseWorkflow):
    ...     async def handle_primary_action(self):
    ...         await self.complete(True, data="signature")
    >>>
    >>> manager = create_manager()
    >>> manager.registry.register(
    ...     WorkflowDefinition(id="signing", name="Sign", description="Sign a contract", load=lambda: Signing)
    ... )
"""

from __future__ import annotations

from guided_workflows.__metadata__ import __project__, __version__
from guided_workflows.base import BaseWorkflow
from guided_workflows.core import (
    EntryState,
    EventBus,
    PresentationState,
    PresentationSurface,
    Workflow,
    WorkflowDefinition,
    WorkflowHost,
    WorkflowResult,
)
from guided_workflows.engine import (
    WorkflowEntry,
    WorkflowManager,
    WorkflowManagerConfig,
    WorkflowRegistry,
    create_manager,
)
from guided_workflows.exceptions import (
    DoubleTerminationError,
    OrphanedChildError,
    ResultSchemaError,
    WorkflowInitializationError,
    WorkflowLoadError,
    WorkflowNotActiveError,
    WorkflowNotAttachedError,
    WorkflowNotRegisteredError,
    WorkflowsError,
)
from guided_workflows.plugin import WorkflowPlugin, WorkflowPluginConfig

__all__ = (
    "BaseWorkflow",
    "DoubleTerminationError",
    "EntryState",
    "EventBus",
    "OrphanedChildError",
    "PresentationState",
    "PresentationSurface",
    "ResultSchemaError",
    "Workflow",
    "WorkflowDefinition",
    "WorkflowEntry",
    "WorkflowHost",
    "WorkflowInitializationError",
    "WorkflowLoadError",
    "WorkflowManager",
    "WorkflowManagerConfig",
    "WorkflowNotActiveError",
    "WorkflowNotAttachedError",
    "WorkflowNotRegisteredError",
    "WorkflowPlugin",
    "WorkflowPluginConfig",
    "WorkflowRegistry",
    "WorkflowResult",
    "WorkflowsError",
    "__project__",
    "__version__",
    "create_manager",
)
