"""Core domain module for guided-workflows.

This module exports the fundamental building blocks shared by the registry,
the manager and workflow implementations: types, results, definitions and
protocols.
"""

from __future__ import annotations

from guided_workflows.core.definition import WorkflowDefinition
from guided_workflows.core.models import PresentationState, PresentationUpdate, WorkflowResult
from guided_workflows.core.protocols import EventBus, PresentationSurface, Workflow, WorkflowHost
from guided_workflows.core.types import EntryState, Params, SizeHint, T

__all__ = [
    "EntryState",
    "EventBus",
    "Params",
    "PresentationState",
    "PresentationSurface",
    "PresentationUpdate",
    "SizeHint",
    "T",
    "Workflow",
    "WorkflowDefinition",
    "WorkflowHost",
    "WorkflowResult",
]
