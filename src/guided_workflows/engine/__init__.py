"""Workflow execution engine.

This module provides the registry that resolves workflow ids, and the stack
based manager that runs, suspends and resumes workflow entries.
"""

from __future__ import annotations

from guided_workflows.engine.entry import WorkflowEntry
from guided_workflows.engine.manager import WorkflowManager, WorkflowManagerConfig, create_manager
from guided_workflows.engine.registry import WorkflowRegistry
from guided_workflows.engine.stack import WorkflowStack

__all__ = [
    "WorkflowEntry",
    "WorkflowManager",
    "WorkflowManagerConfig",
    "WorkflowRegistry",
    "WorkflowStack",
    "create_manager",
]
