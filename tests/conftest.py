"""Shared test fixtures for guided-workflows test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from guided_workflows import BaseWorkflow, WorkflowDefinition

if TYPE_CHECKING:
    from guided_workflows import WorkflowManager, WorkflowRegistry, WorkflowResult
    from guided_workflows.core.types import Params


class RecordingSurface:
    """Presentation surface that records every call it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.title: str | None = None
        self.footer: tuple[bool, str | None] | None = None
        self.validation: tuple[bool, str | None] | None = None
        self.width: str | None = None
        self.closed = 0

    def set_title(self, title: str) -> None:
        self.calls.append(("set_title", (title,)))
        self.title = title

    def set_footer(self, visible: bool, primary_label: str | None = None) -> None:
        self.calls.append(("set_footer", (visible, primary_label)))
        self.footer = (visible, primary_label)

    def set_validation(self, is_valid: bool, message: str | None = None) -> None:
        self.calls.append(("set_validation", (is_valid, message)))
        self.validation = (is_valid, message)

    def set_preferred_width(self, size_hint: str) -> None:
        self.calls.append(("set_preferred_width", (size_hint,)))
        self.width = size_hint

    def close(self) -> None:
        self.calls.append(("close", ()))
        self.closed += 1

    def titles(self) -> list[str]:
        return [args[0] for method, args in self.calls if method == "set_title"]


class MockEventBus:
    """Mock event bus for testing."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def emit(self, event_type: str, **kwargs: Any) -> None:
        self.events.append((event_type, kwargs))

    def types(self) -> list[str]:
        return [event_type for event_type, _ in self.events]


class ScriptedWorkflow(BaseWorkflow):
    """Workflow whose behaviour is driven by its params and that logs every hook.

    Params:
        title: Title set during ``initialize``.
        data: Payload delivered when the primary action completes the workflow.
        nested: Workflow id started (and awaited) by the primary action before completing.
        fail_initialize: Raise from ``initialize``.
        complete_in_initialize: Complete from within ``initialize``.
    """

    log: list[str] = []

    def __init__(self) -> None:
        self.params: Params = {}
        self.resumed: list[WorkflowResult] = []
        self.nested_results: list[WorkflowResult] = []

    @property
    def name(self) -> str:
        return self.params.get("title", "scripted")

    async def initialize(self, params: Params) -> None:
        self.params = params
        self.log.append(f"initialize:{self.name}")
        if params.get("fail_initialize"):
            msg = "boom"
            raise RuntimeError(msg)
        self.update_title(self.name)
        self.update_footer(True, "Next")
        if params.get("complete_in_initialize"):
            await self.complete(True, params.get("data"))

    async def handle_primary_action(self) -> None:
        self.log.append(f"primary:{self.name}")
        nested = self.params.get("nested")
        if nested:
            result = await self.run_nested(nested, self.params.get("nested_params"))
            self.log.append(f"continued:{self.name}")
            self.nested_results.append(result)
            if not result.success:
                return
        await self.complete(True, self.params.get("data"))

    async def resume(self, result: WorkflowResult) -> None:
        self.log.append(f"resume:{self.name}")
        self.resumed.append(result)


class PlainWorkflow:
    """Workflow satisfying the contract without BaseWorkflow and without ``resume``."""

    def attach_host(self, host: Any) -> None:
        self.host = host

    def initialize(self, params: Params) -> None:
        self.host.update_title("plain")

    def handle_primary_action(self) -> None:
        pass


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line("markers", "slow: Slow running tests")


def make_definition(workflow_id: str, factory: Any = ScriptedWorkflow, **kwargs: Any) -> WorkflowDefinition:
    """Create a definition whose loader returns ``factory``."""
    return WorkflowDefinition(
        id=workflow_id,
        name=workflow_id.title(),
        description=f"{workflow_id} workflow",
        load=lambda: factory,
        **kwargs,
    )


@pytest.fixture(autouse=True)
def clear_workflow_log() -> None:
    """Reset the shared hook log of ScriptedWorkflow."""
    ScriptedWorkflow.log.clear()


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def event_bus() -> MockEventBus:
    return MockEventBus()


@pytest.fixture
def workflow_registry() -> WorkflowRegistry:
    """Create a registry with scripted workflows registered as parent, child, grandchild, other and plain.

    Returns:
        WorkflowRegistry instance
    """
    from guided_workflows import WorkflowRegistry

    registry = WorkflowRegistry()
    for workflow_id in ("parent", "child", "grandchild", "other"):
        registry.register(make_definition(workflow_id))
    registry.register(make_definition("plain", PlainWorkflow))
    return registry


@pytest.fixture
def manager(
    workflow_registry: WorkflowRegistry,
    surface: RecordingSurface,
    event_bus: MockEventBus,
) -> WorkflowManager:
    """Create a workflow manager with a recording surface and event bus.

    Args:
        workflow_registry: Workflow registry fixture
        surface: Recording surface fixture
        event_bus: Mock event bus fixture

    Returns:
        WorkflowManager instance
    """
    from guided_workflows import create_manager

    return create_manager(workflow_registry, surface=surface, event_bus=event_bus)


@pytest.fixture
def workflow_log() -> list[str]:
    """Hook log shared by every ScriptedWorkflow instance."""
    return ScriptedWorkflow.log


@pytest.fixture
def definition_factory() -> Any:
    """Expose ``make_definition`` to test modules."""
    return make_definition


@pytest.fixture
def scripted_workflow_class() -> type[ScriptedWorkflow]:
    return ScriptedWorkflow
