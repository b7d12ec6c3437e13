"""Tests for the BaseWorkflow scaffolding."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import pytest

from guided_workflows import (
    BaseWorkflow,
    EntryState,
    OrphanedChildError,
    ResultSchemaError,
    WorkflowNotAttachedError,
    WorkflowResult,
)

if TYPE_CHECKING:
    from guided_workflows import WorkflowManager, WorkflowRegistry


class Minimal(BaseWorkflow):
    """Relies on every default."""


class FailingResume(BaseWorkflow):
    """Caller whose resume hook blows up."""

    async def resume(self, result: WorkflowResult) -> None:
        msg = "resume failed"
        raise RuntimeError(msg)


class Caller(BaseWorkflow):
    """Runs a nested workflow and records what came back."""

    def __init__(self) -> None:
        self.outcome: WorkflowResult | Exception | None = None

    async def initialize(self, params: dict[str, Any]) -> None:
        self.expect = params.get("expect")

    async def handle_primary_action(self) -> None:
        try:
            self.outcome = await self.run_nested("child", {"data": "text"}, expect=self.expect)
        except ResultSchemaError as e:
            self.outcome = e


async def wait_for_workflow(manager: WorkflowManager, workflow_id: str) -> None:
    for _ in range(100):
        if manager.current_workflow_id() == workflow_id:
            return
        await asyncio.sleep(0)
    msg = f"{workflow_id} never became active"
    raise AssertionError(msg)


@pytest.mark.unit
class TestBaseWorkflowUnattached:
    """Tests for a workflow that was never started."""

    def test_host_access_raises(self) -> None:
        """Test using the host before attachment raises."""
        workflow = Minimal()

        with pytest.raises(WorkflowNotAttachedError, match="'Minimal'"):
            workflow.update_title("x")

    def test_not_terminated(self) -> None:
        assert Minimal().terminated is False


@pytest.mark.unit
@pytest.mark.asyncio
class TestBaseWorkflow:
    """Tests for BaseWorkflow under a manager."""

    async def test_defaults(
        self, manager: WorkflowManager, workflow_registry: WorkflowRegistry, definition_factory: Any
    ) -> None:
        """Test the default primary action completes successfully."""
        workflow_registry.register(definition_factory("minimal", Minimal))
        future = await manager.start("minimal")
        workflow = manager.active_entry.workflow

        await manager.dispatch_primary_action()

        assert future.result() == WorkflowResult(success=True)
        assert workflow.terminated is True

    async def test_cancel_marks_terminated(
        self, manager: WorkflowManager, workflow_registry: WorkflowRegistry, definition_factory: Any
    ) -> None:
        workflow_registry.register(definition_factory("minimal", Minimal))
        future = await manager.start("minimal")
        workflow = manager.active_entry.workflow

        await workflow.cancel("changed my mind")

        assert workflow.terminated
        assert future.result().message == "changed my mind"

    async def test_forwarders_reach_surface(
        self, manager: WorkflowManager, workflow_registry: WorkflowRegistry, definition_factory: Any, surface: Any
    ) -> None:
        """Test the presentation helpers go through the host."""
        workflow_registry.register(definition_factory("minimal", Minimal))
        await manager.start("minimal")
        workflow = manager.active_entry.workflow

        workflow.update_title("Title")
        workflow.update_footer(False)
        workflow.notify_validation(False, "Nope")
        workflow.set_modal_width("800px")

        assert surface.title == "Title"
        assert surface.footer == (False, None)
        assert surface.validation == (False, "Nope")
        assert surface.width == "800px"

    @pytest.mark.parametrize(("expect", "matches"), [(str, True), (dict, False), (None, True)])
    async def test_run_nested_expect(
        self,
        manager: WorkflowManager,
        workflow_registry: WorkflowRegistry,
        definition_factory: Any,
        expect: type | None,
        matches: bool,
    ) -> None:
        """Test the expected payload type is checked on successful results."""
        workflow_registry.register(definition_factory("caller", Caller))
        await manager.start("caller", {"expect": expect})
        caller = manager.active_entry.workflow

        task = manager.dispatch_primary_action()
        await wait_for_workflow(manager, "child")
        await manager.dispatch_primary_action()
        await task

        if matches:
            assert caller.outcome == WorkflowResult(success=True, data="text")
        else:
            assert isinstance(caller.outcome, ResultSchemaError)
            assert caller.outcome.workflow_id == "child"

    async def test_run_nested_failure_skips_check(
        self, manager: WorkflowManager, workflow_registry: WorkflowRegistry, definition_factory: Any
    ) -> None:
        """Test a failed result is returned unchecked."""
        workflow_registry.register(definition_factory("caller", Caller))
        await manager.start("caller", {"expect": dict})
        caller = manager.active_entry.workflow

        task = manager.dispatch_primary_action()
        await wait_for_workflow(manager, "child")
        await manager.dismiss()
        await task

        assert caller.outcome == WorkflowResult(success=False, message="Workflow dismissed by user")

    @pytest.mark.parametrize("terminal_call", ["complete", "cancel"])
    async def test_terminated_when_caller_resume_fails(
        self,
        manager: WorkflowManager,
        workflow_registry: WorkflowRegistry,
        definition_factory: Any,
        terminal_call: str,
    ) -> None:
        """Test a terminal call accepted by the host counts even when the caller's resume raises."""
        workflow_registry.register(definition_factory("failing-resume", FailingResume))
        workflow_registry.register(definition_factory("minimal", Minimal))
        await manager.start("failing-resume")
        caller = manager.active_entry
        child_future = await caller.start_nested("minimal")
        child = manager.active_entry.workflow

        with pytest.raises(RuntimeError, match="resume failed"):
            await getattr(child, terminal_call)()

        assert child.terminated is True
        assert child_future.done()
        assert manager.entries == [caller]

    async def test_rejected_terminal_call_is_not_terminated(
        self, manager: WorkflowManager, workflow_registry: WorkflowRegistry, definition_factory: Any
    ) -> None:
        """Test a terminal call the host refuses leaves the workflow live."""
        workflow_registry.register(definition_factory("minimal", Minimal))
        await manager.start("minimal")
        entry = manager.active_entry
        workflow = entry.workflow
        await entry.start_nested("child")

        with pytest.raises(OrphanedChildError):
            await workflow.complete(True)

        assert workflow.terminated is False
        assert entry.state is EntryState.SUSPENDED
