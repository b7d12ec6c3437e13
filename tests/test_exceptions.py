"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

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


@pytest.mark.unit
class TestExceptions:
    """Tests for exception attributes and messages."""

    @pytest.mark.parametrize(
        "exc",
        [
            WorkflowNotRegisteredError("loan"),
            WorkflowLoadError("loan"),
            WorkflowInitializationError("loan", RuntimeError("boom")),
            DoubleTerminationError("e1", "loan", "removed"),
            OrphanedChildError("e1", "loan", ["signing"]),
            WorkflowNotActiveError("e1", "loan", "suspended"),
            WorkflowNotAttachedError("LoanWorkflow"),
            ResultSchemaError("signing", dict, str),
        ],
    )
    def test_hierarchy(self, exc: WorkflowsError) -> None:
        """Test every error derives from WorkflowsError."""
        assert isinstance(exc, WorkflowsError)
        assert str(exc)

    def test_not_registered(self) -> None:
        exc = WorkflowNotRegisteredError("loan")

        assert exc.workflow_id == "loan"
        assert str(exc) == "Workflow 'loan' is not registered"

    def test_load_error_with_and_without_cause(self) -> None:
        cause = ImportError("no module")

        assert str(WorkflowLoadError("loan")) == "Failed to load workflow 'loan'"
        assert str(WorkflowLoadError("loan", cause)) == "Failed to load workflow 'loan': no module"
        assert WorkflowLoadError("loan", cause).cause is cause

    def test_double_termination(self) -> None:
        exc = DoubleTerminationError("e1", "loan", "removed")

        assert exc.entry_id == "e1"
        assert exc.state == "removed"
        assert "already terminated" in str(exc)

    def test_orphaned_child(self) -> None:
        exc = OrphanedChildError("e1", "account", ["kyc", "signing"])

        assert exc.children == ["kyc", "signing"]
        assert str(exc).endswith("kyc, signing")

    def test_result_schema(self) -> None:
        exc = ResultSchemaError("signing", dict, str)

        assert str(exc) == "Workflow 'signing' returned str data, expected dict"
