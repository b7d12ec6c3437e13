"""Tests for core types, models and definitions."""

from __future__ import annotations

import pytest

from guided_workflows import EntryState, PresentationState, ResultSchemaError, WorkflowDefinition, WorkflowResult
from guided_workflows.core import PresentationUpdate


@pytest.mark.unit
class TestEntryState:
    """Tests for EntryState."""

    def test_values(self) -> None:
        """Test states serialize to lowercase names."""
        assert EntryState.ACTIVE.value == "active"
        assert str(EntryState.SUSPENDED) == "suspended"

    @pytest.mark.parametrize(
        ("state", "live"),
        [
            (EntryState.INITIALIZING, True),
            (EntryState.ACTIVE, True),
            (EntryState.SUSPENDED, True),
            (EntryState.TERMINATING, False),
            (EntryState.REMOVED, False),
        ],
    )
    def test_is_live(self, state: EntryState, live: bool) -> None:
        """Test which states still await a terminal call."""
        assert state.is_live is live


@pytest.mark.unit
class TestWorkflowResult:
    """Tests for WorkflowResult."""

    def test_defaults(self) -> None:
        """Test data and message are optional."""
        result = WorkflowResult(success=False)

        assert result.data is None
        assert result.message is None

    def test_data_as_matching_type(self) -> None:
        """Test a matching payload is returned."""
        result = WorkflowResult(success=True, data={"signature": "abc"})

        assert result.data_as(dict) == {"signature": "abc"}

    def test_data_as_without_data(self) -> None:
        """Test a missing payload is not a type error."""
        assert WorkflowResult(success=True).data_as(dict) is None

    def test_data_as_mismatch(self) -> None:
        """Test a mismatching payload raises with both types."""
        result = WorkflowResult(success=True, data="abc")

        with pytest.raises(ResultSchemaError) as exc_info:
            result.data_as(dict, "signing")

        assert exc_info.value.workflow_id == "signing"
        assert exc_info.value.expected is dict
        assert exc_info.value.actual is str


@pytest.mark.unit
class TestPresentation:
    """Tests for presentation state and updates."""

    def test_apply_updates(self) -> None:
        """Test every update kind is folded into the state."""
        state = PresentationState()

        PresentationUpdate("set_title", ("Loan",)).apply(state)
        PresentationUpdate("set_footer", (False, None)).apply(state)
        PresentationUpdate("set_validation", (False, "Amount required")).apply(state)
        PresentationUpdate("set_preferred_width", ("800px",)).apply(state)

        assert state == PresentationState(
            title="Loan",
            footer_visible=False,
            footer_label=None,
            is_valid=False,
            validation_message="Amount required",
            modal_width="800px",
        )

    def test_unknown_update(self) -> None:
        """Test an unknown method is rejected."""
        with pytest.raises(ValueError, match="Unknown presentation method"):
            PresentationUpdate("set_colour", ("red",)).apply(PresentationState())

    def test_send_and_restore(self, surface) -> None:
        """Test updates and full state reach the surface."""
        PresentationUpdate("set_title", ("Hello",)).send(surface)
        PresentationState(title="Loan", footer_label="Continue").restore(surface)

        assert surface.calls == [
            ("set_title", ("Hello",)),
            ("set_title", ("Loan",)),
            ("set_footer", (True, "Continue")),
            ("set_validation", (True, None)),
            ("set_preferred_width", ("500px",)),
        ]


@pytest.mark.unit
class TestWorkflowDefinition:
    """Tests for WorkflowDefinition."""

    def test_defaults(self) -> None:
        """Test optional catalog metadata defaults."""
        definition = WorkflowDefinition(id="kyc", name="KYC", description="Verify", load="pkg.mod:Kyc")

        assert definition.icon is None
        assert definition.searchable is False
        assert definition.popular is False
        assert definition.keywords == ()
        assert definition.search_disabled_condition is None
        assert definition.result_type is None

    def test_locator(self) -> None:
        """Test the implementation reference is described for logs."""

        def load_kyc() -> type:
            return object

        assert WorkflowDefinition(id="a", name="A", description="", load="pkg.mod:Kyc").locator == "pkg.mod:Kyc"
        assert WorkflowDefinition(id="a", name="A", description="", load=load_kyc).locator.endswith("load_kyc")

    def test_frozen(self) -> None:
        """Test definitions are immutable."""
        definition = WorkflowDefinition(id="a", name="A", description="", load="pkg.mod:A")

        with pytest.raises(AttributeError):
            definition.name = "B"  # type: ignore[misc]
