"""Tests for the workflow registry."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from guided_workflows import WorkflowDefinition, WorkflowLoadError, WorkflowNotRegisteredError, WorkflowRegistry


class Greeter:
    """Importable workflow factory for locator tests."""

    def attach_host(self, host: Any) -> None:
        self.host = host

    def initialize(self, params: dict[str, Any]) -> None:
        pass

    def handle_primary_action(self) -> None:
        pass


def definition(workflow_id: str = "greeter", **kwargs: Any) -> WorkflowDefinition:
    kwargs.setdefault("load", lambda: Greeter)
    kwargs.setdefault("description", "Says hello")
    return WorkflowDefinition(id=workflow_id, name="Greeter", **kwargs)


@pytest.mark.unit
class TestWorkflowRegistry:
    """Tests for registering and resolving definitions."""

    def test_register_and_resolve(self) -> None:
        """Test a registered definition resolves by id."""
        registry = WorkflowRegistry()
        greeter = definition()

        registry.register(greeter)

        assert registry.resolve("greeter") is greeter
        assert registry.has_workflow("greeter")
        assert registry.list_definitions() == [greeter]

    def test_resolve_unknown(self) -> None:
        """Test resolving an unknown id raises."""
        registry = WorkflowRegistry()

        with pytest.raises(WorkflowNotRegisteredError, match="'missing' is not registered"):
            registry.resolve("missing")

    def test_register_last_write_wins(self) -> None:
        """Test re-registering an id replaces the definition."""
        registry = WorkflowRegistry()
        registry.register(definition(description="old"))
        replacement = definition(description="new")

        registry.register(replacement)

        assert registry.resolve("greeter") is replacement
        assert len(registry.list_definitions()) == 1

    def test_unregister(self) -> None:
        """Test unregistering removes the definition and ignores unknown ids."""
        registry = WorkflowRegistry()
        registry.register(definition())

        registry.unregister("greeter")
        registry.unregister("missing")

        assert not registry.has_workflow("greeter")
        assert registry.list_definitions() == []


@pytest.mark.unit
@pytest.mark.asyncio
class TestLoadImplementation:
    """Tests for lazy implementation loading."""

    async def test_load_is_lazy_and_cached(self) -> None:
        """Test the loader runs once, on first use."""
        calls = []

        def load() -> type[Greeter]:
            calls.append("load")
            return Greeter

        registry = WorkflowRegistry()
        greeter = definition(load=load)
        registry.register(greeter)
        assert calls == []
        assert not registry.is_loaded("greeter")

        first = await registry.load_implementation(greeter)
        second = await registry.load_implementation(greeter)

        assert first is Greeter
        assert second is Greeter
        assert calls == ["load"]
        assert registry.is_loaded("greeter")

    async def test_async_loader(self) -> None:
        """Test loaders may return an awaitable."""

        async def load() -> type[Greeter]:
            return Greeter

        registry = WorkflowRegistry()
        greeter = definition(load=load)

        assert await registry.load_implementation(greeter) is Greeter

    async def test_locator_string(self) -> None:
        """Test import locators resolve module attributes."""
        registry = WorkflowRegistry()
        signing = definition("signing", load="examples.banking.workflows:SigningWorkflow")

        factory = await registry.load_implementation(signing)

        assert factory.__name__ == "SigningWorkflow"

    @pytest.mark.parametrize(
        "locator",
        ["examples.banking.workflows", "examples.banking.missing:Nothing", "examples.banking.workflows:Nothing"],
    )
    async def test_bad_locator(self, locator: str) -> None:
        """Test broken locators are reported as load errors."""
        registry = WorkflowRegistry()

        with pytest.raises(WorkflowLoadError) as exc_info:
            await registry.load_implementation(definition(load=locator))

        assert exc_info.value.workflow_id == "greeter"
        assert exc_info.value.cause is not None

    async def test_failed_load_is_not_cached(self) -> None:
        """Test a loader failure can be retried."""
        attempts = []

        def flaky() -> type[Greeter]:
            attempts.append(1)
            if len(attempts) == 1:
                msg = "network down"
                raise ConnectionError(msg)
            return Greeter

        registry = WorkflowRegistry()
        greeter = definition(load=flaky)

        with pytest.raises(WorkflowLoadError, match="network down"):
            await registry.load_implementation(greeter)
        assert await registry.load_implementation(greeter) is Greeter

    async def test_non_callable_factory(self) -> None:
        """Test a loader must yield something callable."""
        registry = WorkflowRegistry()

        with pytest.raises(WorkflowLoadError, match="is not callable"):
            await registry.load_implementation(definition(load=lambda: 42))

    async def test_replacing_definition_drops_cached_implementation(self) -> None:
        """Test a changed definition is loaded again."""

        class Other(Greeter):
            pass

        registry = WorkflowRegistry()
        original = definition()
        registry.register(original)
        await registry.load_implementation(original)

        registry.register(original)
        assert registry.is_loaded("greeter")

        replacement = definition(load=lambda: Other)
        registry.register(replacement)

        assert not registry.is_loaded("greeter")
        assert await registry.load_implementation(replacement) is Other


@pytest.mark.unit
@pytest.mark.asyncio
class TestSearchableDefinitions:
    """Tests for the search catalog."""

    async def test_only_searchable_with_keywords(self) -> None:
        """Test definitions need the searchable flag and keywords."""
        registry = WorkflowRegistry()
        registry.register(definition("hidden"))
        registry.register(definition("no-keywords", searchable=True))
        offered = definition("offered", searchable=True, keywords=("hello",))
        registry.register(offered)

        assert await registry.searchable_definitions() == [offered]

    async def test_disabled_condition(self) -> None:
        """Test sync and async conditions hide definitions."""

        async def disabled() -> bool:
            return True

        registry = WorkflowRegistry()
        registry.register(definition("sync", searchable=True, keywords=("a",), search_disabled_condition=lambda: True))
        registry.register(definition("async", searchable=True, keywords=("a",), search_disabled_condition=disabled))
        enabled = definition("enabled", searchable=True, keywords=("a",), search_disabled_condition=lambda: False)
        registry.register(enabled)

        assert await registry.searchable_definitions() == [enabled]

    async def test_failing_condition_hides_definition(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a condition that raises hides the definition and logs a warning."""

        def broken() -> bool:
            msg = "no user"
            raise LookupError(msg)

        registry = WorkflowRegistry()
        registry.register(definition("broken", searchable=True, keywords=("a",), search_disabled_condition=broken))

        with caplog.at_level(logging.WARNING, logger="guided_workflows.engine.registry"):
            assert await registry.searchable_definitions() == []

        assert "Search condition for workflow 'broken' failed" in caplog.text


@pytest.mark.unit
@pytest.mark.asyncio
class TestRegistrationComplete:
    """Tests for the one-shot registration signal."""

    async def test_callbacks_fire_once(self) -> None:
        """Test subscribers are called exactly once."""
        registry = WorkflowRegistry()
        calls = []
        registry.on_registration_complete(lambda: calls.append("early"))
        assert not registry.registration_complete

        registry.emit_registration_complete()
        registry.emit_registration_complete()

        assert registry.registration_complete
        assert calls == ["early"]

    async def test_late_subscriber_called_immediately(self) -> None:
        """Test subscribing after the signal fired calls back right away."""
        registry = WorkflowRegistry()
        registry.emit_registration_complete()
        calls = []

        registry.on_registration_complete(lambda: calls.append("late"))

        assert calls == ["late"]

    async def test_wait_registration_complete(self) -> None:
        """Test waiters are released by the signal."""
        import asyncio

        registry = WorkflowRegistry()
        waiter = asyncio.ensure_future(registry.wait_registration_complete())
        await asyncio.sleep(0)
        assert not waiter.done()

        registry.emit_registration_complete()
        await asyncio.wait_for(waiter, timeout=1)

        await registry.wait_registration_complete()
