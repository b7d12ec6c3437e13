"""Workflow registry for managing workflow definitions.

This module provides a registry for storing and resolving workflow
definitions and for lazily loading their implementations.
"""

from __future__ import annotations

import asyncio
import importlib
import inspect
import logging
from typing import TYPE_CHECKING

from guided_workflows.exceptions import WorkflowLoadError, WorkflowNotRegisteredError

if TYPE_CHECKING:
    from collections.abc import Callable

    from guided_workflows.core.definition import WorkflowDefinition, WorkflowFactory

__all__ = ["WorkflowRegistry"]

logger = logging.getLogger(__name__)


class WorkflowRegistry:
    """Registry for storing and resolving workflow definitions.

    The registry maps stable workflow ids to their definitions and caches the
    implementation factory of each definition after its first load, so
    workflows that are never started are never imported.

    Attributes:
        _definitions: Map of workflow ids to their definitions.
        _implementations: Map of workflow ids to loaded implementation factories.
        _registration_callbacks: Subscribers waiting for the catalog to become stable.
    """

    def __init__(self) -> None:
        """Initialize an empty workflow registry."""
        self._definitions: dict[str, WorkflowDefinition] = {}
        self._implementations: dict[str, WorkflowFactory] = {}
        self._registration_callbacks: list[Callable[[], None]] = []
        self._registration_complete = False
        self._registration_event: asyncio.Event | None = None

    def register(self, definition: WorkflowDefinition) -> None:
        """Register a workflow definition.

        Registration is idempotent by id and the last write wins, so it is
        safe to re-run during hot reload or duplicate bootstrap.

        Args:
            definition: The definition to store.

        Example:
            >>> registry = WorkflowRegistry()
            >>> registry.register(signing_definition)
        """
        previous = self._definitions.get(definition.id)
        if previous is not None and previous != definition:
            # A different loader may now point at a different implementation
            self._implementations.pop(definition.id, None)
            logger.debug("Replaced workflow definition '%s'", definition.id)

        self._definitions[definition.id] = definition
        logger.debug("Registered workflow '%s' (%s)", definition.id, definition.locator)

    def resolve(self, workflow_id: str) -> WorkflowDefinition:
        """Retrieve a workflow definition by id.

        Args:
            workflow_id: The workflow id.

        Returns:
            The WorkflowDefinition registered under ``workflow_id``.

        Raises:
            WorkflowNotRegisteredError: If the id is unknown.
        """
        try:
            return self._definitions[workflow_id]
        except KeyError:
            raise WorkflowNotRegisteredError(workflow_id) from None

    async def load_implementation(self, definition: WorkflowDefinition) -> WorkflowFactory:
        """Materialize the implementation factory of a definition.

        The factory is loaded on first use and cached per workflow id. Loader
        failures are not cached so a later start can retry.

        Args:
            definition: The definition whose implementation is needed.

        Returns:
            A zero-argument callable producing a new workflow object.

        Raises:
            WorkflowLoadError: If the loader fails or yields something that is not callable.
        """
        cached = self._implementations.get(definition.id)
        if cached is not None:
            return cached

        try:
            if isinstance(definition.load, str):
                factory = self._import_locator(definition.load)
            else:
                factory = definition.load()
                if inspect.isawaitable(factory):
                    factory = await factory
        except Exception as e:
            raise WorkflowLoadError(definition.id, e) from e

        if not callable(factory):
            raise WorkflowLoadError(definition.id, TypeError(f"{factory!r} is not callable"))

        self._implementations[definition.id] = factory
        logger.debug("Loaded implementation for workflow '%s'", definition.id)
        return factory

    @staticmethod
    def _import_locator(locator: str) -> WorkflowFactory:
        module_name, _, attribute = locator.partition(":")
        if not attribute:
            msg = f"Locator '{locator}' must have the form 'package.module:Attribute'"
            raise ValueError(msg)
        module = importlib.import_module(module_name)
        return getattr(module, attribute)

    def is_loaded(self, workflow_id: str) -> bool:
        """Check whether the implementation of a workflow has been loaded.

        Args:
            workflow_id: The workflow id.

        Returns:
            True if the implementation factory is cached.
        """
        return workflow_id in self._implementations

    def list_definitions(self) -> list[WorkflowDefinition]:
        """List all registered workflow definitions in registration order.

        Returns:
            List of WorkflowDefinition objects.
        """
        return list(self._definitions.values())

    async def searchable_definitions(self) -> list[WorkflowDefinition]:
        """List the definitions search surfaces may currently offer.

        A definition is offered when it is searchable, has keywords, and its
        ``search_disabled_condition`` is absent or returns False. A condition
        that raises hides the definition.

        Returns:
            List of WorkflowDefinition objects.
        """
        offered = []

        for definition in self._definitions.values():
            if not definition.searchable or not definition.keywords:
                continue

            condition = definition.search_disabled_condition
            if condition is not None:
                try:
                    disabled = condition()
                    if inspect.isawaitable(disabled):
                        disabled = await disabled
                except Exception:
                    logger.warning(
                        "Search condition for workflow '%s' failed, hiding it", definition.id, exc_info=True
                    )
                    continue
                if disabled:
                    continue

            offered.append(definition)

        return offered

    def unregister(self, workflow_id: str) -> None:
        """Remove a workflow from the registry.

        Args:
            workflow_id: The workflow id. Unknown ids are ignored.
        """
        self._definitions.pop(workflow_id, None)
        self._implementations.pop(workflow_id, None)

    def has_workflow(self, workflow_id: str) -> bool:
        """Check if a workflow exists in the registry.

        Args:
            workflow_id: The workflow id.

        Returns:
            True if the workflow is registered, False otherwise.
        """
        return workflow_id in self._definitions

    @property
    def registration_complete(self) -> bool:
        """Whether ``emit_registration_complete`` has fired."""
        return self._registration_complete

    def on_registration_complete(self, callback: Callable[[], None]) -> None:
        """Subscribe to the one-shot registration complete signal.

        Subscribers added after the signal fired are called immediately.

        Args:
            callback: Zero-argument callable.
        """
        if self._registration_complete:
            callback()
            return
        self._registration_callbacks.append(callback)

    def emit_registration_complete(self) -> None:
        """Signal that the catalog is stable.

        Only the first call has an effect. The manager does not use this
        signal; it exists for UI surfaces such as search.
        """
        if self._registration_complete:
            return

        self._registration_complete = True
        if self._registration_event is not None:
            self._registration_event.set()

        callbacks, self._registration_callbacks = self._registration_callbacks, []
        for callback in callbacks:
            callback()

        logger.debug("Workflow registration complete (%d workflows)", len(self._definitions))

    async def wait_registration_complete(self) -> None:
        """Wait until ``emit_registration_complete`` has fired."""
        if self._registration_complete:
            return
        if self._registration_event is None:
            self._registration_event = asyncio.Event()
        await self._registration_event.wait()
