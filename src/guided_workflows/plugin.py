"""Litestar plugin for workflow integration.

This module provides the WorkflowPlugin for seamless integration of
guided-workflows with Litestar applications.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from guided_workflows.engine.manager import WorkflowManager, WorkflowManagerConfig
from guided_workflows.engine.registry import WorkflowRegistry

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

    from guided_workflows.core.definition import WorkflowDefinition

__all__ = ["WorkflowPlugin", "WorkflowPluginConfig"]


@dataclass
class WorkflowPluginConfig:
    """Configuration for the WorkflowPlugin.

    Attributes:
        registry: Optional pre-configured WorkflowRegistry. If not provided,
            a new one will be created.
        manager: Optional pre-configured WorkflowManager. If not provided,
            one will be created using the registry and ``manager_config``.
        manager_config: Configuration for the manager created by the plugin.
        auto_register_workflows: List of workflow definitions to register with
            the registry on app init. Registration is marked complete afterwards.
        dependency_key_registry: The key used for dependency injection of
            the WorkflowRegistry. Defaults to "workflow_registry".
        dependency_key_manager: The key used for dependency injection of
            the WorkflowManager. Defaults to "workflow_manager".
        enable_api: Whether to enable the REST API endpoints. Defaults to True.
        api_path_prefix: URL path prefix for all workflow API endpoints.
            Defaults to "/workflows".
        api_guards: List of Litestar guards to apply to all workflow API endpoints.
        api_tags: OpenAPI tags to apply to workflow API endpoints.
        include_api_in_schema: Whether to include API endpoints in OpenAPI schema.
            Defaults to True.
    """

    registry: WorkflowRegistry | None = None
    manager: WorkflowManager | None = None
    manager_config: WorkflowManagerConfig | None = None
    auto_register_workflows: list[WorkflowDefinition] = field(default_factory=list)
    dependency_key_registry: str = "workflow_registry"
    dependency_key_manager: str = "workflow_manager"
    enable_api: bool = True
    api_path_prefix: str = "/workflows"
    api_guards: list[Any] = field(default_factory=list)
    api_tags: list[str] = field(default_factory=lambda: ["Workflows"])
    include_api_in_schema: bool = True


class WorkflowPlugin(InitPluginProtocol):
    """Litestar plugin for workflow management.

    This plugin integrates guided-workflows with a Litestar application,
    providing dependency injection for the WorkflowRegistry and WorkflowManager
    and closing every live workflow when the application shuts down.

    Example:
        Basic usage with auto-registration::

            from litestar import Litestar
            from guided_workflows import WorkflowDefinition, WorkflowPlugin, WorkflowPluginConfig

            signing = WorkflowDefinition(
                id="signing",
                name="Sign contract",
                description="Collect a signature",
                load="myapp.workflows:SigningWorkflow",
            )

            app = Litestar(
                plugins=[
                    WorkflowPlugin(
                        config=WorkflowPluginConfig(auto_register_workflows=[signing])
                    )
                ]
            )

        Using in a route handler::

            from litestar import post
            from guided_workflows import WorkflowManager


            @post("/contracts/{contract_id:str}/sign")
            async def sign(contract_id: str, workflow_manager: WorkflowManager) -> dict:
                await workflow_manager.start("signing", {"contract_id": contract_id})
                return {"workflow": workflow_manager.current_workflow_id()}
    """

    __slots__ = ("_config", "_manager", "_registry")

    def __init__(self, config: WorkflowPluginConfig | None = None) -> None:
        """Initialize the plugin.

        Args:
            config: Optional configuration for the plugin.
        """
        self._config = config or WorkflowPluginConfig()
        self._registry: WorkflowRegistry | None = None
        self._manager: WorkflowManager | None = None

    @property
    def registry(self) -> WorkflowRegistry:
        """Get the workflow registry.

        Returns:
            The WorkflowRegistry instance.

        Raises:
            RuntimeError: If accessed before plugin initialization.
        """
        if self._registry is None:
            msg = "WorkflowPlugin has not been initialized. Access registry after app startup."
            raise RuntimeError(msg)
        return self._registry

    @property
    def manager(self) -> WorkflowManager:
        """Get the workflow manager.

        Returns:
            The WorkflowManager instance.

        Raises:
            RuntimeError: If accessed before plugin initialization.
        """
        if self._manager is None:
            msg = "WorkflowPlugin has not been initialized. Access manager after app startup."
            raise RuntimeError(msg)
        return self._manager

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Initialize the plugin when the Litestar app starts.

        This method:
        1. Creates or uses the provided WorkflowRegistry
        2. Creates or uses the provided WorkflowManager
        3. Registers any auto_register_workflows and marks registration complete
        4. Adds dependency providers and a shutdown hook to the app config
        5. Optionally registers REST API controllers if enable_api=True

        Args:
            app_config: The Litestar application configuration.

        Returns:
            The modified application configuration.
        """
        if self._config.manager is not None:
            self._manager = self._config.manager
            self._registry = self._config.registry or self._manager.registry
        else:
            self._registry = self._config.registry or WorkflowRegistry()
            self._manager = WorkflowManager(self._registry, config=self._config.manager_config)

        # Auto-register workflows
        for definition in self._config.auto_register_workflows:
            self._registry.register(definition)
        if self._config.auto_register_workflows:
            self._registry.emit_registration_complete()

        # Create dependency providers
        def provide_registry() -> WorkflowRegistry:
            return self._registry  # type: ignore[return-value]

        def provide_manager() -> WorkflowManager:
            return self._manager  # type: ignore[return-value]

        app_config.dependencies[self._config.dependency_key_registry] = Provide(
            provide_registry,
            sync_to_thread=False,
        )
        app_config.dependencies[self._config.dependency_key_manager] = Provide(
            provide_manager,
            sync_to_thread=False,
        )

        app_config.on_shutdown.append(self._close_manager)

        # Register REST API controllers if enabled
        if self._config.enable_api:
            from litestar import Router

            from guided_workflows.exceptions import WorkflowNotRegisteredError, WorkflowsError
            from guided_workflows.web.controllers import WorkflowDefinitionController, WorkflowSessionController
            from guided_workflows.web.exceptions import workflow_error_handler, workflow_not_registered_handler

            workflow_router = Router(
                path=self._config.api_path_prefix,
                route_handlers=[WorkflowDefinitionController, WorkflowSessionController],
                guards=self._config.api_guards,
                tags=self._config.api_tags,
                include_in_schema=self._config.include_api_in_schema,
            )
            app_config.route_handlers.append(workflow_router)

            app_config.exception_handlers[WorkflowNotRegisteredError] = workflow_not_registered_handler  # type: ignore[assignment]
            app_config.exception_handlers[WorkflowsError] = workflow_error_handler  # type: ignore[assignment]

        return app_config

    async def _close_manager(self) -> None:
        if self._manager is not None:
            await self._manager.close()
