"""Banking example of guided-workflows integration.

This example wires the banking workflows into a Litestar app through the
WorkflowPlugin. The plugin exposes the catalog and the workflow session under
``/workflows``; this module adds a form endpoint the shell uses to feed input
to the active workflow.

Run with:
    litestar --app examples.banking.app:app run

Or:
    uvicorn examples.banking.app:app --reload
"""

from __future__ import annotations

import logging
from typing import Any

from litestar import Controller, Litestar, get, post
from litestar.exceptions import NotFoundException

from guided_workflows import WorkflowManager, WorkflowPlugin, WorkflowPluginConfig
from guided_workflows.web import SessionDTO

from examples.banking.services import AccountService, KycService, LoanService
from examples.banking.workflows import FormWorkflow, build_definitions

logging.basicConfig(level=logging.INFO)

# =============================================================================
# Services
# =============================================================================

kyc_service = KycService()
loan_service = LoanService()
account_service = AccountService()


# =============================================================================
# API Controller
# =============================================================================


class BankingController(Controller):
    """Shell endpoints specific to the banking workflows."""

    path = "/banking"
    tags = ["Banking"]

    @post("/form")
    async def fill_form(self, data: dict[str, Any], workflow_manager: WorkflowManager) -> SessionDTO:
        """Feed form input to the active workflow."""
        entry = workflow_manager.active_entry
        if entry is None or not isinstance(entry.workflow, FormWorkflow):
            raise NotFoundException(detail="No active form workflow")

        entry.workflow.provide(**data)
        return SessionDTO.from_manager(workflow_manager)

    @get("/kyc")
    async def kyc_status(self) -> dict[str, str]:
        """Current verification level of the user."""
        return {"level": kyc_service.level.value, "status": kyc_service.status.value}


# =============================================================================
# Application
# =============================================================================

plugin_config = WorkflowPluginConfig(
    auto_register_workflows=build_definitions(kyc_service, loan_service, account_service),
)

app = Litestar(
    route_handlers=[BankingController],
    plugins=[WorkflowPlugin(config=plugin_config)],
    debug=True,
)


# =============================================================================
# Health Check (for testing)
# =============================================================================


@get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


app.register(health_check)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
