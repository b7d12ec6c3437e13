"""Exception handling for workflow web endpoints.

This module maps guided-workflows errors raised inside route handlers to
JSON error responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from litestar import Response
from litestar.status_codes import HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

if TYPE_CHECKING:  # pragma: no cover
    from litestar import Request

    from guided_workflows.exceptions import WorkflowNotRegisteredError, WorkflowsError

__all__ = [
    "workflow_error_handler",
    "workflow_not_registered_handler",
]


def workflow_not_registered_handler(
    _request: Request,
    exc: WorkflowNotRegisteredError,
) -> Response:
    """Exception handler for WorkflowNotRegisteredError.

    Args:
        request: The Litestar request object.
        exc: The WorkflowNotRegisteredError exception.

    Returns:
        A 404 response naming the unknown workflow.
    """
    return Response(
        content={
            "error": "workflow_not_registered",
            "message": str(exc),
            "workflow_id": exc.workflow_id,
        },
        status_code=HTTP_404_NOT_FOUND,
        media_type="application/json",
    )


def workflow_error_handler(
    _request: Request,
    exc: WorkflowsError,
) -> Response:
    """Exception handler for every other WorkflowsError.

    These errors mean the request conflicts with the current state of the
    workflow stack, for example a workflow whose ``initialize`` failed.

    Args:
        request: The Litestar request object.
        exc: The WorkflowsError exception.

    Returns:
        A 409 response with the error details.
    """
    return Response(
        content={
            "error": type(exc).__name__,
            "message": str(exc),
        },
        status_code=HTTP_409_CONFLICT,
        media_type="application/json",
    )
