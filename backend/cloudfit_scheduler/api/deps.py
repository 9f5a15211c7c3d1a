"""Shared dependencies for the API routers."""

from fastapi import HTTPException, Request

from ..services.registry import SchedulingRegistry


def get_registry(request: Request) -> SchedulingRegistry:
    """Return the registry attached to the running application."""
    return request.app.state.registry


def not_found(kind: str, item_id: int) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={"error": f"unknown_{kind}", "message": f"Unknown {kind} id {item_id}"},
    )
