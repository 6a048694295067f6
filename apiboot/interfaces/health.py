"""
Health check route.

Registered by the command line server as its only route hook.
"""

from fastapi import APIRouter
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness payload."""

    status: str


def register_health(router: APIRouter) -> None:
    """Route hook adding ``GET /health`` to the base-path group."""

    @router.get("/health", response_model=HealthResponse, summary="Health check")
    def health_check() -> HealthResponse:
        return HealthResponse(status="ok")
