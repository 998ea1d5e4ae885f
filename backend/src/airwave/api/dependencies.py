"""FastAPI dependencies for reaching components built at startup.

Components live on app.state (set by the lifespan handler, or by tests) so
route handlers never read configuration from the environment.
"""

from typing import Any

from fastapi import Request

from airwave.core.config import Settings
from airwave.services.generation import GenerationService


def get_settings(request: Request) -> Settings:
    """Get the settings instance created at startup."""
    return request.app.state.settings


def get_generation_service(request: Request) -> GenerationService:
    """Get the generation orchestrator from app state.

    Example:
        >>> @router.post("/endpoint")
        >>> async def endpoint(service: GenerationService = Depends(get_generation_service)):
        ...     await service.start_job(service.flow("poses"), "rec123")
    """
    return request.app.state.generation_service


async def read_json_object(request: Request) -> dict[str, Any]:
    """Read the request body as a JSON object.

    Empty, malformed or non-object bodies read as an empty dict, so a missing
    field is reported the same way regardless of how the body was broken.
    """
    raw_body = await request.body()
    if not raw_body:
        return {}
    try:
        payload = await request.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}
