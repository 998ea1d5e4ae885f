"""Start-job endpoints, one per Airtable table."""

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from airwave.api.dependencies import get_generation_service, read_json_object
from airwave.services.exceptions import BadRequest
from airwave.services.generation import GenerationService

logger = structlog.get_logger()
router = APIRouter()


async def run_start_flow(request: Request, service: GenerationService, flow_name: str):
    """Run a start flow and map its outcome to the HTTP contract.

    HTTP Status Codes:
        200: {"ok": true, "job": <provider response>}
        400: {"error": "recordId required"}
        500: {"error": <message>} for any downstream failure
    """
    flow = service.flow(flow_name)
    try:
        body = await read_json_object(request)
        job = await service.start_job(flow, body.get("recordId"))
    except BadRequest as e:
        logger.info("generate.bad_request", flow=flow.name, error=str(e))
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})
    except Exception as e:
        logger.error(
            "generate.failed",
            flow=flow.name,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=e,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e) or type(e).__name__},
        )

    return {"ok": True, "job": job}


@router.post("/recreator")
async def generate_recreator(
    request: Request, service: GenerationService = Depends(get_generation_service)
):
    """Start a recreate job for a record in the recreator table."""
    return await run_start_flow(request, service, "recreator")


@router.post("/poses")
async def generate_poses(
    request: Request, service: GenerationService = Depends(get_generation_service)
):
    """Start a pose-variations job for a record in the poses table."""
    return await run_start_flow(request, service, "poses")
