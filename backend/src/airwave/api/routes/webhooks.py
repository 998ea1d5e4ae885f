"""Wavespeed callback endpoint.

One endpoint serves both flows: the target table and record come from the
metadata Wavespeed echoes back from the original job payload.
"""

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from airwave.api.dependencies import get_generation_service, read_json_object
from airwave.models.job import CallbackEnvelope
from airwave.services.generation import GenerationService

logger = structlog.get_logger()
router = APIRouter()


@router.post("/callback")
async def receive_wavespeed_callback(
    request: Request, service: GenerationService = Depends(get_generation_service)
):
    """Receive a job's terminal status and apply it to the originating record.

    HTTP Status Codes:
        200: {"ok": true} for every parsed callback, including unroutable ones,
             unrecognised statuses and failed store updates
        500: {"error": <message>} on an unexpected exception while parsing
    """
    try:
        payload = await read_json_object(request)
        envelope = CallbackEnvelope.model_validate(payload)
    except Exception as e:
        logger.error("callback.parse_failed", error=str(e), error_type=type(e).__name__)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e) or type(e).__name__},
        )

    logger.info(
        "callback.received",
        status=envelope.status,
        image_count=len(envelope.images),
        has_metadata=envelope.metadata is not None,
    )

    outcome = await service.handle_callback(envelope)
    logger.debug("callback.handled", outcome=outcome.value)
    return {"ok": True}
