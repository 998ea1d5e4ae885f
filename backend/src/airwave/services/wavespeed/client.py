"""Wavespeed API client for submitting generation jobs."""

from typing import Any, Optional

import httpx
import structlog

from airwave.models.job import JobCreated
from airwave.services.exceptions import ProviderUnavailable

logger = structlog.get_logger()


class WavespeedClient:
    """Job provider client.

    Jobs complete out of band: Wavespeed calls the webhook URL embedded in the
    payload exactly once with a terminal status. There is no polling.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.wavespeed.ai",
        create_job_path: str = "/v1/seedream4/generate",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Wavespeed client.

        Args:
            api_key: Wavespeed API key (from WAVESPEED_API_KEY env var)
            api_url: API root
            create_job_path: Path of the job submission endpoint
            timeout: Transport timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.create_job_url = f"{api_url.rstrip('/')}{create_job_path}"
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    async def create_job(self, payload: dict[str, Any]) -> JobCreated:
        """Submit a fully-built job payload.

        Args:
            payload: Provider request body (webhook_url and metadata included)

        Returns:
            JobCreated with provider-assigned identifiers and the raw response

        Raises:
            ProviderUnavailable: Non-success response (message carries body text) or network failure
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.create_job_url, headers=self.headers, json=payload
                )
        except httpx.HTTPError as e:
            raise ProviderUnavailable(f"Wavespeed createJob failed: {str(e)}") from e

        if not response.is_success:
            raise ProviderUnavailable(
                f"Wavespeed createJob failed: {response.status_code} {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        job = JobCreated.from_response(response.json())
        logger.info(
            "wavespeed.job_created",
            job_id=job.job_id,
            batch_id=job.batch_id,
            status=job.status,
            mode=payload.get("mode"),
        )
        return job
