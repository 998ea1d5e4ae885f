"""Generation orchestration: start-job flows and provider callback reconciliation.

Start flow (one per table, structurally identical):
1. Validate record id (BadRequest, no remote calls)
2. Fetch record fields
3. Mark record running (before submission, so a crash leaves it visibly running)
4. Build job payload
5. Submit job
6. Persist job/batch ids (best-effort, failure is logged only)

Nothing is rolled back on failure. A record may be left running with no job
created; it is corrected manually or by a later resubmission/callback.

Callback flow: the record is resolved only from the metadata echoed by the
provider. No job table is kept between submission and completion.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import structlog

from airwave.core.config import Settings
from airwave.models.job import (
    CALLBACK_FAILED,
    CALLBACK_SUCCEEDED,
    CallbackEnvelope,
    GenerationMode,
)
from airwave.models.record import done_patch, error_patch, job_ids_patch, running_patch
from airwave.services.airtable.client import AirtableClient
from airwave.services.exceptions import BadRequest, StoreError
from airwave.services.wavespeed.client import WavespeedClient
from airwave.services.wavespeed.payload import build_job_payload

logger = structlog.get_logger()

FALLBACK_ERROR_MESSAGE = "Unknown Wavespeed error"


@dataclass(frozen=True)
class GenerationFlow:
    """A start flow bound to one table and mode."""

    name: str
    table: str
    mode: GenerationMode


class CallbackOutcome(str, Enum):
    """What a callback did to the record store."""

    APPLIED_DONE = "applied_done"
    APPLIED_ERROR = "applied_error"
    IGNORED = "ignored"
    UNROUTABLE = "unroutable"
    STORE_FAILED = "store_failed"


def build_flows(settings: Settings) -> dict[str, GenerationFlow]:
    """Start flows keyed by route name."""
    return {
        "recreator": GenerationFlow(
            name="recreator",
            table=settings.airtable_table_recreator,
            mode=GenerationMode.RECREATE,
        ),
        "poses": GenerationFlow(
            name="poses",
            table=settings.airtable_table_poses,
            mode=GenerationMode.POSE_VARIATIONS,
        ),
    }


class GenerationService:
    """Drives the record status state machine across Airtable and Wavespeed."""

    def __init__(self, settings: Settings, store: AirtableClient, provider: WavespeedClient):
        self.settings = settings
        self.store = store
        self.provider = provider
        self.flows = build_flows(settings)

    def flow(self, name: str) -> GenerationFlow:
        return self.flows[name]

    async def start_job(self, flow: GenerationFlow, record_id: Optional[str]) -> Any:
        """Run a start flow for one record.

        Args:
            flow: Table/mode binding
            record_id: Airtable record id from the inbound request

        Returns:
            Provider job-creation response, unchanged

        Raises:
            BadRequest: record_id missing or blank
            StoreError: Record fetch or running patch failed
            ProviderError: Job submission failed
        """
        # Stricter than a falsy check: blank and non-string ids are rejected too
        if not isinstance(record_id, str) or not record_id.strip():
            raise BadRequest("recordId required")

        log = logger.bind(flow=flow.name, table=flow.table, record_id=record_id)
        log.info("generation.started")

        fields = await self.store.get_record(flow.table, record_id)

        await self.store.update_record(flow.table, record_id, running_patch())
        log.info("generation.marked_running")

        payload = build_job_payload(
            record_id=record_id,
            fields=fields,
            mode=flow.mode,
            table=flow.table,
            webhook_url=self.settings.callback_url,
        )
        job = await self.provider.create_job(payload)

        # Job id columns are optional on the table
        try:
            await self.store.update_record(
                flow.table, record_id, job_ids_patch(job.job_id, job.batch_id)
            )
        except StoreError as e:
            log.warning(
                "generation.job_ids_not_saved",
                job_id=job.job_id,
                batch_id=job.batch_id,
                error=str(e),
                error_type=type(e).__name__,
            )

        log.info("generation.submitted", job_id=job.job_id, batch_id=job.batch_id)
        return job.raw

    async def handle_callback(self, envelope: CallbackEnvelope) -> CallbackOutcome:
        """Apply a provider callback to the record named in its metadata.

        Never raises for store failures: the provider must not be pushed into
        retrying against an error it cannot fix.
        """
        metadata = envelope.metadata
        if metadata is None or not metadata.routable:
            logger.warning(
                "callback.unroutable",
                status=envelope.status,
                reason="metadata missing airtable_record_id or table",
            )
            return CallbackOutcome.UNROUTABLE

        record_id = metadata.airtable_record_id
        table = metadata.table
        log = logger.bind(table=table, record_id=record_id, mode=metadata.mode)

        if envelope.status == CALLBACK_SUCCEEDED:
            patch = done_patch(envelope.attachments)
            outcome = CallbackOutcome.APPLIED_DONE
        elif envelope.status == CALLBACK_FAILED:
            patch = error_patch(envelope.error or FALLBACK_ERROR_MESSAGE)
            outcome = CallbackOutcome.APPLIED_ERROR
        else:
            log.info("callback.ignored_status", status=envelope.status)
            return CallbackOutcome.IGNORED

        try:
            await self.store.update_record(table, record_id, patch)
        except Exception as e:
            log.error(
                "callback.store_update_failed",
                status=envelope.status,
                error=str(e),
                error_type=type(e).__name__,
            )
            return CallbackOutcome.STORE_FAILED

        log.info("callback.applied", status=envelope.status, image_count=len(envelope.attachments))
        return outcome
