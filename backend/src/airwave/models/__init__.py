"""Domain value objects for records and generation jobs."""

from airwave.models.job import (
    CALLBACK_FAILED,
    CALLBACK_SUCCEEDED,
    CallbackEnvelope,
    GenerationMode,
    JobCreated,
    JobMetadata,
)
from airwave.models.record import Attachment, RecordField, RecordFields, RecordStatus

__all__ = [
    "Attachment",
    "RecordField",
    "RecordFields",
    "RecordStatus",
    "GenerationMode",
    "JobMetadata",
    "JobCreated",
    "CallbackEnvelope",
    "CALLBACK_SUCCEEDED",
    "CALLBACK_FAILED",
]
