"""Generation job value objects: modes, echoed metadata, provider responses, callbacks."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from airwave.models.record import Attachment

CALLBACK_SUCCEEDED = "succeeded"
CALLBACK_FAILED = "failed"


class GenerationMode(str, Enum):
    """Mode tag sent to the provider and echoed back in the callback metadata."""

    RECREATE = "recreate"
    POSE_VARIATIONS = "pose_variations"


class JobMetadata(BaseModel):
    """Correlation data embedded in a job payload and echoed back verbatim.

    This is the only link between a callback and its record.
    """

    model_config = ConfigDict(extra="allow")

    airtable_record_id: Optional[str] = None
    table: Optional[str] = None
    # Echoed verbatim; only the two routing keys are interpreted
    mode: Optional[Any] = None

    @property
    def routable(self) -> bool:
        return bool(self.airtable_record_id) and bool(self.table)


class CallbackImage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: Optional[str] = None


class CallbackEnvelope(BaseModel):
    """Inbound provider callback.

    Every key is optional; unknown keys are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    status: Optional[Any] = None
    images: list[CallbackImage] = Field(default_factory=list)
    error: Optional[str] = None
    metadata: Optional[JobMetadata] = None

    @field_validator("images", mode="before")
    @classmethod
    def _images_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("error", mode="before")
    @classmethod
    def _error_text(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return value if isinstance(value, str) else str(value)

    @property
    def attachments(self) -> list[Attachment]:
        """Output images as attachment references (entries without a url are dropped)."""
        return [Attachment(url=image.url) for image in self.images if image.url]


class JobCreated(BaseModel):
    """Provider response to a job submission.

    `raw` holds the full response body, which is returned to callers unchanged.
    """

    job_id: Optional[str] = None
    batch_id: Optional[str] = None
    status: Optional[str] = None
    raw: Any = None

    @classmethod
    def from_response(cls, body: Any) -> "JobCreated":
        if not isinstance(body, dict):
            return cls(raw=body)
        return cls(
            job_id=_optional_text(body.get("job_id")),
            batch_id=_optional_text(body.get("batch_id")),
            status=_optional_text(body.get("status")),
            raw=body,
        )


def _optional_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)
