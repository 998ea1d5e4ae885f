"""Record entity - typed view over an Airtable record's fields."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class RecordStatus(str, Enum):
    """Relay-managed record status.

    Records start unset (idle). Submission moves them to running, and the
    provider callback moves them to done or error. A fresh submission may
    re-enter running from any state.
    """

    RUNNING = "running"
    DONE = "done"
    ERROR = "error"


class RecordField:
    """Airtable column names read or written by the relay."""

    MODEL_ID = "Model ID"
    PROMPT = "Prompt"
    NEGATIVE_PROMPT = "Negative Prompt"
    CFG = "CFG"
    STEPS = "Steps"
    SAMPLER = "Sampler"
    FACE_LOCK = "Face Lock"
    REFERENCE_STRENGTH = "Reference Strength"
    POSE_CONTROL = "Pose Control"
    LIGHTING_CONTROL = "Lighting Control"
    REFERENCE_IMAGE_URL = "Reference Image URL"
    REFERENCE_IMAGE = "Reference Image"
    SOURCE_IMAGE = "Source Image"
    POSES = "Poses"

    # Managed fields
    STATUS = "Status"
    ERROR_MESSAGE = "Error Message"
    JOB_ID = "Wavespeed Job ID"
    BATCH_ID = "Batch ID"
    OUTPUT_IMAGES = "Output Images"


@dataclass(frozen=True)
class Attachment:
    """Attachment reference as stored in an attachment-list field."""

    url: str

    def to_field(self) -> dict[str, str]:
        return {"url": self.url}


def _number(value: Any) -> Optional[float]:
    # bool is an int subclass but a checkbox value is never a tunable
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _text(value: Any) -> str:
    return value if isinstance(value, str) and value else ""


def _attachments(value: Any) -> tuple[Attachment, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(
        Attachment(url=item["url"])
        for item in value
        if isinstance(item, dict) and isinstance(item.get("url"), str) and item["url"]
    )


@dataclass(frozen=True)
class RecordFields:
    """Explicit typed view over a raw Airtable field mapping.

    Holds coerced values only. Defaulting for the provider payload happens in
    the payload mapper, so an unset tunable stays None here.
    """

    model_id: Optional[Any] = None
    prompt: str = ""
    negative_prompt: str = ""
    cfg: Optional[float] = None
    steps: Optional[float] = None
    sampler: str = ""
    face_lock: bool = False
    reference_strength: Optional[float] = None
    pose_control: bool = False
    lighting_control: bool = False
    reference_image_url: str = ""
    reference_image: tuple[Attachment, ...] = field(default_factory=tuple)
    source_image: tuple[Attachment, ...] = field(default_factory=tuple)
    poses: str = ""

    @classmethod
    def from_fields(cls, raw: Mapping[str, Any]) -> "RecordFields":
        """Build a typed view from the raw `fields` mapping of a record."""
        return cls(
            model_id=raw.get(RecordField.MODEL_ID),
            prompt=_text(raw.get(RecordField.PROMPT)),
            negative_prompt=_text(raw.get(RecordField.NEGATIVE_PROMPT)),
            cfg=_number(raw.get(RecordField.CFG)),
            steps=_number(raw.get(RecordField.STEPS)),
            sampler=_text(raw.get(RecordField.SAMPLER)),
            face_lock=bool(raw.get(RecordField.FACE_LOCK)),
            reference_strength=_number(raw.get(RecordField.REFERENCE_STRENGTH)),
            pose_control=bool(raw.get(RecordField.POSE_CONTROL)),
            lighting_control=bool(raw.get(RecordField.LIGHTING_CONTROL)),
            reference_image_url=_text(raw.get(RecordField.REFERENCE_IMAGE_URL)),
            reference_image=_attachments(raw.get(RecordField.REFERENCE_IMAGE)),
            source_image=_attachments(raw.get(RecordField.SOURCE_IMAGE)),
            poses=_text(raw.get(RecordField.POSES)),
        )


def running_patch() -> dict[str, Any]:
    """Fields written when a job is about to be submitted."""
    return {RecordField.STATUS: RecordStatus.RUNNING.value, RecordField.ERROR_MESSAGE: ""}


def job_ids_patch(job_id: Optional[str], batch_id: Optional[str]) -> dict[str, Any]:
    """Fields written after the provider accepted a job."""
    return {RecordField.JOB_ID: job_id or "", RecordField.BATCH_ID: batch_id or ""}


def done_patch(images: list[Attachment]) -> dict[str, Any]:
    """Fields written for a successful callback."""
    return {
        RecordField.STATUS: RecordStatus.DONE.value,
        RecordField.OUTPUT_IMAGES: [image.to_field() for image in images],
        RecordField.ERROR_MESSAGE: "",
    }


def error_patch(message: str) -> dict[str, Any]:
    """Fields written for a failed callback."""
    return {RecordField.STATUS: RecordStatus.ERROR.value, RecordField.ERROR_MESSAGE: message}
