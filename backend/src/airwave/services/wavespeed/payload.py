"""Map Airtable record fields to the Wavespeed job-submission body.

Key names follow the provisional Seedream request schema and must stay as-is
until the provider confirms its final schema.
"""

from typing import Any, Mapping, Optional

from airwave.models.job import GenerationMode, JobMetadata
from airwave.models.record import Attachment, RecordFields

DEFAULT_SAMPLER = "DPM++ 2M Karras"
DEFAULT_CFG_SCALE = 8
DEFAULT_STEPS = 35
DEFAULT_REFERENCE_STRENGTH = 0.85


def parse_poses(text: str) -> list[str]:
    """Split newline-delimited pose text into trimmed, non-empty descriptors (order kept)."""
    return [line.strip() for line in (text or "").split("\n") if line.strip()]


def first_attachment_url(attachments: tuple[Attachment, ...]) -> Optional[str]:
    return attachments[0].url if attachments else None


def resolve_reference_image_url(fields: RecordFields) -> Optional[str]:
    """Explicit URL field wins, then the first `Reference Image` attachment."""
    return fields.reference_image_url or first_attachment_url(fields.reference_image)


def _tunable(value: Optional[float], default: float) -> float:
    return value if value is not None else default


def build_job_payload(
    record_id: str,
    fields: Mapping[str, Any],
    mode: GenerationMode,
    table: str,
    webhook_url: str,
) -> dict[str, Any]:
    """Build a provider payload from a record's raw fields.

    Pure: the input mapping is never mutated and a new dict is returned each call.

    Args:
        record_id: Airtable record id, echoed back through metadata
        fields: Raw `fields` mapping of the record
        mode: Generation mode tag
        table: Table the record lives in, echoed back through metadata
        webhook_url: Callback URL the provider will POST the result to

    Returns:
        Job payload dict. Optional image/pose keys are omitted when empty.
    """
    view = RecordFields.from_fields(fields)

    payload: dict[str, Any] = {
        "prompt": view.prompt,
        "negative_prompt": view.negative_prompt,
        "cfg_scale": _tunable(view.cfg, DEFAULT_CFG_SCALE),
        "steps": _tunable(view.steps, DEFAULT_STEPS),
        "sampler": view.sampler or DEFAULT_SAMPLER,
        "face_lock": view.face_lock,
        "reference_strength": _tunable(view.reference_strength, DEFAULT_REFERENCE_STRENGTH),
        "pose_control": view.pose_control,
        "lighting_control": view.lighting_control,
        "mode": mode.value,
        "webhook_url": webhook_url,
        "metadata": JobMetadata(
            airtable_record_id=record_id, table=table, mode=mode.value
        ).model_dump(),
    }
    # Unset model id is left for the provider to default
    if view.model_id is not None:
        payload["model"] = view.model_id

    if mode is GenerationMode.RECREATE:
        reference_image_url = resolve_reference_image_url(view)
        if reference_image_url:
            payload["reference_image_url"] = reference_image_url
    else:
        source_image_url = first_attachment_url(view.source_image)
        if source_image_url:
            payload["source_image_url"] = source_image_url
        poses = parse_poses(view.poses)
        if poses:
            payload["poses"] = poses

    return payload
