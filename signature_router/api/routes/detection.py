"""API routes for signature detection and payload normalization."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body
from pydantic import BaseModel, Field

from signature_router.detection.engine import infer
from signature_router.normalizer.normalize import normalize
from signature_router.signatures.schemas import TemplateDescriptor
from signature_router.state import get_registry_state

from .signatures import _get_or_404

logger = logging.getLogger(__name__)

router = APIRouter(tags=["detection"])


class DetectRequest(BaseModel):
    tool_name: Optional[str] = None
    data: Any = None


class DetectResponse(BaseModel):
    matched: bool
    signature: Optional[TemplateDescriptor] = None
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Payload normalized for the matched template (empty when unmatched)",
    )


@router.post("/detect", response_model=DetectResponse)
async def detect(request: DetectRequest):
    """Pick a template for a tool result and normalize the payload for it.

    An unmatched result is not an error: the caller falls back to
    generative rendering.
    """
    descriptor = infer(get_registry_state(), request.tool_name, request.data)
    if descriptor is None:
        logger.debug(f"No signature for tool={request.tool_name!r}")
        return DetectResponse(matched=False)
    return DetectResponse(
        matched=True,
        signature=descriptor,
        data=normalize(descriptor, request.data),
    )


@router.post("/normalize/{family}/{signature_id}")
async def normalize_for_signature(family: str, signature_id: str, data: Any = Body(default=None)):
    """Normalize a payload for an explicit signature."""
    return normalize(_get_or_404(family, signature_id), data)
