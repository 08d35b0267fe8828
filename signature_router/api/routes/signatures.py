"""API routes for template signatures.

Consumers fetch the catalog to see which templates exist, which actions
each one supports, and to register or remove runtime signatures.
"""

import logging

from fastapi import APIRouter, HTTPException

from signature_router.console import FamilyGroup, build_family_groups
from signature_router.signatures.registry import is_action_covered
from signature_router.signatures.schemas import (
    RuntimeDataHint,
    SignatureSummary,
    TemplateDescriptor,
)
from signature_router.state import get_registry_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/signatures", tags=["signatures"])


def _get_or_404(family: str, signature_id: str) -> TemplateDescriptor:
    """Get a signature by identity or raise 404."""
    registry = get_registry_state().signatures
    descriptor = registry.get(family, signature_id)
    if descriptor is None:
        raise HTTPException(
            status_code=404,
            detail=f"Signature '{family}/{signature_id}' not found. "
            f"Families: {registry.list_families()}",
        )
    return descriptor


# -- List endpoints --


@router.get("", response_model=list[SignatureSummary])
async def list_signatures():
    """List all signatures (summaries)."""
    return get_registry_state().signatures.list_summaries()


@router.get("/families", response_model=list[FamilyGroup])
async def list_families():
    """Templates and catalog tools grouped per family."""
    return build_family_groups(get_registry_state())


@router.get("/hints", response_model=list[RuntimeDataHint])
async def list_hints():
    """Runtime data hints in match order."""
    return get_registry_state().signatures.list_hints()


# -- Detail endpoints --


@router.get("/{family}/{signature_id}", response_model=TemplateDescriptor)
async def get_signature(family: str, signature_id: str):
    """Get a single signature."""
    return _get_or_404(family, signature_id)


@router.get("/{family}/{signature_id}/actions/{action}")
async def check_action(family: str, signature_id: str, action: str):
    """Whether the signature's template supports an action."""
    descriptor = _get_or_404(family, signature_id)
    return {
        "family": family,
        "signature_id": signature_id,
        "action": action,
        "covered": is_action_covered(descriptor, action),
    }


# -- CRUD --


@router.post("", response_model=TemplateDescriptor, status_code=201)
async def create_signature(descriptor: TemplateDescriptor):
    """Register a new signature."""
    registry = get_registry_state().signatures
    if registry.get(descriptor.family, descriptor.signature_id) is not None:
        raise HTTPException(
            status_code=409,
            detail=f"Signature '{descriptor.family}/{descriptor.signature_id}' already exists",
        )
    registry.register(descriptor)
    logger.info(f"Created signature: {descriptor.family}/{descriptor.signature_id}")
    return descriptor


@router.post("/hints", status_code=201)
async def create_hint(hint: RuntimeDataHint):
    """Register a runtime data hint."""
    stored = get_registry_state().signatures.register_hint(hint)
    if not stored and not hint.required_keys:
        raise HTTPException(status_code=422, detail="Data hints need at least one required key")
    return {"stored": stored}


@router.delete("/{family}/{signature_id}")
async def delete_signature(family: str, signature_id: str):
    """Remove a signature."""
    if not get_registry_state().signatures.unregister(family, signature_id):
        raise HTTPException(
            status_code=404,
            detail=f"Signature '{family}/{signature_id}' not found",
        )
    return {"deleted": f"{family}/{signature_id}"}
