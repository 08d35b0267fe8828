"""Tool console overview — templates and tools grouped per family."""

import logging

from pydantic import BaseModel, Field

from signature_router.detection.engine import by_tool_name
from signature_router.discovery.dynamic import sync_dynamic_signatures
from signature_router.signatures.schemas import TemplateDescriptor
from signature_router.state import RegistryState

logger = logging.getLogger(__name__)


class FamilyGroup(BaseModel):
    family: str
    tool_count: int = 0
    template_count: int = 0
    tools: list[str] = Field(default_factory=list)
    templates: list[TemplateDescriptor] = Field(default_factory=list)


def build_family_groups(state: RegistryState) -> list[FamilyGroup]:
    """Every family that has a template or a catalog tool, sorted by name."""
    sync_dynamic_signatures(state)

    templates_by_family: dict[str, list[TemplateDescriptor]] = {}
    for descriptor in state.signatures.list_all():
        templates_by_family.setdefault(descriptor.family, []).append(descriptor)

    tools_by_family: dict[str, list[str]] = {}
    for entry in state.reader.entries():
        for tool_name in entry.declared_names:
            descriptor = by_tool_name(state, tool_name)
            if descriptor is None:
                continue
            bucket = tools_by_family.setdefault(descriptor.family, [])
            if tool_name not in bucket:
                bucket.append(tool_name)

    families = sorted(set(templates_by_family) | set(tools_by_family))
    groups = []
    for family in families:
        templates = sorted(templates_by_family.get(family, []), key=lambda d: d.signature_id)
        tools = sorted(tools_by_family.get(family, []))
        groups.append(
            FamilyGroup(
                family=family,
                tool_count=len(tools),
                template_count=len(templates),
                tools=tools,
                templates=templates,
            )
        )
    logger.debug(f"Built {len(groups)} family groups")
    return groups
