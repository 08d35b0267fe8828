"""Dynamic signature discovery.

Scans the capability catalog and gives every tool family that has no
hand-written detection rule a generic "system auto" signature, so any tool
the host exposes renders with something better than the generative
fallback. Re-running is cheap: known and already-mapped prefixes are
skipped, and a prefix is never remapped once recorded.
"""

import logging
import re
from typing import TYPE_CHECKING

from signature_router.catalog.reader import capability_prefix, suffixes_under
from signature_router.detection.rules import KNOWN_PREFIXES
from signature_router.signatures.schemas import TemplateDescriptor

if TYPE_CHECKING:
    from signature_router.state import RegistryState

logger = logging.getLogger(__name__)

SYSTEM_FAMILY_PREFIX = "system_"
SYSTEM_AUTO_PREFIX = "system_auto_"


def slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", value.lower()).strip("_")


def system_auto_descriptor(capability_id: str, prefix: str, suffixes: list[str]) -> TemplateDescriptor:
    """Generic descriptor for a discovered tool prefix."""
    stem = slugify(prefix[:-1] if prefix.endswith("_") else prefix)
    signature_id = f"{SYSTEM_AUTO_PREFIX}{stem}"
    return TemplateDescriptor(
        family=f"{SYSTEM_FAMILY_PREFIX}{slugify(capability_id)}",
        signature_id=signature_id,
        template_id=f"{signature_id.replace('_', '-')}-v1",
        supported_actions=tuple(suffixes),
        coverage_status="covered",
        description=f"Auto-generated toolkit view for {prefix}* tools",
    )


def is_system_auto(descriptor: TemplateDescriptor) -> bool:
    return descriptor.signature_id.startswith(SYSTEM_AUTO_PREFIX)


def sync_dynamic_signatures(state: "RegistryState") -> int:
    """Register signatures for newly seen tool prefixes.

    Returns the number of prefixes mapped by this call.
    """
    # one catalog read per sync; names grouped by capability in catalog order
    names_by_capability: dict[str, list[str]] = {}
    all_names: list[str] = []
    for entry in state.reader.entries():
        names_by_capability.setdefault(entry.capability_id, []).extend(entry.declared_names)
        all_names.extend(entry.declared_names)

    added = 0
    for capability_id, names in names_by_capability.items():
        prefix = capability_prefix(capability_id, names)
        if prefix in KNOWN_PREFIXES or prefix in state.dynamic_prefixes:
            continue

        suffixes = suffixes_under(prefix, all_names)
        if not suffixes:
            continue

        descriptor = system_auto_descriptor(capability_id, prefix, suffixes)
        state.signatures.register(descriptor)
        state.dynamic_prefixes[prefix] = descriptor.key
        added += 1
        logger.info(
            f"Discovered tool prefix {prefix} -> {descriptor.family}/{descriptor.signature_id} "
            f"({len(suffixes)} actions)"
        )
    return added
