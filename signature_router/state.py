"""Registry state — every mutable registry the router reads and writes.

A RegistryState is built once at process start and handed to detection,
normalization and execution functions by reference. Tests build their own
isolated instances.
"""

import logging
from typing import Any, Optional

from signature_router.actions.registry import ActionMapRegistry
from signature_router.artifacts.store import GeneratedArtifactStore
from signature_router.catalog.families import CapabilityFamilyCatalog
from signature_router.catalog.reader import CapabilityCatalogReader, StaticCatalogReader
from signature_router.catalog.schemas import CapabilityFamily
from signature_router.signatures.registry import SignatureRegistry
from signature_router.signatures.schemas import RuntimeDataHint, TemplateDescriptor

logger = logging.getLogger(__name__)


class RegistryState:
    """Signatures, hints, action maps, dynamic prefixes and generated artifacts.

    The capability catalog is not owned here: it is read through the
    injected reader.
    """

    def __init__(
        self,
        reader: Optional[CapabilityCatalogReader] = None,
        signatures: Optional[SignatureRegistry] = None,
        families: Optional[CapabilityFamilyCatalog] = None,
    ):
        self.reader: CapabilityCatalogReader = reader if reader is not None else StaticCatalogReader()
        self.signatures = signatures or SignatureRegistry()
        self.signatures.load()
        self.families = families or CapabilityFamilyCatalog()
        self.action_maps = ActionMapRegistry()
        self.artifacts = GeneratedArtifactStore()
        # prefix -> (family, signature_id); written only by dynamic discovery
        self.dynamic_prefixes: dict[str, tuple[str, str]] = {}

    def register_generated_app(
        self,
        family: str,
        signature_id: str,
        tool_prefix: str,
        tools: list[Any],
        required_keys: Optional[list[str]] = None,
        template_source: Optional[str] = None,
        description: str = "",
    ) -> Optional[TemplateDescriptor]:
        """Wire a generated tool family into every registry.

        Tools whose names do not start with tool_prefix are ignored. Returns
        the new descriptor, or None if no tool could be registered.
        """
        suffixes: list[str] = []
        for tool in tools:
            name = getattr(tool, "name", "") or ""
            if not name.startswith(tool_prefix) or name == tool_prefix:
                logger.warning(f"Skipping generated tool {name!r}: outside prefix {tool_prefix}")
                continue
            self.artifacts.register_executor(tool)
            suffixes.append(name[len(tool_prefix):])

        if not suffixes:
            return None

        descriptor = TemplateDescriptor(
            family=family,
            signature_id=signature_id,
            template_id=f"generated-{signature_id}-v1",
            supported_actions=suffixes,
            coverage_status="covered",
            description=description,
        )
        self.signatures.register(descriptor)

        if required_keys:
            self.signatures.register_hint(
                RuntimeDataHint(family=family, signature_id=signature_id, required_keys=required_keys)
            )
        if template_source:
            self.artifacts.register_template_source(signature_id, template_source)

        self.families.add(
            CapabilityFamily(
                family=family,
                fallback_tool_name=f"{tool_prefix}{suffixes[0]}",
                action_suffixes=suffixes,
                signature_id=signature_id,
                description=description,
            )
        )
        logger.info(f"Registered generated app '{family}' ({len(suffixes)} tools)")
        return descriptor

    def remove_generated_app(self, family: str, signature_id: str, tool_names: list[str]) -> None:
        """Reverse register_generated_app."""
        for name in tool_names:
            self.artifacts.unregister_executor(name)
        self.artifacts.unregister_template_source(signature_id)
        self.artifacts.clear_candidates(family, signature_id)
        self.signatures.unregister(family, signature_id)
        self.signatures.unregister_hints(family)
        self.families.remove(family)
        logger.info(f"Removed generated app '{family}'")


# Global state instance
_state: Optional[RegistryState] = None


def get_registry_state() -> RegistryState:
    """Get the global registry state instance."""
    global _state
    if _state is None:
        _state = RegistryState()
    return _state


def init_registry_state(state: RegistryState) -> None:
    """Install a host-built state (e.g. one wired to the host's catalog)."""
    global _state
    _state = state
