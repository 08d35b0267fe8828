"""Read-only access to the shared capability catalog.

Everything here reads through a CapabilityCatalogReader so the router has
no dependency on process-global state. Helpers cover the questions the
router asks of the catalog: who owns a tool name, what prefix a capability
uses, which action suffixes exist under a prefix, and what metadata the
tools declare.
"""

import logging
from typing import Any, Iterable, Optional, Protocol

from .schemas import CapabilityEntry, ToolMetadata

logger = logging.getLogger(__name__)


class CapabilityCatalogReader(Protocol):
    """Anything that can list the current catalog entries."""

    def entries(self) -> list[CapabilityEntry]: ...


class StaticCatalogReader:
    """In-memory catalog. The host adds entries; the router only reads them."""

    def __init__(self, entries: Optional[Iterable[CapabilityEntry]] = None):
        self._entries: list[CapabilityEntry] = list(entries or [])

    def entries(self) -> list[CapabilityEntry]:
        return list(self._entries)

    def add(self, entry: CapabilityEntry) -> None:
        self._entries.append(entry)
        logger.debug(
            f"Catalog entry added: {entry.capability_id} ({len(entry.declared_names)} tools)"
        )

    def remove(self, capability_id: str) -> int:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.capability_id != capability_id]
        return before - len(self._entries)


def capability_prefix(capability_id: str, names: list[str]) -> str:
    """Common tool-name prefix of a capability, always ending in "_".

    One name: everything up to and including its last underscore.
    Several names: the longest common prefix, trimmed back to an underscore.
    Falls back to capability_id + "_" whenever no prefix can be derived.
    """
    fallback = f"{capability_id}_"
    if not names:
        return fallback
    if len(names) == 1:
        idx = names[0].rfind("_")
        return names[0][: idx + 1] if idx > 0 else fallback

    prefix = names[0]
    for name in names[1:]:
        while not name.startswith(prefix):
            prefix = prefix[:-1]
            if not prefix:
                return fallback

    if not prefix.endswith("_"):
        idx = prefix.rfind("_")
        prefix = prefix[: idx + 1] if idx > 0 else fallback
    return prefix


def names_for_capability(reader: CapabilityCatalogReader, capability_id: str) -> list[str]:
    names: list[str] = []
    for entry in reader.entries():
        if entry.capability_id == capability_id:
            names.extend(entry.declared_names)
    return names


def find_entry(reader: CapabilityCatalogReader, tool_name: str) -> Optional[CapabilityEntry]:
    """First catalog entry that declares tool_name."""
    for entry in reader.entries():
        if tool_name in entry.declared_names:
            return entry
    return None


def is_tool_declared(reader: CapabilityCatalogReader, tool_name: str) -> bool:
    return find_entry(reader, tool_name) is not None


def prefix_for_tool(reader: CapabilityCatalogReader, tool_name: str) -> Optional[str]:
    """Prefix of the capability owning tool_name, or None if nobody declares it."""
    entry = find_entry(reader, tool_name)
    if entry is None:
        return None
    return capability_prefix(
        entry.capability_id, names_for_capability(reader, entry.capability_id)
    )


def suffixes_under(prefix: str, names: Iterable[str]) -> list[str]:
    """Distinct non-empty suffixes of the names starting with prefix, in order."""
    suffixes: list[str] = []
    for name in names:
        if not name.startswith(prefix):
            continue
        suffix = name[len(prefix):]
        if suffix and suffix not in suffixes:
            suffixes.append(suffix)
    return suffixes


def observed_suffixes(reader: CapabilityCatalogReader, prefix: str) -> list[str]:
    """Distinct action suffixes among declared names starting with prefix."""
    return suffixes_under(
        prefix, (name for entry in reader.entries() for name in entry.declared_names)
    )


def instantiate(entry: CapabilityEntry) -> list[Any]:
    """Call an entry's factory with an empty context; always returns a list."""
    resolved = entry.factory({})
    if resolved is None:
        return []
    if isinstance(resolved, (list, tuple)):
        return list(resolved)
    return [resolved]


def list_tool_metadata(
    reader: CapabilityCatalogReader, prefix: Optional[str] = None
) -> list[ToolMetadata]:
    """Name, description and parameter schema of every tool object.

    Restricted to names starting with prefix when given. Tools are
    de-duplicated by name; factories that fail are logged and skipped.
    """
    results: list[ToolMetadata] = []
    seen: set[str] = set()

    for entry in reader.entries():
        if prefix is not None and not any(n.startswith(prefix) for n in entry.declared_names):
            continue
        try:
            tools = instantiate(entry)
        except Exception as e:
            logger.error(f"Failed to resolve tools from capability {entry.capability_id}: {e}")
            continue

        for tool in tools:
            name = getattr(tool, "name", None)
            if not name or name in seen:
                continue
            if prefix is not None and not name.startswith(prefix):
                continue
            seen.add(name)
            parameters = getattr(tool, "parameters", None)
            results.append(
                ToolMetadata(
                    name=name,
                    description=getattr(tool, "description", None) or "",
                    parameters=parameters if isinstance(parameters, dict) else {},
                    capability_id=entry.capability_id,
                )
            )

    return results
