"""Action map registry.

- One ActionMap per tool-name prefix; re-registering a prefix replaces it
- Lookup by full tool name uses the longest registered prefix that matches
- Action descriptions for UI generation come from the map when it provides
  them, otherwise they are generated from catalog tool metadata
"""

import logging
from typing import Any, Optional

from signature_router.catalog.reader import (
    CapabilityCatalogReader,
    is_tool_declared,
    list_tool_metadata,
    prefix_for_tool,
)

from .schemas import ActionMap, ToolInvocation

logger = logging.getLogger(__name__)

REFRESH_LINE = '- "refresh" — Re-fetch the current data from the server. No payload needed.'

ACCOUNT_HINT = (
    "- For actions requiring account_name, extract it from the data prop — look for "
    "data.account_name, data.accountName, data.account, or data.name."
)

LOCAL_STATE_HINT = (
    "- Use local useState for tab switching, sorting, filtering, expanding — "
    "onAction is only for server-side operations."
)


def format_params_from_schema(schema: dict[str, Any]) -> str:
    """Concise payload description, e.g. ``Payload: { path: string, limit?: number }``."""
    properties = schema.get("properties") if isinstance(schema, dict) else None
    if not isinstance(properties, dict) or not properties:
        return "No payload needed."

    required = schema.get("required")
    required_keys = set(required) if isinstance(required, list) else set()

    fields = []
    for key, prop in properties.items():
        prop_type = prop.get("type", "unknown") if isinstance(prop, dict) else "unknown"
        marker = "" if key in required_keys else "?"
        fields.append(f"{key}{marker}: {prop_type}")
    return f"Payload: {{ {', '.join(fields)} }}"


def first_sentence(text: str) -> str:
    return text.split(". ")[0] or text


class ActionMapRegistry:
    """Registry of action maps keyed by prefix."""

    def __init__(self) -> None:
        self._maps: dict[str, ActionMap] = {}

    def register(self, action_map: ActionMap) -> None:
        self._maps[action_map.prefix] = action_map
        logger.info(
            f"Registered action map '{action_map.name}' (prefix: {action_map.prefix})"
        )

    def unregister(self, prefix: str) -> bool:
        if self._maps.pop(prefix, None) is None:
            return False
        logger.info(f"Unregistered action map for prefix {prefix}")
        return True

    def get(self, prefix: str) -> Optional[ActionMap]:
        return self._maps.get(prefix)

    def list_prefixes(self) -> list[str]:
        return list(self._maps.keys())

    def find_by_tool_name(self, tool_name: str) -> Optional[ActionMap]:
        """Action map whose prefix is the longest literal prefix of tool_name."""
        matching = [p for p in self._maps if tool_name.startswith(p)]
        if not matching:
            return None
        return self._maps[max(matching, key=len)]

    def resolve_action(
        self,
        tool_name: str,
        action: str,
        payload: Any,
        card_data: Any,
        reader: CapabilityCatalogReader,
    ) -> Optional[ToolInvocation]:
        """Turn a card action into a tool call.

        The family's action map gets the first chance. Failing that, the
        action is tried as a tool name under the family prefix.
        """
        action_map = self.find_by_tool_name(tool_name)
        if action_map is not None:
            invocation = action_map.map_action(action, payload, card_data)
            if invocation is not None:
                return invocation

        prefix = action_map.prefix if action_map else prefix_for_tool(reader, tool_name)
        if prefix is None:
            return None

        candidate = f"{prefix}{action}"
        if not is_tool_declared(reader, candidate):
            return None
        params = dict(payload) if isinstance(payload, dict) else {}
        return ToolInvocation(tool_name=candidate, params=params)

    def describe_actions(
        self, tool_name: str, reader: CapabilityCatalogReader
    ) -> Optional[str]:
        """Prompt text listing the actions a generated UI may trigger."""
        action_map = self.find_by_tool_name(tool_name)
        if action_map is not None:
            custom = action_map.describe_actions()
            if custom:
                return custom

        prefix = action_map.prefix if action_map else prefix_for_tool(reader, tool_name)
        if prefix is None:
            return None
        return generate_action_descriptions(prefix, reader)


def generate_action_descriptions(
    prefix: str, reader: CapabilityCatalogReader
) -> Optional[str]:
    """Build action descriptions from the catalog's tool metadata.

    Returns None if no tools are found for the prefix.
    """
    tools = list_tool_metadata(reader, prefix=prefix)
    logger.info(
        f"Auto-generating action descriptions for prefix '{prefix}': found {len(tools)} tools"
    )
    if not tools:
        return None

    lines = []
    seen: set[str] = set()
    for tool in tools:
        action = tool.name[len(prefix):]
        if not action or action in seen:
            continue
        seen.add(action)
        short = first_sentence(tool.description).rstrip(".")
        lines.append(f'- "{action}" — {short}. {format_params_from_schema(tool.parameters)}')

    has_account_name = any(
        "account_name" in (t.parameters.get("properties") or {}) for t in tools
    )

    parts = [
        "AVAILABLE TOOL ACTIONS — use these EXACT names with onAction():",
        REFRESH_LINE,
        *lines,
        "",
        "IMPORTANT:",
        "- Use ONLY these action names with onAction(). Do NOT invent other action names.",
        '- Always include a "refresh" button (e.g. a RefreshCw icon button).',
    ]
    if has_account_name:
        parts.append(ACCOUNT_HINT)
    parts.append(
        "- Show contextually relevant actions as buttons — not all actions apply to every view."
    )
    parts.append(LOCAL_STATE_HINT)
    return "\n".join(parts)
