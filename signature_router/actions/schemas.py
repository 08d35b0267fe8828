"""Action map schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ToolInvocation(BaseModel):
    """A concrete tool call produced from a UI action."""

    tool_name: str
    params: dict[str, Any] = Field(default_factory=dict)


class ActionMap:
    """Base class for per-prefix action translators.

    Subclasses set ``name`` and ``prefix`` and override ``map_action``.
    Override ``describe_actions`` only when the auto-generated description
    built from tool metadata is not good enough.
    """

    name: str = ""
    prefix: str = ""

    def map_action(
        self, action: str, payload: Any, card_data: Any
    ) -> Optional[ToolInvocation]:
        """Translate a UI action; None means "not handled here"."""
        return None

    def describe_actions(self) -> Optional[str]:
        return None
