"""Capability catalog schemas.

CapabilityEntry mirrors one registration in the host's plugin registry:
an owning capability id, the tool names it declares, and a factory that
builds the executable tool objects. CapabilityFamily is an entry of the
capability-suffix catalog used to map foreign tool prefixes onto known
template signatures.
"""

from typing import Any, Callable

from pydantic import BaseModel, Field


class CapabilityEntry(BaseModel):
    """One capability registration in the shared catalog."""

    capability_id: str = Field(
        ...,
        description="Owning plugin/capability id (e.g. 'official_mail')",
    )
    factory: Callable[[dict[str, Any]], Any] = Field(
        ...,
        description="Builds one tool object or a list of them from a context dict",
    )
    declared_names: list[str] = Field(
        default_factory=list,
        description="Tool names this capability declares",
    )


class ToolMetadata(BaseModel):
    """Prompt-facing description of a single tool."""

    name: str
    description: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)
    capability_id: str = ""


class CapabilityFamily(BaseModel):
    """Capability-suffix catalog entry.

    A tool whose action suffixes overlap enough with action_suffixes is
    rendered with this family's signature even when its prefix is unknown.
    """

    family: str
    fallback_tool_name: str = Field(
        default="",
        description="Tool to invoke when the family is opened without a specific tool",
    )
    action_suffixes: list[str] = Field(default_factory=list)
    signature_id: str
    description: str = ""
