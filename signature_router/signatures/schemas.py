"""Signature schemas — data models for the template signature catalog.

TemplateDescriptors identify which presentation template renders a tool
result. RuntimeDataHints are last-resort shape matchers registered at
runtime by generated apps.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

REFRESH_ACTION = "refresh"


class TemplateDescriptor(BaseModel):
    """A canonical presentation template for a family of tool results.

    Descriptors are immutable once created. The "refresh" action is
    implicitly supported by every descriptor.
    """

    model_config = ConfigDict(frozen=True)

    # Identity
    family: str = Field(
        ...,
        description="Coarse capability domain (e.g. 'filesystem', 'alpharank')",
    )
    signature_id: str = Field(
        ...,
        description="Template signature within the family (e.g. 'directory_listing')",
    )

    template_id: str = Field(
        ...,
        description="Opaque rendering key handed to the presentation layer "
        "(e.g. 'filesystem-browser-v1')",
    )
    supported_actions: tuple[str, ...] = Field(
        default=(),
        description="Action names the template can trigger via onAction (distinct, declared order)",
    )
    coverage_status: Literal["covered", "partial"] = Field(
        default="covered",
        description="'covered' when the action set is complete, 'partial' otherwise",
    )
    description: str = Field(
        default="",
        description="What kind of result this template presents",
    )

    @field_validator("supported_actions", mode="after")
    @classmethod
    def _distinct_actions(cls, actions: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(actions))

    @property
    def key(self) -> tuple[str, str]:
        return (self.family, self.signature_id)


class RuntimeDataHint(BaseModel):
    """Shape matcher: a payload with all required_keys maps to the signature."""

    model_config = ConfigDict(frozen=True)

    family: str
    signature_id: str
    required_keys: tuple[str, ...] = Field(
        default=(),
        description="Top-level payload keys that must all be present (order significant "
        "for de-duplication only)",
    )


class SignatureSummary(BaseModel):
    """Lightweight summary for listing endpoints."""

    family: str
    signature_id: str
    template_id: str
    coverage_status: str = "covered"
    action_count: int = 0
