"""API routes for catalog tools: metadata, action descriptions, direct execution."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException

from signature_router.actions.schemas import ToolInvocation
from signature_router.bridge.executor import ExecutionOutcome, execute_direct
from signature_router.catalog.reader import list_tool_metadata
from signature_router.catalog.schemas import ToolMetadata
from signature_router.state import get_registry_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools", tags=["tools"])


@router.get("", response_model=list[ToolMetadata])
async def list_tools(prefix: Optional[str] = None):
    """Name, description and parameter schema of every catalog tool."""
    return list_tool_metadata(get_registry_state().reader, prefix=prefix)


@router.get("/{tool_name}/actions")
async def describe_tool_actions(tool_name: str):
    """Prompt-ready list of actions a generated UI may trigger for this tool."""
    state = get_registry_state()
    description = state.action_maps.describe_actions(tool_name, state.reader)
    if description is None:
        raise HTTPException(
            status_code=404,
            detail=f"No actions known for tool '{tool_name}'",
        )
    return {"tool_name": tool_name, "description": description}


@router.post("/{tool_name}/actions/{action}", response_model=ToolInvocation)
async def resolve_tool_action(
    tool_name: str,
    action: str,
    payload: Any = Body(default=None),
):
    """Translate a card action into the tool call it should trigger."""
    state = get_registry_state()
    invocation = state.action_maps.resolve_action(tool_name, action, payload, None, state.reader)
    if invocation is None:
        raise HTTPException(
            status_code=404,
            detail=f"Action '{action}' cannot be mapped for tool '{tool_name}'",
        )
    return invocation


@router.post("/{tool_name}/execute", response_model=ExecutionOutcome)
async def execute_tool(tool_name: str, params: Optional[dict[str, Any]] = Body(default=None)):
    """Execute a tool directly. Failures are reported in the outcome, not as HTTP errors."""
    outcome = await execute_direct(get_registry_state(), tool_name, params)
    logger.info(f"Direct execution {tool_name}: success={outcome.success}")
    return outcome
