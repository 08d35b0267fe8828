"""Capability execution bridge.

Resolves a tool by name (capability catalog first, then generated
executors), calls its execute(call_id, params) and folds whatever comes
back into an ExecutionOutcome:

- unresolvable name: success=False, "not found" error, nothing invoked
- text starting with "[ERROR] ": success=False, error is the text
- JSON text: success=True, data is the parsed value
- any other text: success=True, data wraps the raw text
- any exception: success=False, error is the exception message

No timeout or retry is applied here; that belongs to the tool or caller.
"""

import inspect
import json
import logging
import uuid
from typing import Any, Optional

from pydantic import BaseModel

from signature_router.catalog.reader import instantiate
from signature_router.state import RegistryState

logger = logging.getLogger(__name__)

ERROR_MARKER = "[ERROR] "


class ExecutionOutcome(BaseModel):
    """Uniform result of a direct tool execution."""

    success: bool
    data: Any = None
    raw_text: Optional[str] = None
    error: Optional[str] = None


def resolve_tool(state: RegistryState, tool_name: str) -> Optional[Any]:
    """Find an executable tool object by name.

    The first catalog entry declaring the name is instantiated and the
    object whose own name matches is returned. Generated executors are the
    fallback. Factory exceptions propagate to the caller.
    """
    for entry in state.reader.entries():
        if tool_name not in entry.declared_names:
            continue
        for tool in instantiate(entry):
            if getattr(tool, "name", None) == tool_name and callable(getattr(tool, "execute", None)):
                return tool
        break

    return state.artifacts.get_executor(tool_name)


def _content_blocks(result: Any) -> list:
    content = result.get("content") if isinstance(result, dict) else getattr(result, "content", None)
    return content if isinstance(content, list) else []


def _block_text(block: Any) -> Optional[str]:
    if isinstance(block, dict):
        block_type, text = block.get("type"), block.get("text")
    else:
        block_type, text = getattr(block, "type", None), getattr(block, "text", None)
    if block_type == "text" and isinstance(text, str) and text:
        return text
    return None


def extract_text(result: Any) -> str:
    """Join every text block of a tool result with newlines."""
    parts = [t for t in (_block_text(b) for b in _content_blocks(result)) if t is not None]
    return "\n".join(parts)


def parse_tool_output(raw_text: str) -> Any:
    """JSON if possible, otherwise a text_result wrapper."""
    try:
        return json.loads(raw_text)
    except ValueError:
        return {"rawOutput": raw_text, "type": "text_result"}


async def execute_direct(
    state: RegistryState, tool_name: str, params: Optional[dict[str, Any]] = None
) -> ExecutionOutcome:
    """Run a registered tool directly and classify its result."""
    try:
        tool = resolve_tool(state, tool_name)
        if tool is None:
            logger.info(f"Tool not found for direct execution: {tool_name}")
            return ExecutionOutcome(
                success=False, error=f'Tool "{tool_name}" not found in registry'
            )

        call_id = str(uuid.uuid4())
        result = tool.execute(call_id, dict(params or {}))
        if inspect.isawaitable(result):
            result = await result

        raw_text = extract_text(result)
        if raw_text.startswith(ERROR_MARKER):
            logger.warning(f"Tool {tool_name} reported an error: {raw_text[:200]}")
            return ExecutionOutcome(success=False, raw_text=raw_text, error=raw_text)

        return ExecutionOutcome(
            success=True, data=parse_tool_output(raw_text), raw_text=raw_text
        )

    except Exception as e:
        logger.error(f"Direct execution of {tool_name} failed: {e}")
        return ExecutionOutcome(success=False, error=str(e))
