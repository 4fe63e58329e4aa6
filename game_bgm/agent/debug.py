"""Debug tracing utilities for LLM calls and tool dispatch."""

from __future__ import annotations

import json
import logging
from typing import Any

log = logging.getLogger(__name__)


def _format_value(value: Any, max_length: int | None = 300) -> str:
    """Format a value for display, truncating if needed."""
    if isinstance(value, str):
        s = value
    elif isinstance(value, bytes):
        s = f"<bytes {len(value)} bytes>"
    elif isinstance(value, (dict, list)):
        s = json.dumps(value, indent=2, default=str)
    else:
        s = str(value)

    if max_length is not None and len(s) > max_length:
        return s[:max_length] + f"\n... (truncated {len(s) - max_length} chars)"
    return s


def _banner(title: str) -> None:
    log.debug("=" * 80)
    log.debug(title)
    log.debug("=" * 80)


def trace_system_prompt(system_prompt: str) -> None:
    """Log the system prompt."""
    _banner("SYSTEM PROMPT")
    log.debug(_format_value(system_prompt, max_length=None))
    log.debug("=" * 80)


def trace_user_prompt(user_prompt: str) -> None:
    _banner("USER PROMPT")
    log.debug(_format_value(user_prompt, max_length=None))
    log.debug("=" * 80)


def trace_model_config(model_name: str, base_url: str | None) -> None:
    """Log model configuration."""
    _banner("MODEL CONFIGURATION")
    log.debug("Model: %s", model_name)
    log.debug("Base URL: %s", base_url)
    log.debug("=" * 80)


def trace_completion(content: str | None, usage: Any = None) -> None:
    """Log the raw completion text and token usage."""
    _banner("RAW COMPLETION")
    log.debug(_format_value(content or "<empty>", max_length=None))
    if usage is not None:
        log.debug("Usage: %s", usage)
    log.debug("=" * 80)


def trace_tool_call(tool_name: str, args: dict[str, Any]) -> None:
    """Log a tool call with full arguments."""
    _banner(f"TOOL CALL: {tool_name}")
    log.debug("Arguments:\n%s", _format_value(args, max_length=None))
    log.debug("=" * 80)


def trace_tool_result(tool_name: str, result: Any, error: str | None = None) -> None:
    """Log a tool result."""
    _banner(f"TOOL RESULT: {tool_name}")
    if error:
        log.debug("Error: %s", error)
    else:
        log.debug("Result:\n%s", _format_value(result))
    log.debug("=" * 80)
