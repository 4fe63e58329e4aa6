"""Name → handler table for the four tools, plus their advertised definitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from game_bgm.tools import adaptive_layers, generate_bgm, get_variations, scene_transition


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: type[BaseModel]
    handler: Callable[..., Awaitable[dict[str, Any]]]
    uses_analyzer: bool

    def definition(self) -> dict[str, Any]:
        """MCP tool definition: name, description and JSON input schema."""
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": schema,
        }


TOOLS: dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            generate_bgm.TOOL_NAME,
            generate_bgm.DESCRIPTION,
            generate_bgm.INPUT_MODEL,
            generate_bgm.handle_generate_bgm,
            uses_analyzer=True,
        ),
        ToolSpec(
            get_variations.TOOL_NAME,
            get_variations.DESCRIPTION,
            get_variations.INPUT_MODEL,
            get_variations.handle_get_variations,
            uses_analyzer=False,
        ),
        ToolSpec(
            adaptive_layers.TOOL_NAME,
            adaptive_layers.DESCRIPTION,
            adaptive_layers.INPUT_MODEL,
            adaptive_layers.handle_adaptive_layers,
            uses_analyzer=False,
        ),
        ToolSpec(
            scene_transition.TOOL_NAME,
            scene_transition.DESCRIPTION,
            scene_transition.INPUT_MODEL,
            scene_transition.handle_scene_transition,
            uses_analyzer=True,
        ),
    )
}

TOOL_DEFINITIONS: list[dict[str, Any]] = [spec.definition() for spec in TOOLS.values()]
