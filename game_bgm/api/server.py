"""MCP server exposing the BGM tools over stdio."""

from __future__ import annotations

import json
import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from game_bgm.agent.debug import trace_tool_call, trace_tool_result
from game_bgm.agent.scene_analyzer import SceneAnalyzer
from game_bgm.services.music_service import MusicService
from game_bgm.services.soundraw_client import SoundrawClient
from game_bgm.tools.registry import TOOL_DEFINITIONS, TOOLS

log = logging.getLogger(__name__)

SERVER_NAME = "soundraw-game-bgm"
SERVER_VERSION = "1.0.0"


def _text_result(payload: dict[str, Any], is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=json.dumps(payload, indent=2))],
        isError=is_error,
    )


class ToolDispatcher:
    """Routes a tool call to its handler and turns any failure into an error result.

    The analyzer and the music service are created on first use unless
    injected, so a tool that needs no LLM never asks for DEEPSEEK_API_KEY.
    """

    def __init__(
        self,
        analyzer: SceneAnalyzer | None = None,
        music: MusicService | None = None,
        debug: bool = False,
    ):
        self._analyzer = analyzer
        self._music = music
        self.debug = debug

    @property
    def analyzer(self) -> SceneAnalyzer:
        if self._analyzer is None:
            self._analyzer = SceneAnalyzer(debug=self.debug)
        return self._analyzer

    @property
    def music(self) -> MusicService:
        if self._music is None:
            self._music = SoundrawClient()
        return self._music

    async def call(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        """Run tool ``name``. Never raises."""
        arguments = arguments or {}
        log.info("Tool called: %s", name)
        if self.debug:
            trace_tool_call(name, arguments)

        try:
            spec = TOOLS.get(name)
            if spec is None:
                raise ValueError(f"Unknown tool: {name}")
            deps: dict[str, Any] = {"music": self.music}
            if spec.uses_analyzer:
                deps["analyzer"] = self.analyzer
            result = await spec.handler(arguments, **deps)
        except Exception as e:
            log.error("Tool error: %s: %s", name, e, exc_info=self.debug)
            if self.debug:
                trace_tool_result(name, None, error=str(e))
            return _text_result({"error": str(e)}, is_error=True)

        if self.debug:
            trace_tool_result(name, result)
        return _text_result(result)


def create_server(dispatcher: ToolDispatcher | None = None) -> Server:
    """Build the MCP server with ``tools/list`` and ``tools/call`` handlers."""
    dispatcher = dispatcher or ToolDispatcher()
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        log.debug("Listing tools")
        return [types.Tool(**definition) for definition in TOOL_DEFINITIONS]

    # Handlers validate their own input: unknown layer names must reach
    # adaptive_layer_control instead of being rejected by the schema enum.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        return await dispatcher.call(name, arguments)

    return server


async def run_stdio(dispatcher: ToolDispatcher | None = None) -> None:
    """Serve over stdin/stdout until the client disconnects."""
    server = create_server(dispatcher)
    log.info("Starting %s MCP server", SERVER_NAME)
    async with stdio_server() as (read_stream, write_stream):
        log.info("%s MCP server connected and ready", SERVER_NAME)
        await server.run(read_stream, write_stream, server.create_initialization_options())
