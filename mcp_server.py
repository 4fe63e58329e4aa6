"""MCP server entry point (stdio transport)."""

from __future__ import annotations

import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from game_bgm.api.server import ToolDispatcher, run_stdio


def setup_logging() -> None:
    # stdout carries the MCP protocol, so logs go to stderr only.
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main() -> None:
    """Run the MCP server."""
    load_dotenv()
    setup_logging()
    debug = os.environ.get("LOG_LEVEL", "").upper() == "DEBUG"
    try:
        asyncio.run(run_stdio(ToolDispatcher(debug=debug)))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
