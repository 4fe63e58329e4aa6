"""CLI entry point: run one BGM tool call without an MCP client."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from game_bgm.api.server import ToolDispatcher
from game_bgm.tools.registry import TOOLS

log = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Call one of the game BGM tools and save its result."
    )
    parser.add_argument(
        "tool",
        choices=sorted(TOOLS),
        help="Tool to call.",
    )
    parser.add_argument(
        "--args", "-a",
        type=str,
        default="{}",
        help='Tool arguments as a JSON object, e.g. \'{"scene": "boss_fight", ...}\'.',
    )
    parser.add_argument(
        "--args-file",
        type=str,
        default=None,
        help="Read tool arguments from a JSON file instead of --args.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log every step to stderr.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log full prompts, completions and tool payloads.",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory (default: outputs/YYYY-MM-DD/HH-MM-SS).",
    )
    return parser.parse_args()


def setup_output_dir(custom_dir: str | None = None) -> Path:
    """Create output directory with timestamp."""
    if custom_dir:
        output_dir = Path(custom_dir)
    else:
        now = datetime.now()
        output_dir = Path("outputs") / now.strftime("%Y-%m-%d") / now.strftime("%H-%M-%S")

    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def setup_logging(output_dir: Path, verbose: bool = False, debug: bool = False) -> None:
    """Setup logging to both console and file."""
    log_level = logging.DEBUG if (verbose or debug) else logging.INFO
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(output_dir / "execution.log")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def load_tool_args(args: argparse.Namespace) -> dict:
    raw = Path(args.args_file).read_text() if args.args_file else args.args
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Tool arguments must be a JSON object")
    return data


async def main() -> None:
    args = parse_args()
    load_dotenv()

    output_dir = setup_output_dir(args.output_dir)
    setup_logging(output_dir, args.verbose, args.debug)

    try:
        tool_args = load_tool_args(args)
    except (OSError, ValueError) as e:
        log.error("Invalid tool arguments: %s", e)
        print(f"Error: invalid tool arguments: {e}", file=sys.stderr)
        sys.exit(2)

    start_time = time.time()
    start_datetime = datetime.now().isoformat()

    log.info("=" * 80)
    log.info("Calling tool %s", args.tool)
    log.info("  - Timestamp: %s", start_datetime)
    log.info("  - Arguments: %s", tool_args)
    log.info("  - Output directory: %s", output_dir)
    log.info("=" * 80)

    dispatcher = ToolDispatcher(debug=args.debug)
    result = await dispatcher.call(args.tool, tool_args)
    text = result.content[0].text

    elapsed_time = time.time() - start_time
    log.info("=" * 80)
    log.info(
        "Tool %s %s in %.2fs",
        args.tool,
        "failed" if result.isError else "completed",
        elapsed_time,
    )
    log.info("=" * 80)

    output_file = output_dir / "result.json"
    output_file.write_text(text)
    log.info("Result saved to %s", output_file)

    params_file = output_dir / "params.json"
    params = {
        "timestamp": start_datetime,
        "tool": args.tool,
        "arguments": tool_args,
        "verbose": args.verbose,
        "debug": args.debug,
        "is_error": bool(result.isError),
        "runtime_seconds": elapsed_time,
    }
    params_file.write_text(json.dumps(params, indent=2))
    log.info("Parameters saved to %s", params_file)

    print(text)
    if result.isError:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
