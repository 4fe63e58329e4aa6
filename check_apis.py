#!/usr/bin/env python3
"""Check that the DeepSeek and Soundraw credentials work.

Usage:
    python check_apis.py
    DEEPSEEK_API_KEY=sk-... SOUNDRAW_API_KEY=... python check_apis.py
"""

from __future__ import annotations

import asyncio
import sys

from dotenv import load_dotenv

from game_bgm.agent.scene_analyzer import SceneAnalyzer
from game_bgm.services.soundraw_client import SoundrawClient


async def check_deepseek() -> bool:
    """One tiny completion against the chat endpoint."""
    analyzer = SceneAnalyzer()
    try:
        response = await analyzer.client.chat.completions.create(
            model=analyzer.model,
            messages=[{"role": "user", "content": 'Reply with only: "DeepSeek OK"'}],
            max_tokens=20,
        )
        print(f"✓ DeepSeek ({analyzer.model}) replied: {response.choices[0].message.content!r}")
        return True
    except Exception as e:
        print(f"✗ DeepSeek check failed: {e}")
        return False


async def check_soundraw_account(client: SoundrawClient) -> bool:
    try:
        usage = await client.get_account_usage()
        print(f"✓ Soundraw account: {usage}")
        return True
    except Exception as e:
        print(f"✗ Soundraw account check failed: {e}")
        return False


async def check_soundraw_tags(client: SoundrawClient) -> bool:
    try:
        tags = await client.get_available_tags(
            [{"order": 1, "category": "Genres", "value": "Orchestra"}]
        )
        print(f"✓ Soundraw tags: {len(tags.get('moods', []))} moods available with Orchestra")
        return True
    except Exception as e:
        print(f"✗ Soundraw tags check failed: {e}")
        return False


async def main() -> int:
    load_dotenv()
    print("Checking API connectivity...\n")

    soundraw = SoundrawClient()
    results = [
        await check_deepseek(),
        await check_soundraw_account(soundraw),
        await check_soundraw_tags(soundraw),
    ]

    if all(results):
        print("\n✓ All checks passed!")
        return 0
    print("\n✗ Some checks failed")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
