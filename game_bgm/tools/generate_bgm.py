from __future__ import annotations

import logging
from typing import Any

from game_bgm.agent.scene_analyzer import SceneAnalyzer
from game_bgm.models.soundraw import ComposeRequest
from game_bgm.models.tool_io import GenerateBgmInput, GenerateBgmOutput
from game_bgm.services.music_service import MusicService
from game_bgm.services.parameter_mapper import energy_segments_for_profile
from game_bgm.services.soundraw_client import extract_result
from game_bgm.tools.integration_code import get_integration_code

log = logging.getLogger(__name__)

TOOL_NAME = "generate_bgm"
DESCRIPTION = (
    "Generate background music for a game scene. An LLM maps the scene to "
    "Soundraw parameters, then Soundraw composes the track. Returns the audio "
    "URL, share link, BPM and optional game engine integration code."
)
INPUT_MODEL = GenerateBgmInput


async def handle_generate_bgm(
    args: dict[str, Any],
    *,
    analyzer: SceneAnalyzer,
    music: MusicService,
) -> dict[str, Any]:
    log.info("Handling generate_bgm request: %s", args)
    params = GenerateBgmInput.model_validate(args)

    log.info("Step 1: analyzing scene")
    analysis = await analyzer.analyze_scene(
        params.scene, params.game_genre, params.intensity, params.mood
    )

    request = ComposeRequest(
        length=params.duration_seconds,
        moods=analysis.moods,
        genres=analysis.genres,
        themes=analysis.themes,
        tempo=[analysis.tempo],
        file_format=[params.file_format],
        energy_levels=energy_segments_for_profile(
            analysis.energy_profile, params.duration_seconds
        ),
    )

    log.info("Step 2: composing with Soundraw")
    job, file_format = await music.compose(request)
    extracted = extract_result(job, file_format)

    output = GenerateBgmOutput(
        **extracted.model_dump(),
        file_format=file_format,
        integration_code=get_integration_code(params.engine, extracted.audio_url, extracted.bpm),
        deepseek_reasoning=analysis.reasoning,
        soundraw_params=request.to_payload(),
    )
    log.info(
        "BGM generation complete: share_link=%s bpm=%d duration=%s",
        output.share_link, output.bpm, output.duration_seconds,
    )
    return output.model_dump(exclude_none=True)
