from __future__ import annotations

import logging
from typing import Any

from game_bgm.agent.scene_analyzer import SceneAnalyzer
from game_bgm.models.soundraw import ComposeRequest
from game_bgm.models.tool_io import SceneTransitionInput, SceneTransitionOutput
from game_bgm.services.music_service import MusicService
from game_bgm.services.soundraw_client import extract_result

log = logging.getLogger(__name__)

TOOL_NAME = "scene_transition_music"
DESCRIPTION = (
    "Generate transition music between two game scenes. An LLM plans the "
    "emotional arc and energy curve between the scenes, then Soundraw "
    "composes the transition."
)
INPUT_MODEL = SceneTransitionInput


async def handle_scene_transition(
    args: dict[str, Any],
    *,
    analyzer: SceneAnalyzer,
    music: MusicService,
) -> dict[str, Any]:
    log.info("Handling scene_transition_music request: %s", args)
    params = SceneTransitionInput.model_validate(args)

    log.info("Step 1: analyzing transition")
    analysis = await analyzer.analyze_transition(
        params.from_scene, params.to_scene, params.transition_type, params.duration_seconds
    )

    # The analyzer's energy curve is sent exactly as returned.
    request = ComposeRequest(
        length=params.duration_seconds,
        moods=analysis.moods,
        genres=analysis.genres,
        themes=analysis.themes,
        tempo=[analysis.tempo],
        file_format=["m4a"],
        energy_levels=analysis.energy_levels or None,
    )

    log.info("Step 2: composing transition with Soundraw")
    job, file_format = await music.compose(request)
    extracted = extract_result(job, file_format)

    output = SceneTransitionOutput(
        share_link=extracted.share_link,
        audio_url=extracted.audio_url,
        request_id=extracted.request_id,
        from_scene=params.from_scene,
        to_scene=params.to_scene,
        from_mood=analysis.from_mood,
        to_mood=analysis.to_mood,
        transition_type=params.transition_type,
        duration_seconds=extracted.duration_seconds,
        bpm=extracted.bpm,
        timestamps=extracted.timestamps,
        deepseek_reasoning=analysis.reasoning,
        soundraw_params=request.to_payload(),
    )
    log.info("Transition music generation complete: request_id=%s", output.request_id)
    return output.model_dump()
