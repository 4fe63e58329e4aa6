from __future__ import annotations

import logging
from typing import Any

from game_bgm.models.soundraw import CustomizeRequest, SimilarRequest
from game_bgm.models.tool_io import GetVariationsInput, VariationOutput
from game_bgm.services.music_service import MusicService
from game_bgm.services.parameter_mapper import energy_segments_for_preset
from game_bgm.services.soundraw_client import extract_result

log = logging.getLogger(__name__)

TOOL_NAME = "get_bgm_variations"
DESCRIPTION = (
    'Make a variation of an existing BGM. "similar" composes a new song in the '
    'same style; "customize" re-renders the original with an energy preset '
    "and/or muted stems."
)
INPUT_MODEL = GetVariationsInput


def build_customize_request(params: GetVariationsInput) -> CustomizeRequest:
    """Customize body from a preset and/or mute list.

    With neither given the request changes nothing; it is still submitted.
    """
    energy_levels = (
        energy_segments_for_preset(params.energy_preset) if params.energy_preset else None
    )
    mute_stems = params.mute_stems or None
    if energy_levels is None and mute_stems is None:
        log.info("Customize request without energy_preset or mute_stems; submitting as-is")
    return CustomizeRequest(
        share_link=params.share_link,
        energy_levels=energy_levels,
        mute_stems=mute_stems,
        file_format=["m4a"],
    )


async def handle_get_variations(
    args: dict[str, Any],
    *,
    music: MusicService,
) -> dict[str, Any]:
    log.info("Handling get_bgm_variations request: %s", args)
    params = GetVariationsInput.model_validate(args)

    if params.variation_type == "similar":
        job, file_format = await music.similar(
            SimilarRequest(
                share_link=params.share_link,
                length=params.length,
                mute_stems=params.mute_stems,
                file_format=["m4a"],
            )
        )
    else:
        job, file_format = await music.customize(build_customize_request(params))

    extracted = extract_result(job, file_format)
    output = VariationOutput(
        share_link=extracted.share_link,
        audio_url=extracted.audio_url,
        request_id=extracted.request_id,
        duration_seconds=extracted.duration_seconds,
        bpm=extracted.bpm,
        variation_type=params.variation_type,
        base_share_link=params.share_link,
    )
    log.info("Variation generation complete: share_link=%s", output.share_link)
    return output.model_dump()
