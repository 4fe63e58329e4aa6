from __future__ import annotations

import logging
from typing import Any

from game_bgm.models.soundraw import CustomizeRequest
from game_bgm.models.tool_io import AdaptiveLayerInput, AdaptiveLayerOutput, LayerResult
from game_bgm.services.music_service import MusicService
from game_bgm.services.parameter_mapper import stems_to_mute_for_layer
from game_bgm.services.soundraw_client import extract_result
from game_bgm.tools.integration_code import adaptive_audio_code

log = logging.getLogger(__name__)

TOOL_NAME = "adaptive_layer_control"
DESCRIPTION = (
    "Render one version of a track per requested layer, with every other stem "
    "muted, for adaptive game audio that mixes layers in real time."
)
INPUT_MODEL = AdaptiveLayerInput


async def handle_adaptive_layers(
    args: dict[str, Any],
    *,
    music: MusicService,
) -> dict[str, Any]:
    """Submit one customize job per layer, in order, each polled to completion.

    Unknown layer names are skipped with a warning; the rest still run.
    """
    log.info("Handling adaptive_layer_control request: %s", args)
    params = AdaptiveLayerInput.model_validate(args)

    layers: list[LayerResult] = []
    for layer in params.layers_to_keep:
        mute_stems = stems_to_mute_for_layer(layer)
        if mute_stems is None:
            log.warning("Unknown layer: %s, skipping", layer)
            continue

        log.info("Generating %s layer", layer)
        job, file_format = await music.customize(
            CustomizeRequest(
                share_link=params.share_link,
                mute_stems=mute_stems,
                file_format=[params.file_format],
            )
        )
        extracted = extract_result(job, file_format)
        layers.append(
            LayerResult(
                name=layer,
                mute_stems=mute_stems,
                share_link=extracted.share_link,
                audio_url=extracted.audio_url,
                request_id=extracted.request_id,
            )
        )

    output = AdaptiveLayerOutput(
        layers=layers,
        base_share_link=params.share_link,
        integration_code=adaptive_audio_code(params.layers_to_keep, params.share_link),
    )
    log.info("Adaptive layers generation complete: %d layer(s)", len(layers))
    return output.model_dump()
