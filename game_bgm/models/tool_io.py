"""Argument and result shapes for the four MCP tools."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

from game_bgm.models.soundraw import FileFormat, StemCode

LAYER_NAMES: tuple[str, ...] = ("backing", "bass", "drums", "melody")

_http_url = TypeAdapter(HttpUrl)


def _check_share_link(value: str) -> str:
    # Validate without normalising: Soundraw matches share links verbatim.
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError(f"share_link must be an http(s) URL, got {value!r}") from None
    return value


class GenerateBgmInput(BaseModel):
    scene: str = Field(
        description=(
            'Scene type (e.g., "boss_fight", "exploration", "cutscene", '
            '"menu", "combat", "stealth", "horror")'
        )
    )
    game_genre: str = Field(
        description=(
            'Game genre (e.g., "dark_souls_like", "jrpg", "fps", "puzzle", '
            '"horror", "platformer", "metroidvania")'
        )
    )
    intensity: Literal["low", "medium", "high"] = Field(description="Music intensity level")
    mood: str | None = Field(
        default=None,
        description='Optional mood hint (e.g., "epic", "melancholic", "mysterious", "tense")',
    )
    duration_seconds: float = Field(
        default=60, ge=10, le=300, description="Track duration in seconds (10-300, default: 60)"
    )
    engine: Literal["unreal", "unity", "godot"] | None = Field(
        default=None, description="Game engine for integration code snippets"
    )
    file_format: FileFormat = Field(default="m4a", description="Audio file format (default: m4a)")


class GetVariationsInput(BaseModel):
    share_link: str = Field(
        description="The share_link URL from a previous generate_bgm result"
    )
    variation_type: Literal["similar", "customize"] = Field(
        description=(
            '"similar" creates a new song with a similar style. '
            '"customize" adjusts energy/stems of the existing song.'
        )
    )
    length: float | None = Field(
        default=None, ge=10, le=300,
        description='Length of the similar track in seconds (10-300). Only used with "similar".',
    )
    energy_preset: Literal["building", "steady", "climax", "fade_out"] | None = Field(
        default=None, description='Energy preset. Only used with "customize".'
    )
    mute_stems: list[StemCode] | None = Field(
        default=None,
        description=(
            "Stems to mute: bc (backing), bs (bass), dr (drums), me (melody), "
            "fe (fill end), ff (fill start)"
        ),
    )

    @field_validator("share_link")
    @classmethod
    def check_share_link(cls, value: str) -> str:
        return _check_share_link(value)


class AdaptiveLayerInput(BaseModel):
    share_link: str = Field(description="The share_link URL from a previous generate_bgm result")
    # Unknown names are tolerated here and skipped by the handler.
    layers_to_keep: list[str] = Field(
        description=(
            "Layers to render isolated versions of. Each layer produces a version "
            "with the other layers muted."
        ),
        json_schema_extra={"items": {"type": "string", "enum": list(LAYER_NAMES)}},
    )
    file_format: FileFormat = Field(default="m4a", description="Audio format (default: m4a)")

    @field_validator("share_link")
    @classmethod
    def check_share_link(cls, value: str) -> str:
        return _check_share_link(value)


class SceneTransitionInput(BaseModel):
    from_scene: str = Field(description='Starting scene (e.g., "peaceful village exploration")')
    to_scene: str = Field(description='Target scene (e.g., "intense boss battle")')
    transition_type: Literal["fade", "stinger", "crossfade"] = Field(
        description='"fade" (gradual), "stinger" (dramatic accent) or "crossfade" (blend both)'
    )
    duration_seconds: float = Field(ge=10, le=60, description="Transition duration in seconds (10-60)")


class ExtractedResult(BaseModel):
    """The fields every tool reads out of a finished Soundraw job."""

    share_link: str
    audio_url: str
    request_id: str
    duration_seconds: int | float
    bpm: int
    timestamps: list[dict[str, Any]] = Field(default_factory=list)


class GenerateBgmOutput(BaseModel):
    share_link: str
    audio_url: str
    request_id: str
    duration_seconds: int | float
    bpm: int
    timestamps: list[dict[str, Any]]
    file_format: str
    integration_code: str | None = None
    deepseek_reasoning: str
    soundraw_params: dict[str, Any]


class VariationOutput(BaseModel):
    share_link: str
    audio_url: str
    request_id: str
    duration_seconds: int | float
    bpm: int
    variation_type: str
    base_share_link: str


class LayerResult(BaseModel):
    name: str
    mute_stems: list[str]
    share_link: str
    audio_url: str
    request_id: str


class AdaptiveLayerOutput(BaseModel):
    layers: list[LayerResult]
    base_share_link: str
    integration_code: str


class SceneTransitionOutput(BaseModel):
    share_link: str
    audio_url: str
    request_id: str
    from_scene: str
    to_scene: str
    from_mood: str
    to_mood: str
    transition_type: str
    duration_seconds: int | float
    bpm: int
    timestamps: list[dict[str, Any]]
    deepseek_reasoning: str
    soundraw_params: dict[str, Any]
