from __future__ import annotations

import json
import logging
import os
import re
import time
from typing import Any, Callable, Iterable, TypeVar

from openai import AsyncOpenAI
from pydantic import ValidationError

from game_bgm.agent.debug import (
    trace_completion,
    trace_model_config,
    trace_system_prompt,
    trace_user_prompt,
)
from game_bgm.agent.prompts import (
    SCENE_ANALYSIS_PROMPT,
    TRANSITION_ANALYSIS_PROMPT,
    scene_user_prompt,
    transition_user_prompt,
)
from game_bgm.errors import ConfigurationError, SceneAnalysisError
from game_bgm.models.analysis import SceneAnalysis, TransitionAnalysis
from game_bgm.models.soundraw import (
    SOUNDRAW_ENERGY_LEVELS,
    SOUNDRAW_GENRES,
    SOUNDRAW_MOODS,
    SOUNDRAW_TEMPOS,
    SOUNDRAW_THEMES,
    EnergySegment,
)

log = logging.getLogger(__name__)

# DeepSeek defaults; the key comes from DEEPSEEK_API_KEY
DEFAULT_DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_MODEL_NAME = "deepseek-chat"

# (mood, genre, theme) substituted when filtering leaves a category empty
SCENE_DEFAULTS = ("Epic", "Orchestra", "Gaming")
TRANSITION_DEFAULTS = ("Suspense", "Orchestra", "Cinematic")
DEFAULT_TEMPO = "normal"

_FENCE_OPEN = re.compile(r"^```[a-zA-Z]*\s*\n?")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")

AnalysisT = TypeVar("AnalysisT", SceneAnalysis, TransitionAnalysis)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence (```json ... ```), if any."""
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    stripped = _FENCE_OPEN.sub("", stripped, count=1)
    stripped = _FENCE_CLOSE.sub("", stripped, count=1)
    return stripped.strip()


def filter_vocabulary(values: Iterable[str], vocabulary: Iterable[str], default: str) -> list[str]:
    """Keep only values from ``vocabulary``; fall back to ``[default]`` if none survive."""
    allowed = set(vocabulary)
    kept = [v for v in values if v in allowed]
    return kept or [default]


def restrict_to_vocabularies(analysis: AnalysisT, defaults: tuple[str, str, str]) -> AnalysisT:
    """Return a copy of ``analysis`` whose tags are all valid Soundraw values.

    Applying it twice gives the same result as applying it once.
    """
    default_mood, default_genre, default_theme = defaults
    moods = filter_vocabulary(analysis.moods, SOUNDRAW_MOODS, default_mood)
    genres = filter_vocabulary(analysis.genres, SOUNDRAW_GENRES, default_genre)
    themes = filter_vocabulary(analysis.themes, SOUNDRAW_THEMES, default_theme)
    tempo = analysis.tempo if analysis.tempo in SOUNDRAW_TEMPOS else DEFAULT_TEMPO

    if moods != analysis.moods or genres != analysis.genres or themes != analysis.themes:
        log.debug(
            "Repaired tags: moods %s -> %s, genres %s -> %s, themes %s -> %s",
            analysis.moods, moods, analysis.genres, genres, analysis.themes, themes,
        )
    if tempo != analysis.tempo:
        log.debug("Repaired tempo %r -> %r", analysis.tempo, tempo)

    return analysis.model_copy(
        update={"moods": moods, "genres": genres, "themes": themes, "tempo": tempo}
    )


def repair_energy_levels(segments: Any) -> list[dict[str, Any]]:
    """Keep the segments Soundraw would accept, matching energy labels case-insensitively.

    Segments that still fail validation are dropped; the rest are returned
    in their original order with their boundaries untouched.
    """
    if not isinstance(segments, list):
        log.debug("Ignoring non-list energy_levels: %r", segments)
        return []

    labels = {level.lower(): level for level in SOUNDRAW_ENERGY_LEVELS}
    repaired = []
    for segment in segments:
        if isinstance(segment, dict) and isinstance(segment.get("energy"), str):
            label = segment["energy"]
            segment = {**segment, "energy": labels.get(label.strip().lower(), label)}
        try:
            repaired.append(EnergySegment.model_validate(segment).model_dump())
        except ValidationError:
            log.debug("Dropping invalid energy segment: %r", segment)
    return repaired


def _prepare_transition(data: dict[str, Any]) -> dict[str, Any]:
    if "energy_levels" in data:
        data = {**data, "energy_levels": repair_energy_levels(data["energy_levels"])}
    return data


def _parse_reply(
    content: str,
    model: type[AnalysisT],
    what: str,
    prepare: Callable[[dict[str, Any]], dict[str, Any]] | None = None,
) -> AnalysisT:
    json_str = strip_code_fence(content)
    try:
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        if prepare is not None:
            data = prepare(data)
        return model.model_validate(data)
    except (json.JSONDecodeError, ValidationError, ValueError) as e:
        log.error("Failed to parse %s response: %s", what, e)
        log.error("Full response content: %s", content)
        raise SceneAnalysisError(f"Failed to parse {what} parameters: {content}") from e


class SceneAnalyzer:
    """Asks an OpenAI-compatible chat model (DeepSeek by default) for Soundraw tags.

    Pass ``client`` to reuse or substitute the chat client; otherwise one is
    built on first use from DEEPSEEK_API_KEY, DEEPSEEK_BASE_URL and
    DEEPSEEK_MODEL.
    """

    def __init__(
        self,
        client: AsyncOpenAI | Any | None = None,
        model: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
        debug: bool = False,
    ):
        self._client = client
        self.model = model or os.environ.get("DEEPSEEK_MODEL") or DEFAULT_MODEL_NAME
        self.base_url = base_url or os.environ.get("DEEPSEEK_BASE_URL") or DEFAULT_DEEPSEEK_BASE_URL
        self._api_key = api_key
        self.debug = debug

    @property
    def client(self) -> AsyncOpenAI | Any:
        if self._client is None:
            api_key = self._api_key or os.environ.get("DEEPSEEK_API_KEY")
            if not api_key:
                raise ConfigurationError("DEEPSEEK_API_KEY environment variable is required")
            self._client = AsyncOpenAI(api_key=api_key, base_url=self.base_url)
            log.info("Chat client initialized (%s at %s)", self.model, self.base_url)
            if self.debug:
                trace_model_config(self.model, self.base_url)
        return self._client

    async def _complete(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        if self.debug:
            trace_system_prompt(system_prompt)
            trace_user_prompt(user_prompt)

        start = time.time()
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=0.7,
            max_tokens=max_tokens,
        )
        content = response.choices[0].message.content if response.choices else None
        log.info("Chat completion finished in %.2fs", time.time() - start)

        if self.debug:
            trace_completion(content, getattr(response, "usage", None))
        log.debug("Raw completion: %s", content)

        if not content:
            raise SceneAnalysisError(f"No response from {self.model}")
        return content

    async def analyze_scene(
        self,
        scene: str,
        game_genre: str,
        intensity: str,
        mood: str | None = None,
    ) -> SceneAnalysis:
        """Choose moods/genres/themes, a tempo and an energy profile for a scene."""
        log.info(
            "Analyzing scene for music parameters: scene=%s genre=%s intensity=%s mood=%s",
            scene, game_genre, intensity, mood,
        )
        content = await self._complete(
            SCENE_ANALYSIS_PROMPT,
            scene_user_prompt(scene, game_genre, intensity, mood),
            max_tokens=500,
        )
        analysis = restrict_to_vocabularies(
            _parse_reply(content, SceneAnalysis, "music"), SCENE_DEFAULTS
        )
        log.info(
            "Scene analysis complete: moods=%s tempo=%s energy_profile=%s",
            analysis.moods, analysis.tempo, analysis.energy_profile,
        )
        return analysis

    async def analyze_transition(
        self,
        from_scene: str,
        to_scene: str,
        transition_type: str,
        duration_seconds: float,
    ) -> TransitionAnalysis:
        """Choose tags and an energy curve for a transition between two scenes."""
        log.info(
            "Analyzing scene transition: %s -> %s (%s, %ss)",
            from_scene, to_scene, transition_type, duration_seconds,
        )
        content = await self._complete(
            TRANSITION_ANALYSIS_PROMPT,
            transition_user_prompt(from_scene, to_scene, transition_type, duration_seconds),
            max_tokens=600,
        )
        analysis = restrict_to_vocabularies(
            _parse_reply(content, TransitionAnalysis, "transition", _prepare_transition),
            TRANSITION_DEFAULTS,
        )
        log.info(
            "Transition analysis complete: moods=%s segments=%d",
            analysis.moods, len(analysis.energy_levels),
        )
        return analysis
