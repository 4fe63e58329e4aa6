from game_bgm.models.soundraw import (
    SOUNDRAW_ENERGY_LEVELS,
    SOUNDRAW_GENRES,
    SOUNDRAW_MOODS,
    SOUNDRAW_THEMES,
)

_MOODS = ", ".join(SOUNDRAW_MOODS)
_GENRES = ", ".join(SOUNDRAW_GENRES)
_THEMES = ", ".join(SOUNDRAW_THEMES)
_ENERGY_LEVELS = ", ".join(SOUNDRAW_ENERGY_LEVELS)


SCENE_ANALYSIS_PROMPT = f"""\
You are a game music director. Translate a game scene description into Soundraw \
music generation parameters.

Allowed values (use them EXACTLY as written):

MOODS (pick 1-3):
{_MOODS}

GENRES (pick 1-3):
{_GENRES}

THEMES (pick 1-2):
{_THEMES}

TEMPO: low (<100 bpm), normal (100-125 bpm), high (>125 bpm)

ENERGY_PROFILE: building (starts low and rises), steady (even energy), \
climax (high throughout), ambient (low, understated)

OUTPUT FORMAT: Return ONLY valid JSON with exactly these fields:
{{
  "moods": ["mood1", "mood2"],
  "genres": ["genre1", "genre2"],
  "themes": ["theme1"],
  "tempo": "low" | "normal" | "high",
  "energy_profile": "building" | "steady" | "climax" | "ambient",
  "reasoning": "one or two sentences on why these choices fit"
}}

Scene guidelines:
- Boss fight: Epic, Dark, Suspense + Orchestra, Rock + Gaming + high tempo + climax
- Exploration: Mysterious, Peaceful, Dreamy + Ambient, Acoustic + Nature, Travel + low/normal tempo + ambient or steady
- Combat: Angry, Busy & Frantic, Suspense + Rock, Electronica + Gaming, Sports & Action + high tempo + building or climax
- Menu / title screen: Elegant, Hopeful, Smooth + Orchestra, Ambient + Cinematic + normal tempo + steady
- Horror: Fear, Scary, Suspense + Ambient, Electronica + Horror & Thriller + low tempo + building
- Puzzle: Laid Back, Dreamy, Peaceful + Lofi Hip Hop, Ambient + Technology + normal tempo + steady
- Cutscene: follow the emotional content (Sad, Romantic, Epic, ...) + Orchestra, Acoustic + Cinematic, Drama

CRITICAL: Output ONLY valid JSON. No markdown, no text before or after the JSON.
"""


TRANSITION_ANALYSIS_PROMPT = f"""\
You are a game music director writing a short musical transition between two scenes.

Allowed values (use them EXACTLY as written):
MOODS: {_MOODS}
GENRES: {_GENRES}
THEMES: {_THEMES}
ENERGY_LEVELS: {_ENERGY_LEVELS}

OUTPUT FORMAT: Return ONLY valid JSON:
{{
  "from_mood": "mood of the scene being left",
  "to_mood": "mood of the scene being entered",
  "moods": ["mood1", "mood2"],
  "genres": ["genre1"],
  "themes": ["theme1"],
  "tempo": "low" | "normal" | "high",
  "energy_levels": [
    {{"start": 0, "end": X, "energy": "Level"}},
    {{"start": X, "end": Y, "energy": "Level"}}
  ],
  "reasoning": "one or two sentences"
}}

The energy_levels segments must be contiguous, start at 0 and end exactly at the \
requested duration.

Transition styles:
- fade: energy eases down and back up, 3-4 segments
- stinger: a sharp accent, start Very High, drop to Low, then rise again
- crossfade: a smooth blend, keep energy mostly level with small changes

CRITICAL: Output ONLY valid JSON. No markdown, no text before or after the JSON.
"""


def scene_user_prompt(
    scene: str, game_genre: str, intensity: str, mood: str | None = None
) -> str:
    lines = [
        "Generate Soundraw parameters for this game scene:",
        "",
        f"Scene Type: {scene}",
        f"Game Genre: {game_genre}",
        f"Intensity: {intensity}",
    ]
    if mood:
        lines.append(f"Desired Mood Hint: {mood}")
    lines += ["", "Output only valid JSON, no markdown."]
    return "\n".join(lines)


def transition_user_prompt(
    from_scene: str, to_scene: str, transition_type: str, duration_seconds: float
) -> str:
    return "\n".join(
        [
            "Create transition music parameters:",
            "",
            f"From Scene: {from_scene}",
            f"To Scene: {to_scene}",
            f"Transition Type: {transition_type}",
            f"Duration: {duration_seconds:g} seconds",
            "",
            f"Create an energy_levels array whose segments cover 0 to {duration_seconds:g} seconds.",
            "Output only valid JSON, no markdown.",
        ]
    )
