"""Music parameters returned by the scene analyzer."""

from __future__ import annotations

from pydantic import BaseModel, Field

from game_bgm.models.soundraw import EnergySegment


class SceneAnalysis(BaseModel):
    """Soundraw tags chosen for a single game scene."""

    moods: list[str] = Field(default_factory=list, description="1-3 Soundraw moods")
    genres: list[str] = Field(default_factory=list, description="1-3 Soundraw genres")
    themes: list[str] = Field(default_factory=list, description="1-2 Soundraw themes")
    tempo: str = Field(default="normal", description="low, normal or high")
    energy_profile: str = Field(
        default="steady",
        description="building, steady, climax or ambient",
    )
    reasoning: str = Field(default="", description="Why these tags fit the scene")


class TransitionAnalysis(BaseModel):
    """Soundraw tags and an energy curve bridging two scenes."""

    from_mood: str = Field(default="", description="Mood the transition leaves")
    to_mood: str = Field(default="", description="Mood the transition arrives at")
    moods: list[str] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)
    themes: list[str] = Field(default_factory=list)
    tempo: str = Field(default="normal")
    energy_levels: list[EnergySegment] = Field(
        default_factory=list,
        description="Segments covering the whole transition duration",
    )
    reasoning: str = Field(default="")
