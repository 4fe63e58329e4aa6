"""Soundraw v3 vocabularies, request bodies and job/result payloads."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ── Closed vocabularies accepted by the Soundraw compose endpoint ──

SOUNDRAW_MOODS: tuple[str, ...] = (
    "Angry", "Busy & Frantic", "Dark", "Dreamy", "Elegant", "Epic", "Euphoric",
    "Fear", "Funny & Weird", "Glamorous", "Happy", "Heavy & Ponderous", "Hopeful",
    "Laid Back", "Mysterious", "Peaceful", "Restless", "Romantic", "Running",
    "Sad", "Scary", "Sentimental", "Sexy", "Smooth", "Suspense",
)

SOUNDRAW_GENRES: tuple[str, ...] = (
    "Acoustic", "Hip Hop", "Beats", "Funk", "Pop", "Drum n Bass", "Trap",
    "Tokyo night pop", "Rock", "Latin", "House", "Tropical House", "Ambient",
    "Orchestra", "Electro & Dance", "Electronica", "Techno & Trance",
    "Jersey Club", "Drill", "R&B", "Lofi Hip Hop", "World", "Afrobeats", "Christmas",
)

SOUNDRAW_THEMES: tuple[str, ...] = (
    "Ads & Trailers", "Broadcasting", "Cinematic", "Corporate", "Comedy",
    "Cooking", "Documentary", "Drama", "Fashion & Beauty", "Gaming",
    "Holiday Season", "Horror & Thriller", "Motivational & Inspiring", "Nature",
    "Photography", "Sports & Action", "Technology", "Travel", "Tutorials",
    "Vlogs", "Wedding & Romance", "Workout & Wellness",
)

SOUNDRAW_TEMPOS: tuple[str, ...] = ("low", "normal", "high")
SOUNDRAW_ENERGY_LEVELS: tuple[str, ...] = ("Muted", "Low", "Medium", "High", "Very High")
# backing, bass, drums, melody, fill end, fill start
SOUNDRAW_STEMS: tuple[str, ...] = ("bc", "bs", "dr", "me", "fe", "ff")
SOUNDRAW_FILE_FORMATS: tuple[str, ...] = ("m4a", "mp3", "wav")

Tempo = Literal["low", "normal", "high"]
EnergyLevel = Literal["Muted", "Low", "Medium", "High", "Very High"]
StemCode = Literal["bc", "bs", "dr", "me", "fe", "ff"]
FileFormat = Literal["m4a", "mp3", "wav"]
JobStatus = Literal["processing", "done", "failed"]


class EnergySegment(BaseModel):
    """A time range of the track with a single energy label."""

    model_config = ConfigDict(frozen=True)

    start: float = Field(ge=0, description="Segment start in seconds")
    end: float = Field(description="Segment end in seconds")
    energy: EnergyLevel = Field(description="Energy label for the segment")


class SoundrawRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_format: list[FileFormat] | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the API, with unset fields left out."""
        return self.model_dump(mode="json", exclude_none=True)

    @property
    def file_format_or_default(self) -> str:
        return self.file_format[0] if self.file_format else "m4a"


class ComposeRequest(SoundrawRequest):
    """Body for POST /musics/compose."""

    length: float = Field(ge=10, le=300, description="Track length in seconds")
    moods: list[str] | None = None
    genres: list[str] | None = None
    themes: list[str] | None = None
    tempo: list[Tempo] | None = None
    mute_stems: list[StemCode] | None = None
    energy_levels: list[EnergySegment] | None = None


class SimilarRequest(SoundrawRequest):
    """Body for POST /musics/similar."""

    share_link: str
    length: float | None = Field(default=None, ge=10, le=300)
    tempo: list[Tempo] | None = None
    mute_stems: list[StemCode] | None = None


class CustomizeRequest(SoundrawRequest):
    """Body for POST /musics/customize."""

    share_link: str
    energy_levels: list[EnergySegment] | None = None
    mute_stems: list[StemCode] | None = None


class SoundrawTrack(BaseModel):
    """The ``result`` object of a finished job."""

    model_config = ConfigDict(extra="ignore")

    bpm: str | int | float
    share_link: str
    length: int | float
    timestamps: list[dict[str, Any]] = Field(default_factory=list)
    m4a_url: str | None = None
    mp3_url: str | None = None
    wav_url: str | None = None


class SoundrawJob(BaseModel):
    """Response of GET /results/{request_id}."""

    model_config = ConfigDict(extra="ignore")

    request_id: str
    status: JobStatus
    endpoint: str | None = None
    params: dict[str, Any] | None = None
    result: SoundrawTrack | None = None
