"""Turn categorical tool inputs into Soundraw energy curves and stem mutes.

Everything here is pure: no I/O, no state. Segment boundaries are plain
fractions of the duration and need not be whole seconds.
"""

from __future__ import annotations

from game_bgm.models.soundraw import SOUNDRAW_STEMS, EnergySegment

ENERGY_PROFILES: tuple[str, ...] = ("building", "steady", "climax", "ambient")
ENERGY_PRESETS: tuple[str, ...] = ("building", "steady", "climax", "fade_out")

# Customize requests do not know the original track length.
DEFAULT_PRESET_DURATION = 60

# Stem each layer keeps audible; everything else is muted.
LAYER_STEMS: dict[str, str] = {
    "backing": "bc",
    "bass": "bs",
    "drums": "dr",
    "melody": "me",
}
FILL_STEMS: tuple[str, ...] = ("fe", "ff")


def _quarters(duration: float, levels: tuple[str, str, str, str]) -> list[EnergySegment]:
    quarter = duration / 4
    bounds = [0, quarter, duration / 2, quarter * 3, duration]
    return [
        EnergySegment(start=bounds[i], end=bounds[i + 1], energy=level)
        for i, level in enumerate(levels)
    ]


def _whole(duration: float, level: str) -> list[EnergySegment]:
    return [EnergySegment(start=0, end=duration, energy=level)]


def energy_segments_for_profile(profile: str, duration: float) -> list[EnergySegment]:
    """Energy curve for a scene analysis ``energy_profile``.

    Unrecognised profiles fall back to ``steady``.
    """
    if profile == "building":
        return _quarters(duration, ("Low", "Medium", "High", "Very High"))
    if profile == "climax":
        quarter = duration / 4
        return [
            EnergySegment(start=0, end=quarter, energy="High"),
            EnergySegment(start=quarter, end=duration, energy="Very High"),
        ]
    if profile == "ambient":
        return _whole(duration, "Low")
    return _whole(duration, "Medium")


def energy_segments_for_preset(
    preset: str, duration: float = DEFAULT_PRESET_DURATION
) -> list[EnergySegment]:
    """Energy curve for a ``get_bgm_variations`` customize preset.

    ``fade_out`` mirrors ``building``; unrecognised presets fall back to ``steady``.
    """
    if preset == "building":
        return _quarters(duration, ("Low", "Medium", "High", "Very High"))
    if preset == "fade_out":
        return _quarters(duration, ("High", "Medium", "Low", "Muted"))
    if preset == "climax":
        return _whole(duration, "Very High")
    return _whole(duration, "Medium")


def stems_to_mute_for_layer(layer: str) -> list[str] | None:
    """Stem codes to mute so that only ``layer`` stays audible.

    Returns None for an unknown layer name so callers can tell it apart
    from a (hypothetical) empty mute list.
    """
    keep = LAYER_STEMS.get(layer)
    if keep is None:
        return None
    primaries = set(LAYER_STEMS.values()) - {keep}
    return [s for s in SOUNDRAW_STEMS if s in primaries or s in FILL_STEMS]
