import pytest

from game_bgm.services.parameter_mapper import (
    ENERGY_PRESETS,
    ENERGY_PROFILES,
    energy_segments_for_preset,
    energy_segments_for_profile,
    stems_to_mute_for_layer,
)

DURATIONS = [10, 30, 45, 60, 61, 299, 300]


def assert_covers(segments, duration):
    assert segments[0].start == 0
    assert segments[-1].end == duration
    for prev, nxt in zip(segments, segments[1:]):
        assert prev.end == nxt.start
    for seg in segments:
        assert seg.end > seg.start


class TestEnergyProfiles:
    @pytest.mark.parametrize("profile", ENERGY_PROFILES)
    @pytest.mark.parametrize("duration", DURATIONS)
    def test_profiles_cover_whole_duration(self, profile, duration):
        """Every profile is contiguous, non-overlapping and spans [0, duration]."""
        assert_covers(energy_segments_for_profile(profile, duration), duration)

    def test_building_rises_in_quarters(self):
        segments = energy_segments_for_profile("building", 60)
        assert [s.energy for s in segments] == ["Low", "Medium", "High", "Very High"]
        assert [(s.start, s.end) for s in segments] == [(0, 15), (15, 30), (30, 45), (45, 60)]

    def test_climax_for_thirty_seconds(self):
        segments = energy_segments_for_profile("climax", 30)
        assert [s.model_dump() for s in segments] == [
            {"start": 0, "end": 7.5, "energy": "High"},
            {"start": 7.5, "end": 30, "energy": "Very High"},
        ]

    def test_ambient_is_single_low_segment(self):
        segments = energy_segments_for_profile("ambient", 90)
        assert len(segments) == 1
        assert segments[0].energy == "Low"

    def test_unknown_profile_falls_back_to_steady(self):
        assert energy_segments_for_profile("chaotic", 40) == energy_segments_for_profile(
            "steady", 40
        )
        assert energy_segments_for_profile("steady", 40)[0].energy == "Medium"

    def test_boundaries_may_be_fractional(self):
        segments = energy_segments_for_profile("building", 10)
        assert segments[0].end == 2.5
        assert segments[2].end == 7.5


class TestEnergyPresets:
    @pytest.mark.parametrize("preset", ENERGY_PRESETS)
    @pytest.mark.parametrize("duration", DURATIONS)
    def test_presets_cover_whole_duration(self, preset, duration):
        assert_covers(energy_segments_for_preset(preset, duration), duration)

    @pytest.mark.parametrize("duration", DURATIONS)
    def test_fade_out_mirrors_building(self, duration):
        """fade_out reverses building's energy labels segment for segment."""
        building = energy_segments_for_preset("building", duration)
        fade_out = energy_segments_for_preset("fade_out", duration)
        assert [s.energy for s in fade_out] == ["High", "Medium", "Low", "Muted"]
        order = ["Muted", "Low", "Medium", "High", "Very High"]
        for b, f in zip(building, fade_out):
            assert (b.start, b.end) == (f.start, f.end)
            assert order.index(b.energy) + order.index(f.energy) == 4

    def test_climax_preset_is_all_very_high(self):
        segments = energy_segments_for_preset("climax", 60)
        assert [(s.start, s.end, s.energy) for s in segments] == [(0, 60, "Very High")]

    def test_default_duration_is_sixty_seconds(self):
        assert energy_segments_for_preset("steady")[-1].end == 60

    def test_unknown_preset_falls_back_to_steady(self):
        segments = energy_segments_for_preset("wobble", 20)
        assert [(s.start, s.end, s.energy) for s in segments] == [(0, 20, "Medium")]


class TestLayerStems:
    @pytest.mark.parametrize(
        "layer, kept",
        [("backing", "bc"), ("bass", "bs"), ("drums", "dr"), ("melody", "me")],
    )
    def test_mutes_everything_but_the_layer(self, layer, kept):
        muted = stems_to_mute_for_layer(layer)
        primaries = {"bc", "bs", "dr", "me"}
        assert kept not in muted
        assert set(muted) == (primaries - {kept}) | {"fe", "ff"}
        assert len(muted) == 5

    def test_drums(self):
        assert stems_to_mute_for_layer("drums") == ["bc", "bs", "me", "fe", "ff"]

    def test_unknown_layer_is_none_not_empty(self):
        assert stems_to_mute_for_layer("nonexistent") is None
        assert stems_to_mute_for_layer("") is None
