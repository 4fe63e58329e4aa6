"""Copy-paste snippets for wiring a generated track into a game engine."""

from __future__ import annotations

from typing import Literal

Engine = Literal["unreal", "unity", "godot"]

_UNREAL_TEMPLATE = """\
// Unreal Engine 5 - BGM playback
// 1. Import the track as a Sound Wave / Sound Cue:
//    {audio_url}
// 2. Reference it from your GameMode or audio manager.

#include "Kismet/GameplayStatics.h"
#include "Components/AudioComponent.h"
#include "Sound/SoundCue.h"

// Header
UPROPERTY(EditAnywhere, BlueprintReadWrite, Category = "Audio")
USoundCue* BGMCue;

UPROPERTY()
UAudioComponent* BGMComponent;

static constexpr float BGM_BPM = {bpm}.0f;

// Source
void AMyGameMode::PlayBGM()
{{
    if (BGMCue && !BGMComponent)
    {{
        BGMComponent = UGameplayStatics::SpawnSound2D(this, BGMCue, 1.0f, 1.0f, 0.0f, nullptr, true, false);
    }}
}}

void AMyGameMode::StopBGM(float FadeOutSeconds)
{{
    if (BGMComponent)
    {{
        BGMComponent->FadeOut(FadeOutSeconds, 0.0f);
        BGMComponent = nullptr;
    }}
}}

// Seconds per beat, for beat-synced gameplay events.
float AMyGameMode::GetBeatInterval() const
{{
    return 60.0f / BGM_BPM;
}}
"""

_UNITY_TEMPLATE = """\
// Unity - BGM playback
// Import the track into Assets/ and assign it to bgmClip:
//   {audio_url}

using System.Collections;
using UnityEngine;

[RequireComponent(typeof(AudioSource))]
public class BGMManager : MonoBehaviour
{{
    [SerializeField] private AudioClip bgmClip;
    [SerializeField] private float fadeSeconds = 1f;

    private const float Bpm = {bpm}f;
    private AudioSource source;

    public float BeatInterval => 60f / Bpm;

    void Awake()
    {{
        source = GetComponent<AudioSource>();
        source.loop = true;
        source.playOnAwake = false;
    }}

    public void PlayBGM()
    {{
        if (bgmClip == null) return;
        source.clip = bgmClip;
        source.volume = 1f;
        source.Play();
    }}

    public void StopBGM()
    {{
        StartCoroutine(FadeOut());
    }}

    private IEnumerator FadeOut()
    {{
        float start = source.volume;
        for (float t = 0; t < fadeSeconds; t += Time.deltaTime)
        {{
            source.volume = Mathf.Lerp(start, 0f, t / fadeSeconds);
            yield return null;
        }}
        source.Stop();
    }}

    // Playback time of the next beat, for beat-synced events.
    public float NextBeatTime()
    {{
        return Mathf.Ceil(source.time / BeatInterval) * BeatInterval;
    }}
}}
"""

_GODOT_TEMPLATE = """\
# Godot 4 - BGM playback
# Import the track into res:// and assign it to bgm_stream:
#   {audio_url}

extends Node

@export var bgm_stream: AudioStream
@export var fade_seconds: float = 1.0

const BPM: float = {bpm}.0

var player: AudioStreamPlayer

func _ready() -> void:
    player = AudioStreamPlayer.new()
    player.bus = "Music"
    add_child(player)

func play_bgm() -> void:
    if bgm_stream:
        player.stream = bgm_stream
        player.volume_db = 0.0
        player.play()

func stop_bgm() -> void:
    var tween := create_tween()
    tween.tween_property(player, "volume_db", -80.0, fade_seconds)
    tween.tween_callback(player.stop)

# Seconds until the next beat, for beat-synced events.
func time_to_next_beat() -> float:
    var interval := 60.0 / BPM
    var position := player.get_playback_position()
    return ceil(position / interval) * interval - position
"""

_TEMPLATES: dict[str, str] = {
    "unreal": _UNREAL_TEMPLATE,
    "unity": _UNITY_TEMPLATE,
    "godot": _GODOT_TEMPLATE,
}


def get_integration_code(engine: Engine | None, audio_url: str, bpm: int) -> str | None:
    """Engine snippet with the track URL and BPM filled in; None when no engine was asked for."""
    if engine is None:
        return None
    return _TEMPLATES[engine].format(audio_url=audio_url, bpm=bpm)


_ADAPTIVE_TEMPLATE = """\
// Adaptive music - layer mixing
// Base track: {share_link}
// Each layer is the same track rendered with every other stem muted, so all
// layers stay in sync when started together.

class AdaptiveMusic {{
  constructor(fadeMs = 500) {{
    this.fadeMs = fadeMs;
    this.layers = new Map();
  }}

  async load(urls) {{
    for (const [name, url] of Object.entries(urls)) {{
      const audio = new Audio(url);
      audio.loop = true;
      audio.volume = 0;
      this.layers.set(name, audio);
    }}
  }}

  play() {{
    for (const audio of this.layers.values()) {{
      audio.currentTime = 0;
      audio.play();
    }}
  }}

  fadeTo(name, target) {{
    const audio = this.layers.get(name);
    if (!audio) return;
    const from = audio.volume;
    const t0 = performance.now();
    const step = () => {{
      const k = Math.min((performance.now() - t0) / this.fadeMs, 1);
      audio.volume = from + (target - from) * k;
      if (k < 1) requestAnimationFrame(step);
    }};
    requestAnimationFrame(step);
  }}

  // Layer volumes per gameplay state.
  setState(state) {{
    const mixes = {{
      exploration: {{ backing: 0.8, melody: 0.6, drums: 0.2, bass: 0.4 }},
      combat:      {{ backing: 1.0, melody: 0.8, drums: 1.0, bass: 0.9 }},
      stealth:     {{ backing: 0.5, melody: 0.3, drums: 0.0, bass: 0.4 }},
      boss:        {{ backing: 1.0, melody: 1.0, drums: 1.0, bass: 1.0 }},
    }};
    for (const [name, volume] of Object.entries(mixes[state] || {{}})) {{
      this.fadeTo(name, volume);
    }}
  }}
}}

// Usage:
// const music = new AdaptiveMusic();
// await music.load({{
{layer_lines}
// }});
// music.play();
// music.setState('exploration');
"""


def adaptive_audio_code(layers: list[str], share_link: str) -> str:
    """Layer-mixing snippet listing every requested layer."""
    layer_lines = "\n".join(f"//   '{name}': '<{name}_audio_url>'," for name in layers)
    return _ADAPTIVE_TEMPLATE.format(share_link=share_link, layer_lines=layer_lines)
