"""Test doubles for the chat client, the scene analyzer and the music service."""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

from game_bgm.models.analysis import SceneAnalysis, TransitionAnalysis
from game_bgm.models.soundraw import (
    ComposeRequest,
    CustomizeRequest,
    SimilarRequest,
    SoundrawJob,
)


class FakeChatClient:
    """Mimics ``AsyncOpenAI().chat.completions.create`` with canned replies."""

    def __init__(self, *replies: str | dict | None):
        self.replies = [json.dumps(r) if isinstance(r, dict) else r for r in replies]
        self.calls: list[dict[str, Any]] = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    async def _create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        content = self.replies.pop(0)
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=None)


class FakeAnalyzer:
    """Stands in for SceneAnalyzer, returning fixed analyses."""

    def __init__(
        self,
        scene: SceneAnalysis | None = None,
        transition: TransitionAnalysis | None = None,
    ):
        self.scene = scene
        self.transition = transition
        self.calls: list[tuple[str, tuple]] = []

    async def analyze_scene(self, *args: Any) -> SceneAnalysis:
        self.calls.append(("scene", args))
        assert self.scene is not None
        return self.scene

    async def analyze_transition(self, *args: Any) -> TransitionAnalysis:
        self.calls.append(("transition", args))
        assert self.transition is not None
        return self.transition


def done_job(request_id: str = "req-1", **result: Any) -> SoundrawJob:
    track = {
        "bpm": "120",
        "share_link": "https://soundraw.io/edit_music?m=abc",
        "length": 60,
        "timestamps": [],
        "m4a_url": "https://cdn.soundraw.io/abc.m4a",
    }
    track.update(result)
    return SoundrawJob.model_validate(
        {"request_id": request_id, "status": "done", "result": track}
    )


class FakeMusicService:
    """Records every request and answers each one with an immediately finished job."""

    def __init__(self, job_factory=None):
        self.requests: list[tuple[str, Any]] = []
        self._job_factory = job_factory or (lambda endpoint, request, n: done_job(f"req-{n}"))

    async def _finish(self, endpoint: str, request: Any) -> tuple[SoundrawJob, str]:
        self.requests.append((endpoint, request))
        job = self._job_factory(endpoint, request, len(self.requests))
        return job, request.file_format_or_default

    async def compose(self, request: ComposeRequest) -> tuple[SoundrawJob, str]:
        return await self._finish("compose", request)

    async def similar(self, request: SimilarRequest) -> tuple[SoundrawJob, str]:
        return await self._finish("similar", request)

    async def customize(self, request: CustomizeRequest) -> tuple[SoundrawJob, str]:
        return await self._finish("customize", request)
