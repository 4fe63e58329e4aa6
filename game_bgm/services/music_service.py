from __future__ import annotations

from typing import Protocol, runtime_checkable

from game_bgm.models.soundraw import (
    ComposeRequest,
    CustomizeRequest,
    SimilarRequest,
    SoundrawJob,
)


@runtime_checkable
class MusicService(Protocol):
    """Interface the tool handlers need from a music generation backend.

    ``SoundrawClient`` is the real implementation. Each method submits one
    job, waits for it to finish and returns the job with the file format
    the caller asked for.
    """

    async def compose(self, request: ComposeRequest) -> tuple[SoundrawJob, str]: ...

    async def similar(self, request: SimilarRequest) -> tuple[SoundrawJob, str]: ...

    async def customize(self, request: CustomizeRequest) -> tuple[SoundrawJob, str]: ...
