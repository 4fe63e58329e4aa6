"""HTTP client for the Soundraw v3 music generation REST API.

Generation is asynchronous on Soundraw's side:
  1. Compose             POST /musics/compose     -> {request_id}
  2. Similar             POST /musics/similar     -> {request_id}
  3. Customize           POST /musics/customize   -> {request_id}
  4. Poll result         GET  /results/{request_id} -> {status, result?}
  5. Available tags      POST /musics/tags
  6. Account usage       GET  /accounts

A submitted job is polled every ``poll_interval`` seconds until it is
``done`` or ``failed``, or until ``max_poll_attempts`` polls have been
spent. Nothing is retried: any non-2xx answer ends the call.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

import httpx

from game_bgm.errors import (
    BgmError,
    ConfigurationError,
    GenerationFailedError,
    GenerationTimeoutError,
    SoundrawAPIError,
)
from game_bgm.models.soundraw import (
    ComposeRequest,
    CustomizeRequest,
    SimilarRequest,
    SoundrawJob,
    SoundrawRequest,
    SoundrawTrack,
)
from game_bgm.models.tool_io import ExtractedResult

log = logging.getLogger(__name__)

DEFAULT_SOUNDRAW_URL = "https://soundraw.io/api/v3"
POLL_INTERVAL_SECONDS = 2.0
MAX_POLL_ATTEMPTS = 150  # 5 minutes at the default interval

# Order tried when the requested format has no URL.
FORMAT_FALLBACK_ORDER: tuple[str, ...] = ("m4a", "mp3", "wav")


def get_audio_url(track: SoundrawTrack, file_format: str) -> str:
    """Pick the URL for ``file_format``, falling back to m4a, mp3, wav.

    Returns an empty string when the track carries no URL at all.
    """
    url = getattr(track, f"{file_format}_url", None)
    if url:
        return url
    for fmt in FORMAT_FALLBACK_ORDER:
        url = getattr(track, f"{fmt}_url")
        if url:
            if fmt != file_format:
                log.debug("No %s URL in result, using %s", file_format, fmt)
            return url
    log.debug("Result has no audio URL in any format")
    return ""


def _parse_bpm(bpm: str | int | float) -> int:
    return int(float(bpm))


def extract_result(job: SoundrawJob, file_format: str) -> ExtractedResult:
    """Flatten a finished job into the fields the tools report."""
    if job.result is None:
        raise BgmError(f"No result in Soundraw response for request: {job.request_id}")

    track = job.result
    try:
        bpm = _parse_bpm(track.bpm)
    except (ValueError, OverflowError):
        raise BgmError(
            f"Invalid bpm {track.bpm!r} in Soundraw result for request: {job.request_id}"
        ) from None

    return ExtractedResult(
        share_link=track.share_link,
        audio_url=get_audio_url(track, file_format),
        request_id=job.request_id,
        duration_seconds=track.length,
        bpm=bpm,
        timestamps=track.timestamps,
    )


class SoundrawClient:
    """Async client for the Soundraw REST API.

    Configured via environment variables unless given explicitly:
      - SOUNDRAW_API_KEY: bearer token (required, checked on first request)
      - SOUNDRAW_API_BASE_URL: base URL (default: https://soundraw.io/api/v3)

    ``transport`` is handed to ``httpx.AsyncClient`` and exists so tests can
    plug in an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        max_poll_attempts: int = MAX_POLL_ATTEMPTS,
        timeout: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key or os.environ.get("SOUNDRAW_API_KEY")
        self.base_url = (
            base_url or os.environ.get("SOUNDRAW_API_BASE_URL") or DEFAULT_SOUNDRAW_URL
        ).rstrip("/")
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise ConfigurationError("SOUNDRAW_API_KEY environment variable is required")
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    @staticmethod
    def _check(resp: httpx.Response, what: str) -> None:
        if not resp.is_success:
            log.error("Soundraw %s API error: status=%d body=%s", what, resp.status_code, resp.text)
            raise SoundrawAPIError(resp.status_code, resp.text)

    # ── 1–3. Submission ─────────────────────────────────

    async def submit(self, endpoint: str, request: SoundrawRequest) -> str:
        """POST a generation request and return the job's request_id.

        ``endpoint`` is one of ``compose``, ``similar``, ``customize``.
        """
        headers = self._headers()
        async with self._client() as client:
            resp = await client.post(
                f"{self.base_url}/musics/{endpoint}",
                json=request.to_payload(),
                headers=headers,
            )
        self._check(resp, endpoint)

        body = resp.json()
        request_id = body.get("request_id")
        if not request_id:
            raise BgmError(f"No request_id in Soundraw {endpoint} response: {body}")
        log.info("Submitted Soundraw %s request %s", endpoint, request_id)
        return request_id

    # ── 4. Poll Result ──────────────────────────────────

    async def poll_result(self, request_id: str) -> SoundrawJob:
        """Poll GET /results/{request_id} until the job is done.

        Raises GenerationFailedError on ``failed`` and GenerationTimeoutError
        once ``max_poll_attempts`` polls have all answered ``processing``.
        """
        log.info("Polling for result of %s", request_id)
        headers = self._headers()
        async with self._client() as client:
            for attempt in range(self.max_poll_attempts):
                resp = await client.get(
                    f"{self.base_url}/results/{request_id}",
                    headers=headers,
                )
                self._check(resp, "results")

                job = SoundrawJob.model_validate(resp.json())
                log.debug("Poll %d for %s: status=%s", attempt + 1, request_id, job.status)

                if job.status == "done":
                    log.info("Music generation complete for %s", request_id)
                    return job
                if job.status == "failed":
                    log.error("Music generation failed for %s", request_id)
                    raise GenerationFailedError(request_id)

                await asyncio.sleep(self.poll_interval)

        raise GenerationTimeoutError(request_id, self.max_poll_attempts)

    async def _generate(
        self, endpoint: str, request: SoundrawRequest
    ) -> tuple[SoundrawJob, str]:
        request_id = await self.submit(endpoint, request)
        job = await self.poll_result(request_id)
        return job, request.file_format_or_default

    async def compose(self, request: ComposeRequest) -> tuple[SoundrawJob, str]:
        """Compose a new track. Returns the finished job and its file format."""
        log.info(
            "Composing music via Soundraw: length=%s moods=%s",
            request.length,
            request.moods,
        )
        return await self._generate("compose", request)

    async def similar(self, request: SimilarRequest) -> tuple[SoundrawJob, str]:
        """Create a new track in the style of ``request.share_link``."""
        log.info("Creating similar music via Soundraw: share_link=%s", request.share_link)
        return await self._generate("similar", request)

    async def customize(self, request: CustomizeRequest) -> tuple[SoundrawJob, str]:
        """Re-render ``request.share_link`` with new energy levels and/or muted stems."""
        log.info(
            "Customizing music via Soundraw: share_link=%s mute_stems=%s",
            request.share_link,
            request.mute_stems,
        )
        return await self._generate("customize", request)

    # ── 5. Available Tags ───────────────────────────────

    async def get_available_tags(
        self, selected: list[dict[str, Any]] | None = None
    ) -> dict[str, list[str]]:
        """Tags still selectable given an ordered list of already chosen ones.

        POST /musics/tags (JSON: selected=[{order, category, value}, ...])

        Returns: {themes, moods, genres, tempos}
        """
        headers = self._headers()
        async with self._client() as client:
            resp = await client.post(
                f"{self.base_url}/musics/tags",
                json={"selected": selected or []},
                headers=headers,
            )
        self._check(resp, "tags")
        return resp.json()

    # ── 6. Account Usage ────────────────────────────────

    async def get_account_usage(
        self, month: int | None = None, year: int | None = None
    ) -> dict[str, Any]:
        """Usage summary for the API key's account.

        GET /accounts?month=&year=
        """
        params: dict[str, int] = {}
        if month:
            params["month"] = month
        if year:
            params["year"] = year

        headers = self._headers()
        async with self._client() as client:
            resp = await client.get(
                f"{self.base_url}/accounts",
                params=params,
                headers=headers,
            )
        self._check(resp, "accounts")
        return resp.json()
