import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from fakes import done_job
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
    EnergySegment,
    SimilarRequest,
    SoundrawJob,
    SoundrawTrack,
)
from game_bgm.services.soundraw_client import (
    SoundrawClient,
    extract_result,
    get_audio_url,
)

BASE = "https://soundraw.test/api/v3"
SLEEP = "game_bgm.services.soundraw_client.asyncio.sleep"

TRACK = {
    "bpm": "142",
    "share_link": "https://soundraw.io/edit_music?m=xyz",
    "length": 30,
    "timestamps": [{"start": 0, "end": 8}],
    "m4a_url": "https://cdn.soundraw.io/xyz.m4a",
}


class Recorder:
    """MockTransport handler that answers from a queue and keeps every request."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


def make_client(recorder: Recorder, **kwargs) -> SoundrawClient:
    return SoundrawClient(
        api_key="test-key",
        base_url=BASE + "/",
        transport=httpx.MockTransport(recorder),
        **kwargs,
    )


def processing(request_id="req-1") -> httpx.Response:
    return httpx.Response(200, json={"request_id": request_id, "status": "processing"})


def done(request_id="req-1", **track) -> httpx.Response:
    return httpx.Response(
        200,
        json={"request_id": request_id, "status": "done", "result": {**TRACK, **track}},
    )


class TestSubmit:
    @pytest.mark.asyncio
    async def test_posts_payload_with_bearer_token(self):
        recorder = Recorder(httpx.Response(200, json={"request_id": "req-9"}))
        client = make_client(recorder)
        request = ComposeRequest(length=30, moods=["Epic"], tempo=["high"], file_format=["mp3"])

        request_id = await client.submit("compose", request)

        assert request_id == "req-9"
        sent = recorder.requests[0]
        assert sent.method == "POST"
        assert str(sent.url) == f"{BASE}/musics/compose"
        assert sent.headers["Authorization"] == "Bearer test-key"
        assert json.loads(sent.content) == {
            "length": 30,
            "moods": ["Epic"],
            "tempo": ["high"],
            "file_format": ["mp3"],
        }

    @pytest.mark.asyncio
    async def test_error_status_carries_status_and_body(self):
        recorder = Recorder(httpx.Response(422, text="bad moods"))
        client = make_client(recorder)

        with pytest.raises(SoundrawAPIError) as exc_info:
            await client.submit("compose", ComposeRequest(length=30))

        assert exc_info.value.status_code == 422
        assert exc_info.value.body == "bad moods"
        assert str(exc_info.value) == "Soundraw API error: 422 - bad moods"

    @pytest.mark.asyncio
    async def test_missing_request_id(self):
        client = make_client(Recorder(httpx.Response(200, json={})))
        with pytest.raises(BgmError):
            await client.submit("compose", ComposeRequest(length=30))

    @pytest.mark.asyncio
    async def test_missing_api_key_raises_before_any_request(self, no_credentials):
        recorder = Recorder()
        client = SoundrawClient(transport=httpx.MockTransport(recorder))
        with pytest.raises(ConfigurationError):
            await client.submit("compose", ComposeRequest(length=30))
        assert recorder.requests == []

    def test_base_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("SOUNDRAW_API_BASE_URL", "https://example.test/v3/")
        assert SoundrawClient(api_key="k").base_url == "https://example.test/v3"


class TestPollResult:
    @pytest.mark.asyncio
    async def test_polls_until_done(self):
        recorder = Recorder(processing(), processing(), processing(), done())
        client = make_client(recorder, poll_interval=2.0)

        with patch(SLEEP, new_callable=AsyncMock) as sleep:
            job = await client.poll_result("req-1")

        assert job.status == "done"
        assert job.result.share_link == TRACK["share_link"]
        assert len(recorder.requests) == 4
        assert all(str(r.url) == f"{BASE}/results/req-1" for r in recorder.requests)
        assert sleep.await_count == 3
        sleep.assert_awaited_with(2.0)

    @pytest.mark.asyncio
    async def test_done_on_first_poll_never_sleeps(self):
        client = make_client(Recorder(done()))
        with patch(SLEEP, new_callable=AsyncMock) as sleep:
            await client.poll_result("req-1")
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_times_out_after_max_attempts(self):
        recorder = Recorder(*[processing() for _ in range(5)])
        client = make_client(recorder, max_poll_attempts=5)

        with patch(SLEEP, new_callable=AsyncMock) as sleep:
            with pytest.raises(GenerationTimeoutError) as exc_info:
                await client.poll_result("req-1")

        assert len(recorder.requests) == 5
        # Every processing poll, the last one included, is followed by one sleep.
        assert sleep.await_count == 5
        assert exc_info.value.request_id == "req-1"
        assert exc_info.value.attempts == 5
        assert isinstance(exc_info.value, TimeoutError)

    @pytest.mark.asyncio
    async def test_failed_status(self):
        recorder = Recorder(
            processing("req-7"),
            httpx.Response(200, json={"request_id": "req-7", "status": "failed"}),
        )
        client = make_client(recorder)

        with patch(SLEEP, new_callable=AsyncMock):
            with pytest.raises(GenerationFailedError) as exc_info:
                await client.poll_result("req-7")

        assert exc_info.value.request_id == "req-7"
        assert len(recorder.requests) == 2

    @pytest.mark.asyncio
    async def test_error_status_is_not_retried(self):
        recorder = Recorder(processing(), httpx.Response(500, text="oops"), done())
        client = make_client(recorder)

        with patch(SLEEP, new_callable=AsyncMock):
            with pytest.raises(SoundrawAPIError) as exc_info:
                await client.poll_result("req-1")

        assert exc_info.value.status_code == 500
        assert len(recorder.requests) == 2


class TestGenerate:
    @pytest.mark.asyncio
    async def test_compose_returns_job_and_requested_format(self):
        recorder = Recorder(httpx.Response(200, json={"request_id": "req-1"}), done())
        client = make_client(recorder)

        job, fmt = await client.compose(ComposeRequest(length=30, file_format=["wav"]))

        assert job.request_id == "req-1"
        assert fmt == "wav"

    @pytest.mark.asyncio
    async def test_similar_and_customize_hit_their_endpoints(self):
        recorder = Recorder(
            httpx.Response(200, json={"request_id": "a"}),
            done("a"),
            httpx.Response(200, json={"request_id": "b"}),
            done("b"),
        )
        client = make_client(recorder)
        link = TRACK["share_link"]

        _, fmt = await client.similar(SimilarRequest(share_link=link, length=40))
        await client.customize(
            CustomizeRequest(
                share_link=link,
                energy_levels=[EnergySegment(start=0, end=60, energy="Very High")],
            )
        )

        assert fmt == "m4a"
        assert [str(r.url) for r in recorder.requests] == [
            f"{BASE}/musics/similar",
            f"{BASE}/results/a",
            f"{BASE}/musics/customize",
            f"{BASE}/results/b",
        ]
        assert json.loads(recorder.requests[2].content)["energy_levels"] == [
            {"start": 0.0, "end": 60.0, "energy": "Very High"}
        ]


class TestAccountEndpoints:
    @pytest.mark.asyncio
    async def test_available_tags(self):
        tags = {"moods": ["Epic"], "genres": [], "themes": [], "tempos": ["high"]}
        recorder = Recorder(httpx.Response(200, json=tags))
        selected = [{"order": 0, "category": "moods", "value": "Epic"}]

        assert await make_client(recorder).get_available_tags(selected) == tags
        assert json.loads(recorder.requests[0].content) == {"selected": selected}

    @pytest.mark.asyncio
    async def test_account_usage_query(self):
        recorder = Recorder(httpx.Response(200, json={"usage": 3}))

        assert await make_client(recorder).get_account_usage(month=5, year=2025) == {"usage": 3}
        assert recorder.requests[0].url.params["month"] == "5"
        assert recorder.requests[0].url.params["year"] == "2025"


class TestResultExtraction:
    def test_requested_format_preferred(self):
        track = SoundrawTrack(**TRACK, wav_url="https://cdn.soundraw.io/xyz.wav")
        assert get_audio_url(track, "wav") == "https://cdn.soundraw.io/xyz.wav"

    def test_falls_back_to_m4a(self):
        assert get_audio_url(SoundrawTrack(**TRACK), "wav") == TRACK["m4a_url"]

    def test_falls_back_to_mp3_before_wav(self):
        track = SoundrawTrack(
            **{**TRACK, "m4a_url": None},
            mp3_url="https://cdn.soundraw.io/xyz.mp3",
            wav_url="https://cdn.soundraw.io/xyz.wav",
        )
        assert get_audio_url(track, "m4a") == "https://cdn.soundraw.io/xyz.mp3"

    def test_no_urls_gives_empty_string(self):
        assert get_audio_url(SoundrawTrack(**{**TRACK, "m4a_url": None}), "mp3") == ""

    @pytest.mark.parametrize("bpm, expected", [("142", 142), (120, 120), (97.6, 97), ("88.0", 88)])
    def test_bpm_is_integer(self, bpm, expected):
        result = extract_result(done_job(bpm=bpm), "m4a")
        assert result.bpm == expected
        assert isinstance(result.bpm, int)

    def test_extract_fields(self):
        result = extract_result(done_job("req-3", **TRACK), "m4a")
        assert result.model_dump() == {
            "share_link": TRACK["share_link"],
            "audio_url": TRACK["m4a_url"],
            "request_id": "req-3",
            "duration_seconds": 30,
            "bpm": 142,
            "timestamps": [{"start": 0, "end": 8}],
        }

    @pytest.mark.parametrize("bpm", ["", "fast", "nan"])
    def test_unparseable_bpm_names_the_request(self, bpm):
        with pytest.raises(BgmError, match="request: req-5"):
            extract_result(done_job("req-5", bpm=bpm), "m4a")

    def test_missing_result(self):
        job = SoundrawJob(request_id="req-4", status="done")
        with pytest.raises(BgmError):
            extract_result(job, "m4a")
