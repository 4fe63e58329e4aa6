import pytest

from fakes import FakeMusicService


@pytest.fixture
def music() -> FakeMusicService:
    return FakeMusicService()


@pytest.fixture
def no_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)
    monkeypatch.delenv("SOUNDRAW_API_KEY", raising=False)
