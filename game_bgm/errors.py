"""Exception types raised by the analyzer, the Soundraw client and the tool handlers."""

from __future__ import annotations


class BgmError(Exception):
    """Base class for every error this package raises on purpose."""


class ConfigurationError(BgmError):
    """A required credential is missing from the environment."""


class SoundrawAPIError(BgmError):
    """The Soundraw API answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Soundraw API error: {status_code} - {body}")


class GenerationFailedError(BgmError):
    """A generation job reached the ``failed`` status."""

    def __init__(self, request_id: str):
        self.request_id = request_id
        super().__init__(f"Soundraw generation failed for request: {request_id}")


class GenerationTimeoutError(BgmError, TimeoutError):
    """A generation job never reached a terminal status within the poll budget."""

    def __init__(self, request_id: str, attempts: int):
        self.request_id = request_id
        self.attempts = attempts
        super().__init__(
            f"Timeout waiting for Soundraw result: {request_id} "
            f"(no terminal status after {attempts} polls)"
        )


class SceneAnalysisError(BgmError, ValueError):
    """The LLM reply was empty or could not be parsed into music parameters."""
