"""Exception types raised by the orchestration layer."""

from __future__ import annotations


class IntelboardError(Exception):
    """Base class for all intelboard errors."""


class ConfigError(IntelboardError):
    """Configuration is missing or invalid (e.g. no API key)."""


class RemoteServiceError(IntelboardError):
    """The remote generative service returned a failure status."""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}" if message else f"HTTP {status_code}")

    @property
    def retryable(self) -> bool:
        return self.status_code == 429 or 500 <= self.status_code <= 599


class MalformedResponse(IntelboardError):
    """The service answered, but the payload failed structural validation."""

    def __init__(self, task: str, reason: str, raw: str | None = None):
        self.task = task
        self.reason = reason
        self.raw = raw
        super().__init__(f"Malformed {task} response: {reason}")
