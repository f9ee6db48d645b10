from typing import Any, Protocol


class ProviderError(Exception):
    """Transport or service failure reported by a completion provider."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CompletionProvider(Protocol):
    async def complete(self, messages: list[dict[str, Any]]) -> str | None: ...
