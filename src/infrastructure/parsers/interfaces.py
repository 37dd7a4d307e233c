"""Protocol interfaces for infrastructure collaborators."""

from typing import Any, Protocol


class TextExtractorProtocol(Protocol):
    """Turns raw document bytes into text."""

    def extract(self, data: bytes) -> str:
        """Extract the document's text."""
        ...


class HTTPClientProtocol(Protocol):
    """Protocol for HTTP client."""

    async def get_text(self, url: str) -> str:
        """Get text content from URL."""
        ...

    async def post_json(self, url: str, payload: dict[str, Any]) -> Any:
        """Post JSON and decode the JSON response."""
        ...


class DocumentStoreProtocol(Protocol):
    """External per-user document storage."""

    async def get(self, user_id: str) -> dict[str, Any] | None:
        """Fetch a user document, None if absent."""
        ...

    async def update(self, user_id: str, fields: dict[str, Any]) -> None:
        """Atomically replace the given top-level fields of a user document."""
        ...
