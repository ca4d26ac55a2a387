"""Implements an async client for chat endpoints that stream artifacts.

The endpoint receives the conversation as JSON and answers with server-sent
events. The text deltas of the reply can be consumed directly or fed into a
:class:`~artifact_stream.session.ProjectSession`.
"""

from typing import Self

import httpx

from ._stream import stream_into, stream_text
from ._utils import env_override

DEFAULT_TIMEOUT = 60.0


class AsyncChatStream:
    """Streams chat replies from an HTTP endpoint."""

    chat_url: str
    token: str | None
    timeout: float
    _client: httpx.AsyncClient | None

    def __init__(
        self: Self,
        chat_url: str | None = None,
        token: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize an AsyncChatStream instance.

        Parameters
        ----------
        chat_url: str | None
            The URL of the chat endpoint. Falls back to ``ARTIFACT_CHAT_URL``.
        token: str | None
            The bearer token sent with each request. Falls back to
            ``ARTIFACT_CHAT_TOKEN``.
        timeout: float
            Timeout in seconds for the HTTP client.
        transport: httpx.AsyncBaseTransport | None
            A custom transport for the HTTP client (optional).

        """
        url = env_override("ARTIFACT_CHAT_URL", override=chat_url)
        if not url:
            error_msg = (
                "Chat URL must be provided or set in ARTIFACT_CHAT_URL, "
                "e.g. https://<project>.supabase.co/functions/v1/sakura-chat"
            )
            raise ValueError(error_msg)
        self.chat_url = url.removesuffix("/")
        self.token = env_override("ARTIFACT_CHAT_TOKEN", override=token)
        self.timeout = timeout
        self._transport = transport
        self._client = None

    async def __aenter__(self: Self) -> Self:
        """Async context manager entry."""
        self.get_client()
        return self

    async def __aexit__(
        self: Self,
        exc_type: object,
        exc_val: object,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.aclose()

    async def aclose(self: Self) -> None:
        """Explicitly close the httpx client and clean up resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def get_client(self: Self) -> httpx.AsyncClient:
        """Get or create httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    stream_text = stream_text
    stream_into = stream_into
