"""Methods for streaming a chat reply."""

from __future__ import annotations

import logging
from http import HTTPStatus
from collections.abc import AsyncIterator, Mapping
from typing import TYPE_CHECKING, Any

from ._utils import check_errors, decode_sse_line, get_headers, prepare_messages

if TYPE_CHECKING:
    from artifact_stream.session import ProjectSession

    from . import AsyncChatStream

logger = logging.getLogger(__name__)


async def stream_text(
    self: "AsyncChatStream",
    messages: list[Mapping[str, Any]],
) -> AsyncIterator[str]:
    """Post a conversation and yield the reply text as it arrives.

    Parameters
    ----------
    messages: list[Mapping[str, Any]]
        The conversation so far, each message carrying ``role`` and ``content``.

    Yields
    ------
    str
        Text deltas decoded from the server-sent events of the reply.
    """
    async with self.get_client().stream(
        "POST",
        self.chat_url,
        headers=get_headers(self),
        json={"messages": prepare_messages(messages)},
    ) as response:
        if response.status_code != HTTPStatus.OK:
            await response.aread()
        check_errors(response)

        async for line in response.aiter_lines():
            text = decode_sse_line(line)
            if text:
                yield text


async def stream_into(
    self: "AsyncChatStream",
    session: "ProjectSession",
    messages: list[Mapping[str, Any]],
) -> str:
    """Stream a reply into ``session`` delta by delta.

    Parameters
    ----------
    session: ProjectSession
        The session whose parser and file system receive the reply.
    messages: list[Mapping[str, Any]]
        The conversation so far.

    Returns
    -------
    str
        The full reply text.
    """
    reply = ""
    async for text in self.stream_text(messages):
        reply += text
        session.feed(text)

    logger.info(
        "Chat reply finished with %d characters, artifact %s",
        len(reply),
        session.status,
    )
    return reply
