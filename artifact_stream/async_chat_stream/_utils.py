"""Utility functions for the async chat stream."""

from __future__ import annotations

import json
import logging
import os
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

    from . import AsyncChatStream

logger = logging.getLogger(__name__)

SSE_DATA_PREFIX = "data: "
TEXT_DELTA_EVENT = "content_block_delta"


def env_override(env_var_name: str, *, override: str | None = None) -> str | None:
    """Prefer an explicit value, then the environment."""
    if override is not None:
        return override
    return os.getenv(env_var_name) or None


def get_headers(self: AsyncChatStream) -> dict[str, str]:
    """Get headers for HTTP requests.

    Returns:
        dict[str, str]: Headers to include in the request.

    """
    headers = {"Content-Type": "application/json"}
    if self.token:
        headers["Authorization"] = f"Bearer {self.token}"
        headers["apikey"] = self.token
    return headers


def prepare_messages(
    messages: list[Mapping[str, Any]],
) -> list[dict[str, str]]:
    """Keep only the role and content of each chat message."""
    return [
        {"role": str(message["role"]), "content": str(message["content"])}
        for message in messages
    ]


def check_errors(response: httpx.Response) -> None:
    """Handle errors in HTTP responses."""
    if response.status_code != HTTPStatus.OK:
        error_msg = f"Chat endpoint returned HTTP {response.status_code}"
        raise httpx.HTTPStatusError(
            error_msg,
            request=response.request,
            response=response,
        )


def decode_sse_line(line: str) -> str | None:
    """Return the text carried by one server-sent event line, if any.

    Only ``content_block_delta`` events with a text delta carry reply text;
    other events and JSON that does not decode are skipped.
    """
    if not line.startswith(SSE_DATA_PREFIX):
        return None

    data = line[len(SSE_DATA_PREFIX) :].strip()
    if not data:
        return None

    try:
        event = json.loads(data)
    except json.JSONDecodeError:
        logger.debug("Skipping undecodable event data: %s", data)
        return None

    if not isinstance(event, dict) or event.get("type") != TEXT_DELTA_EVENT:
        return None
    delta = event.get("delta")
    if isinstance(delta, dict) and isinstance(delta.get("text"), str):
        return delta["text"] or None
    return None
