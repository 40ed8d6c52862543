"""Verbose transport trace emitted through httpx event hooks."""

from __future__ import annotations

from typing import Any, Awaitable, Callable

import httpx
from loguru import logger

from ..models.enums import Verbosity

EventHook = Callable[[Any], Awaitable[None]]


def build_event_hooks(verbosity: Verbosity) -> dict[str, list[EventHook]]:
    """Return httpx ``event_hooks`` for the given trace level.

    Hooks only log; they never alter the request or the response.
    """

    if verbosity == Verbosity.SILENT:
        return {"request": [], "response": []}

    async def log_request(request: httpx.Request) -> None:
        logger.info("> {} {}", request.method, request.url)
        if verbosity >= Verbosity.DEBUG:
            for name, value in request.headers.items():
                logger.info("> {}: {}", name, value)
            logger.info("> {}", request.content.decode("utf-8", errors="replace"))

    async def log_response(response: httpx.Response) -> None:
        logger.info("< {} {} ({})", response.status_code, response.reason_phrase, response.request.url)
        if verbosity >= Verbosity.DEBUG:
            for name, value in response.headers.items():
                logger.info("< {}: {}", name, value)
            await response.aread()
            logger.info("< {}", response.text)

    return {"request": [log_request], "response": [log_response]}
