"""Client for the Moodle webservice REST endpoint.

Every call is a single form-encoded POST to
``{subdirectory}/webservice/rest/server.php``; the remote function is picked
by the ``wsfunction`` parameter and the JSON response body is returned
as-is.  Each :meth:`MoodleRestClient.send` opens its own
:class:`httpx.AsyncClient`, so concurrent calls on one instance share no
mutable state.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

import httpx
from loguru import logger
from pydantic import ValidationError

from ..config.client_config import ClientConfig, get_client_config
from ..models.enums import Protocol, Verbosity
from ..models.request_envelope import build_envelope
from ..utils.error_handler import HttpError, InvalidArgumentError, ParseError
from ..utils.query_string import encode_form
from ..utils.tracing import build_event_hooks

CONTENT_TYPE = "application/x-www-form-urlencoded"

_CONFIG_TIMEOUT = object()


@dataclass(frozen=True)
class PreparedRequest:
    """Encoded body and headers of one call."""

    headers: dict[str, str]
    content: bytes


class MoodleRestClient:
    """Send webservice calls to a Moodle site.

    Parameters
    ----------
    host: str
        Site host without scheme, port or slashes, e.g. ``"moodle.example.org"``.
    token: str
        Webservice token.
    port: int
        Site port, 80 by default.
    protocol: str
        ``"http"`` (default) or ``"https"``.
    subdirectory: str, optional
        Site subdirectory such as ``"/moodle"`` or ``"moodle"``.
    timeout: float, optional
        Seconds to wait for each request; ``None`` waits indefinitely.
    verbosity: int, optional
        Initial trace level (0, 1 or 2).  When omitted it is read from
        ``MOODLE_VERBOSITY`` / ``HTTP_VERBOSE``.
    transport: httpx.AsyncBaseTransport, optional
        Transport used instead of the network one, mainly for tests.
    """

    def __init__(
        self,
        host: str,
        token: str,
        *,
        port: int = 80,
        protocol: Protocol | str = Protocol.HTTP,
        subdirectory: str | None = None,
        timeout: float | None = 30.0,
        verbosity: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not host:
            raise InvalidArgumentError("host required")
        if not token:
            raise InvalidArgumentError("token required")

        settings: dict[str, Any] = {
            "host": host,
            "token": token,
            "port": port,
            "protocol": protocol,
            "subdirectory": subdirectory,
            "timeout": timeout,
        }
        if verbosity is not None:
            settings["verbosity"] = verbosity
        try:
            config = ClientConfig(**settings)
        except ValidationError as exc:
            raise InvalidArgumentError(str(exc)) from exc

        self._config = config
        self._transport = transport
        self._verbosity = config.verbosity

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "MoodleRestClient":
        """Build a client from an existing :class:`ClientConfig`."""

        return cls(
            config.host,
            config.token,
            port=config.port,
            protocol=config.protocol,
            subdirectory=config.subdirectory,
            timeout=config.timeout,
            verbosity=config.verbosity,
            transport=transport,
        )

    @classmethod
    def from_env(cls, transport: httpx.AsyncBaseTransport | None = None) -> "MoodleRestClient":
        """Build a client from ``MOODLE_*`` environment variables."""

        try:
            config = get_client_config()
        except ValidationError as exc:
            raise InvalidArgumentError(str(exc)) from exc
        return cls.from_config(config, transport)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def verbosity(self) -> Verbosity:
        return self._verbosity

    @property
    def options(self) -> dict[str, Any]:
        """Static request options shared by every call."""

        return {
            "hostname": self._config.host,
            "path": self._config.path,
            "method": "POST",
            "headers": {"Content-type": CONTENT_TYPE},
            "port": self._config.port,
        }

    def set_verbosity(self, level: int = Verbosity.VERBOSE) -> None:
        """Set the trace level of this client (0 none, 1 verbose, 2 more verbose).

        The level applies to requests started after the call.
        """

        try:
            self._verbosity = Verbosity(level)
        except ValueError as exc:
            raise InvalidArgumentError(f"verbosity must be 0, 1 or 2, got {level!r}") from exc

    def build_data(self, function_name: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Return the flat request data for ``function_name``."""

        if params is not None and not isinstance(params, Mapping):
            raise InvalidArgumentError(f"params must be a mapping, got {type(params).__name__}")
        try:
            envelope = build_envelope(self._config.token, function_name, params)
        except ValidationError as exc:
            raise InvalidArgumentError(str(exc)) from exc
        return envelope.to_data()

    def prepare(self, data: Mapping[str, Any]) -> PreparedRequest:
        """Encode ``data`` and compute the matching headers."""

        content = encode_form(data).encode("utf-8")
        headers = dict(self.options["headers"])
        headers["Content-Length"] = str(len(content))
        return PreparedRequest(headers=headers, content=content)

    async def send(
        self,
        function_name: str,
        params: Mapping[str, Any] | None = None,
        *,
        timeout: float | None | object = _CONFIG_TIMEOUT,
    ) -> Any:
        """Call the webservice function ``function_name`` and return its JSON result.

        Raises
        ------
        InvalidArgumentError
            ``function_name`` is empty or ``params`` is not a mapping; nothing is sent.
        HttpError
            The server answered with a status code of 400 or above.
        ParseError
            The response body is not valid JSON.
        httpx.TransportError
            The connection failed or timed out.
        """
        if not function_name:
            raise InvalidArgumentError("WsFunction required")

        prepared = self.prepare(self.build_data(function_name, params))
        request_timeout = self._config.timeout if timeout is _CONFIG_TIMEOUT else timeout

        logger.debug("Calling {} on {}", function_name, self.url)
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=request_timeout,
            event_hooks=build_event_hooks(self._verbosity),
        ) as client:
            response = await client.post(self.url, content=prepared.content, headers=prepared.headers)

        return self._handle_response(response)

    @staticmethod
    def _handle_response(response: httpx.Response) -> Any:
        body = response.text
        if response.status_code >= 400:
            logger.debug("HTTP {} from {}", response.status_code, response.request.url)
            raise HttpError(response.status_code, response.reason_phrase, body)

        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON response: {exc}", body) from exc
