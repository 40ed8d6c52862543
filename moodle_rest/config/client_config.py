"""Connection settings for the Moodle REST client.

Values may be passed explicitly or read from the environment (and a
``.env`` file) using the ``MOODLE_`` prefix, e.g. ``MOODLE_HOST`` and
``MOODLE_TOKEN``.  The initial trace level also honours ``HTTP_VERBOSE``.
"""

from __future__ import annotations

from functools import lru_cache
import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.enums import Protocol, Verbosity

SERVER_PATH = "/webservice/rest/server.php"

_TRUTHY = {"true", "yes", "on"}
_FALSY = {"", "false", "no", "off"}


def _verbosity_from_env() -> str:
    return os.getenv("HTTP_VERBOSE", "0")


def normalise_subdirectory(value: str | None) -> str:
    """Return ``value`` as ``"/segment"`` or ``""`` when there is none."""

    if value is None:
        return ""
    stripped = value.strip().strip("/")
    if not stripped:
        return ""
    return f"/{stripped}"


class ClientConfig(BaseSettings):
    """Immutable connection parameters of a :class:`MoodleRestClient`."""

    host: str = Field(..., description="Site host without scheme, port or slashes.")
    token: str = Field(..., description="Webservice token sent as ``wstoken``.")
    port: int = Field(80, ge=1, le=65535)
    protocol: Protocol = Field(Protocol.HTTP)
    subdirectory: Optional[str] = Field(None, description="Site subdirectory, e.g. ``/moodle``.")
    timeout: Optional[float] = Field(30.0, description="Per request timeout in seconds; None waits forever.")
    # MOODLE_VERBOSITY wins over the HTTP_VERBOSE flag when both are set.
    verbosity: Verbosity = Field(default_factory=_verbosity_from_env, validate_default=True)

    model_config = SettingsConfigDict(
        env_prefix="MOODLE_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    @field_validator("host")
    @classmethod
    def validate_host(cls, value: str) -> str:
        host = value.strip().rstrip("/")
        if not host:
            raise ValueError("MOODLE_HOST is required")
        if "://" in host:
            raise ValueError("MOODLE_HOST must not include a scheme; use MOODLE_PROTOCOL")
        return host

    @field_validator("token")
    @classmethod
    def validate_token(cls, value: str) -> str:
        if not value:
            raise ValueError("MOODLE_TOKEN is required")
        return value

    @field_validator("protocol", mode="before")
    @classmethod
    def normalise_protocol(cls, value: Protocol | str) -> Protocol | str:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("subdirectory", mode="before")
    @classmethod
    def validate_subdirectory(cls, value: Optional[str]) -> Optional[str]:
        return normalise_subdirectory(value) or None

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("MOODLE_TIMEOUT must be positive")
        return value

    @field_validator("verbosity", mode="before")
    @classmethod
    def parse_verbosity(cls, value: object) -> object:
        # HTTP_VERBOSE is usually set as a flag ("1", "true"), not a level.
        if isinstance(value, str):
            candidate = value.strip().lower()
            if candidate in _TRUTHY:
                return Verbosity.VERBOSE
            if candidate in _FALSY:
                return Verbosity.SILENT
            return int(candidate)
        if isinstance(value, bool):
            return Verbosity.VERBOSE if value else Verbosity.SILENT
        return value

    @property
    def path(self) -> str:
        """Request path including the subdirectory prefix."""

        return f"{self.subdirectory or ''}{SERVER_PATH}"

    @property
    def url(self) -> str:
        """Absolute URL of the webservice endpoint."""

        return f"{self.protocol.value}://{self.host}:{self.port}{self.path}"


@lru_cache()
def get_client_config() -> ClientConfig:
    """Return a cached configuration loaded from the environment.

    The caller's ``.env`` is loaded into ``os.environ`` first so that
    ``HTTP_VERBOSE`` set there is honoured as well.
    """
    load_dotenv(find_dotenv(usecwd=True))
    return ClientConfig()  # type: ignore[call-arg]
