"""Request envelope sent with every webservice call."""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

RESPONSE_FORMAT = "json"
RESERVED_KEYS = frozenset({"wstoken", "wsfunction", "moodlewsrestformat"})


class RequestEnvelope(BaseModel):
    """The protocol keys of a call plus the caller's function parameters.

    ``params`` are merged after the three protocol keys when the envelope is
    flattened, so a caller may deliberately shadow ``wstoken``,
    ``wsfunction`` or ``moodlewsrestformat`` (for instance to call a
    function with a different token).  The override is permitted and
    reported at DEBUG level.
    """

    model_config = ConfigDict(frozen=True)

    wstoken: str
    wsfunction: str = Field(..., min_length=1)
    moodlewsrestformat: str = RESPONSE_FORMAT
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def overridden_keys(self) -> set[str]:
        """Protocol keys that the caller's parameters replace."""

        return RESERVED_KEYS.intersection(self.params)

    def to_data(self) -> dict[str, Any]:
        """Return the flat mapping that is form-encoded into the body."""

        overridden = self.overridden_keys
        if overridden:
            logger.debug("Caller parameters override protocol keys: {}", sorted(overridden))
        return {
            "wstoken": self.wstoken,
            "wsfunction": self.wsfunction,
            "moodlewsrestformat": self.moodlewsrestformat,
            **self.params,
        }


def build_envelope(token: str, function_name: str, params: Mapping[str, Any] | None = None) -> RequestEnvelope:
    """Create a :class:`RequestEnvelope` for ``function_name``."""

    return RequestEnvelope(
        wstoken=token,
        wsfunction=function_name,
        params=dict(params or {}),
    )
