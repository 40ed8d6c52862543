"""Asynchronous client for the Moodle webservice REST endpoint.

Typical use::

    from moodle_rest import MoodleRestClient

    client = MoodleRestClient("moodle.example.org", token, protocol="https", port=443)
    info = await client.send("core_webservice_get_site_info")

The package logs through Loguru but is disabled by default; call
:func:`configure_logging` or ``logger.enable("moodle_rest")`` to see it.
"""

from loguru import logger

from .config.client_config import ClientConfig, get_client_config  # noqa: F401
from .config.logging_config import configure_logging  # noqa: F401
from .models.enums import Protocol, Verbosity  # noqa: F401
from .services.rest_client import MoodleRestClient, PreparedRequest  # noqa: F401
from .utils.error_handler import (  # noqa: F401
    HttpError,
    InvalidArgumentError,
    MoodleRestError,
    ParseError,
    TransportError,
)

logger.disable("moodle_rest")

__version__ = "0.1.0"
