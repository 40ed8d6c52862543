"""Enumerations used across the client."""

from enum import Enum, IntEnum


class Protocol(str, Enum):
    """Scheme used to reach the Moodle site."""

    HTTP = "http"
    HTTPS = "https"


class Verbosity(IntEnum):
    """Transport trace level.

    ``SILENT`` emits nothing, ``VERBOSE`` logs the request line and the
    response status, ``DEBUG`` additionally logs headers and bodies.
    """

    SILENT = 0
    VERBOSE = 1
    DEBUG = 2
