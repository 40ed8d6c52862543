"""Expose the model classes at the package level.

Importing these here allows concise imports like::

    from moodle_rest.models import RequestEnvelope, Verbosity
"""

from .enums import Protocol, Verbosity  # noqa: F401
from .request_envelope import RESERVED_KEYS, RequestEnvelope, build_envelope  # noqa: F401
