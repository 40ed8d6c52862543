"""Nested form-urlencoded encoding.

Moodle expects structured webservice parameters in PHP's bracket notation,
for example ``courseids[0]=2`` or ``users[0][email]=a%40b.c``.  Encoding is
delegated to ``qs_codec``, a port of the ``qs`` package used by the Moodle
JavaScript clients, with its default options: RFC 3986 percent-encoding
(brackets become ``%5B``/``%5D``), indexed lists, nested mappings, ``None``
as an empty value and booleans as ``true``/``false``.
"""

from __future__ import annotations

from typing import Any, Mapping

import qs_codec


def encode_form(data: Mapping[str, Any]) -> str:
    """Serialise ``data`` into an ``application/x-www-form-urlencoded`` string."""

    return qs_codec.encode(dict(data))
