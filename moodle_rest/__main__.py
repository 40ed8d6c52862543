"""Command line entry point: call one webservice function and print the result.

Example::

    moodle-rest core_course_get_courses "options[ids][0]=2" --host moodle.example.org --token abc
"""

from __future__ import annotations

import argparse
import asyncio
import json
import re
import sys
from typing import Any, Sequence

import httpx
from dotenv import find_dotenv, load_dotenv
from loguru import logger

from .config.client_config import ClientConfig
from .config.logging_config import configure_logging
from .services.rest_client import MoodleRestClient
from .utils.error_handler import MoodleRestError

_KEY_SEGMENT = re.compile(r"\[([^\]]*)\]")


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def parse_params(pairs: Sequence[str]) -> dict[str, Any]:
    """Turn ``key=value`` arguments into a nested parameter mapping.

    Bracketed keys nest: ``users[0][email]=a@b.c`` becomes
    ``{"users": {"0": {"email": "a@b.c"}}}``, which encodes back to the same
    bracket notation.  Values are read as JSON when they parse, otherwise
    kept as strings.
    """
    params: dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Parameter '{pair}' must be in key=value form")
        key, raw = pair.split("=", 1)
        root, _, rest = key.partition("[")
        if not root:
            raise ValueError(f"Parameter '{pair}' has an empty name")
        path = [root] + (_KEY_SEGMENT.findall("[" + rest) if rest else [])

        target = params
        for segment in path[:-1]:
            child = target.setdefault(segment, {})
            if not isinstance(child, dict):
                raise ValueError(f"Parameter '{pair}' conflicts with an earlier value")
            target = child
        target[path[-1]] = _parse_value(raw)
    return params


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="moodle-rest",
        description="Call a Moodle webservice function through the REST endpoint.",
    )
    ap.add_argument("function", help="Webservice function name, e.g. core_webservice_get_site_info")
    ap.add_argument("params", nargs="*", help="Function parameters as key=value")
    ap.add_argument("--host", help="Site host (default: MOODLE_HOST)")
    ap.add_argument("--token", help="Webservice token (default: MOODLE_TOKEN)")
    ap.add_argument("--port", type=int, help="Site port (default: MOODLE_PORT or 80)")
    ap.add_argument("--protocol", choices=["http", "https"], help="Request protocol (default: http)")
    ap.add_argument("--subdirectory", help="Site subdirectory, e.g. /moodle")
    ap.add_argument("--timeout", type=float, help="Request timeout in seconds")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Trace requests (-vv for headers and bodies)")
    return ap


def load_config(args: argparse.Namespace) -> ClientConfig:
    """Merge command line options over the environment settings."""

    overrides = {
        name: getattr(args, name)
        for name in ("host", "token", "port", "protocol", "subdirectory", "timeout")
        if getattr(args, name) is not None
    }
    if args.verbose:
        overrides["verbosity"] = min(args.verbose, 2)
    return ClientConfig(**overrides)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_dotenv(find_dotenv(usecwd=True))
    configure_logging(level="DEBUG" if args.verbose else None)

    try:
        config = load_config(args)
        params = parse_params(args.params)
    except ValueError as exc:
        logger.error("Invalid arguments: {}", exc)
        return 2

    client = MoodleRestClient.from_config(config)
    try:
        result = asyncio.run(client.send(args.function, params))
    except (MoodleRestError, httpx.TransportError) as exc:
        logger.error("{} failed: {}", args.function, exc)
        return 1

    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
