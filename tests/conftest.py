from __future__ import annotations

import sys
from pathlib import Path

import pytest

repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from moodle_rest.config.client_config import get_client_config
from moodle_rest.config.logging_config import get_logging_config

ENV_VARS = (
    "MOODLE_HOST",
    "MOODLE_TOKEN",
    "MOODLE_PORT",
    "MOODLE_PROTOCOL",
    "MOODLE_SUBDIRECTORY",
    "MOODLE_TIMEOUT",
    "MOODLE_VERBOSITY",
    "MOODLE_LOG_LEVEL",
    "MOODLE_LOG_FILE",
    "HTTP_VERBOSE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for name in ENV_VARS:
        # setenv first so teardown also removes values a .env loads later.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    # Keep a developer's .env out of the settings sources.
    monkeypatch.chdir(tmp_path)
    get_client_config.cache_clear()
    get_logging_config.cache_clear()
    yield
    get_client_config.cache_clear()
    get_logging_config.cache_clear()
