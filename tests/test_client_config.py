from __future__ import annotations

import pytest
from pydantic import ValidationError

from moodle_rest.config.client_config import ClientConfig, get_client_config, normalise_subdirectory
from moodle_rest.models.enums import Protocol, Verbosity


def test_defaults() -> None:
    config = ClientConfig(host="moodle.test", token="tok")

    assert config.port == 80
    assert config.protocol is Protocol.HTTP
    assert config.subdirectory is None
    assert config.timeout == 30.0
    assert config.verbosity is Verbosity.SILENT
    assert config.path == "/webservice/rest/server.php"
    assert config.url == "http://moodle.test:80/webservice/rest/server.php"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, ""), ("", ""), ("/", ""), ("moodle", "/moodle"), ("/moodle", "/moodle"), ("/moodle/", "/moodle")],
)
def test_subdirectory_is_normalised(raw: str | None, expected: str) -> None:
    assert normalise_subdirectory(raw) == expected


def test_subdirectory_prefixes_the_path() -> None:
    config = ClientConfig(host="moodle.test", token="tok", subdirectory="lms", protocol="HTTPS", port=443)

    assert config.path == "/lms/webservice/rest/server.php"
    assert config.url == "https://moodle.test:443/lms/webservice/rest/server.php"


@pytest.mark.parametrize(
    "overrides",
    [
        {"host": ""},
        {"host": "https://moodle.test"},
        {"token": ""},
        {"port": 0},
        {"protocol": "ftp"},
        {"timeout": 0},
        {"verbosity": 3},
    ],
)
def test_invalid_values_are_rejected(overrides: dict) -> None:
    values = {"host": "moodle.test", "token": "tok", **overrides}
    with pytest.raises(ValidationError):
        ClientConfig(**values)


def test_settings_are_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MOODLE_HOST", "env.test")
    monkeypatch.setenv("MOODLE_TOKEN", "env-token")
    monkeypatch.setenv("MOODLE_PORT", "8080")
    monkeypatch.setenv("MOODLE_SUBDIRECTORY", "moodle/")

    config = get_client_config()

    assert config.host == "env.test"
    assert config.token == "env-token"
    assert config.port == 8080
    assert config.subdirectory == "/moodle"
    assert get_client_config() is config


@pytest.mark.parametrize(("flag", "expected"), [("1", Verbosity.VERBOSE), ("true", Verbosity.VERBOSE), ("2", Verbosity.DEBUG), ("", Verbosity.SILENT)])
def test_http_verbose_sets_initial_verbosity(monkeypatch: pytest.MonkeyPatch, flag: str, expected: Verbosity) -> None:
    monkeypatch.setenv("HTTP_VERBOSE", flag)

    assert ClientConfig(host="moodle.test", token="tok").verbosity is expected


def test_moodle_verbosity_wins_over_http_verbose(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTP_VERBOSE", "1")
    monkeypatch.setenv("MOODLE_VERBOSITY", "2")

    assert ClientConfig(host="moodle.test", token="tok").verbosity is Verbosity.DEBUG


def test_explicit_verbosity_wins_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTP_VERBOSE", "1")

    assert ClientConfig(host="moodle.test", token="tok", verbosity=0).verbosity is Verbosity.SILENT


def test_config_is_frozen() -> None:
    config = ClientConfig(host="moodle.test", token="tok")
    with pytest.raises(ValidationError):
        config.port = 443  # type: ignore[misc]


def test_dotenv_is_only_loaded_by_the_environment_accessor(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("MOODLE_HOST=dotenv.test\nMOODLE_TOKEN=dotenv-token\nHTTP_VERBOSE=1\n")

    assert ClientConfig(host="moodle.test", token="tok").verbosity is Verbosity.SILENT

    config = get_client_config()

    assert config.host == "dotenv.test"
    assert config.verbosity is Verbosity.VERBOSE
