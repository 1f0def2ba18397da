from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from backend.core import config, env_loader
from backend.core.logging_config import AccessPathExcludeFilter


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("Yes", True), (" on ", True), ("0", False), ("off", False), ("maybe", True)],
)
def test_env_flag_parsing(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("ADMIN_CONSOLE_TEST_FLAG", raw)

    assert config._get_env_flag("ADMIN_CONSOLE_TEST_FLAG", default=True) is expected


def test_env_choice_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    choices = {"DEBUG", "INFO"}
    monkeypatch.setenv("ADMIN_CONSOLE_TEST_LEVEL", "debug")
    assert config._get_env_choice("ADMIN_CONSOLE_TEST_LEVEL", choices, "INFO") == "DEBUG"

    monkeypatch.setenv("ADMIN_CONSOLE_TEST_LEVEL", "verbose")
    assert config._get_env_choice("ADMIN_CONSOLE_TEST_LEVEL", choices, "INFO") == "INFO"


def test_env_list_splits_on_commas(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ADMIN_CONSOLE_TEST_ORIGINS", "http://a, ,http://b ")

    assert config._get_env_list("ADMIN_CONSOLE_TEST_ORIGINS", ()) == ("http://a", "http://b")


def test_load_env_does_not_override_existing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# commentaire\n"
        "ADMIN_CONSOLE_TEST_A='quoted'\n"
        "export ADMIN_CONSOLE_TEST_B=plain\n"
        "ADMIN_CONSOLE_TEST_C=from-file\n"
        "not a pair\n",
        encoding="utf-8",
    )
    for name in ("ADMIN_CONSOLE_TEST_A", "ADMIN_CONSOLE_TEST_B"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("ADMIN_CONSOLE_TEST_C", "from-env")

    env_loader.load_env(env_file)

    assert os.environ["ADMIN_CONSOLE_TEST_A"] == "quoted"
    assert os.environ["ADMIN_CONSOLE_TEST_B"] == "plain"
    assert os.environ["ADMIN_CONSOLE_TEST_C"] == "from-env"


def _make_access_record(path: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="uvicorn.access",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='%s - "%s %s HTTP/%s" %s',
        args=("127.0.0.1", "GET", path, "1.1", 200),
        exc_info=None,
    )


def test_access_log_excludes_configured_paths() -> None:
    access_filter = AccessPathExcludeFilter(["/health"])

    assert access_filter.filter(_make_access_record("/health")) is False
    assert access_filter.filter(_make_access_record("/health?probe=1")) is False
    assert access_filter.filter(_make_access_record("/menus/tree")) is True
