"""Tests for core.config module."""

from pathlib import Path

import pytest

from core.config import (
    DEFAULT_ALIAS_MAX_LENGTH,
    KEYSTONE_DIR,
    LOG_DIR,
    LOG_FILE,
    LOCAL_ENV_FILE,
    TEMPLATES_DIR,
    Settings,
    load_cli_defaults,
    source_env_file,
)


def test_keystone_dir_is_under_home():
    assert str(KEYSTONE_DIR).endswith(".keystone")
    assert KEYSTONE_DIR.parent == Path.home()


def test_log_dir_is_under_keystone_dir():
    assert LOG_DIR.parent == KEYSTONE_DIR
    assert LOG_FILE.parent == LOG_DIR


def test_templates_ship_with_generators():
    assert TEMPLATES_DIR.name == "templates"
    assert (TEMPLATES_DIR / "demo").is_dir()
    assert (TEMPLATES_DIR / "base").is_dir()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class TestSettings:
    """Environment-driven runtime settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("KEYSTONE_ALIAS_MAX_LENGTH", raising=False)
        settings = Settings()
        assert settings.git_executable == "git"
        assert settings.alias_max_length == DEFAULT_ALIAS_MAX_LENGTH
        assert settings.org_list_command == "sf org list --json"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KEYSTONE_ALIAS_MAX_LENGTH", "20")
        monkeypatch.setenv("KEYSTONE_GIT_EXECUTABLE", "/opt/git/bin/git")
        settings = Settings()
        assert settings.alias_max_length == 20
        assert settings.git_executable == "/opt/git/bin/git"


# ---------------------------------------------------------------------------
# Env files
# ---------------------------------------------------------------------------


class TestSourceEnvFile:
    """Shell-style key=value parsing."""

    def test_parses_known_keys(self, tmp_path: Path) -> None:
        env = tmp_path / "test.env"
        env.write_text('# comment\nNAME="demo"\nCOUNT=3\nOTHER=x\nnot a pair\n')
        config: dict = {}
        source_env_file(env, config, {"NAME": ("name", str), "COUNT": ("count", int)})
        assert config == {"name": "demo", "count": 3}

    def test_bad_cast_skipped(self, tmp_path: Path) -> None:
        env = tmp_path / "test.env"
        env.write_text("COUNT=many\n")
        config: dict = {}
        source_env_file(env, config, {"COUNT": ("count", int)})
        assert config == {}


class TestLoadCliDefaults:
    """keystone.env in the working directory."""

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_cli_defaults(tmp_path) == {}

    def test_reads_output_dir_and_debug(self, tmp_path: Path) -> None:
        (tmp_path / LOCAL_ENV_FILE).write_text("OUTPUT_DIR=/srv/projects\nDEBUG=yes\n")
        assert load_cli_defaults(tmp_path) == {"output_dir": "/srv/projects", "debug": True}
