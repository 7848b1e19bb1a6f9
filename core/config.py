"""
Keystone configuration - paths, defaults, and shared config helpers.

All modules import path constants from here. The ~/.keystone/ directory
holds logs; runtime tunables come from KEYSTONE_* environment variables
(or a .env file) through Settings.
"""

from pathlib import Path
from typing import Callable

from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Paths - the ~/.keystone/ directory tree
# ---------------------------------------------------------------------------

KEYSTONE_DIR = Path.home() / ".keystone"
LOG_DIR = KEYSTONE_DIR / "logs"
LOG_FILE = LOG_DIR / "keystone.log"

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "generators" / "templates"

# Optional per-directory CLI defaults (key=value, shell style)
LOCAL_ENV_FILE = "keystone.env"

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_GIT_TIMEOUT = 30
DEFAULT_NAME_MAX_LENGTH = 50
DEFAULT_ALIAS_MAX_LENGTH = 15
DEFAULT_ORG_LIST_COMMAND = "sf org list --json"


class Settings(BaseSettings):
    """Keystone runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="KEYSTONE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False

    # Git
    git_executable: str = "git"
    git_timeout: int = DEFAULT_GIT_TIMEOUT
    remote_probe_delay: float = 0.0

    # Org discovery
    org_cli_executable: str = "sf"
    org_list_command: str = DEFAULT_ORG_LIST_COMMAND
    org_list_timeout: int = 60

    # Field limits
    name_max_length: int = DEFAULT_NAME_MAX_LENGTH
    alias_max_length: int = DEFAULT_ALIAS_MAX_LENGTH
    project_alias_max_length: int = DEFAULT_ALIAS_MAX_LENGTH


def get_settings() -> Settings:
    """Return settings instance."""
    return Settings()


# ---------------------------------------------------------------------------
# Shared config helpers
# ---------------------------------------------------------------------------


def source_env_file(
    path: Path,
    config: dict,
    key_map: dict[str, tuple[str, Callable]],
) -> None:
    """Parse key=value pairs from a shell-style env file.

    Args:
        path: Path to the .env file.
        config: Dict to update with parsed values.
        key_map: Mapping of ENV_VAR_NAME -> (config_key, cast_fn).
            Cast functions receive the string value and return the typed value.
    """
    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            value = value.strip().strip('"').strip("'")
            key = key.strip()
            if key in key_map:
                cfg_key, cast = key_map[key]
                try:
                    config[cfg_key] = cast(value)
                except (ValueError, TypeError):
                    pass


def load_cli_defaults(search_dir: Path | None = None) -> dict:
    """Read CLI defaults from keystone.env in the working directory.

    Recognised keys: OUTPUT_DIR, DEBUG. Missing file -> empty dict.
    """
    config: dict = {}
    cfg_file = (search_dir or Path.cwd()) / LOCAL_ENV_FILE
    if cfg_file.is_file():
        source_env_file(cfg_file, config, {
            "OUTPUT_DIR": ("output_dir", str),
            "DEBUG": ("debug", lambda v: v.lower() in ("1", "true", "yes")),
        })
    return config
