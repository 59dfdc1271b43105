"""
Tool settings.

Settings can be configured via:
1. Environment variables (highest priority)
2. ~/.gamecenter/config.json
3. .env file at the repository root
4. Default values

CI jobs normally only set environment variables; the config file is handy
for running the tools locally against a checkout.
"""

import json
import os
from pathlib import Path
from typing import Literal


def _get_gamecenter_config_path() -> Path:
    """Get the path to ~/.gamecenter/config.json."""
    return Path.home() / ".gamecenter" / "config.json"


def _load_gamecenter_config() -> dict:
    """Load config from ~/.gamecenter/config.json."""
    path = _get_gamecenter_config_path()
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            return json.load(f)
    except (json.JSONDecodeError, IOError):
        return {}


def _get_env_file_path() -> Path:
    """Get the .env file path for the repository being operated on."""
    root = os.environ.get("GAMECENTER_REPO_ROOT") or os.getcwd()
    return Path(root) / ".env"


def _load_env_file() -> dict[str, str]:
    """Load settings from .env file."""
    env_path = _get_env_file_path()
    env_vars = {}

    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    env_vars[key.strip()] = value.strip()

    return env_vars


class Settings:
    """
    Tool settings with layered configuration.

    Priority (highest to lowest):
    1. Environment variables
    2. ~/.gamecenter/config.json
    3. .env file
    4. Default values
    """

    def __init__(self):
        self._gamecenter_config = _load_gamecenter_config()
        self._env_file = _load_env_file()

    def _get(self, key: str, default=None, env_key: str | None = None):
        """Get a config value from the layered config sources."""
        env_key = env_key or key.upper()
        if env_key in os.environ:
            return os.environ[env_key]

        if key in self._gamecenter_config:
            return self._gamecenter_config[key]

        if env_key in self._env_file:
            return self._env_file[env_key]

        return default

    def _get_int(self, key: str, default: int = 0, env_key: str | None = None) -> int:
        """Get an integer config value."""
        value = self._get(key, default, env_key)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _get_float(self, key: str, default: float = 0.0, env_key: str | None = None) -> float:
        """Get a float config value."""
        value = self._get(key, default, env_key)
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    # ==========================================
    # Repository Layout
    # ==========================================

    @property
    def repo_root(self) -> Path:
        root = self._get("repo_root", "", "GAMECENTER_REPO_ROOT")
        return Path(root).resolve() if root else Path.cwd().resolve()

    @property
    def games_dir(self) -> str:
        return self._get("games_dir", "games", "GAMECENTER_GAMES_DIR") or "games"

    @property
    def registry_file(self) -> str:
        return self._get("registry_file", "games.json", "GAMECENTER_REGISTRY_FILE") or "games.json"

    @property
    def game_info_file(self) -> str:
        return self._get("game_info_file", "game-info.yaml", "GAMECENTER_GAME_INFO_FILE") or "game-info.yaml"

    # ==========================================
    # PR Tracking
    # ==========================================

    @property
    def description_max_length(self) -> int:
        return self._get_int("description_max_length", 200, "GAMECENTER_DESCRIPTION_MAX_LENGTH")

    @property
    def changes_source(self) -> Literal["git", "github"]:
        source = self._get("changes_source", "git", "GAMECENTER_CHANGES_SOURCE")
        if source == "github":
            return "github"
        return "git"

    @property
    def github_token(self) -> str:
        return self._get("github_token", "", "GITHUB_TOKEN") or ""

    @property
    def github_repository(self) -> str:
        return self._get("github_repository", "", "GITHUB_REPOSITORY") or ""

    # ==========================================
    # Smoke Test Server
    # ==========================================

    @property
    def smoke_host(self) -> str:
        return self._get("smoke_host", "127.0.0.1", "GAMECENTER_SMOKE_HOST") or "127.0.0.1"

    @property
    def smoke_port(self) -> int:
        return self._get_int("smoke_port", 8765, "GAMECENTER_SMOKE_PORT")

    @property
    def smoke_settle_seconds(self) -> float:
        return self._get_float("smoke_settle_seconds", 0.5, "GAMECENTER_SMOKE_SETTLE_SECONDS")

    # ==========================================
    # Logging
    # ==========================================

    @property
    def log_level(self) -> str:
        level = str(self._get("log_level", "INFO", "GAMECENTER_LOG_LEVEL") or "INFO").upper()
        if level in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return level
        return "INFO"

    def reload(self) -> None:
        """Reload config from files."""
        self._gamecenter_config = _load_gamecenter_config()
        self._env_file = _load_env_file()


# Singleton instance
settings = Settings()
