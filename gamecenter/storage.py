"""
Storage utilities for the game center repository.

The registry of all games lives at the repository root:
{repo-root}/games.json

Each game keeps its pull-request history next to its sources:
{repo-root}/games/{game-id}/game-info.yaml

This module is the only place that knows about the two file formats. Callers
load a document, work on the returned structure and hand it back to be saved,
so the update logic itself never touches the filesystem.
"""

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

import yaml

from gamecenter.config import settings


class GameInfoError(Exception):
    """Raised when a game-info.yaml file cannot be read or understood."""


# ==========================================
# Per-Game Metadata
# ==========================================

def _as_text(value: Any) -> Optional[str]:
    """Normalize a YAML scalar to a string.

    PyYAML turns unquoted ISO timestamps into datetime objects; hand-edited
    files commonly contain those.
    """
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _unknown_keys(data: dict, known: tuple[str, ...]) -> dict[str, Any]:
    """Keys this tool does not manage; they are written back unchanged."""
    return {k: v for k, v in data.items() if k not in known}


@dataclass
class GameSummary:
    """The `game:` block of a game-info.yaml file."""
    id: str
    name: str
    description: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
        }
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "GameSummary":
        return cls(
            id=_as_text(data.get("id")) or "",
            name=_as_text(data.get("name")) or "",
            description=_as_text(data.get("description")) or "",
            extra=_unknown_keys(data, ("id", "name", "description")),
        )


@dataclass
class PullRequestRecord:
    """A merged pull request that touched a game."""
    number: int
    title: str = ""
    url: str = ""
    merged_at: str = ""
    author: str = "unknown"
    description: str = ""  # Short summary derived from the PR body
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = {
            "number": self.number,
            "title": self.title,
            "url": self.url,
            "merged_at": self.merged_at,
            "author": self.author,
            "description": self.description,
        }
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "PullRequestRecord":
        return cls(
            number=int(data.get("number", 0)),
            title=_as_text(data.get("title")) or "",
            url=_as_text(data.get("url")) or "",
            merged_at=_as_text(data.get("merged_at")) or "",
            author=_as_text(data.get("author")) or "unknown",
            description=_as_text(data.get("description")) or "",
            extra=_unknown_keys(
                data, ("number", "title", "url", "merged_at", "author", "description")
            ),
        )


@dataclass
class GameStats:
    """Aggregate pull-request statistics for a game."""
    total_prs: int = 0
    first_pr_date: Optional[str] = None  # Set once, never overwritten
    last_pr_date: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = {
            "total_prs": self.total_prs,
            "first_pr_date": self.first_pr_date,
            "last_pr_date": self.last_pr_date,
        }
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "GameStats":
        return cls(
            total_prs=int(data.get("total_prs") or 0),
            first_pr_date=_as_text(data.get("first_pr_date")),
            last_pr_date=_as_text(data.get("last_pr_date")),
            extra=_unknown_keys(data, ("total_prs", "first_pr_date", "last_pr_date")),
        )


@dataclass
class GameInfo:
    """
    Contents of a game-info.yaml file.

    Top-level keys this tool does not manage are kept in `extra` and written
    back unchanged.
    """
    game: GameSummary
    pull_requests: list[PullRequestRecord] = field(default_factory=list)  # Newest first
    stats: GameStats = field(default_factory=GameStats)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = {
            "game": self.game.to_dict(),
            "pull_requests": [pr.to_dict() for pr in self.pull_requests],
            "stats": self.stats.to_dict(),
        }
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "GameInfo":
        return cls(
            game=GameSummary.from_dict(data.get("game") or {}),
            pull_requests=[
                PullRequestRecord.from_dict(pr)
                for pr in data.get("pull_requests") or []
            ],
            stats=GameStats.from_dict(data.get("stats") or {}),
            extra=_unknown_keys(data, ("game", "pull_requests", "stats")),
        )


# ==========================================
# Directory and Path Utilities
# ==========================================

def get_registry_path(repo_root: Path | str | None = None) -> Path:
    """Get the path to games.json."""
    root = Path(repo_root) if repo_root is not None else settings.repo_root
    return root / settings.registry_file


def get_game_info_path(game_dir: Path) -> Path:
    """Get the game-info.yaml path inside a game directory."""
    return game_dir / settings.game_info_file


# ==========================================
# Registry (games.json)
# ==========================================

def load_registry(path: Path) -> dict:
    """
    Load games.json.

    Raises OSError if the file cannot be read and ValueError (JSONDecodeError)
    if it is not valid JSON.
    """
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def save_registry(path: Path, registry: dict) -> None:
    """Save games.json, keeping key order and a trailing newline."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(json.dumps(registry, indent=2, ensure_ascii=False) + "\n")


def find_game(registry: dict, game_id: str) -> dict | None:
    """Get a registry entry by its id."""
    games = registry.get("games") if isinstance(registry, dict) else None
    if not isinstance(games, list):
        return None
    for game in games:
        if isinstance(game, dict) and game.get("id") == game_id:
            return game
    return None


# ==========================================
# Game Info (game-info.yaml)
# ==========================================

def load_game_info(path: Path) -> GameInfo | None:
    """
    Load a game-info.yaml file.

    Returns None if the file does not exist yet. Raises GameInfoError if the
    file exists but cannot be read or parsed.
    """
    if not path.exists():
        return None

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise GameInfoError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise GameInfoError(f"Cannot read {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise GameInfoError(f"Expected a mapping in {path}, got {type(data).__name__}")

    try:
        return GameInfo.from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        raise GameInfoError(f"Unexpected structure in {path}: {e}") from e


def dump_game_info(info: GameInfo) -> str:
    """Serialize game info as block-style YAML without line wrapping."""
    return yaml.dump(
        info.to_dict(),
        Dumper=_GameInfoDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        indent=2,
        width=float("inf"),
    )


def save_game_info(path: Path, info: GameInfo) -> None:
    """Save a game-info.yaml file, creating the game directory if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_game_info(info), encoding="utf-8")


class _GameInfoDumper(yaml.SafeDumper):
    """SafeDumper that never emits anchors or aliases."""

    def ignore_aliases(self, data):
        return True
