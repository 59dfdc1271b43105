"""
PR tracker for the game center.

Runs after a pull request is merged. Every game whose directory the PR
touched gets the PR prepended to its game-info.yaml history, its stats
recomputed, and its prCount in games.json brought in line.

The helpers at the top are pure: they take and return the loaded structures.
`update_games` does the file I/O, one game at a time, so that a broken
game-info.yaml only costs that one game its update.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Literal, Mapping, Optional

from pydantic import ValidationError

from gamecenter.config import settings
from gamecenter.schemas import PullRequestEvent
from gamecenter.services.changes import ChangedFilesError, get_changed_files
from gamecenter.storage import (
    GameInfo,
    GameInfoError,
    GameStats,
    GameSummary,
    PullRequestRecord,
    find_game,
    get_game_info_path,
    get_registry_path,
    load_game_info,
    load_registry,
    save_game_info,
    save_registry,
)

logger = logging.getLogger(__name__)

# Lines skipped when picking a description out of a PR body
_SKIPPED_LINE_PREFIXES = ("#", "<!--")


# ==========================================
# Pure Helpers
# ==========================================

def game_id_from_path(path: str, games_dir: str = "games") -> Optional[str]:
    """
    Get the game id for a changed path, or None if it is not inside a game.

    e.g., games/snake/index.html -> "snake", README.md -> None
    """
    if path.startswith("./"):
        path = path[2:]
    match = re.match(rf"^{re.escape(games_dir.strip('/'))}/([^/]+)/", path)
    return match.group(1) if match else None


def find_affected_games(paths: Iterable[str], games_dir: str = "games") -> list[str]:
    """Get the distinct game ids touched by a set of paths, in first-seen order."""
    affected: list[str] = []
    for path in paths:
        game_id = game_id_from_path(path, games_dir)
        if game_id and game_id not in affected:
            affected.append(game_id)
    return affected


def summarize_body(body: str, title: str, max_length: int = 200) -> str:
    """
    Pick a one-line description for a PR.

    Uses the first line of the body that is not blank, a markdown heading or
    an HTML comment; falls back to the title.
    """
    for line in (body or "").splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(_SKIPPED_LINE_PREFIXES):
            continue
        return line[:max_length]
    return (title or "")[:max_length]


def new_game_info(game_id: str, merged_at: str) -> GameInfo:
    """Create the game-info structure for a game seen for the first time."""
    return GameInfo(
        game=GameSummary(id=game_id, name=game_id, description=""),
        pull_requests=[],
        stats=GameStats(total_prs=0, first_pr_date=merged_at, last_pr_date=merged_at),
    )


def has_pull_request(info: GameInfo, number: int) -> bool:
    """Check whether a PR is already in a game's history."""
    return any(pr.number == number for pr in info.pull_requests)


def apply_pull_request(
    info: GameInfo,
    event: PullRequestEvent,
    max_length: int = 200,
) -> bool:
    """
    Prepend a PR to a game's history and refresh its stats.

    Returns False, leaving `info` untouched, if the PR is already tracked.
    """
    if has_pull_request(info, event.number):
        return False

    info.pull_requests.insert(0, PullRequestRecord(
        number=event.number,
        title=event.title,
        url=event.url,
        merged_at=event.merged_at,
        author=event.author,
        description=summarize_body(event.body, event.title, max_length),
    ))

    info.stats.total_prs = len(info.pull_requests)
    info.stats.last_pr_date = event.merged_at
    if not info.stats.first_pr_date:
        info.stats.first_pr_date = event.merged_at

    return True


def sync_registry_pr_count(registry: dict, game_id: str, total_prs: int) -> bool:
    """Set prCount on a registry entry. Returns False if the game is not listed."""
    game = find_game(registry, game_id)
    if game is None:
        return False
    game["prCount"] = total_prs
    return True


# ==========================================
# Results
# ==========================================

@dataclass
class GameUpdateResult:
    """Outcome of processing one affected game."""
    game_id: str
    status: Literal["updated", "skipped", "failed"]
    total_prs: Optional[int] = None
    registry_synced: bool = False
    error: Optional[str] = None


@dataclass
class TrackingReport:
    """Outcome of processing one merged PR."""
    pr_number: int
    affected_games: list[str] = field(default_factory=list)
    results: list[GameUpdateResult] = field(default_factory=list)

    def _with_status(self, status: str) -> list[str]:
        return [r.game_id for r in self.results if r.status == status]

    @property
    def updated(self) -> list[str]:
        return self._with_status("updated")

    @property
    def skipped(self) -> list[str]:
        return self._with_status("skipped")

    @property
    def failed(self) -> list[str]:
        return self._with_status("failed")


# ==========================================
# File Updates
# ==========================================

def _update_registry(registry_path: Path, game_id: str, total_prs: int) -> bool:
    """Write the new prCount into games.json. Returns True if the file was saved."""
    try:
        registry = load_registry(registry_path)
    except (OSError, ValueError) as e:
        logger.error("  ✗ Error reading %s: %s", registry_path.name, e)
        return False
    if not isinstance(registry, dict):
        logger.error("  ✗ Error reading %s: expected an object, got %s", registry_path.name, type(registry).__name__)
        return False

    if not sync_registry_pr_count(registry, game_id, total_prs):
        logger.info("  ℹ️  %s is not listed in %s, skipping prCount", game_id, registry_path.name)
        return False

    try:
        save_registry(registry_path, registry)
    except OSError as e:
        logger.error("  ✗ Error writing %s: %s", registry_path.name, e)
        return False

    logger.info("  ✓ Updated %s with PR count: %d", registry_path.name, total_prs)
    return True


def update_game(
    game_id: str,
    event: PullRequestEvent,
    repo_root: Path,
    games_dir: str = "games",
    max_length: int = 200,
) -> GameUpdateResult:
    """Record a PR against a single game; errors are reported in the result."""
    game_dir = repo_root / games_dir / game_id
    info_path = get_game_info_path(game_dir)

    logger.info("📦 Updating %s...", game_id)

    try:
        info = load_game_info(info_path)
    except GameInfoError as e:
        logger.error("  ✗ Error reading %s: %s", info_path.name, e)
        return GameUpdateResult(game_id=game_id, status="failed", error=str(e))

    if info is None:
        logger.info("  ℹ️  Creating new %s", info_path.name)
        info = new_game_info(game_id, event.merged_at)
    else:
        logger.info("  ✓ Loaded existing %s", info_path.name)

    if not apply_pull_request(info, event, max_length):
        logger.info("  ℹ️  PR #%d already tracked, skipping", event.number)
        return GameUpdateResult(game_id=game_id, status="skipped", total_prs=info.stats.total_prs)

    try:
        save_game_info(info_path, info)
    except OSError as e:
        logger.error("  ✗ Error writing %s: %s", info_path.name, e)
        return GameUpdateResult(game_id=game_id, status="failed", error=str(e))

    logger.info("  ✓ Updated %s with PR #%d", info_path.name, event.number)
    logger.info("  ✓ Total PRs: %d", info.stats.total_prs)

    synced = _update_registry(get_registry_path(repo_root), game_id, info.stats.total_prs)
    return GameUpdateResult(
        game_id=game_id,
        status="updated",
        total_prs=info.stats.total_prs,
        registry_synced=synced,
    )


def update_games(
    event: PullRequestEvent,
    changed_files: Iterable[str],
    repo_root: Path | str | None = None,
    games_dir: str | None = None,
    max_length: int | None = None,
) -> TrackingReport:
    """
    Record a merged PR against every game it touched.

    Games are processed independently: a failure for one is logged and
    recorded, and the rest still run. Nothing is rolled back.
    """
    root = Path(repo_root) if repo_root is not None else settings.repo_root
    games_dir = games_dir or settings.games_dir
    max_length = max_length if max_length is not None else settings.description_max_length

    report = TrackingReport(
        pr_number=event.number,
        affected_games=find_affected_games(changed_files, games_dir),
    )

    if not report.affected_games:
        logger.info("ℹ️  No game directories were modified in this PR")
        return report

    logger.info("🎮 Games affected by this PR: %s", ", ".join(report.affected_games))

    for game_id in report.affected_games:
        report.results.append(update_game(game_id, event, root, games_dir, max_length))

    return report


# ==========================================
# Command Entry Point
# ==========================================

def main(environ: Optional[Mapping[str, str]] = None) -> int:
    """Run the tracker for the PR described by the PR_* environment variables."""
    logging.basicConfig(level=settings.log_level, format="%(message)s")

    try:
        event = PullRequestEvent.from_env(environ)
    except ValidationError as e:
        logger.error("Invalid pull request metadata: %s", e)
        return 1

    logger.info("🔍 Analyzing PR #%d: \"%s\"", event.number, event.title)

    try:
        changed_files = get_changed_files(event.number)
    except ChangedFilesError as e:
        logger.error("Error getting changed files: %s", e)
        return 1

    logger.info("📝 Files changed in PR: %d", len(changed_files))

    report = update_games(event, changed_files)

    if report.failed:
        logger.warning("⚠️  Could not update: %s", ", ".join(report.failed))
    logger.info("✅ Game PR tracking update complete!")
    return 0
