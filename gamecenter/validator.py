"""
Structure validator for the game center repository.

Checks:
- games.json format and required fields
- Referenced game folders and their files exist
- index.html exists and wires up the game grid
- Repository docs and workflow directory are present
"""

import json
from pathlib import Path
from typing import Any

from gamecenter.checks import CheckRunner, Colors
from gamecenter.config import settings

# Fields every registry entry must carry as non-empty strings
REQUIRED_STRING_FIELDS = ("description", "status", "path", "createdWith", "model")

# Any of these in a game README counts as documenting how it was built
AI_MENTION_MARKERS = ("built with", "ai", "copilot")


def _is_non_blank_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _is_non_negative_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0


def readme_mentions_ai(readme_text: str, model: Any = None) -> bool:
    """Check that a README documents the AI tooling or the model used."""
    content = readme_text.lower()
    if any(marker in content for marker in AI_MENTION_MARKERS):
        return True
    return _is_non_empty_string(model) and model.lower() in content


def validate_registry_entry(runner: CheckRunner, game: Any, prefix: str) -> None:
    """Field checks for one entry of games.json."""
    if not isinstance(game, dict):
        runner.record(f"{prefix}: is an object", False)
        return

    runner.check(f'{prefix}: has "id" field', lambda: _is_non_blank_string(game.get("id")))
    runner.check(f'{prefix}: has "name" field', lambda: _is_non_blank_string(game.get("name")))
    for field_name in REQUIRED_STRING_FIELDS:
        runner.check(
            f'{prefix}: has "{field_name}" field',
            lambda field_name=field_name: _is_non_empty_string(game.get(field_name)),
        )
    runner.check(f'{prefix}: has "prLinks" array', lambda: isinstance(game.get("prLinks"), list))
    # prCount is optional, but when present it must be a count
    runner.check(
        f'{prefix}: has "prCount" field (number)',
        lambda: "prCount" not in game or _is_non_negative_number(game["prCount"]),
    )


def validate_game_directory(runner: CheckRunner, repo_root: Path, game: dict, prefix: str) -> None:
    """File checks for the directory a registry entry points at."""
    game_path = (repo_root / game["path"]).resolve()

    runner.check(f"{prefix}: directory exists at {game['path']}", game_path.is_dir)

    index_path = game_path / "index.html"
    runner.check(f"{prefix}: has index.html", index_path.is_file)

    readme_path = game_path / "README.md"
    runner.check(f"{prefix}: has README.md", readme_path.is_file)

    game_info_path = game_path / settings.game_info_file
    if game_info_path.exists():
        name = game_info_path.name
        runner.check(f"{prefix}: has {name}", game_info_path.is_file)
        try:
            content = game_info_path.read_text(encoding="utf-8")
        except OSError as e:
            runner.record(f"{prefix}: Error reading {name}", False, str(e))
        else:
            runner.check(f"{prefix}: {name} is readable", lambda: len(content) > 0)
            runner.check(f"{prefix}: {name} has pull_requests section", lambda: "pull_requests:" in content)
            runner.check(f"{prefix}: {name} has stats section", lambda: "stats:" in content)

    if readme_path.exists():
        runner.check(
            f"{prefix}: README.md mentions AI/model",
            lambda: readme_mentions_ai(readme_path.read_text(encoding="utf-8"), game.get("model")),
        )


def validate_site_files(runner: CheckRunner, repo_root: Path) -> None:
    """Checks for the entry page and repository-level files."""
    index_html = repo_root / "index.html"
    registry_name = settings.registry_file

    def read_index() -> str:
        return index_html.read_text(encoding="utf-8")

    runner.check("index.html exists", index_html.exists)
    runner.check("index.html is valid HTML", lambda: all(
        marker in read_index() for marker in ("<!DOCTYPE html>", "<html", "</html>")
    ))
    runner.check(f"index.html loads {registry_name}", lambda: registry_name in read_index())
    runner.check("index.html has game grid element", lambda: (
        "gameGrid" in read_index() or "game-grid" in read_index()
    ))

    runner.check("README.md exists", (repo_root / "README.md").exists)
    runner.check("AGENTS.md exists", (repo_root / "AGENTS.md").exists)
    runner.check(".github/workflows directory exists", (repo_root / ".github" / "workflows").is_dir)


def validate_structure(repo_root: Path | str | None = None, runner: CheckRunner | None = None) -> CheckRunner:
    """
    Run every structure check against a repository checkout.

    All checks always run; the returned runner holds the tally.
    """
    root = Path(repo_root).resolve() if repo_root is not None else settings.repo_root
    runner = runner or CheckRunner()

    runner.log("\n🧪 Running Game Center Structure Tests\n", Colors.CYAN)
    runner.log(f"Repository root: {root}\n", Colors.YELLOW)

    runner.log(f"Testing {settings.registry_file}...", Colors.CYAN)
    registry_path = root / settings.registry_file
    registry_name = registry_path.name

    runner.check(f"{registry_name} exists", registry_path.exists)

    registry: Any = None
    try:
        registry = json.loads(registry_path.read_text(encoding="utf-8"))
        runner.record(f"{registry_name} is valid JSON", True)
    except (OSError, ValueError) as e:
        runner.record(f"{registry_name} is valid JSON", False, f"Invalid JSON: {e}")

    games = registry.get("games") if isinstance(registry, dict) else None
    runner.check(f'{registry_name} has "games" array', lambda: isinstance(games, list))

    if isinstance(games, list):
        runner.section("Testing game entries...")
        for index, game in enumerate(games):
            game_id = game.get("id") if isinstance(game, dict) else None
            prefix = f"Game {index + 1} ({game_id or 'unknown'})"
            validate_registry_entry(runner, game, prefix)
            if isinstance(game, dict) and _is_non_empty_string(game.get("path")):
                validate_game_directory(runner, root, game, prefix)

    runner.section("Testing main files...")
    validate_site_files(runner, root)

    return runner


def main() -> int:
    """Validate the repository at settings.repo_root; returns the exit code."""
    runner = validate_structure()
    runner.print_summary()
    return runner.exit_code
