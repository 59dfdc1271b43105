"""Pytest configuration and fixtures for the game center tooling tests."""

import json
import sys
from pathlib import Path

import pytest

# Add the repository root to the path so we can import gamecenter from it
sys.path.insert(0, str(Path(__file__).parent.parent))


INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head><title>AI Game Center</title></head>
<body>
  <h1>Game Center</h1>
  <div id="gameGrid" class="game-grid"></div>
  <script>fetch('./games.json').then(r => r.json());</script>
</body>
</html>
"""


def make_game_entry(game_id: str, **overrides) -> dict:
    """Build a complete games.json entry."""
    entry = {
        "id": game_id,
        "name": game_id.title(),
        "description": f"The {game_id} game",
        "status": "playable",
        "path": f"./games/{game_id}",
        "createdWith": "GitHub Copilot",
        "model": "Claude Sonnet",
        "prLinks": [],
    }
    entry.update(overrides)
    return entry


def write_registry(repo_root: Path, games: list[dict]) -> Path:
    path = repo_root / "games.json"
    path.write_text(json.dumps({"games": games}, indent=2) + "\n", encoding="utf-8")
    return path


def add_game_files(repo_root: Path, game_id: str, readme: str = "# Game\n\nBuilt with Copilot.\n") -> Path:
    game_dir = repo_root / "games" / game_id
    game_dir.mkdir(parents=True, exist_ok=True)
    (game_dir / "index.html").write_text("<!DOCTYPE html><html><body>game</body></html>", encoding="utf-8")
    (game_dir / "README.md").write_text(readme, encoding="utf-8")
    return game_dir


@pytest.fixture
def game_repo(tmp_path) -> Path:
    """A minimal, valid game center checkout with a single game (snake)."""
    (tmp_path / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (tmp_path / "README.md").write_text("# Game Center\n", encoding="utf-8")
    (tmp_path / "AGENTS.md").write_text("# Agents\n", encoding="utf-8")
    (tmp_path / ".github" / "workflows").mkdir(parents=True)
    add_game_files(tmp_path, "snake")
    write_registry(tmp_path, [make_game_entry("snake")])
    return tmp_path
