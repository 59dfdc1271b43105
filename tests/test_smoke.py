"""
Tests for the website smoke test.

The integration tests start the real server on a free local port.
"""

import io
import os
import socket
from unittest.mock import AsyncMock, patch

import pytest

from gamecenter.checks import CheckRunner
from gamecenter.smoke import game_index_url, main, run_smoke_tests

from tests.conftest import make_game_entry, write_registry


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


async def smoke(repo_root, port: int | None = None) -> CheckRunner:
    return await run_smoke_tests(
        repo_root,
        host="127.0.0.1",
        port=port or free_port(),
        settle_seconds=0,
        runner=CheckRunner(stream=io.StringIO()),
    )


def failed_checks(runner: CheckRunner) -> list[str]:
    return [r.description for r in runner.results if not r.passed]


class TestGameIndexUrl:
    """Tests for game_index_url."""

    def test_dot_slash_prefix(self):
        assert game_index_url("./games/snake") == "/games/snake/index.html"

    def test_relative(self):
        assert game_index_url("games/snake") == "/games/snake/index.html"

    def test_absolute(self):
        assert game_index_url("/games/snake") == "/games/snake/index.html"

    def test_trailing_slash(self):
        assert game_index_url("./games/snake/") == "/games/snake/index.html"


class TestRunSmokeTests:
    """Integration tests against a live server."""

    @pytest.mark.asyncio
    async def test_all_checks_pass(self, game_repo):
        runner = await smoke(game_repo)

        assert failed_checks(runner) == []
        assert [r.description for r in runner.results] == [
            "Index page loaded successfully",
            "games.json loaded and parsed successfully",
            "snake: index.html is accessible",
            "Game grid element found",
        ]
        assert runner.exit_code == 0

    @pytest.mark.asyncio
    async def test_missing_game_fails_only_that_game(self, game_repo):
        write_registry(game_repo, [make_game_entry("ghost"), make_game_entry("snake")])

        runner = await smoke(game_repo)

        assert failed_checks(runner) == ["ghost: index.html returned status 404"]
        assert runner.passed == 4

    @pytest.mark.asyncio
    async def test_game_without_path(self, game_repo):
        entry = make_game_entry("snake")
        del entry["path"]
        write_registry(game_repo, [entry])

        runner = await smoke(game_repo)

        assert failed_checks(runner) == ["snake: has no path"]

    @pytest.mark.asyncio
    async def test_invalid_registry_json(self, game_repo):
        (game_repo / "games.json").write_text("{broken")

        runner = await smoke(game_repo)

        assert failed_checks(runner) == ["games.json contains invalid JSON"]
        # The index and grid checks are independent of the registry
        assert runner.passed == 2

    @pytest.mark.asyncio
    async def test_missing_registry(self, game_repo):
        (game_repo / "games.json").unlink()

        runner = await smoke(game_repo)

        assert failed_checks(runner) == ["games.json returned status 404"]

    @pytest.mark.asyncio
    async def test_index_without_brand_or_grid(self, game_repo):
        (game_repo / "index.html").write_text("<!DOCTYPE html><html><body>Arcade</body></html>")

        runner = await smoke(game_repo)

        assert failed_checks(runner) == [
            "Index page failed to load correctly",
            "Game grid element not found",
        ]

    @pytest.mark.asyncio
    async def test_server_is_stopped_afterwards(self, game_repo):
        port = free_port()

        await smoke(game_repo, port)

        # The port can be bound again once the server is gone
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(("127.0.0.1", port))

    @pytest.mark.asyncio
    async def test_port_in_use_is_a_failed_check(self, game_repo):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            blocker.listen()
            port = blocker.getsockname()[1]

            runner = await smoke(game_repo, port)

        assert runner.exit_code == 1
        assert failed_checks(runner) == [f"Server started on http://127.0.0.1:{port}"]


class TestMain:
    """Tests for the smoke test entry point."""

    def test_exit_code_follows_results(self, game_repo):
        runner = CheckRunner(stream=io.StringIO())
        runner.record("one", False)

        with patch("gamecenter.smoke.run_smoke_tests", new=AsyncMock(return_value=runner)):
            assert main() == 1

    def test_runs_against_repo_root(self, game_repo):
        env = {
            "GAMECENTER_REPO_ROOT": str(game_repo),
            "GAMECENTER_SMOKE_PORT": str(free_port()),
            "GAMECENTER_SMOKE_SETTLE_SECONDS": "0",
        }
        with patch.dict(os.environ, env):
            assert main() == 0
