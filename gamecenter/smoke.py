"""
Website smoke test.

Starts the static server on a local port, then checks that the site loads
and can find all games:
1. The index page loads
2. games.json is served and parses
3. Every listed game's index.html is reachable
4. The index page has the game grid element

Requests are made one after another; the server is always stopped at the end.
"""

import asyncio
import json
import logging
from pathlib import Path

import httpx
import uvicorn

from gamecenter.checks import CheckRunner, Colors
from gamecenter.config import settings
from gamecenter.static_server import create_static_app

logger = logging.getLogger(__name__)

# Text the index page must contain
BRAND_MARKER = "Game Center"
GAME_GRID_MARKERS = ("game-grid", "gameGrid")


class ServerStartError(Exception):
    """Raised when the static server cannot start listening."""


def game_index_url(game_path: str) -> str:
    """
    Turn a registry `path` into the URL of the game's index.html.

    e.g., ./games/snake -> /games/snake/index.html
    """
    if game_path.startswith("./"):
        game_path = game_path[1:]
    elif not game_path.startswith("/"):
        game_path = "/" + game_path
    return f"{game_path.rstrip('/')}/index.html"


async def _serve(server: uvicorn.Server) -> None:
    # uvicorn exits the process when it cannot bind
    try:
        await server.serve()
    except SystemExit as e:
        raise ServerStartError(f"Server exited during startup (code {e.code})") from e


async def start_server(root: Path, host: str, port: int) -> tuple[uvicorn.Server, asyncio.Task]:
    """Start the static server in a background task and wait until it listens."""
    config = uvicorn.Config(
        create_static_app(root),
        host=host,
        port=port,
        log_level="warning",
        lifespan="off",
    )
    server = uvicorn.Server(config)
    task = asyncio.create_task(_serve(server))

    while not server.started:
        if task.done():
            # Surfaces ServerStartError (or whatever stopped serve())
            task.result()
            raise ServerStartError("Server stopped before it started listening")
        await asyncio.sleep(0.05)

    return server, task


async def stop_server(server: uvicorn.Server, task: asyncio.Task) -> None:
    server.should_exit = True
    try:
        await task
    except Exception as e:
        logger.warning("Error while stopping server: %s", e)


async def check_index_page(client: httpx.AsyncClient, runner: CheckRunner) -> None:
    runner.section("Test 1: Index page loads")
    try:
        response = await client.get("/")
    except httpx.HTTPError as e:
        runner.record("Error loading index page", False, str(e))
        return
    if response.status_code == 200 and BRAND_MARKER in response.text:
        runner.record("Index page loaded successfully", True)
    else:
        runner.record("Index page failed to load correctly", False)


async def check_registry_and_games(client: httpx.AsyncClient, runner: CheckRunner) -> None:
    registry_url = f"/{settings.registry_file}"
    runner.section(f"Test 2: {settings.registry_file} is accessible")
    try:
        response = await client.get(registry_url)
    except httpx.HTTPError as e:
        runner.record(f"Error loading {settings.registry_file}", False, str(e))
        return

    if response.status_code != 200:
        runner.record(f"{settings.registry_file} returned status {response.status_code}", False)
        return

    try:
        registry = json.loads(response.text)
    except ValueError as e:
        runner.record(f"{settings.registry_file} contains invalid JSON", False, str(e))
        return

    games = registry.get("games") if isinstance(registry, dict) else None
    if not isinstance(games, list):
        runner.record(f"{settings.registry_file} does not contain games array", False)
        return
    runner.record(f"{settings.registry_file} loaded and parsed successfully", True)

    runner.section("Test 3: All game index.html files are accessible")
    for game in games:
        game = game if isinstance(game, dict) else {}
        game_id = game.get("id") or "unknown"
        game_path = game.get("path")
        if not isinstance(game_path, str) or not game_path:
            runner.record(f"{game_id}: has no path", False)
            continue
        try:
            game_response = await client.get(game_index_url(game_path))
        except httpx.HTTPError as e:
            runner.record(f"{game_id}: Error accessing index.html", False, str(e))
            continue
        if game_response.status_code == 200:
            runner.record(f"{game_id}: index.html is accessible", True)
        else:
            runner.record(f"{game_id}: index.html returned status {game_response.status_code}", False)


async def check_game_grid(client: httpx.AsyncClient, runner: CheckRunner) -> None:
    runner.section("Test 4: Index page has game grid element")
    try:
        response = await client.get("/")
    except httpx.HTTPError as e:
        runner.record("Error checking game grid", False, str(e))
        return
    found = any(marker in response.text for marker in GAME_GRID_MARKERS)
    runner.record("Game grid element found" if found else "Game grid element not found", found)


async def run_smoke_tests(
    repo_root: Path | str | None = None,
    host: str | None = None,
    port: int | None = None,
    settle_seconds: float | None = None,
    runner: CheckRunner | None = None,
) -> CheckRunner:
    """Serve the repository locally and run the site checks against it."""
    root = Path(repo_root).resolve() if repo_root is not None else settings.repo_root
    host = host or settings.smoke_host
    port = port if port is not None else settings.smoke_port
    settle_seconds = settle_seconds if settle_seconds is not None else settings.smoke_settle_seconds
    runner = runner or CheckRunner()

    runner.log("\n🌐 Running Web Server Integration Tests\n", Colors.CYAN)

    try:
        server, task = await start_server(root, host, port)
    except (ServerStartError, OSError) as e:
        logger.error("Could not start server on %s:%d: %s", host, port, e)
        runner.record(f"Server started on http://{host}:{port}", False, str(e))
        return runner

    try:
        runner.log(f"Server started on http://{host}:{port}", Colors.YELLOW)
        await asyncio.sleep(settle_seconds)

        async with httpx.AsyncClient(base_url=f"http://{host}:{port}", timeout=None, trust_env=False) as client:
            await check_index_page(client, runner)
            await check_registry_and_games(client, runner)
            await check_game_grid(client, runner)
    except Exception as e:
        logger.error("Fatal error: %s", e)
        runner.record("Smoke test run completed", False, str(e))
    finally:
        await stop_server(server, task)
        runner.log("Server stopped\n", Colors.YELLOW)

    return runner


def main() -> int:
    """Run the smoke test against settings.repo_root; returns the exit code."""
    logging.basicConfig(level=settings.log_level, format="%(message)s")
    runner = asyncio.run(run_smoke_tests())
    runner.print_summary()
    return runner.exit_code
