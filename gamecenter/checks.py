"""
Pass/fail bookkeeping for the repository checks.

Both the structure validator and the website smoke tester run a flat list of
independent checks and report a tally at the end. A failing check, or one
that raises, is recorded and the next check still runs.
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, TextIO


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\x1b[0m"
    RED = "\x1b[31m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[33m"
    CYAN = "\x1b[36m"


def _use_color(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


@dataclass
class CheckResult:
    description: str
    passed: bool
    detail: str = ""


@dataclass
class CheckRunner:
    """Runs checks and keeps the running tally."""
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    results: list[CheckResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.passed)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def log(self, message: str, color: str = Colors.RESET) -> None:
        if _use_color(self.stream):
            message = f"{color}{message}{Colors.RESET}"
        print(message, file=self.stream)

    def section(self, title: str) -> None:
        self.log(f"\n{title}", Colors.CYAN)

    def record(self, description: str, ok: bool, detail: str = "") -> bool:
        """Record the outcome of a check that was evaluated by the caller."""
        self.results.append(CheckResult(description=description, passed=ok, detail=detail))
        message = f"{description}: {detail}" if detail else description
        if ok:
            self.log(f"  ✓ {message}", Colors.GREEN)
        else:
            self.log(f"  ✗ {message}", Colors.RED)
        return ok

    def check(self, description: str, fn: Callable[[], Any]) -> bool:
        """
        Run a check function.

        A falsy return value fails the check; an exception fails it with the
        exception message as detail.
        """
        try:
            ok = bool(fn())
        except Exception as e:
            return self.record(description, False, str(e))
        return self.record(description, ok)

    def print_summary(self) -> None:
        self.log("\n" + "=" * 50, Colors.CYAN)
        self.log(f"Total tests: {self.total}", Colors.CYAN)
        self.log(f"Passed: {self.passed}", Colors.GREEN)
        self.log(f"Failed: {self.failed}", Colors.RED if self.failed else Colors.GREEN)
        self.log("=" * 50 + "\n", Colors.CYAN)
