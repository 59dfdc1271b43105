"""Tests for the CheckRunner tally."""

import io

from gamecenter.checks import CheckRunner


def make_runner() -> CheckRunner:
    return CheckRunner(stream=io.StringIO())


class TestCheckRunner:
    """Tests for CheckRunner."""

    def test_truthy_result_passes(self):
        runner = make_runner()

        assert runner.check("passes", lambda: True) is True
        assert runner.passed == 1
        assert runner.failed == 0
        assert runner.exit_code == 0

    def test_falsy_result_fails(self):
        runner = make_runner()

        assert runner.check("fails", lambda: None) is False
        assert runner.failed == 1
        assert runner.exit_code == 1

    def test_exception_fails_with_detail(self):
        runner = make_runner()

        def boom():
            raise FileNotFoundError("index.html")

        assert runner.check("reads file", boom) is False
        assert runner.results[0].detail == "index.html"
        assert "✗ reads file: index.html" in runner.stream.getvalue()

    def test_checks_continue_after_failure(self):
        runner = make_runner()

        runner.check("one", lambda: False)
        runner.check("two", lambda: 1 / 0)
        runner.check("three", lambda: True)

        assert runner.total == 3
        assert runner.passed == 1
        assert runner.failed == 2

    def test_record(self):
        runner = make_runner()

        runner.record("manual pass", True)
        runner.record("manual fail", False, "why")

        output = runner.stream.getvalue()
        assert "✓ manual pass" in output
        assert "✗ manual fail: why" in output

    def test_no_color_for_non_tty(self):
        runner = make_runner()

        runner.record("plain", True)

        assert "\x1b[" not in runner.stream.getvalue()

    def test_summary(self):
        runner = make_runner()
        runner.record("a", True)
        runner.record("b", False)

        runner.print_summary()

        output = runner.stream.getvalue()
        assert "Total tests: 2" in output
        assert "Passed: 1" in output
        assert "Failed: 1" in output
