"""Tests for the stderr progress spinner."""

from __future__ import annotations

import asyncio
import io

from termread.spinner import run_with_spinner


class _Tty(io.StringIO):
    def isatty(self):
        return True


async def _value(result, delay=0.0):
    await asyncio.sleep(delay)
    return result


class TestRunWithSpinner:

    def test_silent_when_not_a_terminal(self):
        stream = io.StringIO()
        assert asyncio.run(run_with_spinner(_value(7), "Working", stream)) == 7
        assert stream.getvalue() == ""

    def test_animates_and_clears_on_terminal(self):
        stream = _Tty()
        assert asyncio.run(run_with_spinner(_value("done", 0.25), "Working", stream)) == "done"
        written = stream.getvalue()
        assert "\rWorking |" in written
        assert written.endswith("\r" + " " * len("Working  ") + "\r")
