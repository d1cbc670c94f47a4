"""Shell, git and console output utilities.

Provides thin wrappers around subprocess calls for git and the GitHub CLI,
plus the logger that every component receives instead of printing directly.
"""

from __future__ import annotations

import os
import subprocess
import sys
from typing import Protocol


def git(*args: str, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "diff", "--name-only").
        check: If True (default), raise CalledProcessError on non-zero exit.
               Set to False for commands that may legitimately fail.

    Returns:
        Stripped stdout from the git command.
    """
    result = subprocess.run(["git", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


def gh(*args: str, token: str | None = None, check: bool = True) -> str:
    """Run a GitHub CLI command and return stdout.

    Args:
        *args: Arguments to pass to gh (e.g., "api", "repos/o/r/commits/abc").
        token: Token to authenticate with. Falls back to whatever gh is
               already configured with when omitted.
        check: If True (default), raise CalledProcessError on non-zero exit.
    """
    env = None
    if token:
        env = {**os.environ, "GH_TOKEN": token}
    result = subprocess.run(
        ["gh", *args], capture_output=True, text=True, check=check, env=env
    )
    return result.stdout.strip()


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate the phases of a check in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def fatal(msg: str) -> None:
    """Print an error message and exit with code 1.

    Use for unrecoverable errors that should fail the CI job.
    """
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


class Logger(Protocol):
    """Severity-levelled sink passed to every component that reports progress."""

    def debug(self, msg: str) -> None: ...

    def info(self, msg: str) -> None: ...

    def notice(self, msg: str) -> None: ...

    def warning(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...


class ConsoleLogger:
    """Logger that prints to the terminal.

    Under GitHub Actions, debug/notice/warning/error lines are emitted as
    workflow commands (``::warning::...``) so they show up as annotations.
    Debug lines are dropped unless debugging is enabled.

    Args:
        github_actions: Emit workflow commands. Defaults to detecting the
                        ``GITHUB_ACTIONS`` environment variable.
        debug: Show debug lines. Defaults to ``RUNNER_DEBUG == "1"``.
    """

    def __init__(
        self, *, github_actions: bool | None = None, debug: bool | None = None
    ) -> None:
        if github_actions is None:
            github_actions = os.environ.get("GITHUB_ACTIONS") == "true"
        if debug is None:
            debug = os.environ.get("RUNNER_DEBUG") == "1"
        self.github_actions = github_actions
        self.show_debug = debug

    def _annotate(self, command: str, label: str, msg: str) -> None:
        if self.github_actions:
            print(f"::{command}::{msg}")
        else:
            print(f"  {label}: {msg}", file=sys.stderr)

    def debug(self, msg: str) -> None:
        if not self.show_debug:
            return
        if self.github_actions:
            print(f"::debug::{msg}")
        else:
            print(f"  [debug] {msg}")

    def info(self, msg: str) -> None:
        print(f"  {msg}")

    def notice(self, msg: str) -> None:
        if self.github_actions:
            print(f"::notice::{msg}")
        else:
            print(f"  {msg}")

    def warning(self, msg: str) -> None:
        self._annotate("warning", "Warning", msg)

    def error(self, msg: str) -> None:
        self._annotate("error", "Error", msg)


class NullLogger:
    """Logger that discards everything."""

    def debug(self, msg: str) -> None:
        pass

    def info(self, msg: str) -> None:
        pass

    def notice(self, msg: str) -> None:
        pass

    def warning(self, msg: str) -> None:
        pass

    def error(self, msg: str) -> None:
        pass
