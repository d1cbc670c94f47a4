"""Helpers for running a check as a GitHub Actions workflow step."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path

from .errors import ConfigError
from .models import CheckResult, PullRequestContext


def _read_event_payload(event_path: str | None) -> dict:
    if not event_path:
        return {}
    try:
        return json.loads(Path(event_path).read_text())
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not read event payload {event_path}: {exc}") from exc


def load_event_context(env: Mapping[str, str] | None = None) -> PullRequestContext:
    """Build a PullRequestContext from the GitHub Actions environment.

    Reads GITHUB_EVENT_NAME, GITHUB_SHA and GITHUB_REPOSITORY, plus
    ``pull_request.base.sha`` and ``pull_request.number`` from the JSON
    payload at GITHUB_EVENT_PATH.
    """
    env = os.environ if env is None else env
    payload = _read_event_payload(env.get("GITHUB_EVENT_PATH"))
    pull_request = payload.get("pull_request") or {}
    base = pull_request.get("base") or {}

    return PullRequestContext(
        event_name=env.get("GITHUB_EVENT_NAME", ""),
        base_sha=base.get("sha"),
        head_sha=env.get("GITHUB_SHA"),
        number=pull_request.get("number"),
        repository=env.get("GITHUB_REPOSITORY"),
    )


def _write_output(output_path: str, name: str, value: str) -> None:
    with open(output_path, "a") as fh:
        fh.write(f"{name}={value}\n")


def write_outputs(output_path: str, result: CheckResult) -> None:
    """Append the check's step outputs to the GITHUB_OUTPUT file."""
    _write_output(output_path, "version-changed", "true" if result.version_changed else "false")
    _write_output(output_path, "current-version", result.current_version)
    _write_output(output_path, "previous-version", result.previous_version)
