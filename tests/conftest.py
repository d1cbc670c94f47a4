"""Shared test fixtures."""

from __future__ import annotations

import json
from typing import Any

import pytest

BASE_SHA = "a" * 40
HEAD_SHA = "b" * 40


class RecordingLogger:
    """Logger that keeps every message, keyed by severity."""

    def __init__(self) -> None:
        self.messages: dict[str, list[str]] = {
            "debug": [],
            "info": [],
            "notice": [],
            "warning": [],
            "error": [],
        }

    def debug(self, msg: str) -> None:
        self.messages["debug"].append(msg)

    def info(self, msg: str) -> None:
        self.messages["info"].append(msg)

    def notice(self, msg: str) -> None:
        self.messages["notice"].append(msg)

    def warning(self, msg: str) -> None:
        self.messages["warning"].append(msg)

    def error(self, msg: str) -> None:
        self.messages["error"].append(msg)


class FakeRevisionSource:
    """In-memory RevisionSource keyed by (path, ref)."""

    def __init__(
        self,
        files: dict[tuple[str, str], str] | None = None,
        diff: list[str] | None = None,
        tags: list[str] | None = None,
    ) -> None:
        self.files = files or {}
        self.diff = diff or []
        self.tags = tags or []
        self.requests: list[tuple[str, str]] = []

    def get_file_at_revision(self, path: str, ref: str) -> str | None:
        self.requests.append((path, ref))
        return self.files.get((path, ref))

    def changed_files(self, base: str, head: str) -> list[str]:
        return list(self.diff)

    def list_tags(self) -> list[str]:
        return list(self.tags)


def dumps(doc: dict[str, Any]) -> str:
    return json.dumps(doc, indent=2)


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def packages_lockfile() -> dict[str, Any]:
    """An npm v7+ lockfile with one production and one dev dependency."""
    return {
        "name": "my-app",
        "version": "1.0.0",
        "lockfileVersion": 3,
        "requires": True,
        "packages": {
            "": {
                "name": "my-app",
                "version": "1.0.0",
                "dependencies": {"express": "^4.18.0"},
                "devDependencies": {"jest": "^29.0.0"},
            },
            "node_modules/express": {
                "version": "4.18.0",
                "resolved": "https://registry.npmjs.org/express/-/express-4.18.0.tgz",
                "integrity": "sha512-express",
            },
            "node_modules/jest": {
                "version": "29.0.0",
                "resolved": "https://registry.npmjs.org/jest/-/jest-29.0.0.tgz",
                "integrity": "sha512-jest",
                "dev": True,
            },
        },
    }


@pytest.fixture
def legacy_lockfile() -> dict[str, Any]:
    """An npm v6 lockfile."""
    return {
        "name": "my-app",
        "version": "1.0.0",
        "lockfileVersion": 1,
        "dependencies": {
            "express": {
                "version": "4.18.0",
                "resolved": "https://registry.npmjs.org/express/-/express-4.18.0.tgz",
                "integrity": "sha512-express",
            },
        },
    }
