"""Check configuration.

Settings are layered, lowest precedence first:
1. Defaults on CheckConfig
2. An optional TOML file (``.version-gate.toml``), read with tomlkit
3. GitHub Actions inputs from the environment (``INPUT_TAG-PREFIX`` etc.)
4. Explicit overrides (CLI flags)

Keys use the same hyphenated names as the action inputs.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from tomlkit.exceptions import TOMLKitError

from .commits import DEFAULT_SKIP_KEYWORD
from .errors import ConfigError

DEFAULT_CONFIG_FILENAME = ".version-gate.toml"


class CheckConfig(BaseModel):
    """Settings for a single version check.

    Attributes:
        package_path: Path to package.json, relative to the repository root.
        tag_prefix: Prefix of release tags (e.g., "v" for "v1.2.3").
        skip_files_check: Always compare versions, regardless of what changed.
        skip_version_keyword: Commits whose message contains this are
                              ignored when collecting changed files. An
                              empty string disables the feature.
        include_dev_dependencies: devDependencies changes require a bump.
        token: GitHub token for listing PR commits.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    package_path: str = Field(default="package.json", alias="package-path")
    tag_prefix: str = Field(default="v", alias="tag-prefix")
    skip_files_check: bool = Field(default=False, alias="skip-files-check")
    skip_version_keyword: str = Field(
        default=DEFAULT_SKIP_KEYWORD, alias="skip-version-keyword"
    )
    include_dev_dependencies: bool = Field(
        default=False, alias="include-dev-dependencies"
    )
    token: str | None = None


def _input_names() -> list[str]:
    return [field.alias or name for name, field in CheckConfig.model_fields.items()]


def _normalise_keys(values: Mapping[str, Any]) -> dict[str, Any]:
    """Rewrite field names (tag_prefix) to input names (tag-prefix)."""
    aliases = {name: field.alias or name for name, field in CheckConfig.model_fields.items()}
    return {aliases.get(key, key): value for key, value in values.items()}


def load_config_file(path: Path) -> dict[str, Any]:
    """Read settings from a TOML file, returning plain Python values.

    Raises:
        ConfigError: If the file is not valid TOML.
    """
    try:
        doc = tomlkit.parse(path.read_text())
    except TOMLKitError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    return doc.unwrap()


def inputs_from_env(env: Mapping[str, str]) -> dict[str, str]:
    """Collect GitHub Actions inputs for every known setting.

    GitHub exposes ``with:`` inputs as ``INPUT_<NAME>`` with the name
    upper-cased. An input that is present but empty is kept as "", which
    for skip-version-keyword means "disabled". Other empty inputs are
    treated as not set.
    """
    values: dict[str, str] = {}
    for name in _input_names():
        key = f"INPUT_{name.upper()}"
        if key not in env:
            continue
        value = env[key]
        if value == "" and name != "skip-version-keyword":
            continue
        values[name] = value
    return values


def load_config(
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> CheckConfig:
    """Build a CheckConfig from file, environment and overrides.

    Args:
        path: TOML file to read. When None, ``.version-gate.toml`` in the
              current directory is used if it exists.
        env: Environment to read inputs from; defaults to os.environ.
        overrides: Highest-precedence values; None entries are ignored.

    Raises:
        ConfigError: If the file is missing (when given explicitly), is not
            valid TOML, or any value fails validation.
    """
    env = os.environ if env is None else env
    values: dict[str, Any] = {}

    if path is not None:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        values.update(_normalise_keys(load_config_file(path)))
    elif Path(DEFAULT_CONFIG_FILENAME).exists():
        values.update(_normalise_keys(load_config_file(Path(DEFAULT_CONFIG_FILENAME))))

    values.update(inputs_from_env(env))
    if not values.get("token") and env.get("GITHUB_TOKEN"):
        values["token"] = env["GITHUB_TOKEN"]

    for key, value in _normalise_keys(overrides or {}).items():
        if value is not None:
            values[key] = value

    try:
        return CheckConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
