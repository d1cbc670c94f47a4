"""CLI entry point for version-gate."""

from __future__ import annotations

import argparse
import os
from importlib.metadata import version as pkg_version
from pathlib import Path

from version_gate.config import load_config
from version_gate.errors import VersionGateError
from version_gate.models import CheckStatus
from version_gate.pipeline import run_check
from version_gate.shell import ConsoleLogger, fatal, step
from version_gate.workflow_steps import load_event_context, write_outputs

__version__ = pkg_version("version-gate")


def cmd_check(args: argparse.Namespace) -> None:
    """Run the version check for the current pull request (usually from CI)."""
    step("npm version check")
    try:
        config = load_config(
            Path(args.config) if args.config else None,
            overrides={
                "package-path": args.package_path,
                "tag-prefix": args.tag_prefix,
                "skip-files-check": args.skip_files_check,
                "skip-version-keyword": args.skip_version_keyword,
                "include-dev-dependencies": args.include_dev_dependencies,
            },
        )
        logger = ConsoleLogger()
        logger.info(f"Package path: {config.package_path}")
        logger.info(f"Tag prefix: {config.tag_prefix}")
        logger.info(f"Skip files check: {config.skip_files_check}")
        if config.skip_version_keyword:
            logger.info(f"Skip version keyword: {config.skip_version_keyword}")

        result = run_check(config, load_event_context(), logger=logger)
    except VersionGateError as exc:
        fatal(f"Action failed with error: {exc}")
        return

    output_path = args.github_output or os.environ.get("GITHUB_OUTPUT")
    if output_path:
        write_outputs(output_path, result)

    if result.status is CheckStatus.FAILED:
        fatal(result.message)
    print(f"\n{'=' * 60}\n{result.message or 'Version check completed'}\n{'=' * 60}")


def cli(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="version-gate",
        description="Fail a pull request that changes a package without bumping its version.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check", help="Check the current pull request (usually called from CI)."
    )
    check_parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="TOML config file. (default: .version-gate.toml if present)",
    )
    check_parser.add_argument(
        "--package-path", default=None, help="Path to package.json."
    )
    check_parser.add_argument(
        "--tag-prefix", default=None, help='Release tag prefix (e.g., "v").'
    )
    check_parser.add_argument(
        "--skip-files-check",
        action="store_true",
        default=None,
        help="Compare versions regardless of which files changed.",
    )
    check_parser.add_argument(
        "--skip-version-keyword",
        default=None,
        help='Ignore commits containing this text. Pass "" to disable.',
    )
    check_parser.add_argument(
        "--include-dev-dependencies",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Require a version bump for devDependencies changes.",
    )
    check_parser.add_argument(
        "--github-output",
        default=None,
        help="Step output file. (default: $GITHUB_OUTPUT)",
    )
    check_parser.set_defaults(func=cmd_check)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    cli()
