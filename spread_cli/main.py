"""Argument parsing and command dispatch for the ``spread`` CLI."""

from __future__ import annotations

import logging
from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Sequence

from spread_core import __version__
from spread_core.config import load_settings
from spread_core.errors import SpreadError
from spread_core.install import SpreadInstaller, conflict_strategy_for

logger = logging.getLogger(__name__)

CONFLICT_POLICIES = ("interactive", "existing", "new", "skip")


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="spread", description="Distribute files and components with version control")
    parser.add_argument("--version", action="version", version=f"spread {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Install a spread and its spread dependencies")
    _add_common_arguments(add)
    add.add_argument("--no-install", action="store_true", help="Do not run the package manager")
    add.add_argument(
        "--conflict",
        choices=CONFLICT_POLICIES,
        help="How to settle package version conflicts (default: [spread].conflict_policy or interactive)",
    )

    resolve = subparsers.add_parser("resolve", help="Print the artifact location a reference resolves to")
    _add_common_arguments(resolve)
    return parser


def _add_common_arguments(parser: ArgumentParser) -> None:
    parser.add_argument("reference", help="Spread name, name@version, URL, /homepage/path or local path")
    parser.add_argument("--spread-version", dest="spread_version", help="Version to install (default: latest)")
    parser.add_argument("--project-dir", default=".", help="Project root to install into")
    parser.add_argument("--homepage", help="Homepage used for /relative references (default: spread.json)")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _project_root(args: Namespace, start_dir: Path | None) -> Path:
    raw = Path(str(args.project_dir or "."))
    if raw.is_absolute():
        return raw
    return ((start_dir or Path.cwd()) / raw).resolve()


def _installer(args: Namespace, project_root: Path) -> SpreadInstaller:
    settings = load_settings(project_root)
    policy = getattr(args, "conflict", None) or settings.conflict_policy
    return SpreadInstaller(
        project_root,
        settings=settings,
        homepage=args.homepage,
        strategy=conflict_strategy_for(policy),
    )


def _run_add(args: Namespace, project_root: Path) -> int:
    installer = _installer(args, project_root)
    result = installer.add(args.reference, args.spread_version, install_packages=not args.no_install)
    for failure in result.report.failures:
        print(f"[spread:add] warning: failed to process spread dependency {failure.key}: {failure.error}")
    for identity in result.report.installed[1:]:
        print(f"[spread:add] installed dependency {identity}")
    if result.plan is not None and not result.plan.is_empty:
        print(
            "[spread:add] packages "
            f"dependencies={len(result.plan.dependencies)} devDependencies={len(result.plan.dev_dependencies)}"
        )
    print(f"[spread:add] successfully installed {result.spread.identity}")
    return 0


def _run_resolve(args: Namespace, project_root: Path) -> int:
    installer = _installer(args, project_root)
    location = installer.resolve(args.reference, args.spread_version)
    print(location.location)
    return 0


def main(argv: Sequence[str] | None = None, *, start_dir: Path | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(bool(args.verbose))
    project_root = _project_root(args, start_dir)
    command = str(args.command)
    try:
        if command == "add":
            return _run_add(args, project_root)
        return _run_resolve(args, project_root)
    except (SpreadError, OSError) as exc:
        logger.debug("spread %s failed", command, exc_info=True)
        print(f"[spread:{command}] failed: {exc}")
        return 1
