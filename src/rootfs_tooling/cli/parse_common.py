"""Shared CLI arguments for session subcommands (--config, --rootfs, --arch, --platform, --dry-run, ...)."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from rootfs_tooling.config import build_context, load_session_config
from rootfs_tooling.context import BuildContext
from rootfs_tooling.host import HostOps, RecordingHostOps, SystemHostOps


def path_resolver(s: str) -> Path:
    """Resolve a path argument to absolute Path (e.g. --rootfs, --config)."""
    return Path(s).resolve()


def add_session_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--config", type=path_resolver, help="Session YAML file")
    ap.add_argument("--rootfs", type=path_resolver, help="Rootfs directory")
    ap.add_argument("--arch", help="Target architecture (e.g. armv7l, aarch64-musl)")
    ap.add_argument("--platform", help="Platform name used when --arch is not given (e.g. rpi3)")
    ap.add_argument("--host-arch", help="Override detected host architecture")
    ap.add_argument("--cache-dir", type=path_resolver, help="Package cache directory")
    ap.add_argument(
        "--repository",
        action="append",
        dest="repositories",
        help="Repository URL (repeatable)",
    )
    ap.add_argument(
        "--require",
        action="append",
        dest="required_tools",
        help="Extra required host tool (repeatable)",
    )
    ap.add_argument(
        "--keep-rootfs",
        action="store_true",
        default=None,
        dest="keep_rootfs_on_error",
        help="Do not delete the rootfs when the session aborts",
    )
    ap.add_argument(
        "--dry-run",
        action="store_true",
        help="Record host actions instead of performing them, then print them",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def session_config(args: argparse.Namespace) -> dict[str, Any]:
    """Session config file (if any) with command-line values layered on top."""
    config = load_session_config(args.config) if args.config else {}
    for key in (
        "rootfs",
        "arch",
        "platform",
        "host_arch",
        "cache_dir",
        "repositories",
        "required_tools",
        "keep_rootfs_on_error",
    ):
        value = getattr(args, key, None)
        if value is not None:
            config[key] = value
    return config


def context_from_args(args: argparse.Namespace) -> BuildContext:
    """BuildContext from parsed args. Prints the error and exits 1 on a bad config."""
    try:
        return build_context(session_config(args))
    except (OSError, ValueError) as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)


def host_ops_from_args(args: argparse.Namespace) -> HostOps:
    if getattr(args, "dry_run", False):
        return RecordingHostOps(arch=None, host=SystemHostOps())
    return SystemHostOps()


def print_recorded_actions(ops: HostOps) -> None:
    if not isinstance(ops, RecordingHostOps):
        return
    print("Dry run, recorded host actions:")
    for action in ops.actions:
        name, *rest = action
        print(f"  {name}: {' '.join(str(r) for r in rest)}")
