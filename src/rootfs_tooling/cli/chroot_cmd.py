"""`rootfs chroot|run-target|register|cleanup`: session subcommands."""

from __future__ import annotations

import argparse
import sys

from rootfs_tooling.chroot import cleanup_chroot, ensure_registered, run_in_chroot_checked
from rootfs_tooling.cli.parse_common import (
    add_session_args,
    context_from_args,
    host_ops_from_args,
    print_recorded_actions,
    setup_logging,
)
from rootfs_tooling.errors import RootfsError
from rootfs_tooling.preflight import check_tools
from rootfs_tooling.runner import package_tool_args, run_cmd_target
from rootfs_tooling.session import session


def _parser(prog: str, description: str, command: bool = False) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog=prog, description=description)
    add_session_args(ap)
    if command:
        ap.add_argument("command", nargs=argparse.REMAINDER, help="-- <command> [args...]")
    return ap


def _command(ap: argparse.ArgumentParser, args: argparse.Namespace) -> list[str]:
    cmd = list(args.command)
    if cmd and cmd[0] == "--":
        cmd = cmd[1:]
    if not cmd:
        ap.error("missing command (use: -- <command> [args...])")
    return cmd


def _argv(argv: list[str] | None) -> list[str]:
    if argv is None:
        return sys.argv[2:] if len(sys.argv) > 2 else []  # skip 'rootfs <subcommand>'
    return argv


def run_chroot_argv(argv: list[str] | None = None) -> None:
    """Prepare the rootfs (binfmt, dev/proc/sys) and run a command inside it."""
    ap = _parser("rootfs chroot", "Run a command inside the rootfs", command=True)
    ap.add_argument(
        "--no-cleanup",
        action="store_true",
        help="Leave pseudo-filesystems mounted and the emulator installed afterwards",
    )
    args = ap.parse_args(_argv(argv))
    setup_logging(args.verbose)
    command = _command(ap, args)
    ctx = context_from_args(args)
    ops = host_ops_from_args(args)
    try:
        with session(ctx, ops, cleanup=not args.no_cleanup):
            check_tools(ops, ctx.required_tools)
            run_in_chroot_checked(ctx, command, ops)
    finally:
        print_recorded_actions(ops)
    sys.exit(0)


def run_target_argv(argv: list[str] | None = None) -> None:
    """Run a host command (usually the package tool) with XBPS_ARCH or XBPS_TARGET_ARCH set."""
    ap = _parser(
        "rootfs run-target",
        "Run a host command for the target architecture",
        command=True,
    )
    ap.add_argument(
        "--with-repos",
        action="store_true",
        help="Append cache dir and repositories as -c/-R flags",
    )
    args = ap.parse_args(_argv(argv))
    setup_logging(args.verbose)
    command = _command(ap, args)
    ctx = context_from_args(args)
    if args.with_repos:
        command += package_tool_args(ctx)
    ops = host_ops_from_args(args)
    try:
        with session(ctx, ops, cleanup=False):
            run_cmd_target(ctx, command, ops)
    finally:
        print_recorded_actions(ops)
    sys.exit(0)


def run_register_argv(argv: list[str] | None = None) -> None:
    """Register the emulator for the target and install it into the rootfs; leaves it in place."""
    ap = _parser("rootfs register", "Register binfmt_misc emulation for the rootfs")
    args = ap.parse_args(_argv(argv))
    setup_logging(args.verbose)
    ctx = context_from_args(args)
    ops = host_ops_from_args(args)
    try:
        with session(ctx, ops, cleanup=False):
            check_tools(ops, ctx.required_tools)
            ensure_registered(ctx, ops)
            if ctx.emulator:
                print(f"✅ {ctx.emulator} registered for {ctx.target_arch}")
            else:
                print(f"✅ {ctx.target_arch} runs natively on {ctx.host_arch}")
    finally:
        print_recorded_actions(ops)
    sys.exit(0)


def run_cleanup_argv(argv: list[str] | None = None) -> None:
    """Unmount dev/proc/sys and remove the emulator copy from the rootfs. Never deletes the rootfs."""
    ap = _parser("rootfs cleanup", "Unmount pseudo-filesystems and remove the emulator copy")
    args = ap.parse_args(_argv(argv))
    setup_logging(args.verbose)
    ctx = context_from_args(args)
    ops = host_ops_from_args(args)
    try:
        # Only a resolvable arch tells us which emulator copy to remove.
        if ctx.target_arch or ctx.platform:
            try:
                desc = None if ctx.is_native(ops) else ctx.descriptor()
            except RootfsError as e:
                print(f"❌ {e}", file=sys.stderr)
                sys.exit(1)
            ctx.emulator = desc.emulator if desc else None
        cleanup_chroot(ctx, ops)
    finally:
        print_recorded_actions(ops)
    print("Cleanup complete!")
    sys.exit(0)
