"""Run commands with the announce-then-run contract; fail with CommandExecutionFailure on non-zero exit."""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping

from rootfs_tooling.context import BuildContext
from rootfs_tooling.errors import CommandExecutionFailure
from rootfs_tooling.host import HostOps

# xbps reads the architecture from these: XBPS_ARCH for a native install,
# XBPS_TARGET_ARCH for a foreign one (skips actions that need to execute
# target binaries outside the emulated chroot).
CURRENT_ARCH_VAR = "XBPS_ARCH"
TARGET_ARCH_VAR = "XBPS_TARGET_ARCH"

BOLD = "\033[1m"
RESET = "\033[m"


def announce(message: str) -> None:
    print(f"{BOLD}{message}{RESET}", flush=True)


def run_cmd(argv: list[str], ops: HostOps, env: Mapping[str, str] | None = None) -> None:
    """Announce and run argv. Raises CommandExecutionFailure on non-zero exit."""
    announce(f"Running {shlex.join(argv)}")
    rc = ops.run(argv, env=env)
    if rc != 0:
        raise CommandExecutionFailure(argv, rc)


def target_env(ctx: BuildContext, ops: HostOps, base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Environment for a package-tool invocation: XBPS_ARCH when native, XBPS_TARGET_ARCH when cross."""
    env = dict(os.environ if base is None else base)
    target = ctx.resolve_target_arch()
    if ctx.is_native(ops):
        env[CURRENT_ARCH_VAR] = target
        env.pop(TARGET_ARCH_VAR, None)
    else:
        env[TARGET_ARCH_VAR] = target
        env.pop(CURRENT_ARCH_VAR, None)
    return env


def package_tool_args(ctx: BuildContext) -> list[str]:
    """Cache dir and repositories as xbps-install/xbps-query flags (-c DIR, -R URL ...)."""
    args: list[str] = []
    if ctx.cache_dir:
        args += ["-c", str(ctx.cache_dir)]
    for repo in ctx.repositories:
        args += ["-R", repo]
    return args


def run_cmd_target(ctx: BuildContext, argv: list[str], ops: HostOps) -> None:
    """Run argv on the host for the session's target architecture. Raises CommandExecutionFailure."""
    announce(f"Running {shlex.join(argv)} for target {ctx.resolve_target_arch()} ...")
    rc = ops.run(argv, env=target_env(ctx, ops))
    if rc != 0:
        raise CommandExecutionFailure(argv, rc)
