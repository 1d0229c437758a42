"""Run a command inside the rootfs, preparing binfmt and pseudo-filesystems first."""

from __future__ import annotations

import shlex

from rootfs_tooling.chroot.binfmt import ensure_registered
from rootfs_tooling.chroot.pseudofs import mount_all
from rootfs_tooling.context import BuildContext
from rootfs_tooling.errors import CommandExecutionFailure
from rootfs_tooling.host import HostOps
from rootfs_tooling.runner import CURRENT_ARCH_VAR, announce

# Search path for the chrooted command. Also used on the host to find chroot(8).
CHROOT_PATH = "/usr/bin:/usr/sbin:/bin:/sbin"


def chroot_argv(ctx: BuildContext, argv: list[str]) -> list[str]:
    return ["chroot", str(ctx.rootfs), *argv]


def chroot_env(ctx: BuildContext) -> dict[str, str]:
    """Environment for a chrooted command. Inside the rootfs the target is the current arch."""
    return {"PATH": CHROOT_PATH, CURRENT_ARCH_VAR: ctx.resolve_target_arch()}


def run_in_chroot(ctx: BuildContext, argv: list[str], ops: HostOps) -> int:
    """ensure_registered + mount_all, then chroot into ctx.rootfs and run argv. Returns its exit status.

    Cheap to repeat before every chrooted command: registration and mounts are
    only performed when missing.
    """
    ensure_registered(ctx, ops)
    mount_all(ctx.rootfs, ops)
    announce(f"Running {shlex.join(argv)} in {ctx.rootfs}")
    return ops.run(chroot_argv(ctx, argv), env=chroot_env(ctx))


def run_in_chroot_checked(ctx: BuildContext, argv: list[str], ops: HostOps) -> None:
    """run_in_chroot, raising CommandExecutionFailure on non-zero exit."""
    rc = run_in_chroot(ctx, argv, ops)
    if rc != 0:
        raise CommandExecutionFailure(chroot_argv(ctx, argv), rc)
