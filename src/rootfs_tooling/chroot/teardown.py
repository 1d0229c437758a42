"""Teardown: undo mounts and the emulator copy; on fatal errors also delete the rootfs and exit 1."""

from __future__ import annotations

import logging
import sys
from typing import NoReturn

from rootfs_tooling.chroot.pseudofs import mount_entries, unmount_all
from rootfs_tooling.context import BuildContext
from rootfs_tooling.host import HostOps

log = logging.getLogger(__name__)


def cleanup_chroot(ctx: BuildContext, ops: HostOps) -> None:
    """Unmount pseudo-filesystems and remove the emulator installed for this session, if any."""
    unmount_all(ctx.rootfs, ops)
    if ctx.emulator:
        dest = ctx.emulator_path(ctx.emulator)
        if ops.exists(dest):
            try:
                ops.remove_file(dest)
            except OSError as e:
                log.warning("Could not remove %s: %s", dest, e)


def _remove_rootfs(ctx: BuildContext, ops: HostOps) -> str | None:
    """Delete the rootfs. Returns why it was kept, or None once it is gone."""
    # Never recurse into a host /dev, /proc or /sys that is still bound in.
    busy = [e.rootfs_path for e in mount_entries(ctx.rootfs) if ops.is_mountpoint(e.rootfs_path)]
    if busy:
        return f"still mounted: {', '.join(map(str, busy))}"
    try:
        ops.remove_tree(ctx.rootfs)
    except OSError as e:
        log.warning("Could not remove %s: %s", ctx.rootfs, e)
        return str(e)
    return None


def fatal_abort(message: str, ctx: BuildContext, ops: HostOps) -> NoReturn:
    """Report message, clean up, delete the rootfs (unless keep_rootfs_on_error) and exit with status 1.

    When the rootfs cannot be deleted the FATAL output names the kept path so
    it can be cleaned up by hand.
    """
    print(f"❌ FATAL: {message}", file=sys.stderr, flush=True)
    cleanup_chroot(ctx, ops)
    if ops.exists(ctx.rootfs):
        if ctx.keep_rootfs_on_error:
            print(f"   Keeping {ctx.rootfs} for inspection", file=sys.stderr)
        else:
            reason = _remove_rootfs(ctx, ops)
            if reason:
                print(
                    f"❌ FATAL: rootfs kept at {ctx.rootfs} ({reason}); remove it manually",
                    file=sys.stderr,
                )
    raise SystemExit(1)
