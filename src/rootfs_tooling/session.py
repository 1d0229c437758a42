"""Session boundary: cleanup on normal exit, fatal_abort on any RootfsError."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from rootfs_tooling.chroot.teardown import cleanup_chroot, fatal_abort
from rootfs_tooling.context import BuildContext
from rootfs_tooling.errors import RootfsError
from rootfs_tooling.host import HostOps


@contextmanager
def session(ctx: BuildContext, ops: HostOps, *, cleanup: bool = True) -> Iterator[BuildContext]:
    """Yield ctx; afterwards run cleanup_chroot (rootfs is kept for reuse).

    A RootfsError raised in the block goes through fatal_abort (rootfs deleted,
    SystemExit(1)). Any other exception still unmounts before propagating.
    cleanup=False leaves mounts and the emulator in place on success.
    """
    try:
        yield ctx
    except RootfsError as e:
        fatal_abort(str(e), ctx, ops)
    except BaseException:
        cleanup_chroot(ctx, ops)
        raise
    if cleanup:
        cleanup_chroot(ctx, ops)
