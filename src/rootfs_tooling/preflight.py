"""Pre-flight check that the host tools a rootfs session shells out to are installed."""

from __future__ import annotations

from collections.abc import Iterable

from rootfs_tooling.errors import MissingTool
from rootfs_tooling.host import HostOps

BASE_TOOLS = ("chroot", "mount", "umount", "mountpoint", "modprobe")


def required_tools(extra: Iterable[str] = ()) -> list[str]:
    """BASE_TOOLS followed by extra, first occurrence wins."""
    return list(dict.fromkeys([*BASE_TOOLS, *extra]))


def check_tools(ops: HostOps, extra: Iterable[str] = ()) -> None:
    """Raise MissingTool listing every required tool not found on PATH."""
    missing = [t for t in required_tools(extra) if ops.which(t) is None]
    if missing:
        raise MissingTool(missing)
