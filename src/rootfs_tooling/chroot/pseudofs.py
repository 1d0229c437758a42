"""Bind-mount /dev, /proc and /sys into a rootfs (read-only) and take them down again."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from rootfs_tooling.errors import CommandExecutionFailure
from rootfs_tooling.host import HostOps

log = logging.getLogger(__name__)

PSEUDO_FILESYSTEMS = ("dev", "proc", "sys")

# mount(8) exit status for "mount failure"
MOUNT_FAILURE = 32


@dataclass
class MountEntry:
    host_path: Path
    rootfs_path: Path
    mounted: bool = False


def mount_entries(rootfs: Path) -> list[MountEntry]:
    return [MountEntry(Path("/") / name, rootfs / name) for name in PSEUDO_FILESYSTEMS]


def mount_all(rootfs: Path, ops: HostOps) -> list[MountEntry]:
    """Create dev/proc/sys under rootfs and bind them from the host unless already mounted.

    Idempotent. Raises CommandExecutionFailure if a bind mount fails.
    """
    entries = mount_entries(rootfs)
    for entry in entries:
        if not ops.exists(entry.rootfs_path):
            ops.makedirs(entry.rootfs_path)
        if ops.is_mountpoint(entry.rootfs_path):
            log.debug("%s already mounted", entry.rootfs_path)
            entry.mounted = True
            continue
        if not ops.bind_mount(entry.host_path, entry.rootfs_path, read_only=True):
            argv = ["mount", "-r", "--bind", str(entry.host_path), str(entry.rootfs_path)]
            raise CommandExecutionFailure(argv, MOUNT_FAILURE)
        entry.mounted = True
    return entries


def unmount_all(rootfs: Path, ops: HostOps) -> None:
    """Force-unmount dev/proc/sys under rootfs. Never raises; a target may never have been mounted."""
    if not ops.exists(rootfs):
        return
    for entry in mount_entries(rootfs):
        if not ops.unmount(entry.rootfs_path, force=True):
            log.debug("umount %s failed (not mounted?)", entry.rootfs_path)
