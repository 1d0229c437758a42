"""Pytest fixtures for rootfs tooling tests."""

from pathlib import Path

import pytest

from rootfs_tooling.context import BuildContext
from rootfs_tooling.host import RecordingHostOps

QEMU_ARM = "/usr/bin/qemu-arm-static"
HOST_TOOLS = {
    "chroot": "/usr/sbin/chroot",
    "mount": "/usr/bin/mount",
    "umount": "/usr/bin/umount",
    "mountpoint": "/usr/bin/mountpoint",
    "modprobe": "/usr/sbin/modprobe",
}


@pytest.fixture
def rootfs(tmp_path: Path) -> Path:
    """Rootfs path. Only exists inside the RecordingHostOps view, never on disk."""
    return tmp_path.resolve() / "rootfs"


@pytest.fixture
def ops(rootfs: Path) -> RecordingHostOps:
    """x86_64 host with the base tools and qemu-arm-static installed."""
    return RecordingHostOps(
        arch="x86_64",
        tools={**HOST_TOOLS, "qemu-arm-static": QEMU_ARM},
        paths=[rootfs],
    )


@pytest.fixture
def arm_ctx(rootfs: Path) -> BuildContext:
    return BuildContext(rootfs=rootfs, target_arch="armv7l", host_arch="x86_64")
