"""Tests for rootfs_tooling.host.recording (the dry-run host)."""

from pathlib import Path
from unittest.mock import MagicMock

from rootfs_tooling.host import HostOps, RecordingHostOps


def _host() -> MagicMock:
    host = MagicMock(spec=HostOps)
    host.host_arch.return_value = "aarch64"
    host.which.return_value = "/usr/bin/chroot"
    host.exists.return_value = True
    host.is_mountpoint.return_value = True
    host.binfmt_registered.return_value = True
    return host


class TestFallThrough:
    def test_queries_fall_through_to_host(self) -> None:
        ops = RecordingHostOps(arch=None, host=_host())
        assert ops.host_arch() == "aarch64"
        assert ops.which("chroot") == "/usr/bin/chroot"
        assert ops.exists(Path("/srv/rootfs"))
        assert ops.is_mountpoint(Path("/srv/rootfs/proc"))
        assert ops.binfmt_registered("qemu-aarch64")

    def test_recorded_state_wins_over_host(self) -> None:
        ops = RecordingHostOps(arch=None, host=_host())
        ops.unmount(Path("/srv/rootfs/proc"))
        assert not ops.is_mountpoint(Path("/srv/rootfs/proc"))
        ops.remove_tree(Path("/srv/rootfs"))
        assert not ops.exists(Path("/srv/rootfs/usr"))

    def test_mutations_never_reach_host(self) -> None:
        host = _host()
        ops = RecordingHostOps(arch=None, host=host)
        ops.bind_mount(Path("/dev"), Path("/srv/rootfs/dev"))
        ops.binfmt_register(":qemu-arm:M::m:k:/usr/bin/qemu-arm-static:")
        ops.run(["chroot", "/srv/rootfs", "/bin/true"])
        ops.remove_tree(Path("/srv/rootfs"))
        host.bind_mount.assert_not_called()
        host.binfmt_register.assert_not_called()
        host.run.assert_not_called()
        host.remove_tree.assert_not_called()
        assert [a[0] for a in ops.actions] == ["bind_mount", "binfmt_register", "run", "remove_tree"]


class TestVirtualView:
    def test_no_host_means_nothing_exists(self) -> None:
        ops = RecordingHostOps()
        assert ops.host_arch() == "x86_64"
        assert ops.which("chroot") is None
        assert not ops.exists(Path("/srv/rootfs"))

    def test_parents_of_known_paths_exist(self) -> None:
        ops = RecordingHostOps(paths=[Path("/srv/rootfs/usr/bin")])
        assert ops.exists(Path("/srv/rootfs"))
        assert not ops.exists(Path("/srv/rootfs/etc"))

    def test_makedirs_restores_removed_path(self) -> None:
        ops = RecordingHostOps(paths=[Path("/srv/rootfs")])
        ops.remove_tree(Path("/srv/rootfs"))
        ops.makedirs(Path("/srv/rootfs/dev"))
        assert ops.exists(Path("/srv/rootfs/dev"))

    def test_exit_codes_by_program(self) -> None:
        ops = RecordingHostOps(exit_codes={"chroot": 2})
        assert ops.run(["chroot", "/srv/rootfs", "true"]) == 2
        assert ops.run(["true"]) == 0
