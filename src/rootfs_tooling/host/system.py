"""HostOps backed by real OS calls (mount, umount, mountpoint, modprobe, /proc/sys/fs/binfmt_misc)."""

from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess
from collections.abc import Mapping
from pathlib import Path

from rootfs_tooling.host.base import BINFMT_DIR, HostOps

log = logging.getLogger(__name__)


def _quiet(argv: list[str]) -> int:
    try:
        r = subprocess.run(argv, capture_output=True, text=True)
    except OSError as e:
        log.debug("%s: %s", argv[0], e)
        return 127
    if r.returncode != 0:
        log.debug("%s exited %d: %s", " ".join(argv), r.returncode, (r.stderr or "").strip())
    return r.returncode


class SystemHostOps(HostOps):
    """Issues the actual commands. Mount and binfmt operations need root."""

    def __init__(self, binfmt_dir: Path = BINFMT_DIR) -> None:
        self.binfmt_dir = binfmt_dir

    def host_arch(self) -> str:
        return platform.machine()

    def which(self, name: str) -> str | None:
        return shutil.which(name)

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_executable(self, path: Path) -> bool:
        return path.is_file() and os.access(path, os.X_OK)

    def is_mountpoint(self, path: Path) -> bool:
        return _quiet(["mountpoint", "-q", str(path)]) == 0

    def binfmt_registered(self, name: str) -> bool:
        return (self.binfmt_dir / name).is_file()

    def run(
        self,
        argv: list[str],
        env: Mapping[str, str] | None = None,
        quiet: bool = False,
    ) -> int:
        kwargs: dict = {}
        if env is not None:
            kwargs["env"] = dict(env)
        if quiet:
            kwargs["stdout"] = subprocess.DEVNULL
            kwargs["stderr"] = subprocess.DEVNULL
        try:
            r = subprocess.run(argv, **kwargs)
        except OSError as e:
            log.debug("Could not start %s: %s", argv[0], e)
            return 127
        return r.returncode

    def bind_mount(self, source: Path, target: Path, read_only: bool = True) -> bool:
        argv = ["mount"]
        if read_only:
            argv.append("-r")
        argv += ["--bind", str(source), str(target)]
        return _quiet(argv) == 0

    def mount(self, fstype: str, source: str, target: Path) -> bool:
        return _quiet(["mount", "-t", fstype, source, str(target)]) == 0

    def unmount(self, target: Path, force: bool = True) -> bool:
        argv = ["umount", "-f", str(target)] if force else ["umount", str(target)]
        return _quiet(argv) == 0

    def load_module(self, name: str) -> bool:
        return _quiet(["modprobe", "-q", name]) == 0

    def binfmt_register(self, record: str) -> None:
        with (self.binfmt_dir / "register").open("w") as f:
            f.write(record)

    def makedirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def install_executable(self, source: Path, dest: Path) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, dest)
        dest.chmod(0o755)

    def remove_file(self, path: Path) -> None:
        path.unlink(missing_ok=True)

    def remove_tree(self, path: Path) -> None:
        shutil.rmtree(path)
