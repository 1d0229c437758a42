"""In-memory HostOps: records intended actions and keeps a virtual view of mounts, binfmt and files.

Used by the test suite and by ``--dry-run``. With ``host`` set, queries the
recorder has no answer for (paths it never touched, which, host arch) fall
through to that HostOps; mutations never do.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from rootfs_tooling.host.base import BINFMT_DIR, HostOps


class RecordingHostOps(HostOps):
    def __init__(
        self,
        arch: str | None = "x86_64",
        tools: Mapping[str, str] | None = None,
        exit_codes: Mapping[str, int] | None = None,
        paths: list[Path] | None = None,
        executables: list[Path] | None = None,
        host: HostOps | None = None,
        binfmt_dir: Path = BINFMT_DIR,
    ) -> None:
        self.arch = arch
        self.tools: dict[str, str] = dict(tools or {})
        # argv[0] -> exit status; anything unlisted exits 0
        self.exit_codes: dict[str, int] = dict(exit_codes or {})
        self.host = host
        self.binfmt_dir = binfmt_dir
        self.paths: set[Path] = set(paths or [])
        self.executables: set[Path] = set(executables or [])
        self.removed: set[Path] = set()
        self.mounts: set[Path] = set()
        self.unmounted: set[Path] = set()
        self.registrations: dict[str, str] = {}
        self.actions: list[tuple] = []
        self.fail_mounts: set[Path] = set()
        self.busy_mounts: set[Path] = set()
        self.fail_install = False
        self.fail_register = False
        self.binfmt_mountable = True

    # --- Helpers ---

    def _gone(self, path: Path) -> bool:
        return any(p == path or p in path.parents for p in self.removed)

    def _touch(self, path: Path) -> None:
        for p in self.removed.copy():
            if p == path or p in path.parents:
                self.removed.discard(p)
        self.paths.add(path)

    def calls(self, name: str) -> list[tuple]:
        """Recorded actions of one kind, e.g. calls("bind_mount")."""
        return [a for a in self.actions if a[0] == name]

    # --- Queries ---

    def host_arch(self) -> str:
        if self.arch is None and self.host is not None:
            return self.host.host_arch()
        return self.arch or ""

    def which(self, name: str) -> str | None:
        if name in self.tools:
            return self.tools[name]
        if self.host is not None:
            return self.host.which(name)
        return None

    def exists(self, path: Path) -> bool:
        if self._gone(path):
            return False
        if path in self.paths or any(path in p.parents for p in self.paths):
            return True
        return self.host.exists(path) if self.host is not None else False

    def is_executable(self, path: Path) -> bool:
        if self._gone(path):
            return False
        if path in self.executables:
            return True
        return self.host.is_executable(path) if self.host is not None else False

    def is_mountpoint(self, path: Path) -> bool:
        if path in self.mounts:
            return True
        if path in self.unmounted:
            return False
        return self.host.is_mountpoint(path) if self.host is not None else False

    def binfmt_registered(self, name: str) -> bool:
        if name in self.registrations:
            return True
        return self.host.binfmt_registered(name) if self.host is not None else False

    # --- Processes ---

    def run(
        self,
        argv: list[str],
        env: Mapping[str, str] | None = None,
        quiet: bool = False,
    ) -> int:
        self.actions.append(("run", list(argv), dict(env) if env is not None else None))
        return self.exit_codes.get(argv[0], 0)

    # --- Kernel ---

    def bind_mount(self, source: Path, target: Path, read_only: bool = True) -> bool:
        self.actions.append(("bind_mount", source, target, read_only))
        if target in self.fail_mounts:
            return False
        self.mounts.add(target)
        self.unmounted.discard(target)
        return True

    def mount(self, fstype: str, source: str, target: Path) -> bool:
        self.actions.append(("mount", fstype, source, target))
        if target == self.binfmt_dir and not self.binfmt_mountable:
            return False
        self.mounts.add(target)
        self.unmounted.discard(target)
        return True

    def unmount(self, target: Path, force: bool = True) -> bool:
        self.actions.append(("unmount", target, force))
        if target in self.busy_mounts or not self.is_mountpoint(target):
            return False
        self.mounts.discard(target)
        self.unmounted.add(target)
        return True

    def load_module(self, name: str) -> bool:
        self.actions.append(("load_module", name))
        return True

    def binfmt_register(self, record: str) -> None:
        self.actions.append(("binfmt_register", record))
        if self.fail_register:
            msg = f"{self.binfmt_dir / 'register'}: Permission denied"
            raise OSError(msg)
        name = record.split(":")[1]
        self.registrations[name] = record

    # --- Rootfs tree ---

    def makedirs(self, path: Path) -> None:
        self.actions.append(("makedirs", path))
        self._touch(path)

    def install_executable(self, source: Path, dest: Path) -> None:
        self.actions.append(("install_executable", source, dest))
        if self.fail_install:
            msg = f"{dest}: No space left on device"
            raise OSError(msg)
        self._touch(dest)
        self.executables.add(dest)

    def remove_file(self, path: Path) -> None:
        self.actions.append(("remove_file", path))
        self.paths.discard(path)
        self.executables.discard(path)
        self.removed.add(path)

    def remove_tree(self, path: Path) -> None:
        self.actions.append(("remove_tree", path))
        self.paths = {p for p in self.paths if p != path and path not in p.parents}
        self.executables = {p for p in self.executables if path not in p.parents}
        self.removed.add(path)
