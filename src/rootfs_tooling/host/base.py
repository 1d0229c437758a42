"""HostOps: the side effects a rootfs session has on the host.

Everything that touches the kernel (mounts, binfmt_misc), spawns a process or
mutates the rootfs tree goes through this interface, so arch resolution and
idempotency logic can be exercised with RecordingHostOps and no elevated
privileges.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

BINFMT_DIR = Path("/proc/sys/fs/binfmt_misc")


class HostOps(ABC):
    binfmt_dir: Path = BINFMT_DIR

    # --- Queries ---

    @abstractmethod
    def host_arch(self) -> str:
        """Machine architecture of the running host (e.g. x86_64)."""

    @abstractmethod
    def which(self, name: str) -> str | None:
        """Absolute path of an executable on PATH, or None."""

    @abstractmethod
    def exists(self, path: Path) -> bool: ...

    @abstractmethod
    def is_executable(self, path: Path) -> bool:
        """True for a regular file with an execute bit set."""

    @abstractmethod
    def is_mountpoint(self, path: Path) -> bool: ...

    @abstractmethod
    def binfmt_registered(self, name: str) -> bool:
        """True if binfmt_misc already has an entry called name."""

    # --- Processes ---

    @abstractmethod
    def run(
        self,
        argv: list[str],
        env: Mapping[str, str] | None = None,
        quiet: bool = False,
    ) -> int:
        """Run argv to completion and return its exit status. quiet discards output."""

    # --- Kernel ---

    @abstractmethod
    def bind_mount(self, source: Path, target: Path, read_only: bool = True) -> bool: ...

    @abstractmethod
    def mount(self, fstype: str, source: str, target: Path) -> bool: ...

    @abstractmethod
    def unmount(self, target: Path, force: bool = True) -> bool: ...

    @abstractmethod
    def load_module(self, name: str) -> bool: ...

    @abstractmethod
    def binfmt_register(self, record: str) -> None:
        """Write one registration record. Raises OSError on failure."""

    # --- Rootfs tree ---

    @abstractmethod
    def makedirs(self, path: Path) -> None: ...

    @abstractmethod
    def install_executable(self, source: Path, dest: Path) -> None:
        """Copy source to dest with mode 0755, creating parent dirs. Raises OSError on failure."""

    @abstractmethod
    def remove_file(self, path: Path) -> None:
        """Remove path if it exists."""

    @abstractmethod
    def remove_tree(self, path: Path) -> None: ...
