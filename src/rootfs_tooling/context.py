"""BuildContext: per-invocation session state threaded through every rootfs operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rootfs_tooling.arch import (
    ArchitectureDescriptor,
    is_compatible,
    lookup_descriptor,
    resolve_from_platform,
)
from rootfs_tooling.errors import UnknownArchitecture
from rootfs_tooling.host import HostOps

SYSTEM_BIN_DIR = "usr/bin"


@dataclass
class BuildContext:
    """Session state. Architecture fields are filled in lazily on first use.

    ``emulator`` is the name of the qemu binary installed into the rootfs for
    this session; it stays None for native sessions.
    """

    rootfs: Path
    target_arch: str | None = None
    platform: str | None = None
    host_arch: str | None = None
    cache_dir: Path | None = None
    repositories: list[str] = field(default_factory=list)
    required_tools: list[str] = field(default_factory=list)
    keep_rootfs_on_error: bool = False
    emulator: str | None = None
    _descriptor: ArchitectureDescriptor | None = field(default=None, init=False, repr=False)
    _descriptor_arch: str | None = field(default=None, init=False, repr=False)

    def resolve_target_arch(self) -> str:
        """Explicit target_arch wins; otherwise derive it from platform."""
        if not self.target_arch:
            if not self.platform:
                raise UnknownArchitecture("<unset>")
            self.target_arch = resolve_from_platform(self.platform)
        return self.target_arch

    def resolve_host_arch(self, ops: HostOps) -> str:
        if not self.host_arch:
            self.host_arch = ops.host_arch()
        return self.host_arch

    def is_native(self, ops: HostOps) -> bool:
        """True when target binaries run on the host without emulation."""
        return is_compatible(self.resolve_target_arch(), self.resolve_host_arch(ops))

    def descriptor(self) -> ArchitectureDescriptor | None:
        """Catalog entry for the target, cached per target_arch. None for x86-family targets."""
        arch = self.resolve_target_arch()
        if self._descriptor_arch != arch:
            self._descriptor = lookup_descriptor(arch)
            self._descriptor_arch = arch
        return self._descriptor

    def emulator_path(self, emulator: str) -> Path:
        """Where the emulator lives inside the rootfs (host view)."""
        return self.rootfs / SYSTEM_BIN_DIR / emulator
