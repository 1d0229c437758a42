"""Fatal error kinds raised by rootfs_tooling. Every one of them ends a session via fatal_abort."""

from __future__ import annotations


class RootfsError(RuntimeError):
    """Base class for fatal rootfs session errors."""


class MissingTool(RootfsError):
    def __init__(self, tools: list[str]) -> None:
        self.tools = list(tools)
        super().__init__(f"missing required tool(s): {', '.join(self.tools)}")


class UnknownPlatform(RootfsError):
    def __init__(self, platform: str) -> None:
        self.platform = platform
        super().__init__(f"Unknown platform: {platform}")


class UnknownArchitecture(RootfsError):
    def __init__(self, arch: str, host_arch: str | None = None) -> None:
        self.arch = arch
        self.host_arch = host_arch
        msg = f"Unknown target architecture: {arch}"
        if host_arch:
            msg += f" (host: {host_arch})"
        super().__init__(msg)


class EmulatorMissing(RootfsError):
    def __init__(self, emulator: str) -> None:
        self.emulator = emulator
        super().__init__(f"{emulator} binary is missing in your system")


class EmulatorInstallFailure(RootfsError):
    def __init__(self, emulator: str, dest: str, reason: str = "") -> None:
        self.emulator = emulator
        self.dest = dest
        msg = f"could not install {emulator} into {dest}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class CommandExecutionFailure(RootfsError):
    """A command exited non-zero. Keeps argv and returncode for callers that inspect them."""

    def __init__(self, argv: list[str], returncode: int) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        super().__init__(f"Could not run command {' '.join(self.argv)} (exit status {returncode})")
