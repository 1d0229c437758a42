"""Register a qemu user-mode emulator with binfmt_misc so foreign binaries run inside the rootfs.

Registration format (https://docs.kernel.org/admin-guide/binfmt-misc.html):
:name:type:offset:magic:mask:interpreter:flags
"""

from __future__ import annotations

import logging
from pathlib import Path

from rootfs_tooling.arch import ArchitectureDescriptor
from rootfs_tooling.context import SYSTEM_BIN_DIR, BuildContext
from rootfs_tooling.errors import (
    EmulatorInstallFailure,
    EmulatorMissing,
    UnknownArchitecture,
)
from rootfs_tooling.host import HostOps

log = logging.getLogger(__name__)


def registration_record(desc: ArchitectureDescriptor) -> str:
    """Colon-separated record for /proc/sys/fs/binfmt_misc/register (type M, no offset, no flags)."""
    interpreter = f"/{SYSTEM_BIN_DIR}/{desc.emulator}"
    return ":".join(["", desc.binfmt_name, "M", "", desc.magic, desc.mask, interpreter, ""])


def _check_emulator(emulator: str, ops: HostOps) -> Path:
    path = ops.which(emulator)
    if path is None or ops.run([path, "-version"], quiet=True) != 0:
        raise EmulatorMissing(emulator)
    return Path(path)


def _ensure_binfmt_mounted(ops: HostOps) -> None:
    binfmt = ops.binfmt_dir
    if ops.is_mountpoint(binfmt):
        return
    # Another process may mount it concurrently; failures here are not fatal.
    if not ops.load_module("binfmt_misc"):
        log.debug("modprobe binfmt_misc failed")
    if not ops.mount("binfmt_misc", "binfmt_misc", binfmt):
        log.debug("mounting binfmt_misc on %s failed", binfmt)


def _register(desc: ArchitectureDescriptor, ops: HostOps) -> None:
    if ops.binfmt_registered(desc.binfmt_name):
        log.debug("binfmt %s already registered", desc.binfmt_name)
        return
    print(f"🔧 Registering {desc.emulator} with binfmt_misc")
    try:
        ops.binfmt_register(registration_record(desc))
    except OSError as e:
        # Most likely someone else registered it between the check and the write.
        log.debug("binfmt registration of %s failed: %s", desc.binfmt_name, e)


def _install_emulator(ctx: BuildContext, source: Path, emulator: str, ops: HostOps) -> None:
    dest = ctx.emulator_path(emulator)
    if ops.is_executable(dest):
        return
    print(f"📦 Installing {emulator} into {dest.parent}")
    try:
        ops.install_executable(source, dest)
    except OSError as e:
        ops.remove_file(dest)
        raise EmulatorInstallFailure(emulator, str(dest), str(e)) from e


def ensure_registered(ctx: BuildContext, ops: HostOps) -> None:
    """Make foreign-architecture binaries in ctx.rootfs executable on this host.

    Native sessions (target family runs on the host) return without side
    effects. Otherwise the qemu static emulator is checked, binfmt_misc is
    mounted and registered if needed, and the emulator is copied into the
    rootfs. Safe to call repeatedly.
    """
    target = ctx.resolve_target_arch()
    host = ctx.resolve_host_arch(ops)

    if ctx.is_native(ops):
        log.debug("target %s runs natively on %s", target, host)
        ctx.emulator = None
        return
    desc = ctx.descriptor()
    if desc is None:
        raise UnknownArchitecture(target, host)

    source = _check_emulator(desc.emulator, ops)
    _ensure_binfmt_mounted(ops)
    _register(desc, ops)
    _install_emulator(ctx, source, desc.emulator, ops)
    ctx.emulator = desc.emulator
