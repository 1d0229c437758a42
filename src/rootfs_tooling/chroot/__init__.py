"""Chroot preparation: binfmt registration, pseudo-filesystems, execution and teardown."""

from .binfmt import ensure_registered, registration_record
from .executor import CHROOT_PATH, chroot_argv, chroot_env, run_in_chroot, run_in_chroot_checked
from .pseudofs import PSEUDO_FILESYSTEMS, MountEntry, mount_all, unmount_all
from .teardown import cleanup_chroot, fatal_abort

__all__ = [
    "CHROOT_PATH",
    "PSEUDO_FILESYSTEMS",
    "MountEntry",
    "chroot_argv",
    "chroot_env",
    "cleanup_chroot",
    "ensure_registered",
    "fatal_abort",
    "mount_all",
    "registration_record",
    "run_in_chroot",
    "run_in_chroot_checked",
    "unmount_all",
]
