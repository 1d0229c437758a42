"""Platform (board) name -> target architecture.

Patterns are fnmatch-style and checked in order, so board-specific entries
(rpi3*, rpi2*) sit before the general fallback (rpi*).
"""

from __future__ import annotations

from fnmatch import fnmatchcase

from rootfs_tooling.arch.catalog import MUSL_SUFFIX
from rootfs_tooling.errors import UnknownPlatform

PLATFORM_ARCHES: tuple[tuple[str, str], ...] = (
    ("bananapi*", "armv7l"),
    ("beaglebone*", "armv7l"),
    ("cubieboard2*", "armv7l"),
    ("cubietruck*", "armv7l"),
    ("dockstar*", "armv5tel"),
    ("odroid-u2*", "armv7l"),
    ("odroid-c2*", "aarch64"),
    ("pinebookpro*", "aarch64"),
    ("pinephone*", "aarch64"),
    ("rockpro64*", "aarch64"),
    ("rock64*", "aarch64"),
    ("rpi4*", "aarch64"),
    ("rpi3*", "aarch64"),
    ("rpi2*", "armv7l"),
    ("rpi*", "armv6l"),
    ("usbarmory*", "armv7l"),
    ("ci20*", "mipsel"),
    ("GCP*", "x86_64"),
)


def resolve_from_platform(platform: str) -> str:
    """Return the target architecture for platform, with -musl appended for *-musl platforms.

    Raises UnknownPlatform if no pattern matches.
    """
    for pattern, arch in PLATFORM_ARCHES:
        if fnmatchcase(platform, pattern):
            if platform.endswith(MUSL_SUFFIX):
                return arch + MUSL_SUFFIX
            return arch
    raise UnknownPlatform(platform)
