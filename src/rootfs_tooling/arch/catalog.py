"""Supported target architectures: family tags, binfmt magic/mask and qemu emulator names.

Magic/mask strings are written verbatim into /proc/sys/fs/binfmt_misc/register,
so they stay in the kernel's escaped form (\\xNN). They match the ELF class,
data (endianness) and e_machine fields; the mask zeroes EI_ABIVERSION and the
low bit of e_type so both ET_EXEC and ET_DYN match.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from fnmatch import fnmatchcase

from rootfs_tooling.errors import UnknownArchitecture

MUSL_SUFFIX = "-musl"


class IsaFamily(enum.Enum):
    X86 = "x86"
    ARM = "arm"
    AARCH64 = "aarch64"
    PPC = "ppc"
    MIPSEL = "mipsel"


@dataclass(frozen=True)
class ArchitectureDescriptor:
    cpu: str
    family: IsaFamily
    magic: str
    mask: str

    @property
    def emulator(self) -> str:
        return f"qemu-{self.cpu}-static"

    @property
    def binfmt_name(self) -> str:
        return f"qemu-{self.cpu}"


# Order matters: first matching pattern wins.
FAMILY_PATTERNS: tuple[tuple[str, IsaFamily], ...] = (
    ("armv*", IsaFamily.ARM),
    ("aarch64*", IsaFamily.AARCH64),
    ("ppc*", IsaFamily.PPC),
    ("mipsel*", IsaFamily.MIPSEL),
    ("*86*", IsaFamily.X86),
)

DESCRIPTORS: dict[IsaFamily, ArchitectureDescriptor] = {
    d.family: d
    for d in (
        ArchitectureDescriptor(
            cpu="arm",
            family=IsaFamily.ARM,
            magic=r"\x7fELF\x01\x01\x01\x00\x00\x00\x00\x00\x00\x00\x00\x00\x02\x00\x28\x00",
            mask=r"\xff\xff\xff\xff\xff\xff\xff\x00\xff\xff\xff\xff\xff\xff\xff\xff\xfe\xff\xff\xff",
        ),
        ArchitectureDescriptor(
            cpu="aarch64",
            family=IsaFamily.AARCH64,
            magic=r"\x7fELF\x02\x01\x01\x00\x00\x00\x00\x00\x00\x00\x00\x00\x02\x00\xb7",
            mask=r"\xff\xff\xff\xff\xff\xff\xff\x00\xff\xff\xff\xff\xff\xff\xff\xff\xfe\xff\xff",
        ),
        ArchitectureDescriptor(
            cpu="ppc",
            family=IsaFamily.PPC,
            magic=r"\x7fELF\x01\x02\x01\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x02\x00\x14",
            mask=r"\xff\xff\xff\xff\xff\xff\xff\x00\xff\xff\xff\xff\xff\xff\xff\xff\xff\xfe\xff\xff",
        ),
        ArchitectureDescriptor(
            cpu="mipsel",
            family=IsaFamily.MIPSEL,
            magic=r"\x7fELF\x01\x01\x01\x00\x00\x00\x00\x00\x00\x00\x00\x00\x02\x00\x08\x00",
            mask=r"\xff\xff\xff\xff\xff\xff\xff\x00\xff\xff\xff\xff\xff\xff\xff\xff\xfe\xff\xff\xff",
        ),
    )
}

# host family -> target families it runs without emulation. Every other
# family only runs its own base architecture (armv6l does not run armv7l).
COMPATIBLE_FAMILIES: dict[IsaFamily, frozenset[IsaFamily]] = {
    IsaFamily.X86: frozenset({IsaFamily.X86}),
}


def base_arch(arch: str) -> str:
    """Strip the alternate-libc suffix (armv7l-musl -> armv7l)."""
    if arch.endswith(MUSL_SUFFIX):
        return arch[: -len(MUSL_SUFFIX)]
    return arch


def family_of(arch: str) -> IsaFamily | None:
    """Instruction-set family of an architecture string, or None if it is not recognized."""
    name = base_arch(arch)
    for pattern, family in FAMILY_PATTERNS:
        if fnmatchcase(name, pattern):
            return family
    return None


def is_compatible(target_arch: str, host_arch: str) -> bool:
    """True when binaries for target_arch run natively on host_arch.

    Same base architecture (libc suffix ignored), or both x86 family.
    """
    if base_arch(target_arch) == base_arch(host_arch):
        return True
    target = family_of(target_arch)
    host = family_of(host_arch)
    if target is None or host is None:
        return False
    return target in COMPATIBLE_FAMILIES.get(host, frozenset())


def lookup_descriptor(arch: str) -> ArchitectureDescriptor | None:
    """Descriptor for a foreign architecture. None for the X86 family (never emulated).

    Raises UnknownArchitecture when the string matches no family.
    """
    family = family_of(arch)
    if family is None:
        raise UnknownArchitecture(arch)
    return DESCRIPTORS.get(family)
