"""Architecture catalog and platform -> architecture resolution."""

from .catalog import (
    COMPATIBLE_FAMILIES,
    DESCRIPTORS,
    MUSL_SUFFIX,
    ArchitectureDescriptor,
    IsaFamily,
    base_arch,
    family_of,
    is_compatible,
    lookup_descriptor,
)
from .platforms import PLATFORM_ARCHES, resolve_from_platform

__all__ = [
    "COMPATIBLE_FAMILIES",
    "DESCRIPTORS",
    "MUSL_SUFFIX",
    "PLATFORM_ARCHES",
    "ArchitectureDescriptor",
    "IsaFamily",
    "base_arch",
    "family_of",
    "is_compatible",
    "lookup_descriptor",
    "resolve_from_platform",
]
