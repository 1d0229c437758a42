"""Host side effects: HostOps interface, real implementation and in-memory recorder."""

from .base import BINFMT_DIR, HostOps
from .recording import RecordingHostOps
from .system import SystemHostOps

__all__ = [
    "BINFMT_DIR",
    "HostOps",
    "RecordingHostOps",
    "SystemHostOps",
]
