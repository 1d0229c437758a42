"""Session config loading.

Session YAML format (all keys optional):
- rootfs: rootfs directory (relative to the config file)
- arch: target architecture, e.g. armv7l or aarch64-musl
- platform: board name used when arch is not given, e.g. rpi3-musl
- host_arch: override the detected host architecture
- cache_dir: package cache directory, passed through to the package tool
- repositories: list of repository URLs, passed through
- required_tools: extra host tools checked by check-tools
- keep_rootfs_on_error: keep the rootfs when the session aborts
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from rootfs_tooling.context import BuildContext

log = logging.getLogger(__name__)

KNOWN_KEYS = (
    "rootfs",
    "arch",
    "platform",
    "host_arch",
    "cache_dir",
    "repositories",
    "required_tools",
    "keep_rootfs_on_error",
)
_PATH_KEYS = ("rootfs", "cache_dir")
_LIST_KEYS = ("repositories", "required_tools")


def load_session_config(config_path: Path) -> dict[str, Any]:
    """Load and normalize a session config. Paths resolve against the config file's directory.

    Raises ValueError on invalid YAML or a document that is not a mapping.
    """
    try:
        with config_path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        msg = f"Invalid session config {config_path}: {e}"
        raise ValueError(msg) from e
    if not isinstance(data, dict):
        msg = f"Session config {config_path} must be a mapping, got {type(data).__name__}"
        raise ValueError(msg)

    unknown = sorted(str(k) for k in data if k not in KNOWN_KEYS)
    if unknown:
        log.warning("Ignoring unknown keys in %s: %s", config_path, ", ".join(unknown))

    base = config_path.parent.resolve()
    out: dict[str, Any] = {}
    for key in KNOWN_KEYS:
        value = data.get(key)
        if value is None:
            continue
        if key in _PATH_KEYS:
            p = Path(str(value))
            out[key] = p if p.is_absolute() else (base / p).resolve()
        elif key in _LIST_KEYS:
            if isinstance(value, str):
                value = [value]
            out[key] = [str(v) for v in value]
        elif key == "keep_rootfs_on_error":
            out[key] = bool(value)
        else:
            out[key] = str(value)
    return out


def build_context(config: dict[str, Any]) -> BuildContext:
    """BuildContext from a normalized config dict. Raises ValueError when rootfs is missing."""
    rootfs = config.get("rootfs")
    if not rootfs:
        msg = "rootfs is required (--rootfs or 'rootfs:' in the session config)"
        raise ValueError(msg)
    cache_dir = config.get("cache_dir")
    return BuildContext(
        rootfs=Path(rootfs),
        target_arch=config.get("arch") or None,
        platform=config.get("platform") or None,
        host_arch=config.get("host_arch") or None,
        cache_dir=Path(cache_dir) if cache_dir else None,
        repositories=list(config.get("repositories") or []),
        required_tools=list(config.get("required_tools") or []),
        keep_rootfs_on_error=bool(config.get("keep_rootfs_on_error", False)),
    )
