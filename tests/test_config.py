"""Tests for rootfs_tooling.config."""

import logging
from pathlib import Path

import pytest

from rootfs_tooling.config import build_context, load_session_config


def _write(tmp_path: Path, text: str) -> Path:
    cfg = tmp_path / "session.yaml"
    cfg.write_text(text)
    return cfg


class TestLoadSessionConfig:
    def test_full_config(self, tmp_path: Path) -> None:
        cfg = _write(
            tmp_path,
            """
rootfs: build/rootfs
arch: aarch64-musl
platform: rpi3-musl
host_arch: x86_64
cache_dir: /var/cache/xbps
repositories:
  - https://repo-default.voidlinux.org/current/aarch64
required_tools: [xbps-install, xbps-reconfigure]
keep_rootfs_on_error: yes
""",
        )
        config = load_session_config(cfg)
        assert config["rootfs"] == (tmp_path / "build/rootfs").resolve()
        assert config["arch"] == "aarch64-musl"
        assert config["platform"] == "rpi3-musl"
        assert config["host_arch"] == "x86_64"
        assert config["cache_dir"] == Path("/var/cache/xbps")
        assert config["repositories"] == ["https://repo-default.voidlinux.org/current/aarch64"]
        assert config["required_tools"] == ["xbps-install", "xbps-reconfigure"]
        assert config["keep_rootfs_on_error"] is True

    def test_empty_file(self, tmp_path: Path) -> None:
        assert load_session_config(_write(tmp_path, "")) == {}

    def test_single_repository_string(self, tmp_path: Path) -> None:
        config = load_session_config(_write(tmp_path, "repositories: /srv/repo\n"))
        assert config["repositories"] == ["/srv/repo"]

    def test_unknown_keys_are_warned_about(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="rootfs_tooling.config"):
            config = load_session_config(_write(tmp_path, "arch: armv7l\nflavour: base\n"))
        assert config == {"arch": "armv7l"}
        assert "flavour" in caplog.text

    def test_invalid_yaml_raises_value_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Invalid session config"):
            load_session_config(_write(tmp_path, "arch: [unclosed\n"))

    def test_non_mapping_raises_value_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="must be a mapping"):
            load_session_config(_write(tmp_path, "- armv7l\n"))

    def test_missing_file_raises_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            load_session_config(tmp_path / "nope.yaml")


class TestBuildContext:
    def test_builds_context(self, tmp_path: Path) -> None:
        ctx = build_context(
            {
                "rootfs": tmp_path / "rootfs",
                "platform": "rpi2",
                "cache_dir": "/var/cache/xbps",
                "repositories": ["/srv/repo"],
            }
        )
        assert ctx.rootfs == tmp_path / "rootfs"
        assert ctx.target_arch is None
        assert ctx.platform == "rpi2"
        assert ctx.cache_dir == Path("/var/cache/xbps")
        assert ctx.repositories == ["/srv/repo"]
        assert ctx.keep_rootfs_on_error is False
        assert ctx.resolve_target_arch() == "armv7l"

    def test_rootfs_required(self) -> None:
        with pytest.raises(ValueError, match="rootfs is required"):
            build_context({"arch": "armv7l"})
