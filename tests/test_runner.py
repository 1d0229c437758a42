"""Tests for rootfs_tooling.runner."""

from pathlib import Path

import pytest

from rootfs_tooling.context import BuildContext
from rootfs_tooling.errors import CommandExecutionFailure
from rootfs_tooling.host import RecordingHostOps
from rootfs_tooling.runner import (
    CURRENT_ARCH_VAR,
    TARGET_ARCH_VAR,
    package_tool_args,
    run_cmd,
    run_cmd_target,
    target_env,
)


class TestRunCmd:
    def test_announces_then_runs(
        self, ops: RecordingHostOps, capsys: pytest.CaptureFixture[str]
    ) -> None:
        run_cmd(["xbps-query", "-l"], ops)
        assert "Running xbps-query -l" in capsys.readouterr().out
        assert ops.calls("run") == [("run", ["xbps-query", "-l"], None)]

    def test_quotes_arguments_in_announcement(
        self, ops: RecordingHostOps, capsys: pytest.CaptureFixture[str]
    ) -> None:
        run_cmd(["sh", "-c", "echo hi"], ops)
        assert "Running sh -c 'echo hi'" in capsys.readouterr().out

    def test_passes_env(self, ops: RecordingHostOps) -> None:
        run_cmd(["env"], ops, env={"A": "1"})
        assert ops.calls("run")[0][2] == {"A": "1"}

    def test_non_zero_exit_raises(self, ops: RecordingHostOps) -> None:
        ops.exit_codes["false"] = 1
        with pytest.raises(CommandExecutionFailure) as exc_info:
            run_cmd(["false"], ops)
        assert exc_info.value.argv == ["false"]
        assert exc_info.value.returncode == 1
        assert "Could not run command false" in str(exc_info.value)


class TestTargetEnv:
    def test_native_sets_current_arch(self, rootfs: Path, ops: RecordingHostOps) -> None:
        ctx = BuildContext(rootfs=rootfs, target_arch="i686")
        env = target_env(ctx, ops, base={TARGET_ARCH_VAR: "stale", "PATH": "/usr/bin"})
        assert env[CURRENT_ARCH_VAR] == "i686"
        assert TARGET_ARCH_VAR not in env
        assert env["PATH"] == "/usr/bin"

    def test_cross_sets_target_arch(self, arm_ctx: BuildContext, ops: RecordingHostOps) -> None:
        env = target_env(arm_ctx, ops, base={CURRENT_ARCH_VAR: "x86_64"})
        assert env[TARGET_ARCH_VAR] == "armv7l"
        assert CURRENT_ARCH_VAR not in env

    def test_related_arch_is_still_cross(self, rootfs: Path) -> None:
        ops = RecordingHostOps(arch="ppc64le")
        ctx = BuildContext(rootfs=rootfs, target_arch="ppc")
        env = target_env(ctx, ops, base={})
        assert env == {TARGET_ARCH_VAR: "ppc"}

    def test_armv7l_on_armv6l_is_cross(self, rootfs: Path) -> None:
        ctx = BuildContext(rootfs=rootfs, target_arch="armv7l", host_arch="armv6l")
        env = target_env(ctx, RecordingHostOps(arch="armv6l"), base={})
        assert env == {TARGET_ARCH_VAR: "armv7l"}

    def test_same_base_arch_with_musl_is_native(self, rootfs: Path) -> None:
        ctx = BuildContext(rootfs=rootfs, target_arch="aarch64-musl", host_arch="aarch64")
        env = target_env(ctx, RecordingHostOps(arch="aarch64"), base={})
        assert env == {CURRENT_ARCH_VAR: "aarch64-musl"}

    def test_defaults_to_process_environment(
        self, arm_ctx: BuildContext, ops: RecordingHostOps, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ROOTFS_TEST_MARKER", "1")
        env = target_env(arm_ctx, ops)
        assert env["ROOTFS_TEST_MARKER"] == "1"

    def test_base_is_not_mutated(self, arm_ctx: BuildContext, ops: RecordingHostOps) -> None:
        base = {CURRENT_ARCH_VAR: "x86_64"}
        target_env(arm_ctx, ops, base=base)
        assert base == {CURRENT_ARCH_VAR: "x86_64"}


class TestPackageToolArgs:
    def test_empty(self, arm_ctx: BuildContext) -> None:
        assert package_tool_args(arm_ctx) == []

    def test_cache_dir_and_repositories(self, rootfs: Path) -> None:
        ctx = BuildContext(
            rootfs=rootfs,
            cache_dir=Path("/var/cache/xbps"),
            repositories=["https://repo-default.voidlinux.org/current", "/local/repo"],
        )
        assert package_tool_args(ctx) == [
            "-c",
            "/var/cache/xbps",
            "-R",
            "https://repo-default.voidlinux.org/current",
            "-R",
            "/local/repo",
        ]


class TestRunCmdTarget:
    def test_cross_run_gets_target_arch(
        self, arm_ctx: BuildContext, ops: RecordingHostOps, capsys: pytest.CaptureFixture[str]
    ) -> None:
        run_cmd_target(arm_ctx, ["xbps-install", "-S", "base-system"], ops)
        assert "for target armv7l" in capsys.readouterr().out
        [(_, argv, env)] = ops.calls("run")
        assert argv == ["xbps-install", "-S", "base-system"]
        assert env[TARGET_ARCH_VAR] == "armv7l"
        assert CURRENT_ARCH_VAR not in env

    def test_native_run_gets_current_arch(self, rootfs: Path, ops: RecordingHostOps) -> None:
        ctx = BuildContext(rootfs=rootfs, target_arch="x86_64-musl")
        run_cmd_target(ctx, ["xbps-install", "-S"], ops)
        env = ops.calls("run")[0][2]
        assert env[CURRENT_ARCH_VAR] == "x86_64-musl"
        assert TARGET_ARCH_VAR not in env

    def test_does_not_chroot_or_register(self, arm_ctx: BuildContext, ops: RecordingHostOps) -> None:
        run_cmd_target(arm_ctx, ["xbps-install", "-S"], ops)
        assert [a[0] for a in ops.actions] == ["run"]

    def test_non_zero_exit_raises(self, arm_ctx: BuildContext, ops: RecordingHostOps) -> None:
        ops.exit_codes["xbps-install"] = 19
        with pytest.raises(CommandExecutionFailure) as exc_info:
            run_cmd_target(arm_ctx, ["xbps-install", "-S"], ops)
        assert exc_info.value.returncode == 19
