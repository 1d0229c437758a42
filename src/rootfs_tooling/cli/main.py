"""Main CLI entry point for rootfs tooling."""

import sys

from rootfs_tooling.cli import chroot_cmd, platform_cmd, tools_cmd


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print("Usage: rootfs <command> [args...]", file=sys.stderr)
        print("Commands:", file=sys.stderr)
        print(
            "  platform2arch <platform>  - Print the target architecture for a platform",
            file=sys.stderr,
        )
        print(
            "  chroot [opts] -- <cmd>    - Register emulation, mount dev/proc/sys, run cmd in rootfs",
            file=sys.stderr,
        )
        print(
            "  run-target [opts] -- <cmd> - Run a host command with XBPS_ARCH/XBPS_TARGET_ARCH set",
            file=sys.stderr,
        )
        print(
            "  register [opts]           - Register binfmt_misc emulator and install it in rootfs",
            file=sys.stderr,
        )
        print(
            "  cleanup [opts]            - Unmount pseudo-filesystems, remove emulator copy",
            file=sys.stderr,
        )
        print("  check-tools [--require T] - Check required host tools", file=sys.stderr)
        sys.exit(1)

    command = sys.argv[1]

    if command == "platform2arch":
        platform_cmd.run_platform2arch_argv()
    elif command == "chroot":
        chroot_cmd.run_chroot_argv()
    elif command == "run-target":
        chroot_cmd.run_target_argv()
    elif command == "register":
        chroot_cmd.run_register_argv()
    elif command == "cleanup":
        chroot_cmd.run_cleanup_argv()
    elif command == "check-tools":
        tools_cmd.run_check_tools_argv()
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
