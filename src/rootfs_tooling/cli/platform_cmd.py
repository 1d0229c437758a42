"""`rootfs platform2arch <platform>`: print the target architecture for a platform name."""

import sys

from rootfs_tooling.arch import resolve_from_platform
from rootfs_tooling.errors import UnknownPlatform


def run_platform2arch_argv(argv: list[str] | None = None) -> None:
    import argparse

    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []  # skip 'rootfs platform2arch'
    ap = argparse.ArgumentParser(
        prog="rootfs platform2arch",
        description="Print the target architecture for a platform name",
    )
    ap.add_argument("platform", help="Platform name, e.g. rpi3 or rpi2-musl")
    args = ap.parse_args(argv)
    try:
        arch = resolve_from_platform(args.platform)
    except UnknownPlatform as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)
    print(arch)
    sys.exit(0)
