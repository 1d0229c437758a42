"""`rootfs check-tools`: verify required host tools are on PATH."""

import sys

from rootfs_tooling.config import load_session_config
from rootfs_tooling.errors import MissingTool
from rootfs_tooling.host import SystemHostOps
from rootfs_tooling.preflight import check_tools, required_tools


def run_check_tools_argv(argv: list[str] | None = None) -> None:
    import argparse

    from rootfs_tooling.cli.parse_common import path_resolver

    if argv is None:
        argv = sys.argv[2:] if len(sys.argv) > 2 else []  # skip 'rootfs check-tools'
    ap = argparse.ArgumentParser(
        prog="rootfs check-tools",
        description="Check that chroot/mount tooling (plus extras) is installed",
    )
    ap.add_argument("--config", type=path_resolver, help="Session YAML (reads required_tools)")
    ap.add_argument("--require", action="append", default=[], help="Extra tool (repeatable)")
    args = ap.parse_args(argv)

    extra = list(args.require)
    if args.config:
        try:
            extra = load_session_config(args.config).get("required_tools", []) + extra
        except (OSError, ValueError) as e:
            print(f"❌ {e}", file=sys.stderr)
            sys.exit(1)
    try:
        check_tools(SystemHostOps(), extra)
    except MissingTool as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)
    print(f"✅ All required tools found: {', '.join(required_tools(extra))}")
    sys.exit(0)
