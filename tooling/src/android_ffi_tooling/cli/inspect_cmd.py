"""`android-ffi env | verify`: show a target's toolchain env; check the jniLibs layout."""

from __future__ import annotations

import argparse
import sys

from android_ffi_tooling.artifacts import verify_artifacts
from android_ffi_tooling.cli.parse_common import add_common_args, config_from_args
from android_ffi_tooling.cli.pipeline_cmd import configure_logging
from android_ffi_tooling.errors import OrchestratorError
from android_ffi_tooling.helpers import display_path
from android_ffi_tooling.host import resolve_host_fragment
from android_ffi_tooling.targets import find_target
from android_ffi_tooling.toolchain import compose_toolchain_environment


def run_env_argv(argv: list[str] | None = None) -> int:
    """Print the environment overrides a build for <arch> would use."""
    if argv is None:
        argv = sys.argv[2:]
    ap = argparse.ArgumentParser(
        prog="android-ffi env",
        description="Show toolchain environment overrides for one target",
    )
    ap.add_argument("arch", help="ABI label or target triple (e.g. arm64-v8a)")
    add_common_args(ap)
    args = ap.parse_args(argv)
    configure_logging(args.verbose)
    config = config_from_args(args)
    if config is None:
        return 1
    target = find_target(config.targets, args.arch)
    if target is None:
        known = ", ".join(t.arch for t in config.targets)
        print(f"❌ Unknown target: {args.arch}. Use one of: {known}", file=sys.stderr)
        return 1
    try:
        toolchain = compose_toolchain_environment(
            target,
            resolve_host_fragment(),
            api_level=config.api_level,
            ndk_fallback=config.ndk_fallback,
        )
    except OrchestratorError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    for key, value in toolchain.overrides.items():
        print(f"{key}={value}")
    return 0


def run_verify_argv(argv: list[str] | None = None) -> int:
    """Check jniLibs/<arch>/<library> exists for every mandatory target."""
    if argv is None:
        argv = sys.argv[2:]
    ap = argparse.ArgumentParser(
        prog="android-ffi verify",
        description="Check jniLibs contains the expected native libraries",
    )
    add_common_args(ap)
    args = ap.parse_args(argv)
    configure_logging(args.verbose)
    config = config_from_args(args)
    if config is None:
        return 1
    present, missing = verify_artifacts(config.targets, config.jni_libs_dir, config.library_file)
    for p in present:
        print(f"✅ {display_path(p, config.project_root)}")
    for p in missing:
        print(f"❌ Missing: {display_path(p, config.project_root)}", file=sys.stderr)
    if missing:
        return 1
    print(f"✅ {len(present)}/{len(config.targets)} native libraries present")
    return 0
