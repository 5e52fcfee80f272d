"""Shared CLI argument parsing for common flags (--config, --project-root, --jobs, etc.)."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from android_ffi_tooling.config import OrchestratorConfig, load_config
from android_ffi_tooling.errors import OrchestratorError


def path_resolver(s: str) -> Path:
    """Resolve a path argument to absolute Path (e.g. --project-root, --config)."""
    return Path(s).resolve()


def add_common_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument(
        "--config",
        type=path_resolver,
        default=None,
        help="Config file (default: <project-root>/android-ffi.yaml)",
    )
    ap.add_argument(
        "--project-root",
        type=path_resolver,
        default=None,
        help="Android project root (default: config file directory, else cwd)",
    )
    ap.add_argument("--jobs", "-j", type=int, default=None, help="Max parallel tasks")
    ap.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds before an external process is killed",
    )
    ap.add_argument(
        "--ndk-root",
        default=None,
        help="NDK root to use when ANDROID_NDK_ROOT is unset (overrides ndk_fallback)",
    )
    ap.add_argument("--verbose", "-v", action="store_true", help="Debug logging")


def config_from_args(args: argparse.Namespace) -> OrchestratorConfig | None:
    """Load config honouring CLI overrides. Prints the error and returns None on failure."""
    overrides = {
        "jobs": args.jobs,
        "timeout": args.timeout,
        # '$' must be escaped: ndk_fallback is a ${VAR} template
        "ndk_fallback": args.ndk_root.replace("$", "$$") if args.ndk_root else None,
    }
    try:
        return load_config(args.config, project_root=args.project_root, overrides=overrides)
    except OrchestratorError as e:
        print(f"❌ {e}", file=sys.stderr)
        return None
