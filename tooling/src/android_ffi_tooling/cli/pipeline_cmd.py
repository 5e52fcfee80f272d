"""`android-ffi build-lib | run | tasks`: run the Android library pipeline or single tasks."""

from __future__ import annotations

import argparse
import logging
import sys

from android_ffi_tooling.cli.parse_common import add_common_args, config_from_args
from android_ffi_tooling.errors import OrchestratorError
from android_ffi_tooling.pipeline import BUILD_ANDROID_LIB, RunReport, build_pipeline, run_tasks


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def report_failure(report: RunReport) -> None:
    """Print the failed stage, its error (with process output) and blocked tasks to stderr."""
    first = report.first_failure
    if first is None:
        return
    print(f"\n❌ Task '{first.name}' failed:", file=sys.stderr)
    print(str(first.error), file=sys.stderr)
    for other in report.failures[1:]:
        err = other.error
        detail = err.message if isinstance(err, OrchestratorError) else err
        print(f"❌ Task '{other.name}' also failed: {detail}", file=sys.stderr)
    blocked = [o.name for o in report.blocked]
    if blocked:
        print(f"⏭️  Not run: {', '.join(blocked)}", file=sys.stderr)


def _run(goals: list[str], args: argparse.Namespace, include_deps: bool = True) -> int:
    configure_logging(args.verbose)
    config = config_from_args(args)
    if config is None:
        return 1
    try:
        report = run_tasks(config, goals, include_deps=include_deps)
    except OrchestratorError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    if not report.ok:
        report_failure(report)
        return 1
    return 0


def run_build_lib_argv(argv: list[str] | None = None) -> int:
    """Build all targets, move native libs, generate bindings."""
    if argv is None:
        argv = sys.argv[2:]
    ap = argparse.ArgumentParser(
        prog="android-ffi build-lib",
        description="Aggregate task to build Android library",
    )
    add_common_args(ap)
    args = ap.parse_args(argv)
    return _run([BUILD_ANDROID_LIB], args)


def run_tasks_argv(argv: list[str] | None = None) -> int:
    """Run one or more named tasks (with their required tasks unless --no-deps)."""
    if argv is None:
        argv = sys.argv[2:]
    ap = argparse.ArgumentParser(prog="android-ffi run", description="Run pipeline tasks")
    ap.add_argument("tasks", nargs="+", help="Task names (see `android-ffi tasks`)")
    ap.add_argument(
        "--no-deps",
        action="store_true",
        help="Run only the named tasks, not the tasks they require",
    )
    add_common_args(ap)
    args = ap.parse_args(argv)
    return _run(args.tasks, args, include_deps=not args.no_deps)


def run_list_tasks_argv(argv: list[str] | None = None) -> int:
    """Print tasks with group, dependencies and description."""
    if argv is None:
        argv = sys.argv[2:]
    ap = argparse.ArgumentParser(prog="android-ffi tasks", description="List pipeline tasks")
    add_common_args(ap)
    args = ap.parse_args(argv)
    configure_logging(args.verbose)
    config = config_from_args(args)
    if config is None:
        return 1
    graph = build_pipeline(config)
    width = max(len(t.name) for t in graph)
    for t in graph:
        group = f"[{t.group}] " if t.group else ""
        print(f"{t.name:<{width}}  {group}{t.description}")
        if t.requires:
            print(f"{'':<{width}}    requires: {', '.join(t.requires)}")
        if t.after:
            print(f"{'':<{width}}    after:    {', '.join(t.after)}")
    return 0
