"""Main CLI entry point for android-ffi tooling."""

import sys

from android_ffi_tooling.cli import inspect_cmd, pipeline_cmd

COMMANDS = {
    "build-lib": pipeline_cmd.run_build_lib_argv,
    "run": pipeline_cmd.run_tasks_argv,
    "tasks": pipeline_cmd.run_list_tasks_argv,
    "env": inspect_cmd.run_env_argv,
    "verify": inspect_cmd.run_verify_argv,
}


def _usage() -> None:
    print("Usage: android-ffi <command> [args...]", file=sys.stderr)
    print("Commands:", file=sys.stderr)
    print(
        "  build-lib             - Build all ABIs, move jniLibs, generate bindings",
        file=sys.stderr,
    )
    print(
        "  run <task>...         - Run named tasks (--no-deps to skip required tasks)",
        file=sys.stderr,
    )
    print("  tasks                 - List tasks and their dependencies", file=sys.stderr)
    print("  env <arch>            - Show toolchain env overrides for one target", file=sys.stderr)
    print("  verify                - Check jniLibs/<arch>/ contents", file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    if argv is None:
        argv = sys.argv[1:]
    if not argv or argv[0] in ("-h", "--help"):
        _usage()
        sys.exit(1 if not argv else 0)

    command = argv[0]
    handler = COMMANDS.get(command)
    if handler is None:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        _usage()
        sys.exit(1)
    sys.exit(handler(argv[1:]))


if __name__ == "__main__":
    main()
