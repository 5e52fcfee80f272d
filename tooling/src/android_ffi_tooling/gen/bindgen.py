"""Shared utilities for calling the binding generator (cargo run --package <generator>)."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from android_ffi_tooling.errors import GenerationError
from android_ffi_tooling.process import ProcessResult, Runner, run_process

log = logging.getLogger(__name__)


def generator_command(
    build_tool: str,
    package: str,
    language: str,
    out_dir: str,
) -> list[str]:
    """cargo run --package <package> -- --language <language> --out-dir <out_dir>."""
    return [
        build_tool,
        "run",
        "--package",
        package,
        "--",
        "--language",
        language,
        "--out-dir",
        out_dir,
    ]


def generate_bindings(
    native_dir: Path,
    *,
    package: str,
    language: str,
    out_dir: str,
    runner: Runner = run_process,
    build_tool: str = "cargo",
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> ProcessResult:
    """Run the generator in native_dir. out_dir is relative to native_dir.

    Args:
        native_dir: Cargo workspace holding the FFI crate and generator package
        package: Cargo package of the generator binary (e.g. ffi-bindgen)
        language: Binding language passed to --language (e.g. kotlin)
        out_dir: Output directory passed to --out-dir
        runner: Process runner (injectable for tests)
        build_tool: Cargo executable
        env: Process environment; None inherits the ambient one
        timeout: Seconds before the generator is killed

    Returns:
        ProcessResult of the generator run

    Raises:
        GenerationError: non-zero exit or timeout
    """
    print(f"🔨 Generating {language} bindings into {out_dir}...")
    result = runner(
        generator_command(build_tool, package, language, out_dir),
        cwd=native_dir,
        env=env,
        timeout=timeout,
    )
    if not result.ok:
        log.debug("generator output:\n%s", result.output)
        raise GenerationError(result.returncode, timed_out=result.timed_out, output=result.output)
    print(f"✅ {language.capitalize()} bindings file successfully created")
    return result
