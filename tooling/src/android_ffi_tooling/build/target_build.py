"""Cross-compile the FFI crate for one Android target with cargo.

The binary lands at <native_dir>/target/<triple>/release/<library_file>; the artifact
collector relies on that path rather than discovering it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from android_ffi_tooling.config import DEFAULT_NDK_FALLBACK
from android_ffi_tooling.errors import ToolchainInvocationError
from android_ffi_tooling.process import ProcessResult, Runner, run_process
from android_ffi_tooling.targets import DEFAULT_API_LEVEL, TargetSpec
from android_ffi_tooling.toolchain import compose_toolchain_environment

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    target: TargetSpec
    output_path: Path
    process: ProcessResult

    @property
    def ok(self) -> bool:
        return self.process.ok

    def raise_for_status(self) -> None:
        """Raise ToolchainInvocationError when the build did not exit 0."""
        if not self.ok:
            raise ToolchainInvocationError(
                self.target.triple,
                self.process.returncode,
                timed_out=self.process.timed_out,
                output=self.process.output,
            )


def expected_output_path(native_dir: Path, target: TargetSpec, library_file: str) -> Path:
    """<native_dir>/target/<triple>/release/<library_file>."""
    return native_dir / "target" / target.triple / "release" / library_file


def build_command(build_tool: str, target: TargetSpec) -> list[str]:
    return [build_tool, "build", "--release", "--target", target.triple]


def build_target(
    target: TargetSpec,
    fragment: str,
    native_dir: Path,
    *,
    library_file: str,
    env: Mapping[str, str] | None = None,
    runner: Runner = run_process,
    api_level: int = DEFAULT_API_LEVEL,
    ndk_fallback: str = DEFAULT_NDK_FALLBACK,
    build_tool: str = "cargo",
    timeout: float | None = None,
) -> BuildResult:
    """Build target in native_dir and block until the build exits. Never retries.

    Returns a BuildResult; callers decide whether a failure is fatal (raise_for_status).
    """
    toolchain = compose_toolchain_environment(
        target,
        fragment,
        env,
        api_level=api_level,
        ndk_fallback=ndk_fallback,
    )
    print(f"🔨 Building native library for {target.arch} ({target.triple})...")
    proc = runner(
        build_command(build_tool, target),
        cwd=native_dir,
        env=toolchain.variables,
        timeout=timeout,
    )
    result = BuildResult(
        target=target,
        output_path=expected_output_path(native_dir, target, library_file),
        process=proc,
    )
    if result.ok:
        print(f"✅ Native library for {target.arch} built successfully")
    elif proc.timed_out:
        log.warning("build for %s timed out after %ss", target.triple, timeout)
        print(f"❌ Build for {target.arch} timed out")
    else:
        log.debug("build output for %s:\n%s", target.triple, proc.output)
        print(f"❌ Build for {target.arch} failed (exit {proc.returncode})")
    return result
