"""Error taxonomy for the Android FFI build pipeline.

Every failure surfaced by a pipeline stage is an OrchestratorError. The task graph
stamps ``stage`` with the failing task name so the CLI can say which step broke
and show the external process output that goes with it.
"""

from __future__ import annotations

from pathlib import Path

from android_ffi_tooling.helpers import tail_lines


class OrchestratorError(Exception):
    """Base error: message plus optional stage, hint and captured process output."""

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        hint: str | None = None,
        output: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.hint = hint
        self.output = output

    def __str__(self) -> str:
        parts = [self.message]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.output and self.output.strip():
            parts.append("--- process output (tail) ---")
            parts.append(tail_lines(self.output))
        return "\n".join(parts)


class UnsupportedHostError(OrchestratorError):
    """Host OS has no prebuilt NDK toolchain we know how to locate."""

    def __init__(self, system: str) -> None:
        super().__init__(
            f"Cannot build Android library from current host: {system or 'unknown'}",
            hint="Android cross-compilation is supported on macOS and Linux hosts only.",
        )
        self.system = system


class ToolchainInvocationError(OrchestratorError):
    """External build process for one target exited non-zero, timed out, or did not start."""

    def __init__(
        self,
        target: str,
        returncode: int | None,
        *,
        timed_out: bool = False,
        output: str | None = None,
    ) -> None:
        if timed_out:
            msg = f"Build for {target} timed out"
        else:
            msg = f"Build for {target} failed with exit code {returncode}"
        hint = None
        if returncode == 127:
            hint = "Build tool not found on PATH; is the Rust toolchain installed?"
        super().__init__(msg, hint=hint, output=output)
        self.target = target
        self.returncode = returncode
        self.timed_out = timed_out


class ArtifactMissingError(OrchestratorError):
    """Mandatory target binary is not where the build contract says it should be."""

    def __init__(self, target: str, path: Path) -> None:
        super().__init__(
            f"Native library for {target} not found: {path}",
            hint="Check that the build for this target succeeded and that library_name matches the crate.",
        )
        self.target = target
        self.path = path


class ArtifactCopyError(OrchestratorError):
    """Copying a target binary into jniLibs failed at the filesystem level."""

    def __init__(self, target: str, path: Path, reason: OSError) -> None:
        super().__init__(
            f"Could not copy native library for {target} to {path}: {reason.strerror or reason}",
            hint="Check that the jniLibs directory is writable.",
        )
        self.target = target
        self.path = path


class GenerationError(OrchestratorError):
    """Binding generator exited non-zero or timed out."""

    def __init__(
        self,
        returncode: int | None,
        *,
        timed_out: bool = False,
        output: str | None = None,
    ) -> None:
        if timed_out:
            msg = "Binding generation timed out"
        else:
            msg = f"Binding generation failed with exit code {returncode}"
        super().__init__(msg, output=output)
        self.returncode = returncode
        self.timed_out = timed_out


class ConfigError(OrchestratorError):
    """Invalid configuration file, target set, or unresolvable toolchain location."""


class TaskGraphError(OrchestratorError):
    """Malformed task graph: duplicate task, unknown dependency, cycle, or unknown goal."""
