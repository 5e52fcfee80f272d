"""Per-target cargo cross builds for Android ABIs."""

from .target_build import (
    BuildResult,
    build_command,
    build_target,
    expected_output_path,
)

__all__ = [
    "BuildResult",
    "build_command",
    "build_target",
    "expected_output_path",
]
