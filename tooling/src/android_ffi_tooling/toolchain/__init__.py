"""NDK toolchain environment composition for cargo cross builds."""

from .environment import (
    NDK_ROOT_VAR,
    ToolchainEnvironment,
    compose_toolchain_environment,
    resolve_ndk_root,
    toolchain_bin_dir,
)

__all__ = [
    "NDK_ROOT_VAR",
    "ToolchainEnvironment",
    "compose_toolchain_environment",
    "resolve_ndk_root",
    "toolchain_bin_dir",
]
