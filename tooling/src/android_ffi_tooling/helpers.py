"""Shared helpers for android_ffi_tooling (naming, env var names, path display).

Used by targets, build, artifacts, gen, process, errors and cli modules.
"""

from __future__ import annotations

from pathlib import Path

# --- Naming ---


def to_env_token(s: str) -> str:
    """Upper-case a target triple for use in an env var name (aarch64-linux-android -> AARCH64_LINUX_ANDROID)."""
    return "".join(c.upper() if c.isalnum() else "_" for c in s)


def cargo_linker_var(triple: str) -> str:
    """Cargo per-target linker variable: CARGO_TARGET_<TRIPLE>_LINKER."""
    return f"CARGO_TARGET_{to_env_token(triple)}_LINKER"


def library_filename(library_name: str) -> str:
    """Shared library file cargo emits for a cdylib: lib<name>.so, with '-' mapped to '_' like cargo does."""
    return f"lib{library_name.replace('-', '_')}.so"


def clang_executable(clang_triple: str, api_level: int) -> str:
    """NDK clang wrapper name: <clang_triple><api>-clang (e.g. aarch64-linux-android21-clang)."""
    return f"{clang_triple}{api_level}-clang"


def task_name_for_arch(arch: str) -> str:
    """Task name for one ABI build (arm64-v8a -> build-arm64-v8a)."""
    return f"build-{arch.replace('_', '-')}"


# --- Output ---

# Lines of process output shown with a failure.
OUTPUT_TAIL_LINES = 40


def tail_lines(text: str, lines: int = OUTPUT_TAIL_LINES) -> str:
    """Last `lines` lines of text, trailing whitespace dropped."""
    if lines <= 0:
        return ""
    rows = text.rstrip().splitlines()
    return "\n".join(rows[-lines:])


# --- Path ---


def display_path(p: Path, root: Path | None) -> str:
    """Path relative to root when possible, for user-facing messages."""
    if root is None:
        return str(p)
    try:
        return str(p.relative_to(root))
    except ValueError:
        return str(p)
