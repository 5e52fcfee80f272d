"""Android build targets: cargo triple, jniLibs ABI directory, NDK clang wrapper."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from android_ffi_tooling.errors import ConfigError
from android_ffi_tooling.helpers import cargo_linker_var, clang_executable

DEFAULT_API_LEVEL = 21


@dataclass(frozen=True)
class TargetSpec:
    """One cross-compilation target. Fixed when the pipeline is defined."""

    triple: str
    arch: str
    linker_var: str
    cc_var: str
    executable: str
    mandatory: bool = False


def make_target(
    triple: str,
    arch: str,
    clang_triple: str,
    api_level: int = DEFAULT_API_LEVEL,
    *,
    mandatory: bool = False,
    cc_var: str = "CC",
) -> TargetSpec:
    """Build a TargetSpec, deriving the linker var from the triple and the clang wrapper from the API level."""
    return TargetSpec(
        triple=triple,
        arch=arch,
        linker_var=cargo_linker_var(triple),
        cc_var=cc_var,
        executable=clang_executable(clang_triple, api_level),
        mandatory=mandatory,
    )


def default_targets(api_level: int = DEFAULT_API_LEVEL) -> list[TargetSpec]:
    """arm64-v8a (mandatory), x86_64 (emulators), armeabi-v7a (older 32-bit devices)."""
    return [
        # arm64-v8a is the most popular hardware architecture for Android
        make_target(
            "aarch64-linux-android",
            "arm64-v8a",
            "aarch64-linux-android",
            api_level,
            mandatory=True,
        ),
        make_target("x86_64-linux-android", "x86_64", "x86_64-linux-android", api_level),
        # the NDK names the 32-bit arm wrapper armv7a, cargo calls the target armv7
        make_target(
            "armv7-linux-androideabi",
            "armeabi-v7a",
            "armv7a-linux-androideabi",
            api_level,
        ),
    ]


def validate_targets(targets: Iterable[TargetSpec]) -> list[TargetSpec]:
    """Check triples and arch labels are unique and at least one target is mandatory. Returns the list."""
    out = list(targets)
    if not out:
        msg = "No build targets configured"
        raise ConfigError(msg)
    seen_triples: set[str] = set()
    seen_archs: set[str] = set()
    for t in out:
        if t.triple in seen_triples:
            msg = f"Duplicate target triple: {t.triple}"
            raise ConfigError(msg)
        if t.arch in seen_archs:
            msg = f"Duplicate architecture label: {t.arch}"
            raise ConfigError(msg)
        seen_triples.add(t.triple)
        seen_archs.add(t.arch)
    if not any(t.mandatory for t in out):
        msg = "At least one target must be mandatory"
        raise ConfigError(msg, hint="Set mandatory: true on the primary target (usually arm64-v8a).")
    return out


def primary_targets(targets: Iterable[TargetSpec]) -> list[TargetSpec]:
    """Mandatory targets, in declaration order."""
    return [t for t in targets if t.mandatory]


def find_target(targets: Iterable[TargetSpec], key: str) -> TargetSpec | None:
    """Look up a target by arch label or triple."""
    for t in targets:
        if key in (t.arch, t.triple):
            return t
    return None
