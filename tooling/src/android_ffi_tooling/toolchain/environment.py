"""Per-target toolchain environment: NDK root, PATH, CFLAGS, cargo linker and CC.

The ambient environment is any read-only mapping (os.environ by default). It is copied
and extended for each build, never mutated.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import PurePath
from string import Template
from types import MappingProxyType

from android_ffi_tooling.config import DEFAULT_NDK_FALLBACK
from android_ffi_tooling.errors import ConfigError
from android_ffi_tooling.targets import DEFAULT_API_LEVEL, TargetSpec

log = logging.getLogger(__name__)

NDK_ROOT_VAR = "ANDROID_NDK_ROOT"


@dataclass(frozen=True)
class ToolchainEnvironment:
    """Environment for one build invocation. variables is the full process env."""

    variables: Mapping[str, str]
    overrides: Mapping[str, str]
    ndk_root: str


def resolve_ndk_root(
    env: Mapping[str, str],
    fallback: str = DEFAULT_NDK_FALLBACK,
) -> tuple[str, bool]:
    """Return (ndk_root, derived). Uses ANDROID_NDK_ROOT when set, else substitutes fallback from env."""
    ndk = env.get(NDK_ROOT_VAR)
    if ndk:
        return ndk, False
    try:
        derived = Template(fallback).substitute(env)
    except KeyError as e:
        msg = f"{NDK_ROOT_VAR} is not set and the fallback {fallback!r} references unset variable {e.args[0]}"
        raise ConfigError(
            msg,
            hint=f"Export {NDK_ROOT_VAR}, or pass --ndk-root / set ndk_fallback in android-ffi.yaml.",
        ) from e
    except ValueError as e:
        msg = f"Invalid ndk_fallback template {fallback!r}: {e}"
        raise ConfigError(msg) from e
    return derived, True


def toolchain_bin_dir(ndk_root: str, fragment: str) -> str:
    """<ndk>/toolchains/llvm/prebuilt/<fragment>/bin."""
    return str(PurePath(ndk_root, "toolchains", "llvm", "prebuilt", fragment, "bin"))


def compose_toolchain_environment(
    target: TargetSpec,
    fragment: str,
    env: Mapping[str, str] | None = None,
    api_level: int = DEFAULT_API_LEVEL,
    ndk_fallback: str = DEFAULT_NDK_FALLBACK,
) -> ToolchainEnvironment:
    """Compose the build environment for target on a host with the given prebuilt fragment."""
    if env is None:
        env = os.environ
    ndk_root, derived = resolve_ndk_root(env, ndk_fallback)

    overrides: dict[str, str] = {}
    if derived:
        overrides[NDK_ROOT_VAR] = ndk_root
    bin_dir = toolchain_bin_dir(ndk_root, fragment)
    ambient_path = env.get("PATH", "")
    overrides["PATH"] = f"{ambient_path}{os.pathsep}{bin_dir}" if ambient_path else bin_dir
    overrides["CFLAGS"] = f"-D__ANDROID_API__={api_level}"
    overrides[target.linker_var] = target.executable
    overrides[target.cc_var] = target.executable

    variables = dict(env)
    variables.update(overrides)
    log.debug("toolchain env for %s: %s", target.triple, overrides)
    return ToolchainEnvironment(
        variables=MappingProxyType(variables),
        overrides=MappingProxyType(overrides),
        ndk_root=ndk_root,
    )
