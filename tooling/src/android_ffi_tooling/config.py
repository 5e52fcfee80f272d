"""Pipeline configuration loading (android-ffi.yaml).

Config YAML format (all keys optional):
- native_dir: cargo project of the FFI crate (relative to project root)
- jni_libs_dir: jniLibs root of the Android library module (relative to project root)
- library_name: cargo lib name; the built file is lib<name>.so
- api_level: minimum Android API level (NDK clang wrapper suffix, __ANDROID_API__)
- ndk_fallback: ${VAR} template used for ANDROID_NDK_ROOT when it is unset
- build_tool: cargo executable
- generator: { package, language, out_dir } (out_dir relative to native_dir)
- timeout: seconds per external process; jobs: max parallel tasks
- targets: list of { triple, arch, clang, mandatory?, cc_var? }
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from android_ffi_tooling.errors import ConfigError
from android_ffi_tooling.helpers import library_filename
from android_ffi_tooling.targets import (
    DEFAULT_API_LEVEL,
    TargetSpec,
    default_targets,
    make_target,
    validate_targets,
)

CONFIG_FILENAME = "android-ffi.yaml"

# Hosted CI images install the NDK under the SDK's ndk-bundle directory.
DEFAULT_NDK_FALLBACK = "${ANDROID_SDK_ROOT}/ndk-bundle"

# ldklite-style default; override for other consumers.
DEFAULT_LAYOUT: dict[str, Any] = {
    "native_dir": "../ldklite-ffi",
    "jni_libs_dir": "lib/src/main/jniLibs",
    "library_name": "ldkliteffi",
    "api_level": DEFAULT_API_LEVEL,
    "ndk_fallback": DEFAULT_NDK_FALLBACK,
    "build_tool": "cargo",
    "timeout": None,
    "jobs": None,
}

DEFAULT_GENERATOR: dict[str, str] = {
    "package": "ffi-bindgen",
    "language": "kotlin",
    "out_dir": "../ldklite-android/lib/src/main/kotlin",
}


@dataclass(frozen=True)
class GeneratorConfig:
    package: str
    language: str
    out_dir: str


@dataclass(frozen=True)
class OrchestratorConfig:
    """Resolved configuration. Paths are absolute."""

    project_root: Path
    native_dir: Path
    jni_libs_dir: Path
    library_name: str
    api_level: int
    ndk_fallback: str
    build_tool: str
    generator: GeneratorConfig
    targets: tuple[TargetSpec, ...]
    timeout: float | None = None
    jobs: int | None = None

    @property
    def library_file(self) -> str:
        return library_filename(self.library_name)


def resolve_layout(layout: dict[str, Any] | None) -> dict[str, Any]:
    """Return layout dict with defaults filled. Unknown keys are dropped."""
    out = dict(DEFAULT_LAYOUT)
    if layout:
        out.update({k: v for k, v in layout.items() if k in out})
    return out


def _as_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{key} must be an integer, got {value!r}"
        raise ConfigError(msg)
    return value


def _as_str(key: str, value: Any) -> str:
    if not isinstance(value, str) or not value:
        msg = f"{key} must be a non-empty string, got {value!r}"
        raise ConfigError(msg)
    return value


def _parse_generator(raw: Any) -> GeneratorConfig:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        msg = f"generator must be a mapping, got {type(raw).__name__}"
        raise ConfigError(msg)
    merged = dict(DEFAULT_GENERATOR)
    merged.update({k: v for k, v in raw.items() if k in merged})
    return GeneratorConfig(
        package=_as_str("generator.package", merged["package"]),
        language=_as_str("generator.language", merged["language"]),
        out_dir=_as_str("generator.out_dir", merged["out_dir"]),
    )


def parse_targets(raw: Any, api_level: int) -> list[TargetSpec]:
    """Parse the targets list; None means default_targets(api_level)."""
    if raw is None:
        return default_targets(api_level)
    if not isinstance(raw, list):
        msg = f"targets must be a list, got {type(raw).__name__}"
        raise ConfigError(msg)
    out: list[TargetSpec] = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            msg = f"targets[{i}] must be a mapping"
            raise ConfigError(msg)
        triple = _as_str(f"targets[{i}].triple", entry.get("triple"))
        arch = _as_str(f"targets[{i}].arch", entry.get("arch"))
        clang = entry.get("clang") or triple
        out.append(
            make_target(
                triple,
                arch,
                _as_str(f"targets[{i}].clang", clang),
                api_level,
                mandatory=bool(entry.get("mandatory", False)),
                cc_var=_as_str(f"targets[{i}].cc_var", entry.get("cc_var", "CC")),
            )
        )
    return validate_targets(out)


def load_config(
    config_path: Path | None = None,
    project_root: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> OrchestratorConfig:
    """Load android-ffi.yaml and resolve paths against project_root.

    project_root defaults to the config file's directory, or cwd when no config is given.
    A missing config file yields the defaults. overrides (e.g. from CLI flags) win over the
    file; None values in overrides are ignored.
    """
    if project_root is None:
        project_root = config_path.parent if config_path is not None else Path.cwd()
    root = Path(project_root).resolve()
    if config_path is None:
        config_path = root / CONFIG_FILENAME

    data: dict[str, Any] = {}
    if config_path.is_file():
        try:
            with config_path.open() as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            msg = f"Could not parse {config_path}: {e}"
            raise ConfigError(msg) from e
        if loaded is not None and not isinstance(loaded, dict):
            msg = f"{config_path} must contain a mapping at top level"
            raise ConfigError(msg)
        data = loaded or {}

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    layout = resolve_layout(data)
    api_level = _as_int("api_level", layout["api_level"])
    targets = parse_targets(data.get("targets"), api_level)

    timeout = layout["timeout"]
    valid_timeout = isinstance(timeout, (int, float)) and not isinstance(timeout, bool)
    if timeout is not None and (not valid_timeout or timeout <= 0):
        msg = f"timeout must be a positive number of seconds, got {timeout!r}"
        raise ConfigError(msg)
    jobs = layout["jobs"]
    if jobs is not None and _as_int("jobs", jobs) < 1:
        msg = f"jobs must be >= 1, got {jobs!r}"
        raise ConfigError(msg)

    return OrchestratorConfig(
        project_root=root,
        native_dir=(root / _as_str("native_dir", layout["native_dir"])).resolve(),
        jni_libs_dir=(root / _as_str("jni_libs_dir", layout["jni_libs_dir"])).resolve(),
        library_name=_as_str("library_name", layout["library_name"]),
        api_level=api_level,
        ndk_fallback=_as_str("ndk_fallback", layout["ndk_fallback"]),
        build_tool=_as_str("build_tool", layout["build_tool"]),
        generator=_parse_generator(data.get("generator")),
        targets=tuple(targets),
        timeout=float(timeout) if timeout is not None else None,
        jobs=jobs,
    )
