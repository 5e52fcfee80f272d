"""Host platform detection and NDK prebuilt toolchain directory fragment."""

from __future__ import annotations

import platform
from collections.abc import Callable
from enum import Enum

from android_ffi_tooling.errors import UnsupportedHostError


class HostPlatform(Enum):
    MAC = "mac"
    LINUX = "linux"
    OTHER = "other"


# NDK ships x86_64 host binaries only; Apple Silicon runs them under Rosetta.
LLVM_PREBUILT_DIRS: dict[HostPlatform, str] = {
    HostPlatform.MAC: "darwin-x86_64",
    HostPlatform.LINUX: "linux-x86_64",
}


def detect_host_platform(system_probe: Callable[[], str] | None = None) -> HostPlatform:
    """Map platform.system()-style names to HostPlatform. Unknown names are OTHER."""
    system = (system_probe or platform.system)()
    if system == "Darwin":
        return HostPlatform.MAC
    if system == "Linux":
        return HostPlatform.LINUX
    return HostPlatform.OTHER


def llvm_prebuilt_fragment(host: HostPlatform, system: str = "") -> str:
    """Directory under toolchains/llvm/prebuilt/ for host. Raises UnsupportedHostError for OTHER."""
    try:
        return LLVM_PREBUILT_DIRS[host]
    except KeyError:
        raise UnsupportedHostError(system or host.value) from None


def resolve_host_fragment(system_probe: Callable[[], str] | None = None) -> str:
    """Detect the host and return its prebuilt fragment (e.g. linux-x86_64)."""
    system = (system_probe or platform.system)()
    host = detect_host_platform(lambda: system)
    return llvm_prebuilt_fragment(host, system)
