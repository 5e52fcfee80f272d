"""Host detection: which NDK prebuilt toolchain directory applies to this machine."""

from .platform import (
    LLVM_PREBUILT_DIRS,
    HostPlatform,
    detect_host_platform,
    llvm_prebuilt_fragment,
    resolve_host_fragment,
)

__all__ = [
    "LLVM_PREBUILT_DIRS",
    "HostPlatform",
    "detect_host_platform",
    "llvm_prebuilt_fragment",
    "resolve_host_fragment",
]
