"""Copy built .so files from <native>/target/{triple}/release into jniLibs/{arch}/.

Only binaries that exist are copied: optional targets that were not built are skipped.
A missing mandatory binary is an error.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from android_ffi_tooling.build import expected_output_path
from android_ffi_tooling.errors import ArtifactCopyError, ArtifactMissingError
from android_ffi_tooling.helpers import display_path
from android_ffi_tooling.targets import TargetSpec

log = logging.getLogger(__name__)


@dataclass
class CollectionReport:
    copied: list[Path] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def destination_path(dest_root: Path, target: TargetSpec, library_file: str) -> Path:
    """<dest_root>/<arch>/<library_file>."""
    return dest_root / target.arch / library_file


def collect_artifacts(
    targets: Iterable[TargetSpec],
    native_dir: Path,
    dest_root: Path,
    library_file: str,
    *,
    exclude: Iterable[str] = (),
) -> CollectionReport:
    """Copy each available target binary into dest_root/<arch>/. Overwrites existing files.

    exclude holds triples whose build failed in this run; their (possibly stale) binaries
    are not copied. Raises ArtifactMissingError when a mandatory binary is unavailable and
    ArtifactCopyError when the filesystem rejects a copy.
    """
    excluded = set(exclude)
    report = CollectionReport()
    for t in targets:
        src = expected_output_path(native_dir, t, library_file)
        if t.triple in excluded or not src.is_file():
            if t.mandatory:
                raise ArtifactMissingError(t.triple, src)
            reason = "build failed" if t.triple in excluded else "not built"
            log.debug("skipping %s: %s (%s)", t.arch, src, reason)
            report.skipped.append(t.arch)
            continue
        dst = destination_path(dest_root, t, library_file)
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dst)
        except OSError as e:
            raise ArtifactCopyError(t.triple, dst, e) from e
        print(f"📦 Copying {t.arch}: {src.name} -> {display_path(dst, dest_root.parent)}")
        report.copied.append(dst)
    print(f"✅ Native binaries for Android copied to {dest_root}")
    return report


def verify_artifacts(
    targets: Iterable[TargetSpec],
    dest_root: Path,
    library_file: str,
) -> tuple[list[Path], list[Path]]:
    """Check dest_root layout. Returns (present, missing_mandatory) destination paths."""
    present: list[Path] = []
    missing: list[Path] = []
    for t in targets:
        dst = destination_path(dest_root, t, library_file)
        if dst.is_file():
            present.append(dst)
        elif t.mandatory:
            missing.append(dst)
    return present, missing
