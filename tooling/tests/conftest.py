"""Pytest fixtures for android-ffi tooling tests."""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from android_ffi_tooling.process import ProcessResult


@dataclass
class FakeRunner:
    """Stand-in for run_process: records calls, writes the cargo output file on success.

    fail maps a target triple (or "run" for the generator) to the exit code to return.
    """

    library_file: str = "libldkliteffi.so"
    fail: dict[str, int] = field(default_factory=dict)
    write_outputs: bool = True
    calls: list[tuple[tuple[str, ...], Path, dict[str, str] | None]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        argv = tuple(args)
        with self._lock:
            self.calls.append((argv, Path(cwd), dict(env) if env is not None else None))
        if argv[1] == "build":
            triple = argv[argv.index("--target") + 1]
            code = self.fail.get(triple, 0)
            if code == 0 and self.write_outputs:
                out = Path(cwd) / "target" / triple / "release" / self.library_file
                out.parent.mkdir(parents=True, exist_ok=True)
                out.write_bytes(f"ELF {triple}".encode())
            return ProcessResult(argv, code, "", f"error: could not compile for {triple}" if code else "")
        code = self.fail.get("run", 0)
        return ProcessResult(argv, code, "", "generator crashed" if code else "")

    def build_calls(self) -> list[tuple[str, ...]]:
        return [c[0] for c in self.calls if c[0][1] == "build"]

    def generator_calls(self) -> list[tuple[str, ...]]:
        return [c[0] for c in self.calls if c[0][1] == "run"]


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def ci_env() -> dict[str, str]:
    """Synthetic ambient environment of a CI image without ANDROID_NDK_ROOT."""
    return {"PATH": "/usr/bin:/bin", "ANDROID_SDK_ROOT": "/opt/android-sdk", "HOME": "/home/ci"}


@pytest.fixture
def android_project(tmp_path: Path) -> tuple[Path, Path]:
    """ldklite-style tree: <tmp>/ldklite-android (project root) and <tmp>/ldklite-ffi. Returns (root, native)."""
    root = tmp_path / "ldklite-android"
    native = tmp_path / "ldklite-ffi"
    (root / "lib" / "src" / "main").mkdir(parents=True)
    native.mkdir()
    (native / "Cargo.toml").write_text('[workspace]\nmembers = ["ffi", "ffi-bindgen"]\n')
    return root, native


@pytest.fixture
def linux_probe() -> Callable[[], str]:
    return lambda: "Linux"


@pytest.fixture
def make_runner() -> Callable[..., FakeRunner]:
    """Factory for FakeRunner with custom failures, e.g. make_runner(fail={"run": 1})."""
    return FakeRunner
