"""Tests for android_ffi_tooling.build (per-target cargo build)."""

from pathlib import Path

import pytest


def _targets():
    from android_ffi_tooling.targets import default_targets

    return default_targets()


class TestExpectedOutputPath:
    def test_path_contract(self, tmp_path: Path) -> None:
        from android_ffi_tooling.build import expected_output_path

        t = _targets()[1]
        got = expected_output_path(tmp_path, t, "libldkliteffi.so")
        assert got == tmp_path / "target" / "x86_64-linux-android" / "release" / "libldkliteffi.so"

    def test_build_command(self) -> None:
        from android_ffi_tooling.build import build_command

        assert build_command("cargo", _targets()[0]) == [
            "cargo",
            "build",
            "--release",
            "--target",
            "aarch64-linux-android",
        ]


class TestBuildTarget:
    def test_success_records_expected_path(self, android_project, fake_runner, ci_env) -> None:
        from android_ffi_tooling.build import build_target

        _, native = android_project
        t = _targets()[0]
        result = build_target(
            t,
            "linux-x86_64",
            native,
            library_file="libldkliteffi.so",
            env=ci_env,
            runner=fake_runner,
        )
        assert result.ok
        assert result.output_path == native / "target" / t.triple / "release" / "libldkliteffi.so"
        assert result.output_path.is_file()
        result.raise_for_status()

    def test_runner_gets_cwd_and_composed_env(self, android_project, fake_runner, ci_env) -> None:
        from android_ffi_tooling.build import build_target

        _, native = android_project
        build_target(
            _targets()[2],
            "linux-x86_64",
            native,
            library_file="libldkliteffi.so",
            env=ci_env,
            runner=fake_runner,
        )
        (argv, cwd, env) = fake_runner.calls[0]
        assert argv == ("cargo", "build", "--release", "--target", "armv7-linux-androideabi")
        assert cwd == native
        assert env["CARGO_TARGET_ARMV7_LINUX_ANDROIDEABI_LINKER"] == "armv7a-linux-androideabi21-clang"
        assert env["CC"] == "armv7a-linux-androideabi21-clang"
        assert env["ANDROID_NDK_ROOT"] == "/opt/android-sdk/ndk-bundle"
        assert env["HOME"] == "/home/ci"

    def test_failure_raises_with_output(self, android_project, ci_env, make_runner) -> None:
        from android_ffi_tooling.build import build_target
        from android_ffi_tooling.errors import ToolchainInvocationError

        _, native = android_project
        runner = make_runner(fail={"aarch64-linux-android": 101})
        result = build_target(
            _targets()[0],
            "linux-x86_64",
            native,
            library_file="libldkliteffi.so",
            env=ci_env,
            runner=runner,
        )
        assert not result.ok
        assert not result.output_path.exists()
        with pytest.raises(ToolchainInvocationError) as exc:
            result.raise_for_status()
        assert exc.value.returncode == 101
        assert exc.value.target == "aarch64-linux-android"
        assert "could not compile" in str(exc.value)

    def test_timeout_reported(self, android_project, ci_env) -> None:
        from android_ffi_tooling.build import build_target
        from android_ffi_tooling.errors import ToolchainInvocationError
        from android_ffi_tooling.process import ProcessResult

        _, native = android_project
        seen = {}

        def hanging(args, *, cwd, env=None, timeout=None):
            seen["timeout"] = timeout
            return ProcessResult(tuple(args), None, timed_out=True)

        result = build_target(
            _targets()[0],
            "linux-x86_64",
            native,
            library_file="libldkliteffi.so",
            env=ci_env,
            runner=hanging,
            timeout=30,
        )
        assert seen["timeout"] == 30
        with pytest.raises(ToolchainInvocationError, match="timed out") as exc:
            result.raise_for_status()
        assert exc.value.timed_out

    def test_no_retry(self, android_project, ci_env, make_runner) -> None:
        from android_ffi_tooling.build import build_target

        _, native = android_project
        runner = make_runner(fail={"aarch64-linux-android": 1})
        build_target(
            _targets()[0],
            "linux-x86_64",
            native,
            library_file="libldkliteffi.so",
            env=ci_env,
            runner=runner,
        )
        assert len(runner.calls) == 1
