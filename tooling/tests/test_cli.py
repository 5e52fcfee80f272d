"""Tests for android_ffi_tooling.cli (main dispatch and subcommands)."""

from pathlib import Path
from unittest.mock import patch

import pytest


class TestMain:
    def test_no_args_prints_usage_and_exits_1(self, capsys) -> None:
        from android_ffi_tooling.cli.main import main

        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1
        _, err = capsys.readouterr()
        assert "build-lib" in err

    def test_unknown_command(self, capsys) -> None:
        from android_ffi_tooling.cli.main import main

        with pytest.raises(SystemExit) as exc:
            main(["frobnicate"])
        assert exc.value.code == 1
        _, err = capsys.readouterr()
        assert "Unknown command: frobnicate" in err

    def test_dispatches_to_handler(self) -> None:
        from android_ffi_tooling.cli import main as cli_main

        with patch.dict(cli_main.COMMANDS, {"tasks": lambda argv: 0}):
            with pytest.raises(SystemExit) as exc:
                cli_main.main(["tasks"])
        assert exc.value.code == 0


class TestTasksCommand:
    def test_lists_pipeline(self, android_project, capsys) -> None:
        from android_ffi_tooling.cli.pipeline_cmd import run_list_tasks_argv

        root, _ = android_project
        assert run_list_tasks_argv(["--project-root", str(root)]) == 0
        out, _ = capsys.readouterr()
        assert "build-android-lib" in out
        assert "[android] Aggregate task to build Android library" in out
        assert "after:" in out


class TestRunCommand:
    def test_failure_reports_stage_and_output(self, android_project, capsys, make_runner) -> None:
        from android_ffi_tooling.cli.pipeline_cmd import run_tasks_argv
        from android_ffi_tooling.pipeline import android

        root, _ = android_project
        runner = make_runner(fail={"aarch64-linux-android": 101})
        real = android.run_tasks

        def fake_run_tasks(config, goals, include_deps=True):
            env = {"PATH": "/bin", "ANDROID_NDK_ROOT": "/ndk"}
            return real(
                config,
                goals,
                include_deps=include_deps,
                env=env,
                runner=runner,
                system_probe=lambda: "Linux",
            )

        with patch("android_ffi_tooling.cli.pipeline_cmd.run_tasks", fake_run_tasks):
            rc = run_tasks_argv(["build-arm64-v8a", "--project-root", str(root)])
        assert rc == 1
        _, err = capsys.readouterr()
        assert "Task 'build-arm64-v8a' failed" in err
        assert "exit code 101" in err
        assert "could not compile" in err

    def test_unknown_task_exit_1(self, android_project, capsys) -> None:
        from android_ffi_tooling.cli.pipeline_cmd import run_tasks_argv

        root, _ = android_project
        assert run_tasks_argv(["nope", "--project-root", str(root)]) == 1
        _, err = capsys.readouterr()
        assert "Unknown task: nope" in err

    def test_bad_config_exit_1(self, tmp_path: Path, capsys) -> None:
        from android_ffi_tooling.cli.pipeline_cmd import run_build_lib_argv

        (tmp_path / "android-ffi.yaml").write_text("targets: nope\n")
        assert run_build_lib_argv(["--project-root", str(tmp_path)]) == 1
        _, err = capsys.readouterr()
        assert "targets must be a list" in err


class TestEnvCommand:
    def test_prints_overrides(self, android_project, capsys) -> None:
        from android_ffi_tooling.cli.inspect_cmd import run_env_argv

        root, _ = android_project
        with (
            patch("platform.system", return_value="Linux"),
            patch.dict("os.environ", {"ANDROID_NDK_ROOT": "/ndk", "PATH": "/bin"}, clear=True),
        ):
            rc = run_env_argv(["x86_64", "--project-root", str(root)])
        assert rc == 0
        out, _ = capsys.readouterr()
        assert "CARGO_TARGET_X86_64_LINUX_ANDROID_LINKER=x86_64-linux-android21-clang" in out
        assert "CFLAGS=-D__ANDROID_API__=21" in out

    def test_ndk_root_flag_used_as_fallback(self, android_project, capsys) -> None:
        from android_ffi_tooling.cli.inspect_cmd import run_env_argv

        root, _ = android_project
        with (
            patch("platform.system", return_value="Darwin"),
            patch.dict("os.environ", {"PATH": "/bin"}, clear=True),
        ):
            rc = run_env_argv(
                ["arm64-v8a", "--ndk-root", "/Users/dev/ndk", "--project-root", str(root)]
            )
        assert rc == 0
        out, _ = capsys.readouterr()
        assert "ANDROID_NDK_ROOT=/Users/dev/ndk" in out
        assert "/Users/dev/ndk/toolchains/llvm/prebuilt/darwin-x86_64/bin" in out

    def test_unknown_arch(self, android_project, capsys) -> None:
        from android_ffi_tooling.cli.inspect_cmd import run_env_argv

        root, _ = android_project
        assert run_env_argv(["mips", "--project-root", str(root)]) == 1
        _, err = capsys.readouterr()
        assert "Unknown target: mips" in err


class TestVerifyCommand:
    def test_missing_mandatory(self, android_project, capsys) -> None:
        from android_ffi_tooling.cli.inspect_cmd import run_verify_argv

        root, _ = android_project
        assert run_verify_argv(["--project-root", str(root)]) == 1
        _, err = capsys.readouterr()
        assert "arm64-v8a" in err

    def test_present(self, android_project, capsys) -> None:
        from android_ffi_tooling.cli.inspect_cmd import run_verify_argv

        root, _ = android_project
        d = root / "lib" / "src" / "main" / "jniLibs" / "arm64-v8a"
        d.mkdir(parents=True)
        (d / "libldkliteffi.so").write_bytes(b"x")
        assert run_verify_argv(["--project-root", str(root)]) == 0
        out, _ = capsys.readouterr()
        assert "1/3 native libraries present" in out
