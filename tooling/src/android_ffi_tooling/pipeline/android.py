"""Android library pipeline: resolve host -> build ABIs -> move jniLibs -> generate bindings.

Task names:
- resolve-host          prebuilt toolchain fragment for this machine
- build-<arch>          cargo build for one target (e.g. build-arm64-v8a)
- move-native-libs      copy available .so files into jniLibs/<arch>/
- generate-bindings     run the binding generator (not run if any build in the run failed)
- build-android-lib     aggregate of all of the above
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

from android_ffi_tooling.artifacts import collect_artifacts
from android_ffi_tooling.build import BuildResult, build_target
from android_ffi_tooling.config import OrchestratorConfig
from android_ffi_tooling.gen import generate_bindings
from android_ffi_tooling.helpers import task_name_for_arch
from android_ffi_tooling.host import resolve_host_fragment
from android_ffi_tooling.pipeline.graph import Action, RunReport, TaskGraph, TaskOutcome
from android_ffi_tooling.process import Runner, run_process
from android_ffi_tooling.targets import TargetSpec

GROUP = "android"
RESOLVE_HOST = "resolve-host"
MOVE_NATIVE_LIBS = "move-native-libs"
GENERATE_BINDINGS = "generate-bindings"
BUILD_ANDROID_LIB = "build-android-lib"


def _build_action(
    config: OrchestratorConfig,
    target: TargetSpec,
    env: Mapping[str, str] | None,
    runner: Runner,
    system_probe: Callable[[], str] | None,
) -> Action:
    def action(outcomes: Mapping[str, TaskOutcome]) -> BuildResult:
        host = outcomes.get(RESOLVE_HOST)
        # --no-deps runs skip resolve-host
        fragment = host.value if host is not None else resolve_host_fragment(system_probe)
        result = build_target(
            target,
            fragment,
            config.native_dir,
            library_file=config.library_file,
            env=env,
            runner=runner,
            api_level=config.api_level,
            ndk_fallback=config.ndk_fallback,
            build_tool=config.build_tool,
            timeout=config.timeout,
        )
        result.raise_for_status()
        return result

    return action


def build_pipeline(
    config: OrchestratorConfig,
    *,
    env: Mapping[str, str] | None = None,
    runner: Runner = run_process,
    system_probe: Callable[[], str] | None = None,
) -> TaskGraph:
    """Register every pipeline task for config. env and runner are injectable for tests."""
    graph = TaskGraph()
    graph.register(
        RESOLVE_HOST,
        lambda _outcomes: resolve_host_fragment(system_probe),
        description="Resolve the NDK prebuilt toolchain directory for this host",
    )

    build_tasks: dict[str, str] = {}
    for t in config.targets:
        name = task_name_for_arch(t.arch)
        build_tasks[t.triple] = name
        kind = "mandatory" if t.mandatory else "optional"
        graph.register(
            name,
            _build_action(config, t, env, runner, system_probe),
            requires=(RESOLVE_HOST,),
            description=f"Build native library for {t.arch} ({t.triple}, {kind})",
            group=GROUP,
        )

    def move_native_libs(outcomes: Mapping[str, TaskOutcome]):
        failed = [
            triple
            for triple, name in build_tasks.items()
            if name in outcomes and not outcomes[name].ok
        ]
        return collect_artifacts(
            config.targets,
            config.native_dir,
            config.jni_libs_dir,
            config.library_file,
            exclude=failed,
        )

    graph.register(
        MOVE_NATIVE_LIBS,
        move_native_libs,
        requires=[build_tasks[t.triple] for t in config.targets if t.mandatory],
        after=[build_tasks[t.triple] for t in config.targets if not t.mandatory],
        description="Copy built native libraries into jniLibs/<arch>/",
        group=GROUP,
    )

    def generate(_outcomes: Mapping[str, TaskOutcome]):
        return generate_bindings(
            config.native_dir,
            package=config.generator.package,
            language=config.generator.language,
            out_dir=config.generator.out_dir,
            runner=runner,
            build_tool=config.build_tool,
            env=env,
            timeout=config.timeout,
        )

    graph.register(
        GENERATE_BINDINGS,
        generate,
        requires=(MOVE_NATIVE_LIBS,),
        # bindings are not regenerated after any build of this run failed
        after=[build_tasks[t.triple] for t in config.targets if not t.mandatory],
        strict_after=True,
        description=f"Generate {config.generator.language} bindings with {config.generator.package}",
        group=GROUP,
    )

    def aggregate(outcomes: Mapping[str, TaskOutcome]):
        print("🎉 Android library build complete!")
        return outcomes[MOVE_NATIVE_LIBS].value

    graph.register(
        BUILD_ANDROID_LIB,
        aggregate,
        requires=(*build_tasks.values(), MOVE_NATIVE_LIBS, GENERATE_BINDINGS),
        description="Aggregate task to build Android library",
        group=GROUP,
    )
    return graph


def run_tasks(
    config: OrchestratorConfig,
    goals: Iterable[str],
    *,
    include_deps: bool = True,
    env: Mapping[str, str] | None = None,
    runner: Runner = run_process,
    system_probe: Callable[[], str] | None = None,
) -> RunReport:
    """Run goals (and, with include_deps, what they require). Failures are in the report."""
    graph = build_pipeline(config, env=env, runner=runner, system_probe=system_probe)
    return graph.run(goals, include_deps=include_deps, max_workers=config.jobs)


def build_android_lib(
    config: OrchestratorConfig,
    *,
    env: Mapping[str, str] | None = None,
    runner: Runner = run_process,
    system_probe: Callable[[], str] | None = None,
) -> RunReport:
    """Build every target, collect artifacts, generate bindings. Raises the first failure."""
    report = run_tasks(
        config,
        [BUILD_ANDROID_LIB],
        env=env,
        runner=runner,
        system_probe=system_probe,
    )
    report.raise_for_failure()
    return report
