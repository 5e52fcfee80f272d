"""Task graph and the Android library pipeline wired on top of it."""

from .android import (
    BUILD_ANDROID_LIB,
    GENERATE_BINDINGS,
    MOVE_NATIVE_LIBS,
    RESOLVE_HOST,
    build_android_lib,
    build_pipeline,
    run_tasks,
)
from .graph import RunReport, Task, TaskGraph, TaskOutcome

__all__ = [
    "BUILD_ANDROID_LIB",
    "GENERATE_BINDINGS",
    "MOVE_NATIVE_LIBS",
    "RESOLVE_HOST",
    "RunReport",
    "Task",
    "TaskGraph",
    "TaskOutcome",
    "build_android_lib",
    "build_pipeline",
    "run_tasks",
]
