"""Minimal task-dependency graph with a threaded topological scheduler.

Two edge kinds:
- requires: hard dependency. Pulled into the plan with the task; if it fails, the task
  is not run (blocked).
- after: ordering only. Applies when both tasks are planned; failure does not block.
  A task registered with strict_after=True is also blocked by a failed `after` predecessor.

Independent ready tasks run concurrently. A failure never cancels siblings that do not
depend on it; it only blocks its dependents.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from android_ffi_tooling.errors import OrchestratorError, TaskGraphError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskOutcome:
    name: str
    value: Any = None
    error: Exception | None = None
    blocked_by: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.blocked_by is None

    @property
    def skipped(self) -> bool:
        return self.blocked_by is not None


Action = Callable[[Mapping[str, TaskOutcome]], Any]


@dataclass(frozen=True)
class Task:
    name: str
    action: Action
    requires: tuple[str, ...] = ()
    after: tuple[str, ...] = ()
    description: str = ""
    group: str | None = None
    # a failed or blocked `after` predecessor blocks this task too
    strict_after: bool = False

    @property
    def predecessors(self) -> tuple[str, ...]:
        return (*self.requires, *self.after)

    @property
    def blockers(self) -> tuple[str, ...]:
        """Predecessors whose failure keeps this task from running."""
        return self.predecessors if self.strict_after else self.requires


@dataclass
class RunReport:
    outcomes: dict[str, TaskOutcome] = field(default_factory=dict)
    failures: list[TaskOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures and all(o.ok for o in self.outcomes.values())

    @property
    def first_failure(self) -> TaskOutcome | None:
        return self.failures[0] if self.failures else None

    @property
    def blocked(self) -> list[TaskOutcome]:
        return [o for o in self.outcomes.values() if o.skipped]

    def value(self, name: str) -> Any:
        return self.outcomes[name].value

    def raise_for_failure(self) -> None:
        """Re-raise the first failure, if any."""
        first = self.first_failure
        if first is not None and first.error is not None:
            raise first.error


class TaskGraph:
    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            msg = f"Unknown task: {name}"
            raise TaskGraphError(msg, hint=f"Known tasks: {', '.join(self._tasks)}") from None

    def add(self, task: Task) -> Task:
        if task.name in self._tasks:
            msg = f"Duplicate task: {task.name}"
            raise TaskGraphError(msg)
        self._tasks[task.name] = task
        return task

    def register(
        self,
        name: str,
        action: Action,
        *,
        requires: Iterable[str] = (),
        after: Iterable[str] = (),
        description: str = "",
        group: str | None = None,
        strict_after: bool = False,
    ) -> Task:
        return self.add(
            Task(
                name=name,
                action=action,
                requires=tuple(requires),
                after=tuple(after),
                description=description,
                group=group,
                strict_after=strict_after,
            )
        )

    def validate(self) -> None:
        """Raise TaskGraphError on unknown or self dependencies and on cycles."""
        for t in self._tasks.values():
            for dep in t.predecessors:
                if dep == t.name:
                    msg = f"Task {t.name} depends on itself"
                    raise TaskGraphError(msg)
                if dep not in self._tasks:
                    msg = f"Task {t.name} depends on unknown task {dep}"
                    raise TaskGraphError(msg)
        self._toposort(list(self._tasks))

    def _toposort(self, names: list[str]) -> list[str]:
        """Kahn's algorithm over edges among names; ties broken by registration order."""
        index = {n: i for i, n in enumerate(self._tasks)}
        selected = set(names)
        indegree = dict.fromkeys(names, 0)
        children: dict[str, list[str]] = {n: [] for n in names}
        for n in names:
            for dep in self._tasks[n].predecessors:
                if dep in selected:
                    indegree[n] += 1
                    children[dep].append(n)
        ready = sorted((n for n in names if indegree[n] == 0), key=index.__getitem__)
        order: list[str] = []
        while ready:
            n = ready.pop(0)
            order.append(n)
            for c in children[n]:
                indegree[c] -= 1
                if indegree[c] == 0:
                    ready.append(c)
            ready.sort(key=index.__getitem__)
        if len(order) != len(names):
            cyclic = sorted(selected - set(order), key=index.__getitem__)
            msg = f"Dependency cycle among tasks: {', '.join(cyclic)}"
            raise TaskGraphError(msg)
        return order

    def plan(self, goals: Iterable[str], include_deps: bool = True) -> list[str]:
        """Tasks to run for goals, in execution order. include_deps follows requires edges."""
        self.validate()
        goal_list = list(goals)
        if not goal_list:
            msg = "No tasks requested"
            raise TaskGraphError(msg)
        for g in goal_list:
            self.get(g)
        selected: set[str] = set()
        stack = list(goal_list)
        while stack:
            n = stack.pop()
            if n in selected:
                continue
            selected.add(n)
            if include_deps:
                stack.extend(self._tasks[n].requires)
        return self._toposort([n for n in self._tasks if n in selected])

    def run(
        self,
        goals: Iterable[str],
        *,
        include_deps: bool = True,
        max_workers: int | None = None,
    ) -> RunReport:
        """Execute the plan for goals. Failures are collected in the report, not raised."""
        order = self.plan(goals, include_deps)
        planned = set(order)
        report = RunReport()
        pending = list(order)
        running: dict[Future, str] = {}
        workers = max_workers or len(order)
        log.debug("plan: %s (workers=%d)", " -> ".join(order), workers)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="task") as pool:
            while pending or running:
                blocked_now = self._start_ready(pool, pending, planned, running, report)
                if not running:
                    if pending and not blocked_now:
                        msg = f"Scheduler stalled with pending tasks: {', '.join(pending)}"
                        raise TaskGraphError(msg)
                    continue
                done, _ = wait(running, return_when=FIRST_COMPLETED)
                for fut in done:
                    name = running.pop(fut)
                    self._record(name, fut, report)
        return report

    def _start_ready(
        self,
        pool: ThreadPoolExecutor,
        pending: list[str],
        planned: set[str],
        running: dict[Future, str],
        report: RunReport,
    ) -> int:
        """Submit tasks whose planned predecessors have finished. Returns count newly blocked."""
        blocked = 0
        for name in list(pending):
            task = self._tasks[name]
            preds = [d for d in task.predecessors if d in planned]
            if any(d not in report.outcomes for d in preds):
                continue
            pending.remove(name)
            done = report.outcomes
            blocker = next((d for d in task.blockers if d in done and not done[d].ok), None)
            if blocker is not None:
                log.debug("task %s not run: dependency %s did not succeed", name, blocker)
                report.outcomes[name] = TaskOutcome(name, blocked_by=blocker)
                blocked += 1
                continue
            log.debug("starting task %s", name)
            snapshot = MappingProxyType(dict(report.outcomes))
            running[pool.submit(task.action, snapshot)] = name
        return blocked

    @staticmethod
    def _record(name: str, fut: Future, report: RunReport) -> None:
        try:
            value = fut.result()
        except Exception as e:
            if isinstance(e, OrchestratorError) and e.stage is None:
                e.stage = name
            log.debug("task %s failed: %s", name, e.__class__.__name__)
            outcome = TaskOutcome(name, error=e)
            report.failures.append(outcome)
        else:
            outcome = TaskOutcome(name, value=value)
        report.outcomes[name] = outcome
