"""Run an external command to completion and capture its exit code and output."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from android_ffi_tooling.helpers import OUTPUT_TAIL_LINES, tail_lines

log = logging.getLogger(__name__)

# Exit code shells use for "command not found".
NOT_FOUND_RETURNCODE = 127


@dataclass(frozen=True)
class ProcessResult:
    args: tuple[str, ...]
    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return not self.timed_out and self.returncode == 0

    @property
    def output(self) -> str:
        """stdout and stderr joined, for diagnostics."""
        return "\n".join(s for s in (self.stdout, self.stderr) if s)

    def output_tail(self, lines: int = OUTPUT_TAIL_LINES) -> str:
        """Last lines of output, as shown in failure reports."""
        return tail_lines(self.output, lines)


Runner = Callable[..., ProcessResult]


def _text(data: str | bytes | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode(errors="replace")
    return data


def run_process(
    args: Sequence[str],
    *,
    cwd: Path,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> ProcessResult:
    """Run args in cwd with env; block until exit or timeout (child is killed on timeout)."""
    argv = tuple(str(a) for a in args)
    log.debug("run %s (cwd=%s, timeout=%s)", " ".join(argv), cwd, timeout)
    try:
        r = subprocess.run(
            list(argv),
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,  # Let caller handle errors
        )
    except subprocess.TimeoutExpired as e:
        log.debug("timed out after %ss: %s", timeout, argv[0])
        return ProcessResult(argv, None, _text(e.stdout), _text(e.stderr), timed_out=True)
    except OSError as e:
        log.debug("could not start %s: %s", argv[0], e)
        return ProcessResult(argv, NOT_FOUND_RETURNCODE, "", str(e))
    return ProcessResult(argv, r.returncode, r.stdout or "", r.stderr or "")
