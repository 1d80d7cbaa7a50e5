"""Non-blocking git subprocess execution.

Every ``execute`` call returns immediately and later delivers exactly one
``callback(error, output)``. Work happens on daemon worker threads; results are
posted to a ``CallbackQueue`` and only run when its owner drains it, so
callbacks always execute on the owner's thread.

Two strategies share the ``GitRunner`` interface:

``SingleShotRunner``
    ``subprocess.run`` returns the full result after the process exits.
``PipeStreamRunner``
    ``subprocess.Popen`` plus one reader thread per pipe. Output is buffered
    chunk by chunk and the completion is posted only after both pipes hit EOF
    and were closed and the process was reaped.
"""

from __future__ import annotations

import logging
import subprocess
import threading
import time
from collections.abc import Callable, Sequence
from queue import Empty, Queue
from typing import IO

from .errors import GitCommandFailed, GitError, GitTimeout, SpawnFailure

logger = logging.getLogger(__name__)

GitCallback = Callable[[GitError | None, str | None], None]

GENERIC_FAILURE_MESSAGE = "Git command failed"
DEFAULT_GIT_EXECUTABLE = "git"
_READ_CHUNK_BYTES = 64 * 1024


class CallbackQueue:
    """Thread-safe mailbox of pending completions for one owner thread."""

    def __init__(self) -> None:
        self._pending: Queue[tuple[Callable[..., None], tuple[object, ...]]] = Queue()

    def post(self, callback: Callable[..., None], *args: object) -> None:
        """Queue ``callback(*args)``; safe to call from any thread."""
        self._pending.put((callback, args))

    def drain(self) -> int:
        """Run every queued callback on the calling thread and return the count."""
        ran = 0
        while True:
            try:
                callback, args = self._pending.get_nowait()
            except Empty:
                return ran
            callback(*args)
            ran += 1

    def run_until(self, predicate: Callable[[], bool], timeout: float | None = None) -> bool:
        """Block, running callbacks as they arrive, until ``predicate()`` holds.

        Returns ``False`` if ``timeout`` seconds pass first.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while not predicate():
            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
            try:
                callback, args = self._pending.get(timeout=remaining)
            except Empty:
                return predicate()
            callback(*args)
        return True


class _Completion:
    """Exactly-once bridge from a worker thread to the callback queue."""

    def __init__(self, callbacks: CallbackQueue, callback: GitCallback) -> None:
        self._callbacks = callbacks
        self._callback = callback
        self._lock = threading.Lock()
        self._resolved = False

    def resolve(self, error: GitError | None, output: str | None) -> None:
        with self._lock:
            if self._resolved:
                return
            self._resolved = True
        self._callbacks.post(self._callback, error, output)


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class GitRunner:
    """Common ``execute`` front end; subclasses implement ``_run``."""

    strategy = ""

    def __init__(
        self,
        callbacks: CallbackQueue,
        *,
        git_executable: str = DEFAULT_GIT_EXECUTABLE,
        default_timeout: float | None = None,
    ) -> None:
        self.callbacks = callbacks
        self.git_executable = git_executable
        self.default_timeout = default_timeout

    def execute(
        self,
        args: Sequence[str],
        callback: GitCallback,
        *,
        cwd: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Start ``git <args>`` in ``cwd`` and return without waiting."""
        argv = [self.git_executable, *args]
        effective_timeout = self.default_timeout if timeout is None else timeout
        completion = _Completion(self.callbacks, callback)
        logger.debug("spawning %s (cwd=%s, strategy=%s)", argv, cwd, self.strategy)
        worker = threading.Thread(
            target=self._run_guarded,
            args=(argv, cwd, effective_timeout, completion),
            name="lazychanges-git",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError as exc:
            completion.resolve(SpawnFailure(f"Failed to start git worker: {exc}"), None)

    def _run_guarded(
        self,
        argv: list[str],
        cwd: str | None,
        timeout: float | None,
        completion: _Completion,
    ) -> None:
        try:
            self._run(argv, cwd, timeout, completion)
        except Exception as exc:
            logger.exception("git worker crashed for %s", argv)
            completion.resolve(GitError(f"{argv[0]} failed: {exc}"), None)

    def _run(
        self,
        argv: list[str],
        cwd: str | None,
        timeout: float | None,
        completion: _Completion,
    ) -> None:
        raise NotImplementedError

    @staticmethod
    def _finish(completion: _Completion, returncode: int, stdout: str, stderr: str) -> None:
        if returncode == 0:
            completion.resolve(None, stdout)
            return
        completion.resolve(GitCommandFailed(stderr or GENERIC_FAILURE_MESSAGE, returncode), None)

    @staticmethod
    def _spawn_failed(completion: _Completion, argv: list[str], exc: OSError) -> None:
        logger.debug("failed to spawn %s: %s", argv, exc)
        completion.resolve(SpawnFailure(f"Failed to spawn {argv[0]} process: {exc}"), None)

    @staticmethod
    def _timed_out(completion: _Completion, argv: list[str], timeout: float) -> None:
        logger.debug("killed %s after %ss", argv, timeout)
        completion.resolve(GitTimeout(argv[1:], timeout), None)


class SingleShotRunner(GitRunner):
    strategy = "single-shot"

    def _run(self, argv, cwd, timeout, completion) -> None:
        try:
            proc = subprocess.run(
                argv,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            self._timed_out(completion, argv, timeout)
            return
        except OSError as exc:
            self._spawn_failed(completion, argv, exc)
            return
        self._finish(completion, proc.returncode, proc.stdout or "", proc.stderr or "")


class PipeStreamRunner(GitRunner):
    strategy = "pipe"

    def _run(self, argv, cwd, timeout, completion) -> None:
        try:
            proc = subprocess.Popen(
                argv,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            self._spawn_failed(completion, argv, exc)
            return

        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []
        read_errors: list[OSError] = []
        readers: list[threading.Thread] = []
        try:
            readers.append(_start_reader(proc.stdout, stdout_chunks, read_errors, "stdout"))
            readers.append(_start_reader(proc.stderr, stderr_chunks, read_errors, "stderr"))
        except RuntimeError as exc:
            _abandon(proc, readers)
            completion.resolve(SpawnFailure(f"Failed to start {argv[0]} output readers: {exc}"), None)
            return

        timed_out = False
        try:
            returncode = proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            timed_out = True
            proc.kill()
            returncode = proc.wait()

        # Readers close their pipe once it reaches EOF.
        for reader in readers:
            reader.join()

        if timed_out:
            self._timed_out(completion, argv, timeout)
            return
        if read_errors:
            completion.resolve(GitError(f"Failed reading {argv[0]} output: {read_errors[0]}"), None)
            return
        self._finish(completion, returncode, _decode(b"".join(stdout_chunks)), _decode(b"".join(stderr_chunks)))


def _start_reader(stream: IO[bytes], chunks: list[bytes], errors: list[OSError], label: str) -> threading.Thread:
    reader = threading.Thread(
        target=_pump,
        args=(stream, chunks, errors),
        name=f"lazychanges-git-{label}",
        daemon=True,
    )
    reader.start()
    return reader


def _abandon(proc: subprocess.Popen, readers: list[threading.Thread]) -> None:
    """Kill ``proc`` and release both pipes after a failed reader start."""
    proc.kill()
    proc.wait()
    for reader in readers:
        reader.join()
    for stream in (proc.stdout, proc.stderr):
        if stream is not None:
            stream.close()


def _pump(stream: IO[bytes], chunks: list[bytes], errors: list[OSError]) -> None:
    with stream:
        try:
            for chunk in iter(lambda: stream.read1(_READ_CHUNK_BYTES), b""):
                chunks.append(chunk)
        except OSError as exc:
            errors.append(exc)


RUNNER_STRATEGIES: dict[str, type[GitRunner]] = {
    SingleShotRunner.strategy: SingleShotRunner,
    PipeStreamRunner.strategy: PipeStreamRunner,
}


def create_runner(
    callbacks: CallbackQueue,
    strategy: str = SingleShotRunner.strategy,
    *,
    git_executable: str = DEFAULT_GIT_EXECUTABLE,
    default_timeout: float | None = None,
) -> GitRunner:
    """Build the runner registered for ``strategy``."""
    try:
        runner_cls = RUNNER_STRATEGIES[strategy]
    except KeyError:
        raise ValueError(f"unknown runner strategy: {strategy!r}") from None
    return runner_cls(callbacks, git_executable=git_executable, default_timeout=default_timeout)


__all__ = [
    "GitCallback",
    "CallbackQueue",
    "GitRunner",
    "SingleShotRunner",
    "PipeStreamRunner",
    "RUNNER_STRATEGIES",
    "create_runner",
    "GENERIC_FAILURE_MESSAGE",
]
