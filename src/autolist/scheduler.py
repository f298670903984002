"""Batch command scheduler.

Runs a list of Commands against an EditClient with a concurrency cap,
per-item mutual exclusion, a throttle pause after every completion,
placeholder rewriting after creations, and cooperative cancellation.

Each run has one dispatch thread that owns the command list, the
running set and the throttle deadline. Worker threads only perform the remote
calls; their futures are the completion channel back into the loop.
"""

import threading
import time
import uuid
from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

from loguru import logger

from .api.base import EditClient
from .concurrency import StopFlag
from .config import AutoListConfig
from .errors import AlreadyRunningError, AutoListError, ConfigError
from .executor import execute_command
from .models import (
    Command,
    CommandMode,
    CommandResult,
    CommandStatus,
    ErrorKind,
    RunOutcome,
    RunProgress,
    RunReport,
)
from .rewriter import rewrite_entity_ref

log = logger.bind(component="scheduler")

Listener = Callable[[Command], None]
CompletionCallback = Callable[[RunReport], None]


def next_eligible(commands: Iterable[Command]) -> Command | None:
    """First waiting command whose item has nothing running, in list order."""
    commands = list(commands)
    busy = {c.entity_ref for c in commands if c.status == CommandStatus.RUNNING}
    for command in commands:
        if command.status == CommandStatus.WAITING and command.entity_ref not in busy:
            return command
    return None


class RunHandle:
    """One scheduler run: its commands, stop flag and final report.

    Attributes:
        run_id: Short random id used in log lines
        commands: The run's command list (owned by the dispatch thread)
        concurrency: Maximum commands in flight
        throttle_ms: Pause after each completion before the next dispatch
        created_ids: Item ids created during the run, in completion order
        failed_ids: Ids of commands whose remote call failed
    """

    def __init__(self, commands: list[Command], concurrency: int, throttle_ms: int) -> None:
        self.run_id = uuid.uuid4().hex[:8]
        self.commands = commands
        self.concurrency = concurrency
        self.throttle_ms = throttle_ms
        self.stop_flag = StopFlag()
        self.created_ids: list[str] = []
        self.failed_ids: list[int] = []
        self.report: RunReport | None = None
        self._lock = threading.Lock()
        self._callbacks: list[CompletionCallback] = []
        self._finished = threading.Event()

    @property
    def active(self) -> bool:
        return self.report is None

    @property
    def finished(self) -> bool:
        return self._finished.is_set()

    def cancel(self) -> None:
        with self._lock:
            self.stop_flag.request_stop()

    def progress(self) -> RunProgress:
        with self._lock:
            done = sum(1 for c in self.commands if c.status == CommandStatus.DONE)
            running = sum(1 for c in self.commands if c.status == CommandStatus.RUNNING)
        return RunProgress(done=done, total=len(self.commands), running=running)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the run finished. Returns False on timeout."""
        return self._finished.wait(timeout)

    def add_done_callback(self, callback: CompletionCallback) -> None:
        """Call ``callback(report)`` once the run ends (now, if it already has)."""
        with self._lock:
            if self.report is None:
                self._callbacks.append(callback)
                return
            report = self.report
        callback(report)

    def _finish(self, outcome: RunOutcome) -> None:
        progress = self.progress()
        with self._lock:
            if self.report is not None:
                return
            self.report = RunReport(
                outcome=outcome,
                done=progress.done,
                total=progress.total,
                created_ids=list(self.created_ids),
                failed_ids=list(self.failed_ids),
            )
            report = self.report
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            try:
                callback(report)
            except Exception as e:
                log.error(f"Completion callback failed for run {self.run_id}: {e}")
        self._finished.set()


class CommandScheduler:
    """Executes command lists, one run at a time.

    Attributes:
        client: Edit capability the commands are executed with
        config: Defaults for concurrency, throttle, poll interval and wiki
        listener: Optional callable invoked on every command status change,
            from the dispatch thread
    """

    def __init__(
        self,
        client: EditClient,
        config: AutoListConfig | None = None,
        listener: Listener | None = None,
    ) -> None:
        self.client = client
        self.config = config or AutoListConfig()
        self.listener = listener
        self._lock = threading.Lock()
        self._current: RunHandle | None = None

    def start(
        self,
        commands: Iterable[Command],
        concurrency: int | None = None,
        throttle_ms: int | None = None,
    ) -> RunHandle:
        """Begin executing ``commands`` in the background.

        Raises AlreadyRunningError if the previous run is still active, and
        ConfigError for a concurrency below 1 or a negative throttle.
        """
        if concurrency is None:
            concurrency = self.config.effective_concurrency
        if throttle_ms is None:
            throttle_ms = self.config.effective_throttle_ms
        if concurrency < 1:
            raise ConfigError(f"concurrency must be at least 1, got {concurrency}")
        if throttle_ms < 0:
            raise ConfigError(f"throttle_ms must not be negative, got {throttle_ms}")

        with self._lock:
            if self._current is not None and self._current.active:
                raise AlreadyRunningError(self._current.run_id)
            handle = RunHandle(list(commands), concurrency, throttle_ms)
            self._current = handle

        log.info(
            f"Starting run {handle.run_id}: {len(handle.commands)} commands, "
            f"concurrency={concurrency}, throttle={throttle_ms}ms"
        )
        thread = threading.Thread(
            target=self._run,
            args=(handle,),
            name=f"autolist-{handle.run_id}",
            daemon=True,
        )
        thread.start()
        return handle

    def cancel(self, handle: RunHandle) -> None:
        """Stop dispatching new commands; in-flight calls finish normally."""
        if not handle.active:
            log.debug(f"Run {handle.run_id} already finished, nothing to cancel")
            return
        handle.cancel()

    def on_complete(self, handle: RunHandle, callback: CompletionCallback) -> None:
        handle.add_done_callback(callback)

    def progress(self, handle: RunHandle | None = None) -> RunProgress:
        """Done/total for ``handle``, or for the latest run."""
        handle = handle or self._current
        if handle is None:
            return RunProgress()
        return handle.progress()

    # -- dispatch loop --

    def _run(self, handle: RunHandle) -> None:
        running: dict[Future, Command] = {}
        try:
            outcome = self._loop(handle, running)
        except Exception as e:
            log.error(f"Run {handle.run_id} aborted: {e}")
            handle.stop_flag.request_stop()
            outcome = RunOutcome.STOPPED
            # The executor shutdown already waited for these calls
            self._drain(handle, running)

        progress = handle.progress()
        if outcome == RunOutcome.STOPPED:
            log.warning(
                f"Run {handle.run_id} stopped: {progress.done}/{progress.total} done"
            )
        else:
            log.info(
                f"Run {handle.run_id} complete: {progress.done}/{progress.total} done, "
                f"{len(handle.failed_ids)} failed, {len(handle.created_ids)} created"
            )
        handle._finish(outcome)

    def _loop(self, handle: RunHandle, running: dict[Future, Command]) -> RunOutcome:
        throttle = handle.throttle_ms / 1000.0
        poll = self.config.poll_interval_ms / 1000.0
        # No dispatch before this point: last completion + throttle
        not_before = 0.0

        with ThreadPoolExecutor(
            max_workers=handle.concurrency,
            thread_name_prefix=f"autolist-{handle.run_id}",
        ) as executor:
            while True:
                now = time.monotonic()

                while now >= not_before and len(running) < handle.concurrency:
                    if handle.stop_flag.stop_requested:
                        break
                    command = next_eligible(handle.commands)
                    if command is None:
                        break
                    if not self._dispatch(handle, command, executor, running):
                        break

                if not running:
                    if handle.stop_flag.stop_requested:
                        return RunOutcome.STOPPED
                    if all(c.status == CommandStatus.DONE for c in handle.commands):
                        return RunOutcome.COMPLETED

                # Wait for a completion, the end of the throttle pause, or
                # the next poll tick
                timeout = poll
                if not_before > now:
                    timeout = min(timeout, not_before - now)

                if running:
                    done, _ = wait(
                        list(running), timeout=timeout, return_when=FIRST_COMPLETED
                    )
                    for future in done:
                        command = running.pop(future)
                        self._complete(handle, command, future.result())
                        if throttle > 0:
                            not_before = time.monotonic() + throttle
                else:
                    handle.stop_flag.wait(timeout)

    def _drain(self, handle: RunHandle, running: dict[Future, Command]) -> None:
        """Complete commands left in flight when the loop aborted."""
        for future, command in list(running.items()):
            running.pop(future)
            if future.cancelled() or future.exception() is not None:
                result = CommandResult.failure(ErrorKind.REMOTE, "run aborted")
            else:
                result = future.result()
            try:
                self._complete(handle, command, result)
            except AutoListError as e:
                log.error(f"Could not complete {command.describe()}: {e}")

    def _dispatch(
        self,
        handle: RunHandle,
        command: Command,
        executor: ThreadPoolExecutor,
        running: dict[Future, Command],
    ) -> bool:
        with handle._lock:
            # Checked under the lock so a concurrent cancel wins
            if handle.stop_flag.stop_requested:
                return False
            command.mark_running()
        entity_ref = command.entity_ref

        future = executor.submit(self._execute_safe, command, entity_ref)
        running[future] = command
        log.debug(f"Dispatched {command.describe()} (running={len(running)})")
        self._notify(command)
        return True

    def _execute_safe(self, command: Command, entity_ref: str) -> CommandResult:
        """Wrapper for execute_command that turns any exception into a failure."""
        try:
            return execute_command(command, entity_ref, self.client, self.config.wiki)
        except Exception as e:
            log.error(f"Error executing {command.describe()}: {e}")
            return CommandResult.failure(ErrorKind.REMOTE, str(e))

    def _complete(self, handle: RunHandle, command: Command, result: CommandResult) -> None:
        former_ref = command.entity_ref
        with handle._lock:
            command.mark_done()
            if result.ok and command.mode == CommandMode.CREATE and result.new_id:
                rewrite_entity_ref(former_ref, result.new_id, handle.commands)
                handle.created_ids.append(result.new_id)
            elif not result.ok:
                handle.failed_ids.append(command.id)

        progress = handle.progress()
        status = "ok" if result.ok else f"failed ({result.error_kind})"
        log.info(
            f"[{progress.done}/{progress.total}] {command.describe()}: {status}"
        )
        self._notify(command)

    def _notify(self, command: Command) -> None:
        if self.listener is None:
            return
        try:
            self.listener(command)
        except Exception as e:
            log.error(f"Status listener failed for {command.describe()}: {e}")
