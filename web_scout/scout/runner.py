"""ScoutRunner -- runs a research task in an isolated worker process.

Only the worker's final answer and usage numbers come back; everything it
fetched along the way stays in the child process.

Lifecycle of one ``run()``::

    Idle -> Spawning -> Streaming -> Completed | Failed | Cancelled

The temporary instructions file and its directory are removed on every
path out of ``run()``.
"""

import asyncio
import codecs
import contextlib
import os
import shlex
import tempfile
from typing import Callable, List, Optional, Sequence

from web_scout.errors import WorkerSpawnFailed
from web_scout.scout.models import RunStatus, ScoutRunResult
from web_scout.scout.protocol import LineDecoder, TurnCompleted, decode_event
from web_scout.utils.config import settings
from web_scout.utils.logger import get_logger

log = get_logger(__name__)

CHUNK_SIZE = 8192
PROMPT_FILENAME = "research-prompt.md"
# How long to wait for a killed worker, and for stdio readers after exit.
KILL_WAIT = 2.0
READER_DRAIN_TIMEOUT = 1.0

UpdateCallback = Callable[[str], None]


def _write_private(path: str, text: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(text)


def _cleanup(prompt_path: str, tmp_dir: str) -> None:
    for remove, target in ((os.unlink, prompt_path), (os.rmdir, tmp_dir)):
        try:
            remove(target)
        except OSError as exc:
            log.debug("Cleanup of %s failed: %s", target, exc)


class ScoutRunner:
    """Spawns the scout CLI and consumes its JSON event stream.

    Args:
        command: argv prefix of the worker (defaults to ``SCOUT_COMMAND``).
        tools: comma-separated tool allow-list passed to the worker.
        grace_period: seconds between SIGTERM and SIGKILL on cancellation.
    """

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        tools: Optional[str] = None,
        grace_period: Optional[float] = None,
    ):
        self.command = list(command) if command else shlex.split(settings.scout_command)
        self.tools = tools or settings.scout_tools
        self.grace_period = (
            settings.scout_grace_period if grace_period is None else grace_period
        )

    def build_args(
        self, model: str, extension_path: str, prompt_path: str, task_text: str
    ) -> List[str]:
        return [
            *self.command,
            "--mode", "json",
            "-p",
            "--no-session",
            "--model", model,
            "--tools", self.tools,
            "-e", extension_path,
            "--append-system-prompt", prompt_path,
            f"Task: {task_text}",
        ]

    async def run(
        self,
        cwd: str,
        task_text: str,
        system_prompt: str,
        model: str,
        extension_path: str,
        cancel_event: Optional[asyncio.Event] = None,
        on_update: Optional[UpdateCallback] = None,
    ) -> ScoutRunResult:
        """Run one scout to completion, failure or cancellation.

        Raises:
            WorkerSpawnFailed: the worker process could not be created.
        """
        result = ScoutRunResult()
        if cancel_event is not None and cancel_event.is_set():
            log.info("Scout cancelled before spawn")
            result.status = RunStatus.CANCELLED
            result.exit_code = -1
            return result

        try:
            tmp_dir = tempfile.mkdtemp(prefix="web-scout-")
        except OSError as exc:
            raise WorkerSpawnFailed(
                f"Failed to create scout temp directory: {exc}", cause=exc
            ) from exc

        prompt_path = os.path.join(tmp_dir, PROMPT_FILENAME)
        try:
            try:
                _write_private(prompt_path, system_prompt)
            except OSError as exc:
                raise WorkerSpawnFailed(
                    f"Failed to write scout instructions: {exc}", cause=exc
                ) from exc
            args = self.build_args(model, extension_path, prompt_path, task_text)
            try:
                proc = await asyncio.create_subprocess_exec(
                    *args,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=cwd,
                )
            except OSError as exc:
                raise WorkerSpawnFailed(
                    f"Failed to start scout worker '{args[0]}': {exc}", cause=exc
                ) from exc

            log.info("Scout started (pid=%s, model=%s)", proc.pid, model)
            await self._supervise(proc, result, cancel_event, on_update)
        finally:
            _cleanup(prompt_path, tmp_dir)

        log.info(
            "Scout finished: status=%s exit=%s turns=%d",
            result.status.value,
            result.exit_code,
            result.usage.turn_count,
        )
        return result

    # -- Process supervision ------------------------------------------------

    async def _supervise(
        self,
        proc: asyncio.subprocess.Process,
        result: ScoutRunResult,
        cancel_event: Optional[asyncio.Event],
        on_update: Optional[UpdateCallback],
    ) -> None:
        readers = [
            asyncio.create_task(self._read_stdout(proc.stdout, result, on_update)),
            asyncio.create_task(self._read_stderr(proc.stderr, result)),
        ]
        exit_task = asyncio.create_task(proc.wait())
        cancel_task = (
            asyncio.create_task(cancel_event.wait()) if cancel_event is not None else None
        )

        try:
            waiting = {exit_task} if cancel_task is None else {exit_task, cancel_task}
            done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)
            if cancel_task is not None and cancel_task in done and not exit_task.done():
                result.status = RunStatus.CANCELLED
                await self._terminate(proc, exit_task)

            _, stuck = await asyncio.wait(readers, timeout=READER_DRAIN_TIMEOUT)
            for task in stuck:
                task.cancel()
            for task in readers:
                if task.done() and not task.cancelled() and task.exception() is not None:
                    raise task.exception()
        except asyncio.CancelledError:
            result.status = RunStatus.CANCELLED
            await self._terminate(proc, exit_task)
            raise
        finally:
            for task in (*readers, exit_task, cancel_task):
                if task is not None and not task.done():
                    task.cancel()

        result.exit_code = proc.returncode if proc.returncode is not None else -1
        if result.status != RunStatus.CANCELLED:
            result.status = RunStatus.COMPLETED if result.exit_code == 0 else RunStatus.FAILED

    async def _terminate(
        self, proc: asyncio.subprocess.Process, exit_task: "asyncio.Task[int]"
    ) -> None:
        """SIGTERM, wait out the grace period, then SIGKILL."""
        if proc.returncode is not None:
            return
        log.info("Terminating scout worker (pid=%s)", proc.pid)
        with contextlib.suppress(ProcessLookupError):
            proc.terminate()

        await asyncio.wait({exit_task}, timeout=self.grace_period)
        if proc.returncode is not None:
            return

        log.warning(
            "Scout worker (pid=%s) still running after %.1fs, killing",
            proc.pid,
            self.grace_period,
        )
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        await asyncio.wait({exit_task}, timeout=KILL_WAIT)

    # -- Stream consumers ---------------------------------------------------

    async def _read_stdout(
        self,
        stream: asyncio.StreamReader,
        result: ScoutRunResult,
        on_update: Optional[UpdateCallback],
    ) -> None:
        decoder = LineDecoder()
        while True:
            chunk = await stream.read(CHUNK_SIZE)
            if not chunk:
                break
            for line in decoder.feed(chunk):
                self._handle_line(line, result, on_update)

        tail = decoder.flush()
        if tail:
            self._handle_line(tail, result, on_update)

    async def _read_stderr(self, stream: asyncio.StreamReader, result: ScoutRunResult) -> None:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            chunk = await stream.read(CHUNK_SIZE)
            if not chunk:
                break
            result.stderr_text += decoder.decode(chunk)
        result.stderr_text += decoder.decode(b"", final=True)

    def _handle_line(
        self, line: str, result: ScoutRunResult, on_update: Optional[UpdateCallback]
    ) -> None:
        event = decode_event(line)
        if event is None:
            log.debug("Skipping non-JSON scout output: %s", line[:200])
            return
        if not isinstance(event, TurnCompleted):
            return

        usage = result.usage
        usage.turn_count += 1
        usage.input_tokens += event.input_tokens
        usage.output_tokens += event.output_tokens
        usage.cost_total += event.cost
        if event.model:
            usage.model_used = event.model

        for text in event.texts:
            result.final_output_text = text
            if on_update is not None:
                try:
                    on_update(text)
                except Exception:
                    log.exception("Scout progress callback failed")
