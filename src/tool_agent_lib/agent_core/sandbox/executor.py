"""Asynchronous request/response channel to the sandbox worker process."""

from __future__ import annotations

import asyncio
import json
import os
import signal
import sys
import uuid
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from ..exceptions import SandboxError
from ..logger import get_logger
from .protocol import ExecutionOutcome, ResultMessage, RunMessage

logger = get_logger(__name__)

WORKER_PATH = Path(__file__).with_name("worker.py")

# Only these variables reach the worker; credentials in the host environment stay out.
WORKER_ENV_ALLOWLIST = ("PATH", "SYSTEMROOT", "TMPDIR", "TEMP", "TMP", "LANG", "LC_ALL")

# Replies carry captured logs on a single line.
_STREAM_LIMIT = 16 * 1024 * 1024

# The worker enforces the timeout itself; this covers interpreter startup before
# the executor gives up on the worker as a whole.
_STARTUP_GRACE = 5.0


def worker_env() -> Dict[str, str]:
    """Environment handed to the worker: the allowlisted host variables only."""
    return {name: os.environ[name] for name in WORKER_ENV_ALLOWLIST if name in os.environ}


class IsolatedExecutor:
    """Runs untrusted snippets in separate interpreter processes.

    A long-lived worker receives JSON envelopes correlated by a unique id and
    runs every snippet in a fresh interpreter of its own, with a scrubbed
    environment. Several requests may be in flight; a single reader task
    resolves each pending future exactly once. A snippet that exceeds its
    timeout is killed by the worker. If the worker itself stops answering, it
    is killed with its process group and the next call starts a fresh one.
    """

    def __init__(self, timeout: float = 10.0, python_executable: Optional[str] = None) -> None:
        """Initialize the executor.

        Args:
            timeout: Default per-call timeout in seconds.
            python_executable: Interpreter used for the worker. Defaults to ``sys.executable``.
        """
        self.timeout = timeout
        self._python = python_executable or sys.executable
        self._process: Optional[asyncio.subprocess.Process] = None
        self._reader: Optional[asyncio.Task[None]] = None
        self._pending: Dict[str, asyncio.Future[ExecutionOutcome]] = {}
        self._start_lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._process is not None and self._process.returncode is None

    async def __aenter__(self) -> "IsolatedExecutor":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def start(self) -> None:
        """Start the worker process if it is not already running.

        Raises:
            SandboxError: If the worker process cannot be spawned.
        """
        async with self._start_lock:
            if self.running:
                return
            try:
                self._process = await asyncio.create_subprocess_exec(
                    self._python,
                    "-I",
                    str(WORKER_PATH),
                    stdin=asyncio.subprocess.PIPE,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.DEVNULL,
                    env=worker_env(),
                    start_new_session=sys.platform != "win32",
                    limit=_STREAM_LIMIT,
                )
            except OSError as e:
                msg = f"Could not start sandbox worker: {e}"
                logger.error(msg)
                raise SandboxError(msg) from e

            self._pending = {}
            self._reader = asyncio.create_task(self._read_replies(self._process, self._pending))
            logger.debug("Sandbox worker started (pid %s).", self._process.pid)

    async def execute(self, code: str, timeout: Optional[float] = None) -> ExecutionOutcome:
        """Run ``code`` in the sandbox.

        Never raises for faults inside the snippet, a dead worker or a timeout;
        those are reported through ``ExecutionOutcome.error``.

        Args:
            code: Python source. A top-level ``return`` sets the result.
            timeout: Optional override of the default timeout in seconds.

        Returns:
            The captured logs, result value and error text.
        """
        wait_for = self.timeout if timeout is None else timeout

        try:
            await self.start()
        except SandboxError as e:
            return ExecutionOutcome(error=str(e))

        process = self._process
        pending = self._pending
        assert process is not None and process.stdin is not None

        request = RunMessage(id=uuid.uuid4().hex, code=code, timeout=wait_for)
        future: asyncio.Future[ExecutionOutcome] = asyncio.get_running_loop().create_future()
        pending[request.id] = future

        try:
            process.stdin.write((request.model_dump_json() + "\n").encode("utf-8"))
            await process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            pending.pop(request.id, None)
            logger.warning(f"Sandbox worker is not accepting requests: {e}")
            return ExecutionOutcome(error=f"sandbox unavailable: {e}")

        try:
            return await asyncio.wait_for(asyncio.shield(future), timeout=wait_for + _STARTUP_GRACE)
        except asyncio.TimeoutError:
            pending.pop(request.id, None)
            logger.warning(f"Sandbox worker did not answer request {request.id} in time. Restarting worker.")
            await self._kill(process)
            return ExecutionOutcome(error=f"execution timed out after {wait_for}s")

    async def close(self) -> None:
        """Stop the worker and fail any request still waiting for it."""
        if self._process is not None:
            await self._kill(self._process)
        if self._reader is not None:
            await asyncio.gather(self._reader, return_exceptions=True)
            self._reader = None

    async def _kill(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                if sys.platform == "win32":
                    process.kill()
                else:
                    os.killpg(process.pid, signal.SIGKILL)
            except ProcessLookupError:
                pass
            await process.wait()
        if self._process is process:
            self._process = None

    async def _read_replies(
        self, process: asyncio.subprocess.Process, pending: Dict[str, asyncio.Future[ExecutionOutcome]]
    ) -> None:
        assert process.stdout is not None
        try:
            while True:
                line = await process.stdout.readline()
                if not line:
                    break
                self._resolve(line, pending)
        except (asyncio.LimitOverrunError, ValueError) as e:
            logger.warning(f"Sandbox worker reply could not be read: {e}")
            if process.returncode is None:
                process.kill()
        finally:
            self._fail_pending(pending)

    @staticmethod
    def _resolve(line: bytes, pending: Dict[str, asyncio.Future[ExecutionOutcome]]) -> None:
        try:
            reply = ResultMessage.model_validate(json.loads(line))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Ignoring malformed sandbox reply: {e}")
            return

        future = pending.pop(reply.id, None)
        if future is None:
            logger.debug("Dropping sandbox reply for unknown request %s.", reply.id)
            return
        if not future.done():
            future.set_result(ExecutionOutcome(logs=reply.logs, result=reply.result, error=reply.error))

    @staticmethod
    def _fail_pending(pending: Dict[str, asyncio.Future[ExecutionOutcome]]) -> None:
        if pending:
            logger.warning(f"Sandbox worker exited with {len(pending)} request(s) pending.")
        while pending:
            _, future = pending.popitem()
            if not future.done():
                future.set_result(ExecutionOutcome(error="sandbox worker exited before replying"))
