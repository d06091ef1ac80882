"""Isolated code execution over a request/response channel to a worker process."""

from .executor import IsolatedExecutor
from .protocol import ConsoleEntry, ExecutionOutcome, ResultMessage, RunMessage

__all__ = ["IsolatedExecutor", "ConsoleEntry", "ExecutionOutcome", "ResultMessage", "RunMessage"]
