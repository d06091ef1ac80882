"""Sandbox worker process.

Started by ``IsolatedExecutor`` as ``python -I worker.py``. Reads one JSON
``run`` envelope per line from stdin and writes one ``result`` envelope per
line to stdout.

Each snippet runs in its own short-lived interpreter (``worker.py --snippet``),
so nothing a snippet does to globals, ``builtins`` or imported modules is
visible to the next one. The worker enforces the per-run timeout by killing
that interpreter. Runs are served on threads, so requests do not queue behind
a slow snippet.

Inside the snippet interpreter, ``print`` and ``console.*`` calls are captured
into the log and file descriptor 1 is pointed at stderr, so snippet output
never reaches the protocol channel.

This module only imports the standard library so it can run without the
package being importable.
"""

import ast
import json
import os
import subprocess
import sys
import threading

# Bound before any snippet code runs in this interpreter.
_dumps = json.dumps


def _jsonable(value):
    try:
        _dumps(value)
    except (TypeError, ValueError):
        return repr(value)
    return value


def _reply(request_id, logs=None, result=None, error=None):
    return {"type": "result", "id": request_id, "logs": logs or [], "result": result, "error": error}


class Console:
    """Records console-style calls in order."""

    def __init__(self):
        self.entries = []

    def _record(self, level, args):
        self.entries.append({"level": level, "args": [_jsonable(arg) for arg in args]})

    def log(self, *args):
        self._record("log", args)

    def info(self, *args):
        self._record("info", args)

    def warn(self, *args):
        self._record("warn", args)

    warning = warn

    def error(self, *args):
        self._record("error", args)

    def debug(self, *args):
        self._record("debug", args)

    def print(self, *args, **kwargs):
        self._record("log", args)


def _compile_snippet(code):
    """Wrap ``code`` into ``def __snippet__(): ...`` so top-level ``return`` works.

    A trailing bare expression becomes the return value.
    """
    module = ast.parse(code, filename="<sandbox>", mode="exec")
    body = module.body or [ast.Pass()]
    if isinstance(body[-1], ast.Expr):
        body[-1] = ast.copy_location(ast.Return(value=body[-1].value), body[-1])

    wrapper = ast.parse("def __snippet__():\n    pass\n", filename="<sandbox>", mode="exec")
    wrapper.body[0].body = body
    ast.fix_missing_locations(wrapper)
    return compile(wrapper, "<sandbox>", "exec")


def run_snippet(request_id, code):
    """Execute one snippet in the current interpreter and build its reply."""
    console = Console()
    namespace = {"__name__": "__sandbox__", "console": console, "print": console.print}
    result = None
    error = None
    try:
        exec(_compile_snippet(code), namespace)
        result = _jsonable(namespace["__snippet__"]())
    except BaseException as exc:  # SystemExit from a snippet must not skip the reply
        if isinstance(exc, KeyboardInterrupt):
            raise
        error = f"{type(exc).__name__}: {exc}"
    return _reply(request_id, logs=console.entries, result=result, error=error)


def run_isolated(request_id, code, timeout=None):
    """Run one snippet in a fresh interpreter and return its reply.

    Args:
        request_id: Identifier echoed on the reply.
        code: Snippet source.
        timeout: Seconds before the snippet interpreter is killed. ``None`` waits forever.
    """
    request = _dumps({"id": request_id, "code": code}).encode("utf-8")
    try:
        completed = subprocess.run(
            [sys.executable, "-I", os.path.abspath(__file__), "--snippet"],
            input=request,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return _reply(request_id, error=f"execution timed out after {timeout}s")
    except OSError as exc:
        return _reply(request_id, error=f"could not start snippet interpreter: {exc}")

    try:
        reply = json.loads(completed.stdout)
    except ValueError:
        reply = None
    if not isinstance(reply, dict) or reply.get("id") != request_id:
        return _reply(request_id, error=f"snippet interpreter exited with code {completed.returncode} before replying")
    return _reply(
        request_id,
        logs=reply.get("logs") if isinstance(reply.get("logs"), list) else [],
        result=reply.get("result"),
        error=reply.get("error"),
    )


def snippet_main():
    """Entry point of the per-snippet interpreter: one request on stdin, one reply on stdout."""
    channel = os.fdopen(os.dup(1), "w", encoding="utf-8")
    os.dup2(2, 1)
    sys.stdout = sys.stderr

    request = json.loads(sys.stdin.read())
    reply = run_snippet(str(request.get("id", "")), str(request.get("code", "")))
    channel.write(_dumps(reply))
    channel.flush()


def main():
    channel = sys.stdout
    sys.stdout = sys.stderr
    write_lock = threading.Lock()

    def serve(request_id, code, timeout):
        reply = run_isolated(request_id, code, timeout)
        with write_lock:
            channel.write(json.dumps(reply) + "\n")
            channel.flush()

    for line in sys.stdin:
        line = line.strip()
        if not line:
            continue
        try:
            message = json.loads(line)
        except ValueError:
            continue
        if not isinstance(message, dict) or message.get("type") != "run":
            continue

        timeout = message.get("timeout")
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            timeout = None
        threading.Thread(
            target=serve,
            args=(str(message.get("id", "")), str(message.get("code", "")), timeout),
            daemon=True,
        ).start()


if __name__ == "__main__":
    if sys.argv[1:] == ["--snippet"]:
        snippet_main()
    else:
        main()
