"""
Runs one remote call off the request path and reports back through callbacks.

    dispatcher.submit(call, on_success, on_error)

on_success(result) or on_error(exc) is invoked exactly once, when the call
finishes. No polling, no blocking waits, no cancellation.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

logger = logging.getLogger(__name__)

Call = Callable[[], Any]
OnSuccess = Callable[[Any], None]
OnError = Callable[[Exception], None]


class ThreadDispatcher:
    """Single background worker, so remote calls never overlap."""

    def __init__(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="codebreaker-remote")

    def submit(self, call: Call, on_success: OnSuccess, on_error: OnError) -> None:
        future = self._executor.submit(call)
        future.add_done_callback(lambda done: _deliver(done, on_success, on_error))

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)


class InlineDispatcher:
    """Runs the call right away on the caller's thread."""

    def submit(self, call: Call, on_success: OnSuccess, on_error: OnError) -> None:
        try:
            result = call()
        except Exception as exc:
            on_error(exc)
            return
        on_success(result)


def _deliver(future: Future, on_success: OnSuccess, on_error: OnError) -> None:
    try:
        exc = future.exception()
        if exc is not None:
            on_error(exc)
        else:
            on_success(future.result())
    except Exception:
        # Nobody waits on the future; make sure a broken callback is seen
        logger.exception("Remote call callback raised")
