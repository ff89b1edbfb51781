"""Bridge SIGINT into the session close handler."""
from __future__ import annotations

import asyncio
import inspect
import signal
import sys
from typing import Any, Callable, Optional

CloseHandler = Callable[[], Any]


class SignalBridge:
    """Runs the close handler once on Ctrl-C, then ends the process."""

    def __init__(
        self,
        *,
        exit_code: int = 130,
        exit: Callable[[int], Any] = sys.exit,
        signum: int = signal.SIGINT,
    ) -> None:
        self.exit_code = exit_code
        self._exit = exit
        self.signum = signum
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._handler: Optional[CloseHandler] = None
        self._previous: Any = None
        self._mode: Optional[str] = None
        self._fired = False
        self._task: Optional[asyncio.Task] = None

    @property
    def installed(self) -> bool:
        return self._handler is not None

    def install(self, close_handler: CloseHandler) -> None:
        if self.installed:
            return
        loop = asyncio.get_running_loop()
        self._loop = loop
        self._handler = close_handler
        self._fired = False
        try:
            loop.add_signal_handler(self.signum, self.trigger)
            self._mode = "loop"
            return
        except (NotImplementedError, RuntimeError):
            pass
        try:
            # Event loops without signal support, e.g. on Windows.
            self._previous = signal.signal(self.signum, self._on_signal)
            self._mode = "signal"
        except ValueError:
            # Not on the main thread.
            self._mode = None

    def uninstall(self) -> None:
        if not self.installed:
            return
        if self._mode == "loop":
            assert self._loop is not None
            if not self._loop.is_closed():
                self._loop.remove_signal_handler(self.signum)
        elif self._mode == "signal":
            signal.signal(self.signum, self._previous or signal.default_int_handler)
        self._handler = None
        self._previous = None
        self._mode = None
        self._loop = None

    def _on_signal(self, signum: int, frame: Any) -> None:
        assert self._loop is not None
        self._loop.call_soon_threadsafe(self.trigger)

    def trigger(self) -> Optional[asyncio.Task]:
        """Invoke the close handler at most once and schedule the exit."""
        if self._fired or self._handler is None:
            return None
        self._fired = True
        handler = self._handler
        assert self._loop is not None
        self._task = self._loop.create_task(self._close_and_exit(handler))
        return self._task

    async def _close_and_exit(self, handler: CloseHandler) -> None:
        result = handler()
        if inspect.isawaitable(result):
            await result
        self._exit(self.exit_code)


__all__ = ["CloseHandler", "SignalBridge"]
