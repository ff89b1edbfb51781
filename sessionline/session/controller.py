"""Session lifecycle for the persistent status line."""
from __future__ import annotations

import asyncio
import inspect
import time
from contextlib import asynccontextmanager
from functools import partial
from typing import Any, AsyncIterator, Callable, Mapping, Optional, Union

from rich.text import Text

from ..tui.animation import DEFAULT_INTERVAL, StatusRenderer
from ..tui.terminal import POINTER, Terminal
from .model import DEFAULT_ENTITY, Color, StatusModel, StopReason, reason_color
from .signals import CloseHandler, SignalBridge


class SessionError(RuntimeError):
    """Raised when a session cannot be started."""


class SessionController:
    """Starts, updates and stops the animated status line.

    One controller owns one ``StatusModel``; a second ``start`` while a
    session is active is ignored. Ctrl-C runs the close handler, which by
    default is ``stop("cancel", "Canceled")``, and then exits the process.
    """

    def __init__(
        self,
        terminal: Optional[Terminal] = None,
        *,
        debug: bool = False,
        interval: float = DEFAULT_INTERVAL,
        entity: str = DEFAULT_ENTITY,
        clock: Callable[[], float] = time.monotonic,
        signals: Optional[SignalBridge] = None,
    ) -> None:
        self.terminal = terminal or Terminal(debug=debug)
        self.terminal.debug_enabled = debug
        self._debug = debug
        self._clock = clock
        self.model = StatusModel(entity=entity)
        self.signals = signals or SignalBridge()
        self.renderer = StatusRenderer(
            self.model,
            self.terminal,
            debug=debug,
            interval=interval,
            clock=clock,
            on_error=self._on_render_error,
        )
        self._task: Optional[asyncio.Task] = None

    @property
    def debug(self) -> bool:
        return self._debug

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def start(
        self,
        status: Optional[str] = None,
        *,
        timer: bool = False,
        close_handler: Optional[CloseHandler] = None,
    ) -> Optional[asyncio.Task]:
        """Begin a session and return the render task, or ``None`` if one is running."""
        if self.model.active:
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            raise SessionError("a status session needs a running event loop") from exc

        generation = self.model.reset(self._clock(), timer=timer)
        self.terminal.hide_cursor()
        if self._debug:
            self.terminal.write_line()

        if close_handler is None:
            close_handler = self._close_canceled
        self.signals.install(partial(self._interrupted, close_handler))

        if status:
            self.update_status(status)
        self.model.active = True

        self._task = loop.create_task(self.renderer.run(generation))
        return self._task

    def update_status(
        self,
        status: Optional[str] = None,
        entity: Optional[str] = None,
        color: Union[str, Color, None] = None,
    ) -> None:
        self.model.apply(status=status, entity=entity, color=color)

    def stop(
        self,
        reason: Union[str, StopReason] = StopReason.CLOSE,
        message: Union[str, BaseException, None] = "Closed",
    ) -> None:
        """Erase the status line and write the final result line."""
        reason = StopReason.parse(reason)
        terminal = self.terminal

        terminal.cursor_to_column_start()
        terminal.erase_down()

        if reason is StopReason.ERROR:
            terminal.write_error_trace(message)

        if reason is not StopReason.SILENT:
            terminal.write_line()
            terminal.write(self.compose_summary(reason, message), end="\n")
            terminal.write_line()

        terminal.cursor_to_column_start()
        terminal.show_cursor()

        self.model.active = False
        self.signals.uninstall()

    def is_active(self) -> bool:
        return self.model.active

    def elapsed_seconds(self) -> int:
        return self.model.elapsed_seconds(self._clock())

    async def wait_closed(self) -> None:
        """Wait for the render task of the last session to finish."""
        if self._task is not None:
            await self._task

    @asynccontextmanager
    async def session(
        self,
        status: Optional[str] = None,
        *,
        timer: bool = False,
        message: str = "Done",
    ) -> AsyncIterator["SessionController"]:
        """Run a block under a status session.

        The session stops with ``success`` when the block finishes and with
        ``error`` when it raises; the exception is re-raised. A block torn
        down by cancellation or ``KeyboardInterrupt`` stops with ``cancel``.
        """
        task = self.start(status, timer=timer)
        if task is None:
            # Nested inside a running session; the outer block stops it.
            yield self
            return
        try:
            yield self
        except Exception as exc:
            if self.is_active():
                self.stop(StopReason.ERROR, exc)
            raise
        else:
            if self.is_active():
                self.stop(StopReason.SUCCESS, message)
        finally:
            if self.is_active():
                self._close_canceled()
            await task

    # ------------------------------------------------------------------
    # output helpers
    # ------------------------------------------------------------------
    def compose_summary(self, reason: StopReason, message: Union[str, BaseException, None]) -> Text:
        style = reason_color(reason).style
        content = ""
        if self.model.timer_enabled:
            content += f"{self.elapsed_seconds()}s {POINTER} "
        content += f"{self.model.entity} {POINTER} {_message_text(message)}"
        return Text(content, style=style)

    def log_error(self, error: Union[str, BaseException, None]) -> None:
        self.terminal.log_error(error, self.model.entity)

    def log_outputs(self, outputs: Optional[Mapping[str, Any]]) -> None:
        if not outputs:
            self.stop(StopReason.CLOSE, "Success")
            return
        self.terminal.log_outputs(outputs)

    def _close_canceled(self) -> None:
        self.stop(StopReason.CANCEL, "Canceled")

    async def _interrupted(self, close_handler: CloseHandler) -> None:
        result = close_handler()
        if inspect.isawaitable(result):
            await result
        # The terminal must be restored even if the handler did not stop.
        if self.is_active():
            self._close_canceled()

    def _on_render_error(self, exc: Exception) -> None:
        self.stop(StopReason.ERROR, exc)


def _message_text(message: Union[str, BaseException, None]) -> str:
    if message is None:
        return ""
    if isinstance(message, BaseException):
        return str(message) or type(message).__name__
    return str(message)


__all__ = ["SessionController", "SessionError"]
