"""Cooperative render loop for the persistent status line."""
from __future__ import annotations

import asyncio
import time
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from rich.text import Text

from .cursor import rows_to_move_up
from .terminal import POINTER, Terminal

if TYPE_CHECKING:
    from ..session.model import StatusModel

DEFAULT_INTERVAL = 0.1


class RendererState(str, Enum):
    IDLE = "idle"
    RENDERING = "rendering"


class StatusRenderer:
    """Redraws the status line in place until the session ends.

    In transcript mode (debug, or output that is not a terminal) each new
    status is written once as ``"<status>..."`` instead of being animated.
    """

    def __init__(
        self,
        model: StatusModel,
        terminal: Terminal,
        *,
        debug: bool = False,
        interval: float = DEFAULT_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        self.model = model
        self.terminal = terminal
        self.debug = debug
        self.interval = interval
        self.clock = clock
        self.on_error = on_error
        self.state = RendererState.IDLE
        self.ticks = 0

    @property
    def transcript(self) -> bool:
        return self.debug or not self.terminal.is_interactive

    def _is_current(self, generation: int) -> bool:
        return self.model.active and self.model.generation == generation

    async def run(self, generation: int) -> None:
        self.state = RendererState.RENDERING
        try:
            while self._is_current(generation):
                try:
                    self.render_once()
                except Exception as exc:
                    if self.on_error is None:
                        raise
                    self.on_error(exc)
                    break
                await asyncio.sleep(self.interval)
        finally:
            self.state = RendererState.IDLE

    def render_once(self) -> None:
        """Draw one tick of the status line."""
        self.ticks += 1
        model = self.model
        if self.transcript:
            if model.status != model.last_rendered_status:
                self.terminal.write_line(f"{model.status}...")
                model.last_rendered_status = model.status
            return

        line = self.compose_line(model.advance_animation())
        self.terminal.erase_down()
        self.terminal.write("", end="\n")
        self.terminal.write(line, end="\n")
        rows = rows_to_move_up(self.terminal.visible_width(line), self.terminal.columns())
        self.terminal.cursor_up(rows)
        self.terminal.cursor_to_column_start()

    def compose_line(self, dots: str = "") -> Text:
        model = self.model
        style = model.status_color.style
        line = Text()
        if model.timer_enabled:
            line.append(f"{model.elapsed_seconds(self.clock())}s", style=style)
            line.append(" ")
            line.append(POINTER, style=style)
            line.append(" ")
        line.append(model.entity, style=style)
        line.append(" ")
        line.append(POINTER, style=style)
        line.append(" ")
        line.append(model.status, style=style)
        line.append(" ")
        line.append(dots, style=style)
        return line


__all__ = ["DEFAULT_INTERVAL", "RendererState", "StatusRenderer"]
