"""Terminal output helpers used around an active status session."""
from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from rich.console import Console
from rich.control import Control
from rich.pretty import Pretty
from rich.text import Text
from rich.traceback import Traceback

from .colors import Color

ERASE_DOWN = "\x1b[J"
POINTER = "·"


def create_console(use_color: bool = True) -> Console:
    return Console(no_color=not use_color, highlight=False, soft_wrap=True)


class Terminal:
    """Writes status lines, logs and cursor control to a rich console."""

    def __init__(self, console: Optional[Console] = None, *, debug: bool = False) -> None:
        self.console = console or create_console()
        self.debug_enabled = debug

    # ------------------------------------------------------------------
    # cursor control
    # ------------------------------------------------------------------
    @property
    def is_interactive(self) -> bool:
        return self.console.is_terminal

    def columns(self) -> int:
        return self.console.width

    def hide_cursor(self) -> None:
        self.console.show_cursor(False)

    def show_cursor(self) -> None:
        self.console.show_cursor(True)

    def erase_down(self) -> None:
        # rich has no control code for erasing below the cursor.
        if self.console.is_terminal:
            self.console.file.write(ERASE_DOWN)
            self.console.file.flush()

    def cursor_to_column_start(self) -> None:
        self.console.control(Control.move_to_column(0))

    def cursor_up(self, rows: int) -> None:
        if rows > 0:
            self.console.control(Control.move(y=-rows))

    # ------------------------------------------------------------------
    # text
    # ------------------------------------------------------------------
    @staticmethod
    def strip_formatting(text: Union[str, Text]) -> str:
        if isinstance(text, Text):
            return text.plain
        return Text.from_ansi(text).plain

    @staticmethod
    def visible_width(text: Union[str, Text]) -> int:
        if isinstance(text, str):
            text = Text.from_ansi(text)
        return text.cell_len

    def write(self, text: Union[str, Text] = "", *, end: str = "") -> None:
        self.console.print(text, end=end, markup=False, highlight=False, soft_wrap=True)

    def write_line(self, message: Any = None, color: Union[str, Color, None] = None) -> None:
        """Write one log line below the status region."""
        if message is None or message == "":
            self.console.print()
            return
        self.erase_down()
        if isinstance(message, (str, Text)):
            style = Color.parse(color or Color.DEFAULT).style
            text = message if isinstance(message, Text) else Text(message, style=style)
            self.write(text, end="\n")
        else:
            self.console.print(Pretty(message))
        self.cursor_to_column_start()

    def debug(self, message: Optional[str]) -> None:
        if not self.debug_enabled or not message:
            return
        self.erase_down()
        self.write(str(message), end="\n")
        self.cursor_to_column_start()

    def write_error_trace(self, error: object) -> None:
        """Render the traceback of ``error``; only in debug mode."""
        if not self.debug_enabled or not isinstance(error, BaseException):
            return
        self.erase_down()
        self.console.print()
        self.console.print(Traceback.from_exception(type(error), error, error.__traceback__))
        self.cursor_to_column_start()

    def log_error(self, error: Union[str, BaseException, None], entity: str) -> None:
        if error is None or error == "":
            return
        if isinstance(error, str):
            error = RuntimeError(error)
        self.erase_down()
        self.write_error_trace(error)
        self.write(Text(f"{entity} {POINTER} {error}", style=Color.RED.style), end="\n")
        self.console.print()
        self.cursor_to_column_start()

    def log_outputs(self, outputs: Mapping[str, Any]) -> None:
        self.erase_down()
        self.console.print(Pretty(dict(outputs), expand_all=True))


__all__ = ["ERASE_DOWN", "POINTER", "Terminal", "create_console"]
