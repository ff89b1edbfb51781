from conftest import make_console, output_of, plain_output

from sessionline.session import Color
from sessionline.tui.terminal import ERASE_DOWN, Terminal


def test_write_line_colors_and_blank_lines():
    console = make_console()
    terminal = Terminal(console)

    terminal.write_line("deployed", Color.GREEN)
    terminal.write_line()

    output = output_of(console)
    assert output.startswith(ERASE_DOWN)
    assert "\x1b[32mdeployed" in output
    assert output.endswith("\x1b[1G\n")


def test_debug_messages_only_in_debug_mode():
    console = make_console()
    terminal = Terminal(console)

    terminal.debug("hidden")
    assert output_of(console) == ""

    terminal.debug_enabled = True
    terminal.debug("visible")
    assert "visible" in plain_output(console)


def test_log_error_uses_entity_and_alert_color():
    console = make_console()
    terminal = Terminal(console)

    terminal.log_error("quota exceeded", "Uploader")
    terminal.log_error("", "Uploader")

    output = output_of(console)
    assert "\x1b[38;2;255;99;99mUploader · quota exceeded" in output
    assert output.count("quota exceeded") == 1


def test_cursor_helpers():
    console = make_console()
    terminal = Terminal(console)

    terminal.hide_cursor()
    terminal.cursor_up(3)
    terminal.cursor_up(0)
    terminal.cursor_to_column_start()
    terminal.show_cursor()

    assert output_of(console) == "\x1b[?25l\x1b[3A\x1b[1G\x1b[?25h"
    assert terminal.columns() == 80
