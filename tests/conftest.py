import io

import pytest
from rich.console import Console

from sessionline.tui.terminal import Terminal


def make_console(width: int = 80) -> Console:
    return Console(
        file=io.StringIO(),
        force_terminal=True,
        color_system="truecolor",
        width=width,
        highlight=False,
        soft_wrap=True,
        _environ={"TERM": "xterm-256color"},
    )


@pytest.fixture
def console() -> Console:
    return make_console()


@pytest.fixture
def terminal(console: Console) -> Terminal:
    return Terminal(console)


def output_of(console: Console) -> str:
    return console.file.getvalue()


def plain_output(console: Console) -> str:
    return Terminal.strip_formatting(output_of(console))
