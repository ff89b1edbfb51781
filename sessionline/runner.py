"""Run work under a status session."""
from __future__ import annotations

import asyncio
import codecs
import contextlib
import re
from collections import deque
from dataclasses import dataclass, field
from typing import AsyncIterator, List, Optional, Sequence

from .session import SessionController, StopReason
from .tui.terminal import Terminal

STATUS_MAX_WIDTH = 60
OUTPUT_TAIL = 20
READ_CHUNK = 4096
MAX_LINE = 4096
LINE_BREAK = re.compile(r"\r\n|\r|\n")

DEMO_STEPS = [
    "Packaging",
    "Uploading artifacts",
    "Creating resources",
    "Updating configuration",
    "Finishing",
]


class CommandError(RuntimeError):
    """The command could not be launched."""


class CommandFailed(RuntimeError):
    """The command exited with a non-zero code."""

    def __init__(self, argv: Sequence[str], returncode: int) -> None:
        super().__init__(f"{argv[0]} exited with code {returncode}")
        self.argv = list(argv)
        self.returncode = returncode


@dataclass(slots=True)
class CommandResult:
    returncode: int
    output: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


def shorten_status(line: str, limit: int = STATUS_MAX_WIDTH) -> str:
    text = Terminal.strip_formatting(line).strip()
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


async def output_lines(stream: asyncio.StreamReader) -> AsyncIterator[str]:
    """Yield decoded lines of ``stream``, treating ``\\r`` as a line break.

    Reads fixed-size chunks so progress bars and output without newlines
    never hit the reader's line limit; an unterminated line keeps only its
    last ``MAX_LINE`` characters.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    pending = ""
    while True:
        chunk = await stream.read(READ_CHUNK)
        if not chunk:
            break
        pending += decoder.decode(chunk)
        *lines, pending = LINE_BREAK.split(pending)
        for line in lines:
            yield line[-MAX_LINE:]
        pending = pending[-MAX_LINE:]
    pending += decoder.decode(b"", final=True)
    if pending:
        yield pending[-MAX_LINE:]


async def run_command(
    argv: Sequence[str],
    controller: SessionController,
    *,
    status: Optional[str] = None,
    timer: bool = True,
) -> CommandResult:
    """Run ``argv`` while showing its latest output line as the status."""
    if not argv:
        raise CommandError("no command given")

    controller.start(status or f"Running {argv[0]}", timer=timer)
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as exc:
        error = CommandError(f"cannot run {argv[0]}: {exc.strerror or exc}")
        controller.stop(StopReason.ERROR, error)
        await controller.wait_closed()
        raise error from exc

    tail: deque[str] = deque(maxlen=OUTPUT_TAIL)
    assert process.stdout is not None
    try:
        async for raw in output_lines(process.stdout):
            line = raw.rstrip()
            if not line.strip():
                continue
            tail.append(line)
            if status is None:
                controller.update_status(shorten_status(line))

        returncode = await process.wait()
        if returncode == 0:
            controller.stop(StopReason.SUCCESS, "Done")
        else:
            controller.stop(StopReason.ERROR, CommandFailed(argv, returncode))
    except Exception as exc:
        if controller.is_active():
            controller.stop(StopReason.ERROR, exc)
        raise
    finally:
        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
        if controller.is_active():
            controller.stop(StopReason.CANCEL, "Canceled")
        await controller.wait_closed()
    return CommandResult(returncode=returncode, output=list(tail))


async def run_demo(
    controller: SessionController,
    *,
    steps: int = len(DEMO_STEPS),
    delay: float = 1.0,
    timer: bool = True,
    fail: bool = False,
) -> None:
    """Simulate a deployment, one status per step."""
    async with controller.session("Deploying", timer=timer, message="Deployed"):
        for step in DEMO_STEPS[:steps]:
            await asyncio.sleep(delay)
            controller.update_status(step)
        await asyncio.sleep(delay)
        if fail:
            raise RuntimeError("Deployment failed")


__all__ = [
    "CommandError",
    "CommandFailed",
    "CommandResult",
    "DEMO_STEPS",
    "output_lines",
    "run_command",
    "run_demo",
    "shorten_status",
]
