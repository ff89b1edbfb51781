import asyncio
import os
import signal
import sys

import pytest
from conftest import make_console, output_of

from sessionline.session import SessionController, SignalBridge
from sessionline.tui.terminal import Terminal


def test_trigger_runs_close_handler_once_then_exits():
    calls = []
    exits = []
    bridge = SignalBridge(exit=exits.append)

    async def close():
        calls.append("closed")

    async def scenario():
        bridge.install(close)
        task = bridge.trigger()
        assert bridge.trigger() is None
        await task
        bridge.uninstall()

    asyncio.run(scenario())

    assert calls == ["closed"]
    assert exits == [130]
    assert not bridge.installed


def test_install_registers_a_single_handler():
    bridge = SignalBridge(exit=lambda code: None)
    first, second = [], []

    async def scenario():
        bridge.install(lambda: first.append(1))
        bridge.install(lambda: second.append(1))
        await bridge.trigger()
        bridge.uninstall()

    asyncio.run(scenario())

    assert first == [1]
    assert second == []


def test_interrupt_cancels_session_with_default_handler():
    console = make_console()
    exits = []
    controller = SessionController(
        Terminal(console),
        interval=0.005,
        signals=SignalBridge(exit=exits.append),
    )

    async def scenario():
        task = controller.start("Deploying")
        await asyncio.sleep(0.01)
        await controller.signals.trigger()
        await task

    asyncio.run(scenario())

    assert exits == [130]
    assert not controller.is_active()
    assert "\x1b[38;2;255;99;99msessionline · Canceled" in output_of(console)
    assert output_of(console).endswith("\x1b[?25h")


def test_custom_close_handler_is_used():
    console = make_console()
    exits = []
    controller = SessionController(Terminal(console), signals=SignalBridge(exit=exits.append))

    async def scenario():
        task = controller.start(
            "Deploying",
            close_handler=lambda: controller.stop("close", "Interrupted by user"),
        )
        await controller.signals.trigger()
        await task

    asyncio.run(scenario())

    assert "sessionline · Interrupted by user" in output_of(console)
    assert exits == [130]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
def test_sigint_reaches_close_handler():
    calls = []
    exits = []
    bridge = SignalBridge(exit=exits.append)

    async def scenario():
        bridge.install(lambda: calls.append("closed"))
        os.kill(os.getpid(), signal.SIGINT)
        for _ in range(50):
            if exits:
                break
            await asyncio.sleep(0.01)
        bridge.uninstall()

    asyncio.run(scenario())

    assert calls == ["closed"]
    assert exits == [130]
