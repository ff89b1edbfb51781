"""Status session lifecycle: model, controller and interrupt handling."""

from .controller import SessionController, SessionError
from .model import Color, StatusModel, StopReason, reason_color
from .signals import SignalBridge

__all__ = [
    "Color",
    "SessionController",
    "SessionError",
    "SignalBridge",
    "StatusModel",
    "StopReason",
    "reason_color",
]
