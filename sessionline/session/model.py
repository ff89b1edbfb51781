"""Status line state shared by the session controller and the renderer."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..tui.colors import Color

LOADING_DOTS = ("", ".", "..", "...")
TICKS_PER_FRAME = 2
ANIMATION_PHASES = len(LOADING_DOTS) * TICKS_PER_FRAME

DEFAULT_ENTITY = "sessionline"
DEFAULT_STATUS = "Initializing"


class StopReason(str, Enum):
    """Outcome passed to ``stop``; selects the color of the final line."""

    ERROR = "error"
    CANCEL = "cancel"
    CLOSE = "close"
    SUCCESS = "success"
    SILENT = "silent"

    @classmethod
    def parse(cls, value: Union[str, "StopReason", None]) -> "StopReason":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.CLOSE
        text = str(value).strip().lower()
        for member in cls:
            if member.value == text:
                return member
        return cls.CLOSE


def reason_color(reason: StopReason) -> Color:
    if reason in (StopReason.ERROR, StopReason.CANCEL):
        return Color.RED
    if reason is StopReason.SUCCESS:
        return Color.GREEN
    return Color.DEFAULT


@dataclass(slots=True)
class StatusModel:
    """Mutable state of the current session.

    Written only by the controller, read by the render loop on every tick.
    """

    entity: str = DEFAULT_ENTITY
    status: str = DEFAULT_STATUS
    status_color: Color = Color.GREY
    last_rendered_status: Optional[str] = None
    timer_enabled: bool = False
    session_start_time: float = 0.0
    animation_phase: int = 0
    active: bool = False
    generation: int = 0

    def reset(self, started_at: float, *, timer: bool) -> int:
        """Prepare the model for a new session and return its generation."""
        self.session_start_time = started_at
        self.timer_enabled = timer
        self.animation_phase = 0
        self.last_rendered_status = None
        self.generation += 1
        return self.generation

    def apply(
        self,
        status: Optional[str] = None,
        entity: Optional[str] = None,
        color: Union[str, Color, None] = None,
    ) -> None:
        if status:
            self.status = status
        if entity:
            self.entity = entity
        if color is not None:
            self.status_color = Color.parse(color)

    def elapsed_seconds(self, now: float) -> int:
        return max(0, int(now - self.session_start_time))

    def current_dots(self) -> str:
        return LOADING_DOTS[self.animation_phase // TICKS_PER_FRAME]

    def advance_animation(self) -> str:
        """Return the frame for the current phase and step to the next one."""
        dots = self.current_dots()
        self.animation_phase = (self.animation_phase + 1) % ANIMATION_PHASES
        return dots


__all__ = [
    "ANIMATION_PHASES",
    "Color",
    "DEFAULT_ENTITY",
    "DEFAULT_STATUS",
    "LOADING_DOTS",
    "StatusModel",
    "StopReason",
    "reason_color",
]
