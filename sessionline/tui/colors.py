"""Display colors and their rich styles."""
from __future__ import annotations

from enum import Enum
from typing import Union


class Color(str, Enum):
    """Display colors understood by the status line."""

    DEFAULT = "default"
    GREY = "grey"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"

    @classmethod
    def parse(cls, value: Union[str, "Color", None]) -> "Color":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.GREY
        text = str(value).strip().lower()
        if text == "white":
            return cls.DEFAULT
        for member in cls:
            if member.value == text:
                return member
        return cls.GREY

    @property
    def style(self) -> str:
        return _COLOR_STYLES[self]


_COLOR_STYLES = {
    Color.DEFAULT: "",
    Color.GREY: "dim",
    Color.RED: "rgb(255,99,99)",
    Color.GREEN: "green",
    Color.BLUE: "rgb(199,232,255)",
}


__all__ = ["Color"]
