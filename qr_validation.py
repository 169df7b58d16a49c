import re
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Union

DEFAULT_COLOR = "#000000"

_HEX_COLOR_RE = re.compile(r"#?[0-9a-fA-F]{6}")


class Shape(str, Enum):
    SQUARE = "square"
    CIRCLE = "circle"
    DIAMOND = "diamond"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Shape":
        """Exact, case-sensitive match; anything else is a square."""
        try:
            return cls(value)
        except ValueError:
            return cls.SQUARE


class ValidationError(ValueError):
    message = "Invalid request."

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class MissingDataError(ValidationError):
    message = "Missing required parameter 'data'."


class InvalidColorError(ValidationError):
    message = "Invalid 'color' parameter, must be a valid 6 digit hex code."


@dataclass(frozen=True)
class RenderRequest:
    data: str
    color: str = DEFAULT_COLOR
    shape: Shape = Shape.SQUARE


def _validate_data(raw_params: Mapping[str, str]) -> Union[str, ValidationError]:
    data = raw_params.get("data")
    if not data:
        return MissingDataError()
    return data


def _validate_color(raw_params: Mapping[str, str]) -> Union[str, ValidationError]:
    if "color" not in raw_params:
        return DEFAULT_COLOR
    color = raw_params["color"]
    if color is None or not _HEX_COLOR_RE.fullmatch(color):
        return InvalidColorError()
    if not color.startswith("#"):
        color = f"#{color}"
    return color


def validate(raw_params: Mapping[str, str]) -> Union[RenderRequest, ValidationError]:
    data = _validate_data(raw_params)
    if isinstance(data, ValidationError):
        return data

    color = _validate_color(raw_params)
    if isinstance(color, ValidationError):
        return color

    return RenderRequest(
        data=data,
        color=color,
        shape=Shape.parse(raw_params.get("shape")),
    )
