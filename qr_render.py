from dataclasses import dataclass
from typing import Callable, Dict, Tuple, Union

from qr_encoder import ModuleGrid
from qr_validation import RenderRequest, Shape

DEFAULT_BLOCK_SIZE = 50

Number = Union[int, float]
Point = Tuple[Number, Number]


@dataclass(frozen=True)
class Square:
    x: Number
    y: Number
    size: Number
    fill: str
    kind: str = "square"


@dataclass(frozen=True)
class Circle:
    cx: Number
    cy: Number
    r: Number
    fill: str
    kind: str = "circle"


@dataclass(frozen=True)
class Diamond:
    points: Tuple[Point, Point, Point, Point]
    fill: str
    kind: str = "diamond"


ShapePrimitive = Union[Square, Circle, Diamond]


@dataclass(frozen=True)
class VectorDocument:
    canvas_size: int
    shapes: Tuple[ShapePrimitive, ...]


def _half(block_size: int) -> Number:
    return block_size // 2 if block_size % 2 == 0 else block_size / 2


def _square(x: int, y: int, block_size: int, fill: str) -> Square:
    return Square(x=x, y=y, size=block_size, fill=fill)


def _circle(x: int, y: int, block_size: int, fill: str) -> Circle:
    half = _half(block_size)
    return Circle(cx=x + half, cy=y + half, r=half, fill=fill)


def _diamond(x: int, y: int, block_size: int, fill: str) -> Diamond:
    half = _half(block_size)
    return Diamond(
        points=(
            (x + half, y),               # top
            (x + block_size, y + half),  # right
            (x + half, y + block_size),  # bottom
            (x, y + half),               # left
        ),
        fill=fill,
    )


_SHAPE_BUILDERS: Dict[Shape, Callable[[int, int, int, str], ShapePrimitive]] = {
    Shape.SQUARE: _square,
    Shape.CIRCLE: _circle,
    Shape.DIAMOND: _diamond,
}


def render(
    grid: ModuleGrid,
    request: RenderRequest,
    block_size: int = DEFAULT_BLOCK_SIZE,
) -> VectorDocument:
    """Emit one shape per dark module in row-major order.

    The outer index ``i`` drives the x axis and the inner index ``j`` the
    y axis, matching the output of earlier releases.
    """
    if isinstance(block_size, bool) or not isinstance(block_size, int) or block_size <= 0:
        raise ValueError(f"block_size must be a positive integer (got {block_size!r})")

    build = _SHAPE_BUILDERS.get(Shape.parse(request.shape), _square)
    shapes = []
    for i in range(grid.size):
        for j in range(grid.size):
            if grid.cell(i, j):
                shapes.append(build(i * block_size, j * block_size, block_size, request.color))

    return VectorDocument(canvas_size=grid.size * block_size, shapes=tuple(shapes))
