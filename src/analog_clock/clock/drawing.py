"""Vector drawing model for the clock face."""

import math
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple, Union
from xml.sax.saxutils import escape

from analog_clock.clock.engine import HOUR_HAND, MINUTE_HAND, SECOND_HAND, TWO_PI, Patch
from analog_clock.clock.geometry import GeometryParams
from analog_clock.clock.theme import ThemeColors
from analog_clock.errors import DrawingError

Point = Tuple[float, float]


@dataclass(frozen=True)
class Circle:
    """A circle centered on the origin."""

    radius: float
    fill: str
    stroke_width: float
    stroke_color: str
    id: Optional[str] = None


@dataclass(frozen=True)
class Line:
    """A line segment, rotated by ``rotate`` radians about ``pin``."""

    start: Point
    end: Point
    stroke_width: float
    stroke_color: str
    pin: Point = (0.0, 0.0)
    rotate: float = 0.0
    id: Optional[str] = None


Primitive = Union[Circle, Line]


@dataclass(frozen=True)
class Drawing:
    """An ordered set of primitives, painted first to last."""

    primitives: Tuple[Primitive, ...]

    def get(self, element_id: str) -> Primitive:
        """
        Find a primitive by id.

        Raises:
            DrawingError: If no primitive has the id
        """
        for primitive in self.primitives:
            if primitive.id == element_id:
                return primitive
        raise DrawingError(f"No element with id {element_id!r}")

    def ids(self) -> Tuple[str, ...]:
        return tuple(p.id for p in self.primitives if p.id is not None)


def _hand(geometry: GeometryParams, size: float, color: str, element_id: str) -> Line:
    return Line(
        start=(0.0, geometry.back_size),
        end=(0.0, size),
        stroke_width=geometry.thickness,
        stroke_color=color,
        id=element_id,
    )


def _ticks(geometry: GeometryParams, color: str) -> Iterable[Line]:
    angle = TWO_PI / 12
    for n in range(1, 13):
        yield Line(
            start=(0.0, geometry.radius - geometry.tick_size),
            end=(0.0, geometry.radius),
            stroke_width=geometry.thickness,
            stroke_color=color,
            rotate=n * angle,
        )


def build_initial_drawing(
    geometry: GeometryParams,
    theme: ThemeColors,
    show_seconds: bool,
    show_ticks: bool,
) -> Drawing:
    """
    Build the clock face with every hand pointing at 12.

    Args:
        geometry: Face and hand sizes
        theme: Colors
        show_seconds: Include the second hand
        show_ticks: Include the twelve hour tick marks

    Returns:
        Drawing of the clock face
    """
    primitives = [
        Circle(
            radius=geometry.radius,
            fill=theme.background,
            stroke_width=geometry.thickness,
            stroke_color=theme.border,
        ),
        _hand(geometry, geometry.hour_size, theme.hour_color, HOUR_HAND),
        _hand(geometry, geometry.minute_size, theme.minute_color, MINUTE_HAND),
    ]
    if show_seconds:
        primitives.append(
            _hand(geometry, geometry.second_size, theme.second_color, SECOND_HAND)
        )
    if show_ticks:
        primitives.extend(_ticks(geometry, theme.border))
    return Drawing(primitives=tuple(primitives))


def apply_patch(drawing: Drawing, patch: Patch) -> Drawing:
    """
    Replace the rotation of the named hands, leaving everything else as is.

    Args:
        drawing: Current drawing
        patch: Ordered (element id, radians) pairs

    Returns:
        A new drawing with the rotations applied

    Raises:
        DrawingError: If the patch names an element that is not in the drawing
    """
    primitives = list(drawing.primitives)
    index = {p.id: i for i, p in enumerate(primitives) if p.id is not None}

    for element_id, radians in patch:
        if element_id not in index:
            raise DrawingError(f"No element with id {element_id!r}")
        i = index[element_id]
        primitives[i] = replace(primitives[i], rotate=radians)

    return Drawing(primitives=tuple(primitives))


def _num(value: float) -> str:
    return f"{value:.4f}".rstrip("0").rstrip(".")


def _attr(value: str) -> str:
    return escape(value, {'"': "&quot;"})


def _circle_svg(circle: Circle) -> str:
    id_attr = f' id="{_attr(circle.id)}"' if circle.id else ""
    return (
        f'<circle{id_attr} cx="0" cy="0" r="{_num(circle.radius)}" fill="{_attr(circle.fill)}" '
        f'stroke="{_attr(circle.stroke_color)}" stroke-width="{_num(circle.stroke_width)}" />'
    )


def _line_svg(line: Line) -> str:
    id_attr = f' id="{_attr(line.id)}"' if line.id else ""
    (x1, y1), (x2, y2) = line.start, line.end
    px, py = line.pin
    degrees = math.degrees(line.rotate)
    return (
        f'<line{id_attr} x1="{_num(x1)}" y1="{_num(y1)}" x2="{_num(x2)}" y2="{_num(y2)}" '
        f'stroke="{_attr(line.stroke_color)}" stroke-width="{_num(line.stroke_width)}" '
        f'stroke-linecap="round" '
        f'transform="rotate({_num(degrees)} {_num(px)} {_num(py)})" />'
    )


def to_svg(drawing: Drawing, size: Optional[int] = None) -> str:
    """
    Serialize a drawing as a standalone SVG document.

    The view box is centered on the origin and sized to the face circle.

    Args:
        drawing: Drawing to serialize
        size: Optional pixel width/height of the document

    Returns:
        SVG string
    """
    extent = 0.0
    for primitive in drawing.primitives:
        if isinstance(primitive, Circle):
            extent = max(extent, primitive.radius + primitive.stroke_width)
    extent = extent or 1.0

    body = "\n    ".join(
        _circle_svg(p) if isinstance(p, Circle) else _line_svg(p)
        for p in drawing.primitives
    )
    size_attrs = f' width="{size}" height="{size}"' if size else ""
    view_box = f"{_num(-extent)} {_num(-extent)} {_num(2 * extent)} {_num(2 * extent)}"

    return f"""<?xml version="1.0" encoding="UTF-8" standalone="no"?>
<svg{size_attrs} viewBox="{view_box}" xmlns="http://www.w3.org/2000/svg">
    {body}
</svg>
"""
