from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Protocol, Set, Tuple

from pixelbox.errors import UnknownTool
from pixelbox.history import Action, EditorState
from pixelbox.picture import Color, PixelUpdate


logger = logging.getLogger(__name__)

Point = Tuple[int, int]
Emit = Callable[[Action], None]

_AROUND: Tuple[Point, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class Gesture(Protocol):
    def move(self, pos: Point, state: EditorState) -> None:
        ...


Tool = Callable[[Point, EditorState, Emit], Optional[Gesture]]


class ToolKind(str, Enum):
    DRAW = "draw"
    RECTANGLE = "rectangle"
    FILL = "fill"
    PICK = "pick"
    LINE = "line"


def _rectangle_cells(start: Point, end: Point, color: Color) -> List[PixelUpdate]:
    x_start, x_end = min(start[0], end[0]), max(start[0], end[0])
    y_start, y_end = min(start[1], end[1]), max(start[1], end[1])
    return [
        PixelUpdate(x, y, color)
        for y in range(y_start, y_end + 1)
        for x in range(x_start, x_end + 1)
    ]


def _line_cells(start: Point, end: Point, color: Color) -> List[PixelUpdate]:
    x0, y0 = start
    x1, y1 = end
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    step_x = 1 if x0 < x1 else -1
    step_y = 1 if y0 < y1 else -1
    err = dx + dy
    cells = []
    while True:
        cells.append(PixelUpdate(x0, y0, color))
        if x0 == x1 and y0 == y1:
            return cells
        doubled = 2 * err
        if doubled >= dy:
            err += dy
            x0 += step_x
        if doubled <= dx:
            err += dx
            y0 += step_y


@dataclass(frozen=True)
class DrawGesture:
    emit: Emit

    def move(self, pos: Point, state: EditorState) -> None:
        # Paint onto whatever picture is current so strokes accumulate.
        x, y = pos
        self.emit(Action(picture=state.picture.draw([PixelUpdate(x, y, state.color)])))


@dataclass(frozen=True)
class RectangleGesture:
    start: Point
    base: EditorState
    emit: Emit

    def move(self, pos: Point, state: EditorState) -> None:
        cells = _rectangle_cells(self.start, pos, self.base.color)
        self.emit(Action(picture=self.base.picture.draw(cells)))


@dataclass(frozen=True)
class LineGesture:
    start: Point
    base: EditorState
    emit: Emit

    def move(self, pos: Point, state: EditorState) -> None:
        cells = _line_cells(self.start, pos, self.base.color)
        self.emit(Action(picture=self.base.picture.draw(cells)))


def draw(pos: Point, state: EditorState, emit: Emit) -> Optional[Gesture]:
    gesture = DrawGesture(emit)
    gesture.move(pos, state)
    return gesture


def rectangle(pos: Point, state: EditorState, emit: Emit) -> Optional[Gesture]:
    gesture = RectangleGesture(start=pos, base=state, emit=emit)
    gesture.move(pos, state)
    return gesture


def line(pos: Point, state: EditorState, emit: Emit) -> Optional[Gesture]:
    gesture = LineGesture(start=pos, base=state, emit=emit)
    gesture.move(pos, state)
    return gesture


def flood_region(state: EditorState, pos: Point) -> Set[Point]:
    picture = state.picture
    target = picture.pixel(*pos)
    region = {pos}
    queue = deque([pos])
    while queue:
        cx, cy = queue.popleft()
        for dx, dy in _AROUND:
            nx, ny = cx + dx, cy + dy
            if (nx, ny) in region or not picture.contains(nx, ny):
                continue
            if picture.pixel(nx, ny) != target:
                continue
            region.add((nx, ny))
            queue.append((nx, ny))
    return region


def fill(pos: Point, state: EditorState, emit: Emit) -> Optional[Gesture]:
    region = flood_region(state, pos)
    logger.debug("Flood fill at %s repaints %d pixels", pos, len(region))
    cells = [PixelUpdate(x, y, state.color) for x, y in sorted(region, key=lambda p: (p[1], p[0]))]
    emit(Action(picture=state.picture.draw(cells)))
    return None


def pick(pos: Point, state: EditorState, emit: Emit) -> Optional[Gesture]:
    emit(Action(color=state.picture.pixel(*pos)))
    return None


DEFAULT_TOOLS: Dict[str, Tool] = {
    ToolKind.DRAW.value: draw,
    ToolKind.FILL.value: fill,
    ToolKind.RECTANGLE.value: rectangle,
    ToolKind.PICK.value: pick,
    ToolKind.LINE.value: line,
}


class ToolRegistry:
    def __init__(self, tools: Optional[Dict[str, Tool]] = None) -> None:
        self._tools: Dict[str, Tool] = dict(DEFAULT_TOOLS if tools is None else tools)

    def register(self, name: str, tool: Tool) -> None:
        self._tools[name] = tool

    def get(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownTool(name) from None

    def names(self) -> List[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)
