from __future__ import annotations

import logging
from typing import Callable, List, Optional

from pixelbox.history import COALESCE_WINDOW_MS, Action, EditorState, monotonic_ms, reduce
from pixelbox.picture import Color, Picture
from pixelbox.tools import Gesture, Point, ToolRegistry


logger = logging.getLogger(__name__)

Listener = Callable[[EditorState], None]


class EditorSession:
    """Holds the current editor state and routes pointer gestures through tools.

    The session is the only owner of the state: tools receive snapshots and
    emit actions back through :meth:`dispatch`, which swaps in the reduced
    state and tells every listener about it.
    """

    def __init__(
        self,
        state: EditorState,
        *,
        tools: Optional[ToolRegistry] = None,
        clock: Callable[[], float] = monotonic_ms,
        window: float = COALESCE_WINDOW_MS,
        max_depth: Optional[int] = None,
    ) -> None:
        self.tools = tools or ToolRegistry()
        self.tools.get(state.tool)
        self.state = state
        self.clock = clock
        self.window = window
        self.max_depth = max_depth
        self.gesture: Optional[Gesture] = None
        self.last_pos: Optional[Point] = None
        self.listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self.listeners.append(listener)

    def dispatch(self, action: Action) -> EditorState:
        self.state = reduce(
            self.state,
            action,
            now=self.clock(),
            window=self.window,
            max_depth=self.max_depth,
        )
        for listener in self.listeners:
            listener(self.state)
        return self.state

    def pointer_down(self, pos: Point) -> None:
        tool = self.tools.get(self.state.tool)
        logger.debug("Tool %s started at %s", self.state.tool, pos)
        self.gesture = None
        self.last_pos = pos
        self.gesture = tool(pos, self.state, self.dispatch)

    def pointer_move(self, pos: Point) -> None:
        if self.gesture is None or pos == self.last_pos:
            return
        self.last_pos = pos
        self.gesture.move(pos, self.state)

    def pointer_up(self) -> None:
        self.gesture = None
        self.last_pos = None

    @property
    def dragging(self) -> bool:
        return self.gesture is not None

    def select_tool(self, name: str) -> EditorState:
        self.tools.get(name)
        return self.dispatch(Action(tool=name))

    def select_color(self, color: Color) -> EditorState:
        return self.dispatch(Action(color=color))

    def undo(self) -> EditorState:
        return self.dispatch(Action(undo=True))

    def load_picture(self, picture: Picture) -> EditorState:
        logger.info("Loaded %dx%d picture", picture.width, picture.height)
        return self.dispatch(Action(picture=picture))
