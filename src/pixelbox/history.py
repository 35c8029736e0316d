from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

from pixelbox.picture import Color, Picture


logger = logging.getLogger(__name__)

COALESCE_WINDOW_MS = 1000


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(frozen=True)
class EditorState:
    tool: str
    color: Color
    picture: Picture
    history: Tuple[Picture, ...] = ()
    last_snapshot_at: float = 0.0


@dataclass(frozen=True)
class Action:
    tool: Optional[str] = None
    color: Optional[Color] = None
    picture: Optional[Picture] = None
    undo: bool = False


def _merge_selection(state: EditorState, action: Action) -> EditorState:
    changes = {}
    if action.tool is not None:
        changes["tool"] = action.tool
    if action.color is not None:
        changes["color"] = action.color
    if not changes:
        return state
    return replace(state, **changes)


def reduce(
    state: EditorState,
    action: Action,
    *,
    now: Optional[float] = None,
    window: float = COALESCE_WINDOW_MS,
    max_depth: Optional[int] = None,
) -> EditorState:
    """Return the state that follows ``state`` once ``action`` is applied.

    A picture update pushes the previous picture onto the history only when
    at least ``window`` milliseconds have passed since the last push; updates
    arriving sooner replace the picture in place, so a drag collapses into a
    single undo step. Undo pops the newest entry and resets the snapshot time
    to zero so the next picture update is always recorded.

    ``tool`` and ``color`` fields are merged whichever branch fires. The
    input state is never modified.
    """
    if action.undo:
        if not state.history:
            logger.debug("Undo requested with empty history")
            return _merge_selection(state, action)
        undone = replace(
            state,
            picture=state.history[0],
            history=state.history[1:],
            last_snapshot_at=0.0,
        )
        logger.debug("Undo; %d entries left", len(undone.history))
        return _merge_selection(undone, action)

    if action.picture is not None:
        current = monotonic_ms() if now is None else now
        if current - state.last_snapshot_at >= window:
            history = (state.picture,) + state.history
            if max_depth is not None and max_depth >= 0:
                history = history[:max_depth]
            snapshotted = replace(
                state,
                picture=action.picture,
                history=history,
                last_snapshot_at=current,
            )
            return _merge_selection(snapshotted, action)
        return _merge_selection(replace(state, picture=action.picture), action)

    return _merge_selection(state, action)


def replay(
    state: EditorState,
    timed_actions: Iterable[Tuple[float, Action]],
    *,
    window: float = COALESCE_WINDOW_MS,
    max_depth: Optional[int] = None,
) -> EditorState:
    for at, action in timed_actions:
        state = reduce(state, action, now=at, window=window, max_depth=max_depth)
    return state
