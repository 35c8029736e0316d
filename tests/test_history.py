from pixelbox.history import COALESCE_WINDOW_MS, Action, EditorState, reduce, replay
from pixelbox.picture import Picture, PixelUpdate


WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
RED = (255, 0, 0)


def _picture(mark=None):
    picture = Picture.empty(3, 3, WHITE)
    if mark is None:
        return picture
    return picture.draw([PixelUpdate(mark, 0, BLACK)])


def _state(**kwargs):
    base = dict(tool="draw", color=BLACK, picture=_picture())
    base.update(kwargs)
    return EditorState(**base)


def test_first_picture_update_snapshots():
    p0, p1 = _picture(), _picture(0)
    state = reduce(_state(picture=p0), Action(picture=p1), now=5000)
    assert state.picture is p1
    assert state.history == (p0,)
    assert state.last_snapshot_at == 5000


def test_updates_inside_window_coalesce():
    p0, p1, p2 = _picture(), _picture(0), _picture(1)
    state = reduce(_state(picture=p0), Action(picture=p1), now=5000)
    state = reduce(state, Action(picture=p2), now=5500)
    assert state.picture is p2
    assert state.history == (p0,)
    assert state.last_snapshot_at == 5000


def test_updates_outside_window_push_twice():
    p0, p1, p2 = _picture(), _picture(0), _picture(1)
    state = reduce(_state(picture=p0), Action(picture=p1), now=5000)
    state = reduce(state, Action(picture=p2), now=5000 + COALESCE_WINDOW_MS + 1)
    assert state.history == (p1, p0)


def test_window_boundary_is_inclusive():
    p0, p1, p2 = _picture(), _picture(0), _picture(1)
    state = reduce(_state(picture=p0), Action(picture=p1), now=5000)
    state = reduce(state, Action(picture=p2), now=5000 + COALESCE_WINDOW_MS)
    assert len(state.history) == 2


def test_undo_pops_history_and_resets_timer():
    p0, p1, p2 = _picture(), _picture(0), _picture(1)
    state = _state(picture=p0, history=(p1, p2), last_snapshot_at=9000)
    undone = reduce(state, Action(undo=True), now=9100)
    assert undone.picture is p1
    assert undone.history == (p2,)
    assert undone.last_snapshot_at == 0


def test_undo_on_empty_history_is_noop():
    state = _state(last_snapshot_at=1234)
    assert reduce(state, Action(undo=True), now=2000) is state


def test_update_after_undo_always_snapshots():
    p0, p1, p2 = _picture(), _picture(0), _picture(1)
    state = _state(picture=p0, history=(p1,), last_snapshot_at=9000)
    state = reduce(state, Action(undo=True), now=9100)
    state = reduce(state, Action(picture=p2), now=9200)
    assert state.history == (p1,)
    assert state.picture is p2


def test_tool_and_color_do_not_touch_history():
    state = _state(last_snapshot_at=100)
    state = reduce(state, Action(tool="fill"), now=5000)
    state = reduce(state, Action(color=RED), now=6000)
    assert state.tool == "fill"
    assert state.color == RED
    assert state.history == ()
    assert state.last_snapshot_at == 100


def test_selection_fields_merge_alongside_picture():
    p1 = _picture(0)
    state = reduce(_state(), Action(picture=p1, color=RED), now=5000)
    assert state.color == RED
    assert state.picture is p1


def test_reduce_does_not_mutate_input():
    p0, p1 = _picture(), _picture(0)
    state = _state(picture=p0)
    reduce(state, Action(picture=p1), now=5000)
    assert state.picture is p0
    assert state.history == ()
    assert state.last_snapshot_at == 0


def test_max_depth_drops_oldest_entries():
    pictures = [_picture(), _picture(0), _picture(1), _picture(2)]
    state = _state(picture=pictures[0])
    for idx, picture in enumerate(pictures[1:], start=1):
        state = reduce(state, Action(picture=picture), now=idx * 2000, max_depth=2)
    assert state.history == (pictures[2], pictures[1])


def test_replay_is_deterministic():
    p1, p2 = _picture(0), _picture(1)
    actions = [
        (2000, Action(picture=p1)),
        (2100, Action(picture=p2)),
        (2200, Action(color=RED)),
        (5000, Action(undo=True)),
    ]
    first = replay(_state(), actions)
    second = replay(_state(), actions)
    assert first == second
    assert first.picture == _picture()
    assert first.color == RED
    assert first.history == ()
