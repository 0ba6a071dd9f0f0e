"""
Tests for EditController

The controller is the only object the UI talks to, so these tests drive it
the way the canvas does: clicks, pointer down/move/up, mode buttons and
undo/redo, then read the accessors back.
"""

import math
from itertools import count

import pytest

from dotmap.config import Settings
from dotmap.edit import EditController, EditOptions, Mode
from dotmap.models import Dot, Snapshot


def make_controller(**kwargs) -> EditController:
    ids = count(1)
    return EditController(id_factory=lambda: f'id-{next(ids)}', **kwargs)


@pytest.fixture
def controller():
    return make_controller()


def place(controller, *points):
    """Place one dot per point and return the created ids."""
    controller.set_mode(Mode.PLACE)
    created = []
    for x, y in points:
        controller.click(x, y)
        created.append(controller.selected_dot().id)
    return created


class TestPlaceMode:
    """Clicks on the canvas in place mode."""

    def test_starts_empty_in_place_mode(self, controller):
        assert controller.mode is Mode.PLACE
        assert controller.current_snapshot() == Snapshot.empty()
        assert not controller.can_undo()
        assert not controller.can_redo()

    def test_place_on_empty_canvas(self, controller):
        controller.click(10, 10)
        snapshot = controller.current_snapshot()
        assert len(snapshot.dots) == 1
        dot = snapshot.dots[0]
        assert (dot.x, dot.y, dot.direction, dot.selected) == (10, 10, 0, True)
        assert controller.can_undo()

    def test_new_dot_takes_over_selection(self, controller):
        first, second = place(controller, (10, 10), (100, 100))
        snapshot = controller.current_snapshot()
        assert snapshot.dot_by_id(first).selected is False
        assert snapshot.dot_by_id(second).selected is True

    def test_click_on_existing_dot_places_nothing(self, controller):
        place(controller, (10, 10))
        controller.click(12, 12)
        assert len(controller.current_snapshot().dots) == 1
        assert len(controller.history) == 2


class TestConnectMode:
    """Two-click connections and the pending start."""

    def test_connect_two_dots_once(self, controller):
        a, b = place(controller, (10, 10), (100, 100))
        controller.set_mode('connect')

        controller.click(10, 10)
        assert controller.connection_start() == a
        controller.click(100, 100)
        assert controller.connection_start() is None

        snapshot = controller.current_snapshot()
        assert len(snapshot.connections) == 1
        conn = snapshot.connections[0]
        assert (conn.source_id, conn.target_id) == (a, b)
        assert snapshot.selected_dot() is None

        # Same pair again, in reverse: nothing new
        history_len = len(controller.history)
        controller.click(100, 100)
        controller.click(10, 10)
        assert len(controller.current_snapshot().connections) == 1
        assert controller.connection_start() is None
        # Only the select click of the first pick committed
        assert len(controller.history) == history_len + 1

    def test_clicking_start_again_keeps_it_pending(self, controller):
        a, _ = place(controller, (10, 10), (100, 100))
        controller.set_mode(Mode.CONNECT)
        controller.click(10, 10)
        controller.click(10, 10)
        assert controller.connection_start() == a
        assert controller.current_snapshot().connections == ()

    def test_clicking_start_again_can_cancel(self):
        controller = make_controller(options=EditOptions(self_click='cancel'))
        place(controller, (10, 10))
        controller.set_mode(Mode.CONNECT)
        controller.click(10, 10)
        controller.click(10, 10)
        assert controller.connection_start() is None

    def test_start_removed_by_undo_is_ignored(self, controller):
        a, b = place(controller, (10, 10), (100, 100))
        controller.set_mode(Mode.CONNECT)
        controller.click(100, 100)
        assert controller.connection_start() == b

        controller.undo()   # select b
        controller.undo()   # deselect on mode change
        controller.undo()   # place b
        assert controller.current_snapshot().dot_by_id(b) is None
        assert controller.connection_start() == b

        controller.click(10, 10)
        assert controller.connection_start() == a
        assert controller.current_snapshot().connections == ()

    def test_escape_cancels_pending_connection(self, controller):
        place(controller, (10, 10))
        controller.set_mode(Mode.CONNECT)
        controller.click(10, 10)
        controller.cancel_gesture()
        assert controller.connection_start() is None
        assert controller.mode is Mode.CONNECT


class TestAdjustMode:
    """Selection and direction drags in adjust mode."""

    def test_click_selects(self, controller):
        a, _ = place(controller, (10, 10), (100, 100))
        controller.set_mode(Mode.ADJUST)
        controller.click(10, 10)
        assert controller.selected_dot().id == a

    def test_pointer_down_selects_pressed_dot(self, controller):
        a, _ = place(controller, (10, 10), (100, 100))
        controller.set_mode(Mode.ADJUST)
        controller.pointer_down(10, 10)
        assert controller.selected_dot().id == a
        controller.pointer_move(10, 60)
        controller.pointer_up()
        assert controller.selected_dot().id == a
        assert controller.selected_dot().direction == 90

    def test_drag_left_points_at_180(self, controller):
        (a,) = place(controller, (100, 100))
        controller.set_mode(Mode.ADJUST)
        controller.pointer_down(100, 100)
        assert controller.active_gesture().dot_id == a
        controller.pointer_move(50, 100)
        controller.pointer_up()
        assert controller.current_snapshot().dot_by_id(a).direction == 180
        assert controller.active_gesture() is None

    def test_drag_above_axis_wraps_negative_angle(self, controller):
        (a,) = place(controller, (100, 100))
        controller.set_mode(Mode.ADJUST)
        controller.pointer_down(100, 100)
        rad = math.radians(-10)
        controller.pointer_move(100 + 50 * math.cos(rad), 100 + 50 * math.sin(rad))
        controller.pointer_up()
        assert controller.current_snapshot().dot_by_id(a).direction == 350

    def test_each_move_is_one_undo_step(self, controller):
        (a,) = place(controller, (100, 100))
        controller.set_mode(Mode.ADJUST)
        controller.pointer_down(100, 100)
        controller.pointer_move(100, 150)
        controller.pointer_move(50, 100)
        controller.pointer_up()
        controller.undo()
        assert controller.current_snapshot().dot_by_id(a).direction == 90

    def test_pointer_leave_ends_drag_without_commit(self, controller):
        place(controller, (100, 100))
        controller.set_mode(Mode.ADJUST)
        controller.pointer_down(100, 100)
        controller.pointer_move(100, 150)
        history_len = len(controller.history)
        controller.pointer_leave()
        assert controller.active_gesture() is None
        assert len(controller.history) == history_len

    def test_pointer_down_off_dot_or_outside_adjust(self, controller):
        place(controller, (100, 100))
        controller.pointer_down(100, 100)
        assert controller.active_gesture() is None
        controller.set_mode(Mode.ADJUST)
        controller.pointer_down(300, 300)
        assert controller.active_gesture() is None

    def test_moves_without_drag_change_nothing(self, controller):
        place(controller, (100, 100))
        controller.set_mode(Mode.ADJUST)
        history_len = len(controller.history)
        controller.pointer_move(150, 150)
        controller.pointer_up()
        assert len(controller.history) == history_len

    def test_set_direction_from_slider(self, controller):
        (a,) = place(controller, (100, 100))
        controller.set_direction(a, 270)
        assert controller.current_snapshot().dot_by_id(a).direction == 270
        controller.set_direction(a, -90)
        assert controller.current_snapshot().dot_by_id(a).direction == 270
        history_len = len(controller.history)
        controller.set_direction('ghost', 45)
        controller.set_direction(a, float('nan'))
        assert len(controller.history) == history_len

    def test_nearest_hit_policy(self):
        controller = make_controller(options=EditOptions(hit_policy='nearest'))
        initial = Snapshot(dots=[Dot('far', 0, 0), Dot('near', 6, 0)])
        controller.replace_snapshot(initial)
        controller.set_mode(Mode.ADJUST)
        controller.click(5, 0)
        assert controller.selected_dot().id == 'near'


class TestModeChange:
    """Switching modes resets gestures and deselects."""

    def test_mode_change_deselects_and_is_undoable(self, controller):
        (a,) = place(controller, (10, 10))
        controller.set_mode(Mode.CONNECT)
        assert controller.selected_dot() is None
        controller.undo()
        assert controller.selected_dot().id == a
        # Undo does not revert the mode
        assert controller.mode is Mode.CONNECT

    def test_mode_change_without_selection_does_not_commit(self, controller):
        controller.set_mode(Mode.ADJUST)
        assert len(controller.history) == 1

    def test_unknown_mode_is_ignored(self, controller):
        controller.set_mode('lasso')
        assert controller.mode is Mode.PLACE


class TestDeleteAndClear:
    """Deleting the selected dot and clearing the diagram."""

    def test_delete_selected_cascades(self, controller):
        a, b, c = place(controller, (10, 10), (100, 100), (200, 10))
        controller.set_mode(Mode.CONNECT)
        controller.click(10, 10)
        controller.click(100, 100)
        controller.click(200, 10)
        controller.click(100, 100)
        assert len(controller.current_snapshot().connections) == 2

        controller.set_mode(Mode.ADJUST)
        controller.click(100, 100)
        controller.delete_selected()
        snapshot = controller.current_snapshot()
        assert [d.id for d in snapshot.dots] == [a, c]
        assert snapshot.connections == ()
        assert snapshot.dot_by_id(b) is None

    def test_delete_without_selection_is_noop(self, controller):
        place(controller, (10, 10), (100, 100), (200, 10))
        controller.set_mode(Mode.ADJUST)
        before = controller.current_snapshot()
        history_len = len(controller.history)
        controller.delete_selected()
        assert controller.current_snapshot() is before
        assert len(controller.history) == history_len

    def test_delete_pending_start_clears_it(self, controller):
        place(controller, (10, 10))
        controller.set_mode(Mode.CONNECT)
        controller.click(10, 10)
        controller.delete_selected()
        assert controller.connection_start() is None

    def test_clear_all_and_undo(self, controller):
        place(controller, (10, 10), (100, 100))
        controller.clear_all()
        assert controller.current_snapshot() == Snapshot.empty()
        controller.undo()
        assert len(controller.current_snapshot().dots) == 2

    def test_clear_all_on_empty_still_commits(self, controller):
        controller.clear_all()
        assert len(controller.history) == 2


class TestHistoryIntegration:
    """Edits flow through the bounded undo/redo timeline."""

    def test_history_is_bounded(self):
        controller = make_controller(history_limit=3)
        place(controller, *[(i * 30, 10) for i in range(5)])
        assert len(controller.history) == 3
        controller.undo()
        controller.undo()
        assert not controller.can_undo()
        assert len(controller.current_snapshot().dots) == 3

    def test_new_edit_after_undo_drops_redo(self, controller):
        place(controller, (10, 10), (100, 100))
        controller.undo()
        assert controller.can_redo()
        controller.click(200, 200)
        assert not controller.can_redo()

    def test_metadata_edits_are_undoable(self, controller):
        (a,) = place(controller, (10, 10))
        controller.update_dot(a, label='Start')
        assert controller.selected_dot().label == 'Start'
        controller.undo()
        assert controller.selected_dot().label is None

    def test_update_connection_style(self, controller):
        place(controller, (10, 10), (100, 100))
        controller.set_mode(Mode.CONNECT)
        controller.click(10, 10)
        controller.click(100, 100)
        conn_id = controller.current_snapshot().connections[0].id
        controller.update_connection(conn_id, style='dashed', label='path')
        conn = controller.current_snapshot().connection_by_id(conn_id)
        assert (conn.style, conn.label) == ('dashed', 'path')


class TestStateChangeCallback:
    """The redraw callback fires once per effective event."""

    def test_called_once_per_effective_event(self, controller):
        calls = []
        controller.set_on_state_change(calls.append)

        controller.click(10, 10)
        assert calls == [controller]
        controller.click(12, 12)           # on the dot: nothing happens
        controller.pointer_move(50, 50)    # no drag
        controller.redo()                  # nothing to redo
        assert len(calls) == 1

        controller.undo()
        controller.set_mode(Mode.ADJUST)
        assert len(calls) == 3


def test_from_settings():
    settings = Settings(history_limit=7, hit_radius=12, hit_policy='nearest', self_click='cancel')
    controller = EditController.from_settings(settings)
    assert controller.history.limit == 7
    assert controller.options == EditOptions(hit_radius=12, hit_policy='nearest', self_click='cancel')
