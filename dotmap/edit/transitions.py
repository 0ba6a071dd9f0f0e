"""
Pure event handlers for the editing state machine.

Every handler takes the current EditState and Snapshot and returns a
Transition: the next EditState and, when the event changes the diagram, the
snapshot to commit. Handlers never raise for user input; anything that does
not apply (stale ids, clicks on empty canvas in connect mode, moves without a
drag) is a Transition that keeps the state and commits nothing.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional

from dotmap.edit.actions import EditActions
from dotmap.edit.constants import HIT_RADIUS
from dotmap.edit.state import DragState, EditState, Mode, Transition
from dotmap.geometry import direction_from_points, pick_first, pick_nearest
from dotmap.models import Dot, Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditOptions:
    """Tunable interaction rules (see dotmap.config.Settings)."""
    hit_radius: float = HIT_RADIUS
    # 'first': list order wins among overlapping dots, 'nearest': closest center wins
    hit_policy: str = 'first'
    # Clicking the pending connection start again: 'ignore' keeps it, 'cancel' drops it
    self_click: str = 'ignore'


def coerce_mode(value: Any) -> Optional[Mode]:
    if isinstance(value, Mode):
        return value
    try:
        return Mode(str(value).strip().lower())
    except ValueError:
        return None


def find_dot_at(snapshot: Snapshot, x: float, y: float,
                radius: float = HIT_RADIUS, policy: str = 'first') -> Optional[Dot]:
    """Return the dot under (x, y), or None."""
    candidates = ((dot, dot.position) for dot in snapshot.dots)
    if policy == 'nearest':
        return pick_nearest((x, y), candidates, radius)
    return pick_first((x, y), candidates, radius)


def on_set_mode(state: EditState, snapshot: Snapshot, mode: Any, actions: EditActions) -> Transition:
    """Switch mode, drop any gesture, and deselect everything."""
    new_mode = coerce_mode(mode)
    if new_mode is None:
        logger.warning(f"Ignoring unknown mode {mode!r}")
        return Transition(state)
    new_state = EditState(mode=new_mode)
    if snapshot.selected_dot() is None:
        return Transition(new_state)
    return Transition(new_state, actions.deselect_all(snapshot))


def on_click(state: EditState, snapshot: Snapshot, x: float, y: float,
             actions: EditActions, options: EditOptions = EditOptions()) -> Transition:
    """A click lands on a dot when one is within the hit radius, on the canvas otherwise."""
    dot = find_dot_at(snapshot, x, y, options.hit_radius, options.hit_policy)
    if dot is None:
        return _on_canvas_click(state, snapshot, x, y, actions)
    return _on_dot_click(state, snapshot, dot, actions, options)


def _on_canvas_click(state: EditState, snapshot: Snapshot, x: float, y: float,
                     actions: EditActions) -> Transition:
    if state.mode is Mode.PLACE:
        new_snapshot, dot = actions.place_dot(snapshot, x, y)
        logger.debug(f"Placed dot {dot.id[:8]} at ({x:.1f}, {y:.1f})")
        return Transition(state, new_snapshot)
    return Transition(state)


def _on_dot_click(state: EditState, snapshot: Snapshot, dot: Dot,
                  actions: EditActions, options: EditOptions) -> Transition:
    if state.mode is Mode.ADJUST:
        return Transition(state, actions.select_only(snapshot, dot.id))

    if state.mode is Mode.CONNECT:
        start = state.connection_start
        if start is not None and snapshot.dot_by_id(start) is None:
            # The pending start vanished (undo, delete); begin afresh
            start = None

        if start is None:
            return Transition(replace(state, connection_start=dot.id), actions.select_only(snapshot, dot.id))

        if start == dot.id:
            if options.self_click == 'cancel':
                return Transition(replace(state, connection_start=None))
            return Transition(state)

        new_snapshot = actions.connect(snapshot, start, dot.id)
        if new_snapshot is None:
            logger.debug(f"Dots {start[:8]} and {dot.id[:8]} are already connected")
        return Transition(replace(state, connection_start=None), new_snapshot)

    # Place mode: clicking an existing dot does nothing
    return Transition(state)


def on_pointer_down(state: EditState, snapshot: Snapshot, x: float, y: float,
                    actions: EditActions, options: EditOptions = EditOptions()) -> Transition:
    """Start a direction drag when pressing on a dot in adjust mode; the dot becomes selected."""
    if state.mode is not Mode.ADJUST:
        return Transition(state)
    dot = find_dot_at(snapshot, x, y, options.hit_radius, options.hit_policy)
    if dot is None:
        return Transition(state)
    new_state = replace(state, drag=DragState(dot_id=dot.id, origin=dot.position))
    if dot.selected:
        return Transition(new_state)
    return Transition(new_state, actions.select_only(snapshot, dot.id))


def on_pointer_move(state: EditState, snapshot: Snapshot, x: float, y: float,
                    actions: EditActions) -> Transition:
    """While dragging, point the active dot at the pointer. Every move commits."""
    drag = state.drag
    if drag is None:
        return Transition(state)
    direction = direction_from_points(drag.origin, (x, y))
    new_state = replace(state, drag=replace(drag, pointer=(x, y)))
    return Transition(new_state, actions.set_direction(snapshot, drag.dot_id, direction))


def on_pointer_up(state: EditState) -> Transition:
    """End a drag (also used when the pointer leaves the canvas). Never commits."""
    if state.drag is None:
        return Transition(state)
    return Transition(replace(state, drag=None))


def on_set_direction(state: EditState, snapshot: Snapshot, dot_id: str, degrees: float,
                     actions: EditActions) -> Transition:
    return Transition(state, actions.set_direction(snapshot, dot_id, degrees))


def on_delete_selected(state: EditState, snapshot: Snapshot, actions: EditActions) -> Transition:
    """Delete the selected dot and its connections; forget gestures that referenced it."""
    selected = snapshot.selected_dot()
    if selected is None:
        return Transition(state)
    new_state = state
    if state.connection_start == selected.id:
        new_state = replace(new_state, connection_start=None)
    if state.drag is not None and state.drag.dot_id == selected.id:
        new_state = replace(new_state, drag=None)
    return Transition(new_state, actions.delete_dot(snapshot, selected.id))


def on_clear_all(state: EditState, actions: EditActions) -> Transition:
    return Transition(state.reset_gesture(), actions.clear())


def on_cancel_gesture(state: EditState) -> Transition:
    return Transition(state.reset_gesture())


def on_replace_snapshot(state: EditState, snapshot: Snapshot) -> Transition:
    return Transition(state.reset_gesture(), snapshot)


def on_update_dot(state: EditState, snapshot: Snapshot, dot_id: str,
                  actions: EditActions, **changes) -> Transition:
    return Transition(state, actions.update_dot(snapshot, dot_id, **changes))


def on_update_connection(state: EditState, snapshot: Snapshot, connection_id: str,
                         actions: EditActions, **changes) -> Transition:
    return Transition(state, actions.update_connection(snapshot, connection_id, **changes))
