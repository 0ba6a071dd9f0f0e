"""
Edit Controller - Single source of truth for diagram editing.

This controller owns:
- the undo/redo timeline (HistoryManager) holding diagram snapshots
- the interaction state (mode, pending connection, active drag)

The UI only calls the public methods below and re-reads the accessors in
the state-change callback. Each call handles exactly one event: the pure
transition computes the next state, and at most one snapshot is committed.
"""

import logging
from typing import Any, Callable, Optional

from dotmap.edit import transitions
from dotmap.edit.actions import EditActions, new_id
from dotmap.edit.state import DragState, EditState, Mode, Transition
from dotmap.edit.transitions import EditOptions
from dotmap.history import DEFAULT_HISTORY_LIMIT, HistoryManager
from dotmap.models import Dot, Snapshot

logger = logging.getLogger(__name__)


class EditController:
    """Drives the place / connect / adjust state machine and its history."""

    def __init__(self, initial: Optional[Snapshot] = None,
                 history_limit: int = DEFAULT_HISTORY_LIMIT,
                 options: Optional[EditOptions] = None,
                 id_factory: Callable[[], str] = new_id,
                 check_invariants: bool = __debug__):
        self._history = HistoryManager(initial, limit=history_limit, check_invariants=check_invariants)
        self._actions = EditActions(id_factory)
        self._options = options or EditOptions()
        self._state = EditState()
        self._on_state_change: Optional[Callable[['EditController'], None]] = None

    @classmethod
    def from_settings(cls, settings, initial: Optional[Snapshot] = None,
                      id_factory: Callable[[], str] = new_id) -> 'EditController':
        """Build a controller from dotmap.config.Settings."""
        options = EditOptions(
            hit_radius=settings.hit_radius,
            hit_policy=settings.hit_policy,
            self_click=settings.self_click,
        )
        return cls(initial, history_limit=settings.history_limit, options=options,
                   id_factory=id_factory, check_invariants=settings.check_invariants)

    # --- Read accessors ---

    @property
    def state(self) -> EditState:
        return self._state

    @property
    def mode(self) -> Mode:
        return self._state.mode

    @property
    def history(self) -> HistoryManager:
        return self._history

    @property
    def options(self) -> EditOptions:
        return self._options

    def current_snapshot(self) -> Snapshot:
        return self._history.current()

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    def selected_dot(self) -> Optional[Dot]:
        return self._history.current().selected_dot()

    def active_gesture(self) -> Optional[DragState]:
        """The drag in progress, for visual feedback only."""
        return self._state.drag

    def connection_start(self) -> Optional[str]:
        return self._state.connection_start

    def set_on_state_change(self, callback: Callable[['EditController'], None]):
        self._on_state_change = callback

    # --- Events ---

    def set_mode(self, mode: Any) -> EditState:
        previous = self._state.mode
        self._apply(transitions.on_set_mode(self._state, self.current_snapshot(), mode, self._actions))
        if self._state.mode is not previous:
            logger.info(f"Mode changed: {previous.value} -> {self._state.mode.value}")
        return self._state

    def click(self, x: float, y: float) -> EditState:
        return self._apply(transitions.on_click(
            self._state, self.current_snapshot(), x, y, self._actions, self._options
        ))

    def pointer_down(self, x: float, y: float) -> EditState:
        return self._apply(transitions.on_pointer_down(
            self._state, self.current_snapshot(), x, y, self._actions, self._options
        ))

    def pointer_move(self, x: float, y: float) -> EditState:
        if self._state.drag is None:
            # Hover without a drag: nothing to do, not even a redraw
            return self._state
        return self._apply(transitions.on_pointer_move(self._state, self.current_snapshot(), x, y, self._actions))

    def pointer_up(self) -> EditState:
        if self._state.drag is None:
            return self._state
        return self._apply(transitions.on_pointer_up(self._state))

    def pointer_leave(self) -> EditState:
        """Leaving the canvas ends a drag exactly like releasing the pointer."""
        return self.pointer_up()

    def set_direction(self, dot_id: str, degrees: float) -> EditState:
        return self._apply(transitions.on_set_direction(
            self._state, self.current_snapshot(), dot_id, degrees, self._actions
        ))

    def delete_selected(self) -> EditState:
        selected = self.selected_dot()
        self._apply(transitions.on_delete_selected(self._state, self.current_snapshot(), self._actions))
        if selected is not None:
            logger.info(f"Deleted dot {selected.id[:8]}")
        return self._state

    def clear_all(self) -> EditState:
        self._apply(transitions.on_clear_all(self._state, self._actions))
        logger.info("Cleared diagram")
        return self._state

    def cancel_gesture(self) -> EditState:
        return self._apply(transitions.on_cancel_gesture(self._state))

    def update_dot(self, dot_id: str, **changes) -> EditState:
        """Change ``label`` and/or ``color`` of a dot."""
        return self._apply(transitions.on_update_dot(
            self._state, self.current_snapshot(), dot_id, self._actions, **changes
        ))

    def update_connection(self, connection_id: str, **changes) -> EditState:
        """Change ``label``, ``style`` and/or ``color`` of a connection."""
        return self._apply(transitions.on_update_connection(
            self._state, self.current_snapshot(), connection_id, self._actions, **changes
        ))

    def replace_snapshot(self, snapshot: Snapshot) -> EditState:
        """Commit a snapshot produced outside the editor (e.g. loaded from a file)."""
        return self._apply(transitions.on_replace_snapshot(self._state, snapshot))

    def undo(self) -> EditState:
        if self._history.undo():
            self._notify_change()
        return self._state

    def redo(self) -> EditState:
        if self._history.redo():
            self._notify_change()
        return self._state

    # --- Internals ---

    def _apply(self, transition: Transition) -> EditState:
        changed = transition.state != self._state or transition.commits
        if transition.commits:
            self._history.commit(transition.snapshot)
        self._state = transition.state
        if changed:
            self._notify_change()
        return self._state

    def _notify_change(self):
        if self._on_state_change:
            self._on_state_change(self)
