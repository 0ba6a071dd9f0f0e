"""
Interaction state records.

The controller never mutates these: each event produces a new EditState,
the same way the hover/drag state is rebuilt on every mouse event.
None of this is ever stored in the undo history.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from dotmap.models import Snapshot


class Mode(str, Enum):
    """How pointer input on the canvas is interpreted."""
    PLACE = 'place'
    CONNECT = 'connect'
    ADJUST = 'adjust'


@dataclass(frozen=True)
class DragState:
    """A direction drag in progress on one dot."""
    dot_id: str
    origin: Tuple[float, float]
    pointer: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class EditState:
    """Immutable snapshot of the current interaction state."""
    mode: Mode = Mode.PLACE
    connection_start: Optional[str] = None
    drag: Optional[DragState] = None

    @property
    def is_dragging(self) -> bool:
        return self.drag is not None

    def reset_gesture(self) -> 'EditState':
        return EditState(mode=self.mode)


@dataclass(frozen=True)
class Transition:
    """Result of handling one event: the next state, plus a snapshot to commit or None."""
    state: EditState
    snapshot: Optional[Snapshot] = None

    @property
    def commits(self) -> bool:
        return self.snapshot is not None
