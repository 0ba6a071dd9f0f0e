"""
Edit Actions Module for Diagram Editing

Produces new snapshots from the current one. Nothing here touches history or
interaction state: each method takes a Snapshot and returns a new Snapshot,
or None when the requested change does not apply (unknown id, duplicate edge,
no actual change). The controller decides whether to commit.
"""

import logging
import math
import uuid
from dataclasses import replace
from typing import Callable, Optional, Tuple

from dotmap.geometry import normalize_direction
from dotmap.models import CONNECTION_STYLES, Connection, Dot, Snapshot

logger = logging.getLogger(__name__)

_UNSET = object()


def new_id() -> str:
    return str(uuid.uuid4())


class EditActions:
    """
    Snapshot mutations for the three editing modes.

    Args:
        id_factory: Source of fresh, collision-free ids for dots and connections
    """

    def __init__(self, id_factory: Callable[[], str] = new_id):
        self.id_factory = id_factory

    def deselect_all(self, snapshot: Snapshot) -> Snapshot:
        dots = tuple(replace(d, selected=False) if d.selected else d for d in snapshot.dots)
        return replace(snapshot, dots=dots)

    def select_only(self, snapshot: Snapshot, dot_id: str) -> Optional[Snapshot]:
        """Select ``dot_id`` and deselect every other dot."""
        if snapshot.dot_by_id(dot_id) is None:
            return None
        dots = tuple(
            d if d.selected == (d.id == dot_id) else replace(d, selected=d.id == dot_id)
            for d in snapshot.dots
        )
        return replace(snapshot, dots=dots)

    def place_dot(self, snapshot: Snapshot, x: float, y: float) -> Tuple[Snapshot, Dot]:
        """
        Add a new selected dot at (x, y), pointing at 0 degrees.

        Returns:
            (new snapshot, created dot)
        """
        dot = Dot(id=self.id_factory(), x=float(x), y=float(y), direction=0, selected=True)
        cleared = self.deselect_all(snapshot)
        return replace(cleared, dots=cleared.dots + (dot,)), dot

    def connect(self, snapshot: Snapshot, source_id: str, target_id: str) -> Optional[Snapshot]:
        """
        Join two distinct existing dots and deselect everything.

        Returns None for a self-connection, a missing endpoint, or an edge that
        already exists in either direction.
        """
        if source_id == target_id:
            return None
        if snapshot.dot_by_id(source_id) is None or snapshot.dot_by_id(target_id) is None:
            return None
        if snapshot.has_connection(source_id, target_id):
            return None
        conn = Connection(id=self.id_factory(), source_id=source_id, target_id=target_id)
        cleared = self.deselect_all(snapshot)
        return replace(cleared, connections=cleared.connections + (conn,))

    def set_direction(self, snapshot: Snapshot, dot_id: str, degrees: float) -> Optional[Snapshot]:
        """Point a dot at ``degrees``, wrapped into [0, 359]."""
        if snapshot.dot_by_id(dot_id) is None:
            return None
        if isinstance(degrees, bool) or not isinstance(degrees, (int, float)) or not math.isfinite(degrees):
            return None
        direction = normalize_direction(degrees)
        dots = tuple(replace(d, direction=direction) if d.id == dot_id else d for d in snapshot.dots)
        return replace(snapshot, dots=dots)

    def delete_dot(self, snapshot: Snapshot, dot_id: str) -> Optional[Snapshot]:
        """Remove a dot together with every connection touching it."""
        if snapshot.dot_by_id(dot_id) is None:
            return None
        dots = tuple(d for d in snapshot.dots if d.id != dot_id)
        connections = tuple(c for c in snapshot.connections if not c.touches(dot_id))
        removed = len(snapshot.connections) - len(connections)
        if removed:
            logger.debug(f"Deleting dot {dot_id[:8]} cascades to {removed} connection(s)")
        return Snapshot(dots=dots, connections=connections)

    def clear(self) -> Snapshot:
        return Snapshot.empty()

    def update_dot(self, snapshot: Snapshot, dot_id: str,
                   label=_UNSET, color=_UNSET) -> Optional[Snapshot]:
        """Change display metadata of a dot. Pass None to clear a field."""
        dot = snapshot.dot_by_id(dot_id)
        if dot is None:
            return None
        changes = {}
        if label is not _UNSET and label != dot.label:
            changes['label'] = label
        if color is not _UNSET and color != dot.color:
            changes['color'] = color
        if not changes:
            return None
        dots = tuple(replace(d, **changes) if d.id == dot_id else d for d in snapshot.dots)
        return replace(snapshot, dots=dots)

    def update_connection(self, snapshot: Snapshot, connection_id: str,
                          label=_UNSET, style=_UNSET, color=_UNSET) -> Optional[Snapshot]:
        """Change display metadata of a connection. Unknown styles are rejected."""
        conn = snapshot.connection_by_id(connection_id)
        if conn is None:
            return None
        if style is not _UNSET and style not in CONNECTION_STYLES:
            logger.debug(f"Ignoring unknown connection style {style!r}")
            return None
        changes = {}
        if label is not _UNSET and label != conn.label:
            changes['label'] = label
        if style is not _UNSET and style != conn.style:
            changes['style'] = style
        if color is not _UNSET and color != conn.color:
            changes['color'] = color
        if not changes:
            return None
        connections = tuple(
            replace(c, **changes) if c.id == connection_id else c for c in snapshot.connections
        )
        return replace(snapshot, connections=connections)
