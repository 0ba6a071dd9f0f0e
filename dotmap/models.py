"""
Diagram data model for DotMap.

A Snapshot is the full diagram content at one point in time: a tuple of dots
and a tuple of connections. Dots, connections and snapshots are frozen
dataclasses, so a snapshot can be shared freely between the history timeline
and the renderer without anyone editing it in place. Every change goes through
``dataclasses.replace`` (or the helpers in ``dotmap.edit.actions``) and yields
a new snapshot.

Dict format (used by the presentation layer and by any external persistence):
{
  "dots": [{"id": "...", "x": 10.0, "y": 10.0, "direction": 0,
            "selected": true, "label": null, "color": null}],
  "connections": [{"id": "...", "sourceId": "...", "targetId": "...",
                   "label": null, "style": "solid", "color": null}]
}
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Literal, Optional, Tuple

logger = logging.getLogger(__name__)

ConnectionStyle = Literal['solid', 'dashed', 'dotted']
CONNECTION_STYLES = ('solid', 'dashed', 'dotted')


class SnapshotInvariantError(AssertionError):
    """A snapshot breaks a structural invariant. Always a programming error."""


@dataclass(frozen=True)
class Dot:
    """A positioned, directed point."""
    id: str
    x: float
    y: float
    direction: int = 0
    selected: bool = False
    label: Optional[str] = None
    color: Optional[str] = None

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'direction': self.direction,
            'selected': self.selected,
            'label': self.label,
            'color': self.color,
        }


@dataclass(frozen=True)
class Connection:
    """An undirected edge between two dots."""
    id: str
    source_id: str
    target_id: str
    label: Optional[str] = None
    style: ConnectionStyle = 'solid'
    color: Optional[str] = None

    @property
    def pair(self) -> FrozenSet[str]:
        """Unordered endpoint pair; two connections are the same edge iff pairs match."""
        return frozenset((self.source_id, self.target_id))

    def touches(self, dot_id: str) -> bool:
        return self.source_id == dot_id or self.target_id == dot_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'sourceId': self.source_id,
            'targetId': self.target_id,
            'label': self.label,
            'style': self.style,
            'color': self.color,
        }


@dataclass(frozen=True)
class Snapshot:
    """Immutable diagram content."""
    dots: Tuple[Dot, ...] = field(default_factory=tuple)
    connections: Tuple[Connection, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any iterable but always store tuples
        object.__setattr__(self, 'dots', tuple(self.dots))
        object.__setattr__(self, 'connections', tuple(self.connections))

    @classmethod
    def empty(cls) -> 'Snapshot':
        return cls()

    def dot_by_id(self, dot_id: Optional[str]) -> Optional[Dot]:
        if dot_id is None:
            return None
        for dot in self.dots:
            if dot.id == dot_id:
                return dot
        return None

    def connection_by_id(self, connection_id: Optional[str]) -> Optional[Connection]:
        if connection_id is None:
            return None
        for conn in self.connections:
            if conn.id == connection_id:
                return conn
        return None

    def selected_dot(self) -> Optional[Dot]:
        for dot in self.dots:
            if dot.selected:
                return dot
        return None

    def has_connection(self, a: str, b: str) -> bool:
        """True when an edge joins ``a`` and ``b`` in either direction."""
        pair = frozenset((a, b))
        return any(conn.pair == pair for conn in self.connections)

    def connections_of(self, dot_id: str) -> Tuple[Connection, ...]:
        return tuple(conn for conn in self.connections if conn.touches(dot_id))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dots': [dot.to_dict() for dot in self.dots],
            'connections': [conn.to_dict() for conn in self.connections],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Snapshot':
        """
        Build a snapshot from the dict format above.

        Raises:
            ValueError: if a required key is missing or a value has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError("Snapshot data must be a dict")
        try:
            dots = tuple(_dot_from_dict(d) for d in data.get('dots', []))
            connections = tuple(_connection_from_dict(c) for c in data.get('connections', []))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed snapshot data: {e}") from e
        return cls(dots=dots, connections=connections)


def _dot_from_dict(data: Dict[str, Any]) -> Dot:
    direction = data.get('direction', 0)
    if isinstance(direction, bool) or not isinstance(direction, (int, float)):
        raise TypeError(f"direction must be a number, got {direction!r}")
    return Dot(
        id=str(data['id']),
        x=float(data['x']),
        y=float(data['y']),
        direction=int(direction),
        selected=bool(data.get('selected', False)),
        label=data.get('label'),
        color=data.get('color'),
    )


def _connection_from_dict(data: Dict[str, Any]) -> Connection:
    style = data.get('style') or 'solid'
    if style not in CONNECTION_STYLES:
        raise TypeError(f"unknown connection style {style!r}")
    return Connection(
        id=str(data['id']),
        source_id=str(data['sourceId']),
        target_id=str(data['targetId']),
        label=data.get('label'),
        style=style,
        color=data.get('color'),
    )


def _duplicates(values: Iterable) -> list:
    seen = set()
    dupes = []
    for value in values:
        if value in seen:
            dupes.append(value)
        seen.add(value)
    return dupes


def validate_snapshot(snapshot: Snapshot) -> None:
    """
    Check the structural invariants of a snapshot.

    Raises:
        SnapshotInvariantError: on the first violated invariant
    """
    dot_ids = [dot.id for dot in snapshot.dots]
    dupes = _duplicates(dot_ids)
    if dupes:
        raise SnapshotInvariantError(f"Duplicate dot ids: {dupes}")

    selected = [dot.id for dot in snapshot.dots if dot.selected]
    if len(selected) > 1:
        raise SnapshotInvariantError(f"More than one selected dot: {selected}")

    for dot in snapshot.dots:
        if isinstance(dot.direction, bool) or not isinstance(dot.direction, int) or not 0 <= dot.direction <= 359:
            raise SnapshotInvariantError(f"Dot {dot.id} has direction {dot.direction!r} outside [0, 359]")

    dupes = _duplicates(conn.id for conn in snapshot.connections)
    if dupes:
        raise SnapshotInvariantError(f"Duplicate connection ids: {dupes}")

    known = set(dot_ids)
    pairs = set()
    for conn in snapshot.connections:
        if conn.source_id == conn.target_id:
            raise SnapshotInvariantError(f"Connection {conn.id} joins dot {conn.source_id} to itself")
        missing = [end for end in (conn.source_id, conn.target_id) if end not in known]
        if missing:
            raise SnapshotInvariantError(f"Connection {conn.id} references missing dots: {missing}")
        if conn.pair in pairs:
            raise SnapshotInvariantError(
                f"Connection {conn.id} duplicates edge {conn.source_id} - {conn.target_id}"
            )
        pairs.add(conn.pair)
