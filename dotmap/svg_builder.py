"""
SVG builder for the DotMap canvas.

This module converts a diagram snapshot (plus the transient drag and pending
connection state) into SVG markup for ``ui.interactive_image(content=...)``,
including the background grid, connection styles and labels, and dot
direction arrows.
"""

from html import escape
from typing import List, Optional, Tuple

from dotmap.edit.constants import (
    ARROW_HEAD_LENGTH,
    CANVAS_HEIGHT,
    CANVAS_PADDING,
    DIRECTION_LENGTH,
    DOT_RADIUS,
    EMPHASIS_ARROW_HEAD_LENGTH,
    EMPHASIS_DIRECTION_LENGTH,
    GRID_SIZE,
    MIN_CANVAS_WIDTH,
    SELECTED_DOT_RADIUS,
)
from dotmap.geometry import arrowhead_points, direction_endpoint
from dotmap.models import Connection, Dot, Snapshot

GRID_COLOR = '#f0f0f0'
CONNECTION_COLOR = '#3B82F6'
CONNECTION_LABEL_COLOR = '#4B5563'
DIRECTION_COLOR = '#14B8A6'
DOT_COLOR = '#3B82F6'
SELECTED_DOT_COLOR = '#F97316'
PENDING_RING_COLOR = '#F97316'

DASH_PATTERNS = {
    'solid': None,
    'dashed': '5,5',
    'dotted': '2,2',
}


def canvas_size(container_width: Optional[float],
                height: int = CANVAS_HEIGHT,
                min_width: int = MIN_CANVAS_WIDTH) -> Tuple[int, int]:
    """Canvas fills the container minus padding, never narrower than ``min_width``."""
    width = int((container_width or 0) - CANVAS_PADDING)
    return max(width, min_width), height


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip('0').rstrip('.')


def _grid(width: int, height: int) -> List[str]:
    lines = []
    for x in range(0, width, GRID_SIZE):
        lines.append(f'<line x1="{x}" y1="0" x2="{x}" y2="{height}" stroke="{GRID_COLOR}" stroke-width="1" />')
    for y in range(0, height, GRID_SIZE):
        lines.append(f'<line x1="0" y1="{y}" x2="{width}" y2="{y}" stroke="{GRID_COLOR}" stroke-width="1" />')
    return lines


def _connection(conn: Connection, source: Dot, target: Dot) -> List[str]:
    color = escape(conn.color or CONNECTION_COLOR)
    dash = DASH_PATTERNS.get(conn.style)
    dash_attr = f' stroke-dasharray="{dash}"' if dash else ''
    parts = [
        f'<line class="connection" data-id="{escape(conn.id)}" '
        f'x1="{_fmt(source.x)}" y1="{_fmt(source.y)}" x2="{_fmt(target.x)}" y2="{_fmt(target.y)}" '
        f'stroke="{color}" stroke-width="2" stroke-linecap="round"{dash_attr} />'
    ]
    if conn.label:
        mid_x = (source.x + target.x) / 2
        mid_y = (source.y + target.y) / 2
        parts.append(
            f'<text x="{_fmt(mid_x)}" y="{_fmt(mid_y - 5)}" font-family="Arial" font-size="12" '
            f'fill="{CONNECTION_LABEL_COLOR}" text-anchor="middle">{escape(conn.label)}</text>'
        )
    return parts


def _dot(dot: Dot, is_dragged: bool, is_pending: bool) -> List[str]:
    emphasize = dot.selected or is_dragged
    length = EMPHASIS_DIRECTION_LENGTH if emphasize else DIRECTION_LENGTH
    head_length = EMPHASIS_ARROW_HEAD_LENGTH if emphasize else ARROW_HEAD_LENGTH

    end = direction_endpoint(dot.position, dot.direction, length)
    tip, left, right = arrowhead_points(dot.position, end, head_length)
    head = ' '.join(f"{_fmt(px)},{_fmt(py)}" for px, py in (tip, left, right))

    radius = SELECTED_DOT_RADIUS if dot.selected else DOT_RADIUS
    fill = dot.color or (SELECTED_DOT_COLOR if dot.selected else DOT_COLOR)

    parts = [
        f'<line class="direction" x1="{_fmt(dot.x)}" y1="{_fmt(dot.y)}" x2="{_fmt(end[0])}" y2="{_fmt(end[1])}" '
        f'stroke="{DIRECTION_COLOR}" stroke-width="2" stroke-linecap="round" />',
        f'<polygon class="arrowhead" points="{head}" fill="{DIRECTION_COLOR}" />',
    ]
    if is_pending:
        parts.append(
            f'<circle class="pending" cx="{_fmt(dot.x)}" cy="{_fmt(dot.y)}" r="{radius + 5}" fill="none" '
            f'stroke="{PENDING_RING_COLOR}" stroke-width="1.5" stroke-dasharray="3,3" />'
        )
    parts.append(
        f'<circle class="dot" data-id="{escape(dot.id)}" cx="{_fmt(dot.x)}" cy="{_fmt(dot.y)}" r="{radius}" '
        f'fill="{escape(fill)}" stroke="#fff" stroke-width="2" />'
    )
    if dot.label:
        parts.append(
            f'<text x="{_fmt(dot.x)}" y="{_fmt(dot.y - radius - 5)}" font-family="Arial" font-size="12" '
            f'fill="{CONNECTION_LABEL_COLOR}" text-anchor="middle">{escape(dot.label)}</text>'
        )
    return parts


def build_svg(
    snapshot: Snapshot,
    size: Tuple[int, int] = (MIN_CANVAS_WIDTH, CANVAS_HEIGHT),
    dragging_id: Optional[str] = None,
    connection_start: Optional[str] = None,
) -> str:
    """
    Build SVG content from a diagram snapshot.

    Args:
        snapshot: Diagram content to draw
        size: (width, height) of the canvas, used for the grid
        dragging_id: Dot whose direction is being dragged; its arrow is drawn longer
        connection_start: Dot id waiting for the second click in connect mode

    Returns:
        SVG fragment (no outer <svg> element) ready for interactive_image content
    """
    width, height = size
    dots_by_id = {dot.id: dot for dot in snapshot.dots}

    parts = _grid(width, height)

    for conn in snapshot.connections:
        source = dots_by_id.get(conn.source_id)
        target = dots_by_id.get(conn.target_id)
        if source and target:
            parts.extend(_connection(conn, source, target))

    for dot in snapshot.dots:
        parts.extend(_dot(dot, dot.id == dragging_id, dot.id == connection_start))

    return '\n'.join(parts)
