"""
Tests for the SVG canvas builder.

build_svg returns plain markup, so these tests look for the attributes the
canvas relies on: sizes, colours, arrow endpoints and drawing order.
"""

from dotmap.models import Connection, Dot, Snapshot
from dotmap.svg_builder import (
    DOT_COLOR,
    SELECTED_DOT_COLOR,
    build_svg,
    canvas_size,
)


def test_canvas_size_respects_minimum_width():
    assert canvas_size(1000) == (968, 500)
    assert canvas_size(200) == (300, 500)
    assert canvas_size(None, height=400, min_width=250) == (250, 400)


def test_empty_snapshot_draws_only_grid():
    svg = build_svg(Snapshot.empty(), size=(40, 40))
    assert svg.count('<line') == 4
    assert '<circle' not in svg


class TestDots:
    """Dot circles, direction arrows and labels."""

    def test_selected_dot_is_larger_and_orange(self):
        snapshot = Snapshot(dots=[Dot('a', 10, 10), Dot('b', 50, 50, selected=True)])
        svg = build_svg(snapshot, size=(0, 0))
        assert f'data-id="a" cx="10" cy="10" r="6" fill="{DOT_COLOR}"' in svg
        assert f'data-id="b" cx="50" cy="50" r="8" fill="{SELECTED_DOT_COLOR}"' in svg

    def test_custom_color_wins_over_selection(self):
        snapshot = Snapshot(dots=[Dot('a', 10, 10, selected=True, color='#22C55E')])
        assert 'r="8" fill="#22C55E"' in build_svg(snapshot, size=(0, 0))

    def test_direction_arrow_points_along_heading(self):
        svg = build_svg(Snapshot(dots=[Dot('a', 10, 10, direction=90)]), size=(0, 0))
        assert '<line class="direction" x1="10" y1="10" x2="10" y2="30"' in svg
        assert 'class="arrowhead" points="10,30 ' in svg

    def test_selected_or_dragged_dot_gets_longer_arrow(self):
        assert 'x2="40" y2="10"' in build_svg(Snapshot(dots=[Dot('a', 10, 10, selected=True)]), size=(0, 0))

        snapshot = Snapshot(dots=[Dot('a', 10, 10), Dot('b', 100, 10)])
        svg = build_svg(snapshot, size=(0, 0), dragging_id='b')
        assert 'x1="10" y1="10" x2="30" y2="10"' in svg
        assert 'x1="100" y1="10" x2="130" y2="10"' in svg

    def test_label_sits_above_dot(self):
        svg = build_svg(Snapshot(dots=[Dot('a', 10, 50, label='Home')]), size=(0, 0))
        assert '<text x="10" y="39"' in svg
        assert '>Home</text>' in svg


class TestConnections:
    """Connection lines, dash styles and pending-connection feedback."""

    def test_styles_and_labels(self):
        snapshot = Snapshot(
            dots=[Dot('a', 0, 0), Dot('b', 100, 0)],
            connections=[Connection('ab', 'a', 'b', label='A & B', style='dashed')],
        )
        svg = build_svg(snapshot, size=(0, 0))
        assert 'class="connection" data-id="ab"' in svg
        assert 'stroke-dasharray="5,5"' in svg
        assert '>A &amp; B</text>' in svg
        # Connections are drawn below dots
        assert svg.index('class="connection"') < svg.index('class="dot"')

    def test_pending_connection_start_gets_a_ring(self):
        snapshot = Snapshot(dots=[Dot('a', 0, 0), Dot('b', 100, 0)])
        svg = build_svg(snapshot, size=(0, 0), connection_start='b')
        assert svg.count('class="pending"') == 1
        assert 'class="pending" cx="100"' in svg
