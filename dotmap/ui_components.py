"""
UI Components for DotMap - NiceGUI panels around the canvas.

Public functions:
- render_toolbar(controller, handlers) -> mode, history and delete buttons
- render_instructions(mode) -> per-mode hint card
- render_direction_control(controller) -> slider, quick angles and label for the selected dot
- render_connections(controller) -> style and label of each connection on the selected dot
- render_statistics(snapshot) -> dot / connection / group counts

Every renderer reads the controller at call time; app.py wraps them in
ui.refreshable and refreshes after each state change.
"""

from nicegui import ui
from typing import Callable, Dict

from dotmap.edit.constants import QUICK_ANGLES
from dotmap.edit.controller import EditController
from dotmap.edit.state import Mode
from dotmap.graph_stats import diagram_stats, neighbors
from dotmap.models import CONNECTION_STYLES, Snapshot

MODE_BUTTONS = [
    (Mode.PLACE, 'place', 'Place Dots'),
    (Mode.CONNECT, 'link', 'Connect Dots'),
    (Mode.ADJUST, 'open_with', 'Adjust Dot Direction'),
]

MODE_INSTRUCTIONS = {
    Mode.PLACE: 'Click anywhere on the map to place a new dot.',
    Mode.CONNECT: 'Click on a dot to start a connection, then click on another dot to connect them.',
    Mode.ADJUST: 'Click and drag from a dot to adjust its direction, or use the controls below.',
}

CARD_CLASSES = 'w-full p-4 bg-white border border-gray-200 shadow-sm'


def render_toolbar(controller: EditController, handlers: Dict[str, Callable]):
    """Mode switch, undo/redo and delete buttons. Disabled states follow the controller."""
    with ui.card().classes('w-full p-2 border border-gray-200 shadow-sm'):
        with ui.row().classes('items-center gap-4'):
            with ui.row().classes('items-center gap-1 border-r pr-4'):
                ui.label('Mode:').classes('text-xs text-gray-400 mr-1')
                for mode, icon, tooltip in MODE_BUTTONS:
                    active = controller.mode is mode
                    ui.button(icon=icon, on_click=lambda _, m=mode: controller.set_mode(m)) \
                        .props(f'flat dense color={"primary" if active else "grey"}') \
                        .tooltip(tooltip)

            with ui.row().classes('items-center gap-1 border-r pr-4'):
                ui.label('History:').classes('text-xs text-gray-400 mr-1')
                undo_btn = ui.button(icon='undo', on_click=handlers['handle_undo']).props('flat dense').tooltip('Undo')
                redo_btn = ui.button(icon='redo', on_click=handlers['handle_redo']).props('flat dense').tooltip('Redo')
                undo_btn.set_enabled(controller.can_undo())
                redo_btn.set_enabled(controller.can_redo())

            with ui.row().classes('items-center gap-1'):
                ui.label('Delete:').classes('text-xs text-gray-400 mr-1')
                delete_btn = ui.button(icon='delete', on_click=handlers['handle_delete_selected']) \
                    .props('flat dense color=red').tooltip('Delete Selected')
                delete_btn.set_enabled(controller.selected_dot() is not None)
                ui.button(icon='delete_sweep', on_click=handlers['handle_clear_all']) \
                    .props('outline dense color=red').tooltip('Clear All')


def render_instructions(mode: Mode):
    with ui.card().classes(CARD_CLASSES):
        ui.label('Instructions').classes('text-sm font-medium text-gray-700')
        ui.label(MODE_INSTRUCTIONS[mode]).classes('text-sm text-gray-600')


def render_direction_control(controller: EditController):
    """Direction slider and quick angles for the selected dot. Renders nothing without a selection."""
    dot = controller.selected_dot()
    if dot is None:
        return

    dot_id = dot.id
    with ui.card().classes(CARD_CLASSES):
        with ui.row().classes('items-center gap-2'):
            ui.icon('rotate_right', size='xs')
            ui.label('Direction').classes('text-sm font-medium text-gray-700')

        with ui.row().classes('w-full items-center gap-3 no-wrap'):
            # Commit on release; the panel is rebuilt after every commit
            ui.slider(min=0, max=359, step=1, value=dot.direction).classes('w-full') \
                .on('change', lambda e: controller.set_direction(dot_id, e.args))
            ui.label(f'{dot.direction}°').classes('text-sm font-medium w-10 text-right')

        with ui.row().classes('w-full gap-1'):
            for angle in QUICK_ANGLES:
                active = dot.direction == angle
                ui.button(f'{angle}°', on_click=lambda _, a=angle: controller.set_direction(dot_id, a)) \
                    .props(f'dense unelevated size=sm color={"primary" if active else "grey-3"}'
                           f'{"" if active else " text-color=grey-8"}')

        ui.input(
            'Label', value=dot.label or '',
        ).props('dense outlined').classes('w-full mt-2').on(
            'blur', lambda e: controller.update_dot(dot_id, label=(e.sender.value or '').strip() or None)
        )


def statistics_rows(snapshot: Snapshot):
    stats = diagram_stats(snapshot)
    return [
        ('Dots:', stats['dots']),
        ('Connections:', stats['connections']),
        ('Groups:', stats['groups']),
        ('Isolated:', stats['isolated']),
        ('Most links:', stats['max_degree']),
    ]


def render_statistics(snapshot: Snapshot):
    rows = statistics_rows(snapshot)
    with ui.card().classes(CARD_CLASSES):
        ui.label('Statistics').classes('text-sm font-medium text-gray-700')
        with ui.grid(columns=2).classes('gap-2 text-sm'):
            for name, value in rows:
                ui.label(name).classes('text-gray-600')
                ui.label(str(value)).classes('font-medium')


def connection_rows(snapshot: Snapshot, dot_id: str):
    """(connection, name of the dot at the other end) for every connection on ``dot_id``."""
    rows = []
    for conn in snapshot.connections_of(dot_id):
        other = snapshot.dot_by_id(conn.target_id if conn.source_id == dot_id else conn.source_id)
        rows.append((conn, other.label or other.id[:8]))
    return rows


def render_connections(controller: EditController):
    """Connections of the selected dot, each with a style picker and label."""
    dot = controller.selected_dot()
    if dot is None:
        return
    snapshot = controller.current_snapshot()
    rows = connection_rows(snapshot, dot.id)
    if not rows:
        return

    with ui.card().classes(CARD_CLASSES):
        with ui.row().classes('items-center gap-2'):
            ui.icon('link', size='xs')
            ui.label(f'Connected to {len(neighbors(snapshot, dot.id))} dot(s)').classes('text-sm font-medium text-gray-700')

        for conn, name in rows:
            with ui.column().classes('w-full gap-1'):
                ui.label(f'→ {name}').classes('text-xs text-gray-500')
                with ui.row().classes('w-full items-center gap-2 no-wrap'):
                    ui.select(
                        list(CONNECTION_STYLES), value=conn.style,
                        on_change=lambda e, cid=conn.id: controller.update_connection(cid, style=e.value),
                    ).props('dense outlined').classes('w-28')
                    ui.input('Label', value=conn.label or '').props('dense outlined').classes('grow').on(
                        'blur',
                        lambda e, cid=conn.id: controller.update_connection(
                            cid, label=(e.sender.value or '').strip() or None
                        ),
                    )
