"""
Edit Handlers - Event handlers for the canvas in app.py

This module extracts the mouse and keyboard handling from app.py so the
main application file stays focused on layout. Handlers only translate
NiceGUI events into EditController calls; the controller's state-change
callback takes care of redrawing.
"""

from nicegui import ui
from typing import Any, Callable, Dict, Optional, Tuple

from dotmap.edit.controller import EditController
from dotmap.edit.state import Mode

CANVAS_EVENTS = ['click', 'mousedown', 'mousemove', 'mouseup', 'mouseleave']

MODE_KEYS = {'1': Mode.PLACE, '2': Mode.CONNECT, '3': Mode.ADJUST}


def event_position(event: Any) -> Optional[Tuple[float, float]]:
    """Extract canvas coordinates from a NiceGUI mouse event or a raw payload."""
    x = getattr(event, 'image_x', None)
    y = getattr(event, 'image_y', None)
    if x is None or y is None:
        raw = event.args if hasattr(event, 'args') else event
        if isinstance(raw, dict):
            x = raw.get('image_x', raw.get('offsetX', raw.get('x')))
            y = raw.get('image_y', raw.get('offsetY', raw.get('y')))
        elif isinstance(raw, (list, tuple)) and len(raw) >= 2:
            x, y = raw[0], raw[1]
    if x is None or y is None:
        return None
    try:
        return float(x), float(y)
    except (TypeError, ValueError):
        return None


def _key_name(event: Any) -> str:
    key = getattr(event, 'key', '')
    return str(getattr(key, 'name', key))


def setup_edit_handlers(
    controller: EditController,
    notify: Optional[Callable[..., Any]] = None,
) -> Dict[str, Callable]:
    """
    Set up the canvas and keyboard event handlers.

    Args:
        controller: EditController instance driving the diagram
        notify: Toast function, defaults to ui.notify

    Returns:
        Dict with handler functions for binding to UI events
    """
    notify = notify or ui.notify
    # Set when a mouseup ends a drag that moved; the browser's trailing click is swallowed
    pending = {'drag_release': False}

    def handle_mouse(event):
        """Route one interactive_image mouse event to the controller."""
        kind = getattr(event, 'type', None)

        if kind == 'mouseup':
            gesture = controller.active_gesture()
            pending['drag_release'] = gesture is not None and gesture.pointer is not None
            controller.pointer_up()
            return
        if kind == 'mouseleave':
            pending['drag_release'] = False
            controller.pointer_leave()
            return

        pos = event_position(event)
        if pos is None:
            return
        x, y = pos

        if kind == 'click':
            if pending['drag_release']:
                pending['drag_release'] = False
                return
            controller.click(x, y)
        elif kind == 'mousedown':
            pending['drag_release'] = False
            # Only the primary button starts a drag
            if getattr(event, 'button', 0) == 0:
                controller.pointer_down(x, y)
        elif kind == 'mousemove':
            controller.pointer_move(x, y)

    def handle_keyboard(event):
        """Undo/redo, delete, escape and mode shortcuts."""
        action = getattr(event, 'action', None)
        if action is None or not getattr(action, 'keydown', False):
            return
        if getattr(action, 'repeat', False):
            return

        key = _key_name(event)
        modifiers = getattr(event, 'modifiers', None)
        ctrl = bool(modifiers and (getattr(modifiers, 'ctrl', False) or getattr(modifiers, 'meta', False)))
        shift = bool(modifiers and getattr(modifiers, 'shift', False))

        if ctrl and key.lower() == 'z':
            if shift:
                handle_redo()
            else:
                handle_undo()
        elif ctrl and key.lower() == 'y':
            handle_redo()
        elif key in ('Delete', 'Backspace'):
            handle_delete_selected()
        elif key == 'Escape':
            controller.cancel_gesture()
        elif not ctrl and key in MODE_KEYS:
            controller.set_mode(MODE_KEYS[key])

    def handle_undo():
        if controller.can_undo():
            controller.undo()

    def handle_redo():
        if controller.can_redo():
            controller.redo()

    def handle_delete_selected():
        if controller.selected_dot() is None:
            return
        controller.delete_selected()
        notify('Dot deleted', position='bottom', timeout=800)

    def handle_clear_all():
        controller.clear_all()
        notify('Diagram cleared', position='bottom', timeout=800)

    return {
        'handle_mouse': handle_mouse,
        'handle_keyboard': handle_keyboard,
        'handle_undo': handle_undo,
        'handle_redo': handle_redo,
        'handle_delete_selected': handle_delete_selected,
        'handle_clear_all': handle_clear_all,
    }
