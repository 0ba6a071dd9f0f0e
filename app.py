"""
Main NiceGUI application for DotMap.

Renders the diagram as SVG inside ui.interactive_image, routes mouse and
keyboard events to the EditController, and rebuilds the toolbar and side
panels after every state change. All diagram logic lives in dotmap.*; this
file is layout only.
"""

import logging
import sys

from dotenv import load_dotenv
from nicegui import ui

from dotmap.paths import get_env_path

load_dotenv(get_env_path())

from dotmap.config import get_settings
from dotmap.edit import EditController
from dotmap.edit.handlers import CANVAS_EVENTS, setup_edit_handlers
from dotmap.svg_builder import build_svg, canvas_size
from dotmap.ui_components import (
    render_connections,
    render_direction_control,
    render_instructions,
    render_statistics,
    render_toolbar,
)

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger('dotmap.app')

# Reports the canvas column width on load and on window resize
RESIZE_JS = '''
<script>
window.addEventListener('resize', () => {
    const el = document.querySelector('.dotmap-canvas');
    if (el) emitEvent('canvas_resize', el.clientWidth);
});
</script>
'''


# UI Construction - encapsulated in page function so every browser tab gets its own diagram
@ui.page('/')
async def main_page():
    ui.add_body_html(RESIZE_JS)
    ui.query('body').classes('bg-gray-50')

    controller = EditController.from_settings(settings)
    logger.info(f"New editor session (history limit {settings.history_limit})")
    handlers = setup_edit_handlers(controller)
    state = {'size': canvas_size(None, settings.canvas_height, settings.min_canvas_width)}

    @ui.refreshable
    def toolbar():
        render_toolbar(controller, handlers)

    @ui.refreshable
    def side_panel():
        render_instructions(controller.mode)
        render_direction_control(controller)
        render_connections(controller)
        render_statistics(controller.current_snapshot())

    def redraw_canvas():
        gesture = controller.active_gesture()
        canvas.content = build_svg(
            controller.current_snapshot(),
            size=state['size'],
            dragging_id=gesture.dot_id if gesture else None,
            connection_start=controller.connection_start(),
        )

    def on_state_change(_controller):
        redraw_canvas()
        # Mid-drag updates only touch the canvas; panels catch up on release
        if controller.active_gesture() is None:
            toolbar.refresh()
            side_panel.refresh()

    def resize_canvas(width):
        try:
            new_size = canvas_size(float(width), settings.canvas_height, settings.min_canvas_width)
        except (TypeError, ValueError):
            return
        if new_size == state['size']:
            return
        state['size'] = new_size
        canvas.props['size'] = list(new_size)
        canvas.update()
        redraw_canvas()

    with ui.column().classes('w-full gap-4 p-4'):
        toolbar()
        with ui.row().classes('w-full gap-4 no-wrap items-start'):
            with ui.column().classes('dotmap-canvas grow'):
                canvas = ui.interactive_image(
                    size=state['size'],
                    on_mouse=handlers['handle_mouse'],
                    events=CANVAS_EVENTS,
                    cross=False,
                ).classes('border border-gray-200 bg-white rounded-lg shadow-sm cursor-crosshair')
            with ui.column().classes('w-64 gap-4'):
                side_panel()

    controller.set_on_state_change(on_state_change)
    ui.keyboard(on_key=handlers['handle_keyboard'])
    ui.on('canvas_resize', lambda e: resize_canvas(e.args))
    redraw_canvas()

    await ui.context.client.connected()
    width = await ui.run_javascript("return document.querySelector('.dotmap-canvas').clientWidth")
    resize_canvas(width)


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title='DotMap',
        port=8082,
        reload=not getattr(sys, 'frozen', False),
    )
