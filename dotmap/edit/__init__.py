"""
Diagram editing system for DotMap.

This package provides the place / connect / adjust interaction model:
- EditState / Mode / DragState: immutable interaction state records
- EditActions: snapshot mutations (place, select, connect, direction, delete)
- transitions: pure event handlers returning (next state, snapshot to commit)
- EditController: history-backed facade the UI calls
- handlers: NiceGUI event handlers for app.py integration

Usage:
    from dotmap.edit import EditController, Mode
    from dotmap.edit.handlers import setup_edit_handlers
"""

from dotmap.edit.constants import (
    DOT_RADIUS,
    SELECTED_DOT_RADIUS,
    HIT_RADIUS,
    QUICK_ANGLES,
)
from dotmap.edit.state import DragState, EditState, Mode, Transition
from dotmap.edit.actions import EditActions
from dotmap.edit.transitions import EditOptions, find_dot_at
from dotmap.edit.controller import EditController

__all__ = [
    'EditController',
    'EditState',
    'EditActions',
    'EditOptions',
    'DragState',
    'Mode',
    'Transition',
    'find_dot_at',
    'DOT_RADIUS',
    'SELECTED_DOT_RADIUS',
    'HIT_RADIUS',
    'QUICK_ANGLES',
]
