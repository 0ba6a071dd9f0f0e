"""
Shared constants for the editing system.

These values are used by both hit-testing (edit controller) and the SVG
renderer. Keep them in sync!
"""

# Dot radii in pixels
DOT_RADIUS = 6
SELECTED_DOT_RADIUS = 8

# A pointer hits a dot within the selected-dot radius
HIT_RADIUS = float(SELECTED_DOT_RADIUS)

# Direction indicator lengths in pixels (longer for the selected or dragged dot)
DIRECTION_LENGTH = 20
EMPHASIS_DIRECTION_LENGTH = 30
ARROW_HEAD_LENGTH = 10
EMPHASIS_ARROW_HEAD_LENGTH = 12

# Quick-angle buttons in the direction control
QUICK_ANGLES = (0, 90, 180, 270)

# Canvas sizing
CANVAS_HEIGHT = 500
MIN_CANVAS_WIDTH = 300
CANVAS_PADDING = 32
GRID_SIZE = 20
