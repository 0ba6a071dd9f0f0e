"""DotMap: directed dots, connections, and an undoable editing core."""
