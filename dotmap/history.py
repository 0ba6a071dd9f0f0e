import logging
from typing import List, Optional

from dotmap.models import Snapshot, validate_snapshot

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


class HistoryManager:
    """
    Linear undo/redo timeline of diagram snapshots.

    ``snapshots[cursor]`` is always the visible state. Committing after an undo
    starts a new branch: everything past the cursor is dropped before the new
    snapshot is appended. The timeline holds at most ``limit`` snapshots; the
    oldest one is evicted first and the cursor moves with it.
    """

    def __init__(self, initial: Optional[Snapshot] = None,
                 limit: int = DEFAULT_HISTORY_LIMIT,
                 check_invariants: bool = __debug__):
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self._limit = limit
        self._check_invariants = check_invariants
        initial = initial if initial is not None else Snapshot.empty()
        if self._check_invariants:
            validate_snapshot(initial)
        self._snapshots: List[Snapshot] = [initial]
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def snapshots(self) -> tuple:
        return tuple(self._snapshots)

    def current(self) -> Snapshot:
        return self._snapshots[self._cursor]

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    def commit(self, new_state: Snapshot) -> None:
        """Append ``new_state`` after the cursor, discarding any redo branch."""
        if self._check_invariants:
            validate_snapshot(new_state)

        dropped = len(self._snapshots) - (self._cursor + 1)
        del self._snapshots[self._cursor + 1:]
        self._snapshots.append(new_state)
        self._cursor = len(self._snapshots) - 1

        if len(self._snapshots) > self._limit:
            del self._snapshots[0]
            self._cursor -= 1
            logger.debug("History full, evicted oldest snapshot")

        if dropped:
            logger.debug(f"Commit discarded {dropped} redo snapshot(s)")
        logger.debug(f"Committed snapshot {self._cursor + 1}/{len(self._snapshots)}")

    def undo(self) -> bool:
        """Step back one snapshot. Returns False when already at the oldest."""
        if self._cursor > 0:
            self._cursor -= 1
            logger.debug(f"Undo to snapshot {self._cursor + 1}/{len(self._snapshots)}")
            return True
        return False

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False when already at the newest."""
        if self._cursor < len(self._snapshots) - 1:
            self._cursor += 1
            logger.debug(f"Redo to snapshot {self._cursor + 1}/{len(self._snapshots)}")
            return True
        return False

    def reset(self, initial: Optional[Snapshot] = None) -> None:
        """Replace the whole timeline with a single snapshot."""
        initial = initial if initial is not None else Snapshot.empty()
        if self._check_invariants:
            validate_snapshot(initial)
        self._snapshots = [initial]
        self._cursor = 0
