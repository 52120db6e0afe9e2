"""Mapping between chart rows and the task shown on each row."""

from __future__ import annotations


class RowIndex:
    """Ordered list of (row, task id) pairs; later entries win on lookup."""

    def __init__(self) -> None:
        self._pairs: list[tuple[int, int]] = []

    def add(self, row: int, task_id: int) -> None:
        """Record that ``task_id`` is shown on ``row``."""
        self._pairs.append((row, task_id))

    def row_of(self, task_id: int) -> int:
        """Return the row of ``task_id``, or 0 when it is not shown."""
        return next((row for row, tid in reversed(self._pairs) if tid == task_id), 0)

    def id_at(self, row: int) -> int:
        """Return the task id on ``row``, or 0 when the row is empty."""
        return next((tid for r, tid in reversed(self._pairs) if r == row), 0)

    def clear(self) -> None:
        """Forget every recorded row."""
        self._pairs.clear()

    def __len__(self) -> int:
        return len(self._pairs)