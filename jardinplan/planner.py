"""Gantt view of the tasks of one project phase."""

from __future__ import annotations

from datetime import date

from jardinplan.calendar import (
    KIND_BAR,
    ROW_HEIGHT,
    CalendarLayout,
    SceneItem,
    ShapeKind,
    bar_dates,
    bar_item,
    build_calendar,
    link_polyline,
    today_marker,
    year_parameters,
)
from jardinplan.positions import RowIndex
from jardinplan.tasks import Task, TaskStore

DAY_OFFSET = 8
"""Column of 1 January on the chart (one week of the previous year comes first)."""

PROGRESS_COLOUR = "blue"


def _days(start: date | None, end: date | None) -> int:
    if start is None or end is None:
        return 0
    return (end - start).days


class Planner:
    """Tasks of the selected phase laid out as bars on a yearly chart."""

    def __init__(self, store: TaskStore, year: int, today: date) -> None:
        self.store = store
        self.year = year
        self.today = today
        names = store.phase_names()
        self.phase = names[0] if names else ""
        self.positions = RowIndex()
        self.layout: CalendarLayout
        self._rows: list[Task] = []
        self._refresh()

    @property
    def height(self) -> int:
        """Height of the chart: one row per displayed task."""
        return len(self._rows) * ROW_HEIGHT

    def _refresh(self) -> None:
        day, bis = year_parameters(self.year)
        self.layout = build_calendar(day, bis, self.year, self.today)
        parent = self.store.phase_parent_of(self.phase)
        if parent is None:
            self._rows = []
        else:
            self._rows = [task for root in self.store.tree(parent) for task in root.walk()]
        self.positions.clear()
        if self._rows:
            for row, task in enumerate(self._rows[1:], start=1):
                self.positions.add(row, task.id)
            self.positions.add(len(self._rows), 0)

    def set_year(self, year: int) -> None:
        """Show the chart of another year."""
        self.year = year
        self._refresh()

    def select_phase(self, designation: str) -> None:
        """Show the tasks of the phase named ``designation``."""
        self.phase = designation
        self._refresh()

    def rows(self) -> list[Task]:
        """Return the displayed tasks in chart order, the tree fully expanded."""
        return list(self._rows)

    def bars(self) -> list[SceneItem]:
        """Return the bar of every displayed task, followed by its progress bar."""
        jan_first = date(self.year, 1, 1)
        items: list[SceneItem] = []
        for position, task in enumerate(self._rows):
            start_day = _days(jan_first, task.start)
            duration = _days(jan_first, task.end) - start_day
            progress_days = (duration + 1) * task.progress / 100
            colour, shape = self.store.type_style(task.type)
            column = DAY_OFFSET + start_day
            items.append(bar_item(task.id, " ", position + 1, column,
                                  duration + 1, shape, colour))
            if progress_days > 0:
                items.append(bar_item(task.id, " ", position + 1, column,
                                      int(progress_days), ShapeKind.PROGRESS,
                                      PROGRESS_COLOUR))
        return items

    def links(self) -> list[tuple[tuple[int, int], ...]]:
        """Return the polylines joining date-constrained tasks to their predecessor."""
        jan_first = date(self.year, 1, 1)
        polylines: list[tuple[tuple[int, int], ...]] = []
        for row in range(1, len(self.positions)):
            task_id = self.positions.id_at(row)
            try:
                task = self.store.get(task_id)
            except KeyError:
                continue
            if not task.date_constraint:
                continue
            try:
                previous_end = self.store.get(task.previous).end
            except KeyError:
                previous_end = None
            start_day = _days(jan_first, task.start)
            previous_day = _days(jan_first, previous_end)
            previous_row = self.positions.row_of(task.previous)
            polylines.append(link_polyline(
                previous_row + 1, DAY_OFFSET + previous_day,
                row + 1, DAY_OFFSET + start_day - 1,
            ))
        return polylines

    def scene(self) -> list[SceneItem]:
        """Return grid cells, the marker of today and the task bars."""
        items = list(self.layout.cells(self.height))
        items.append(today_marker(self.year, self.today, self.height))
        items.extend(self.bars())
        return items

    def select_bar(self, item: SceneItem) -> tuple[int, date, date, int]:
        """Return task id, start, end and length in days read from a bar."""
        if item.kind != KIND_BAR:
            raise ValueError(f"not a task bar: {item.kind}")
        start, end, days = bar_dates(item.x, item.width, self.year)
        return item.item_id, start, end, days