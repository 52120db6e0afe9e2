"""Geometry of the yearly planning chart: grid, calendar headers, bars and links."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import IntEnum
from typing import Iterator

SPACE_CASE = 14
"""Width in scene units of one day column (half the height of one row)."""

ROW_HEIGHT = SPACE_CASE * 2
SCENE_WIDTH = 5205
HEADER_WIDTH = 5320
HEADER_HEIGHT = 100
DEFAULT_SCENE_HEIGHT = 800

WEEK_WIDTH = SPACE_CASE * 7
WEEK_HEIGHT = 35
WEEK_TOP = 20
DAY_TOP = 37
MONTH_HEIGHT = 20
MONTH_DAY_TOP = WEEK_HEIGHT + SPACE_CASE

KIND_CELL = "cell"
KIND_WEEK = "week"
KIND_DAY = "day"
KIND_MONTH = "month"
KIND_MARKER = "marker"
KIND_BAR = "bar"

WEEKDAY_LETTERS = ("L", "M", "M.", "J", "V", "S", "D")
MONTH_NAMES = (
    "Janvier", "Février", "Mars", "Avril", "Mai", "Juin", "Juillet",
    "Aout", "Septembre", "Octobre", "Novembre", "Décembre", "Janvier",
)
MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31, 31)


class ShapeKind(IntEnum):
    """Task shapes that are drawn differently from a plain bar."""

    TRIANGLE = 5
    PHASE = 6
    PROGRESS = 7
    DIAMOND = 8


@dataclass(frozen=True)
class SceneItem:
    """One drawable item, positioned by its centre."""

    kind: str
    x: float
    y: float
    width: float
    height: float
    colour: str
    pen_colour: str = "black"
    text: str = ""
    item_id: int = 0
    shape: int | None = None
    mode: int = 1
    line_width: int | None = None


@dataclass
class CalendarLayout:
    """Header labels of one planning year and the scroll offset for today."""

    year: int
    header: list[SceneItem] = field(default_factory=list)
    scroll: int = 0
    scene_width: int = SCENE_WIDTH

    def _of_kind(self, kind: str) -> list[SceneItem]:
        return [item for item in self.header if item.kind == kind]

    @property
    def weeks(self) -> list[SceneItem]:
        return self._of_kind(KIND_WEEK)

    @property
    def days(self) -> list[SceneItem]:
        return self._of_kind(KIND_DAY)

    @property
    def months(self) -> list[SceneItem]:
        return self._of_kind(KIND_MONTH)

    def cells(self, height: float) -> Iterator[SceneItem]:
        """Yield the background grid squares for a chart of the given height."""
        columns = math.ceil(self.scene_width / SPACE_CASE)
        rows = math.ceil(height / SPACE_CASE) if height > 0 else 0
        half = SPACE_CASE // 2
        for h in range(1, columns + 1):
            for v in range(1, rows + 1):
                yield SceneItem(
                    KIND_CELL, h * SPACE_CASE - half, v * SPACE_CASE - half,
                    SPACE_CASE, SPACE_CASE, "white", "blue",
                )


def year_parameters(year: int) -> tuple[int, int]:
    """Return the weekday of 1 January (Monday is 1) and the length of February."""
    first = date(year, 1, 1)
    february = (date(year, 3, 1) - date(year, 2, 1)).days
    return first.isoweekday(), february


def _week_label(text: str, column: float, colour: str) -> SceneItem:
    height = WEEK_HEIGHT - 14
    return SceneItem(
        KIND_WEEK, column - (WEEK_WIDTH / 2 + 4), WEEK_TOP + height / 2,
        WEEK_WIDTH, height, colour, text=text,
    )


def _day_label(text: str, column: float, line: float, colour: str) -> SceneItem:
    return SceneItem(
        KIND_DAY, column + SPACE_CASE / 2 - 3, line + SPACE_CASE / 2,
        SPACE_CASE, SPACE_CASE, colour, text=text,
    )


def _month_label(text: str, column: float, days: int, colour: str) -> SceneItem:
    width = days * SPACE_CASE
    return SceneItem(
        KIND_MONTH, column + (width / 2 - 3), MONTH_HEIGHT / 2,
        width, MONTH_HEIGHT, colour, text=text,
    )


def build_calendar(day: int, bis: int, year: int, today: date) -> CalendarLayout:
    """Lay out week, weekday and month labels for a year starting on ``day``.

    ``bis`` is the number of days in February of that year.
    """
    offset = (day - 1) * SPACE_CASE
    header: list[SceneItem] = []

    header.append(_week_label("semaine 52", WEEK_WIDTH + 4, "white"))
    header.extend(
        _day_label("", i * SPACE_CASE + 4, DAY_TOP, "lightgray") for i in range(7)
    )
    week_count = (HEADER_WIDTH - 100) / WEEK_WIDTH + 1
    decal = 101 - offset
    v = 2
    while v < week_count + 2:
        header.append(_week_label(f"semaine {v - 1}", v * WEEK_WIDTH - offset + 3, "white"))
        header.extend(
            _day_label(letter, decal + i * SPACE_CASE, DAY_TOP, "yellow")
            for i, letter in enumerate(WEEKDAY_LETTERS)
        )
        decal += WEEK_WIDTH
        v += 1

    lengths = list(MONTH_LENGTHS)
    if bis == 29:
        lengths[1] = 29

    header.append(_month_label("Decembre", 3, 8, "lightgray"))
    header.extend(
        _day_label(str(i + 1), (i - 24) * SPACE_CASE + 4, MONTH_DAY_TOP, "lightgray")
        for i in range(24, 31)
    )
    steps = HEADER_WIDTH / SPACE_CASE + 1
    waiting, skip, month, position = True, 1, 0, 100
    v = 1
    while v < steps:
        if v > 5:
            if not waiting:
                days = lengths[month]
                header.append(_month_label(MONTH_NAMES[month], position, days, "yellow"))
                header.extend(
                    _day_label(str(i + 1), position + i * SPACE_CASE + 1, MONTH_DAY_TOP, "yellow")
                    for i in range(days)
                )
                position += days * SPACE_CASE
                month = 0 if month == 12 else month + 1
                waiting, skip = True, 1
            elif skip < 7:
                skip += 1
            else:
                waiting = False
        v += 1

    elapsed = (today - date(year, 1, 1)).days
    scroll = (5200 // 365) * (elapsed - 20)
    return CalendarLayout(year=year, header=header, scroll=scroll)


def today_marker(year: int, today: date, height: float) -> SceneItem:
    """Return the thin red vertical line that marks ``today`` on the chart."""
    column = (today - date(year, 1, 1)).days * SPACE_CASE + 105
    return SceneItem(
        KIND_MARKER, column + 0.5, 1 + height / 2, 1, height, "red", "red",
    )


def bar_item(task_id: int, title: str, row: float, column: float, cells: float,
             shape: int, colour: str) -> SceneItem:
    """Return the bar of a task on chart row ``row`` starting at day ``column``."""
    line = math.ceil(row * ROW_HEIGHT)
    col = math.ceil((column - 1) * SPACE_CASE)
    if shape in (ShapeKind.PHASE, ShapeKind.PROGRESS):
        width, height = cells * SPACE_CASE, 4
        x = math.ceil(col + (width - 5) / 2)
        y = math.ceil(line - height / 2 - 1) - SPACE_CASE
        return SceneItem(KIND_BAR, x, y, width, height, colour, "blue", title,
                         task_id, shape, 1, 10)
    if shape in (ShapeKind.TRIANGLE, ShapeKind.DIAMOND):
        width, height = SPACE_CASE, ROW_HEIGHT
        x = math.ceil(col + (width - 5) / 2)
        y = math.ceil(line - height / 2 - 1)
        return SceneItem(KIND_BAR, x, y, width, height, colour, "blue", title,
                         task_id, shape, 3, 10)
    width, height = cells * SPACE_CASE, ROW_HEIGHT
    x = math.ceil(col + (width - 5) / 2)
    y = math.ceil(line - height / 2 - 1)
    return SceneItem(KIND_BAR, x, y, width, height, colour, "black", title,
                     task_id, shape, 2)


def link_polyline(row_origin: int, col_origin: int, row_dest: int,
                  col_dest: int) -> tuple[tuple[int, int], ...]:
    """Return the elbow polyline joining the end of one task to the start of another."""
    line_origin = int(row_origin) * ROW_HEIGHT
    x_origin = int(col_origin) * SPACE_CASE
    line_dest = int(row_dest) * ROW_HEIGHT
    x_dest = int(col_dest) * SPACE_CASE + SPACE_CASE // 2 - 2
    return (
        (x_origin, line_origin - SPACE_CASE),
        (x_dest, line_origin - SPACE_CASE),
        (x_dest, line_dest - ROW_HEIGHT),
    )


def bar_dates(x: float, width: float, year: int) -> tuple[date, date, int]:
    """Return start date, end date and length in days of a bar at ``x``."""
    days = int(width // SPACE_CASE)
    offset = int(x / SPACE_CASE - days // 2 - 7)
    start = date(year, 1, 1) + timedelta(days=offset)
    end = start + timedelta(days=days - 1)
    return start, end, days