"""Yearly chart of the crops grown on one parcel of the garden."""

from __future__ import annotations

import dataclasses
from datetime import date, timedelta

from jardinplan.calendar import (
    KIND_BAR,
    ROW_HEIGHT,
    SPACE_CASE,
    CalendarLayout,
    SceneItem,
    bar_item,
    build_calendar,
    today_marker,
    year_parameters,
)
from jardinplan.cultures import Culture, CultureStore

DAY_OFFSET = 8
"""Column of 1 January on the chart (one week of the previous year comes first)."""

CULTURE_SHAPE = 1
"""Shape used for crop bars: a plain rectangle."""

FIXED_MODE = 1
"""Crop bars cannot be dragged on the chart."""


class CulturePlanning:
    """Crops of the selected parcel laid out as bars on a yearly chart.

    The first row of the chart holds the parcel itself; each crop that starts
    or ends in the shown year follows on its own row.
    """

    def __init__(self, store: CultureStore, parcel_id: int, year: int, today: date) -> None:
        self.store = store
        self.year = year
        self.today = today
        name = store.parcel_name(parcel_id)
        if name:
            self.parcel = name
        else:
            names = store.parcel_names()
            self.parcel = names[0] if names else ""
        self.parcel_id: int | None = None
        self.layout: CalendarLayout
        self._rows: list[Culture] = []
        self._refresh()

    @property
    def height(self) -> int:
        """Height of the chart: the parcel row plus one row per crop."""
        return (len(self._rows) + 1) * ROW_HEIGHT

    def _refresh(self) -> None:
        day, bis = year_parameters(self.year)
        self.layout = build_calendar(day, bis, self.year, self.today)
        self.parcel_id = self.store.parcel_id(self.parcel)
        if self.parcel_id is None:
            self._rows = []
        else:
            self._rows = self.store.cultures_in_year(self.parcel_id, self.year)

    def set_parcel(self, designation: str) -> None:
        """Show the crops of the parcel named ``designation``."""
        self.parcel = designation
        self._refresh()

    def set_year(self, year: int) -> None:
        """Show the chart of another year."""
        self.year = year
        self._refresh()

    def rows(self) -> list[Culture]:
        """Return the displayed crops in chart order, below the parcel row."""
        return list(self._rows)

    def bars(self) -> list[SceneItem]:
        """Return one bar per displayed crop, coloured by its plant family."""
        jan_first = date(self.year, 1, 1)
        items: list[SceneItem] = []
        for position, culture in enumerate(self._rows, start=1):
            if culture.sowing is None:
                continue
            start_day = (culture.sowing - jan_first).days
            colour = self.store.family_colour(culture.plant_type)
            item = bar_item(culture.id, culture.designation, position + 1,
                            DAY_OFFSET + start_day, culture.duration + 1,
                            CULTURE_SHAPE, colour)
            items.append(dataclasses.replace(item, mode=FIXED_MODE))
        return items

    def scene(self) -> list[SceneItem]:
        """Return grid cells, the marker of today and the crop bars."""
        items = list(self.layout.cells(self.height))
        items.append(today_marker(self.year, self.today, self.height))
        items.extend(self.bars())
        return items

    def select_bar(self, item: SceneItem) -> tuple[int, date, int, str]:
        """Return crop id, sowing date, length in days and name read from a bar."""
        if item.kind != KIND_BAR:
            raise ValueError(f"not a crop bar: {item.kind}")
        days = int(item.width // SPACE_CASE) + 1
        offset = int(item.x / SPACE_CASE - days // 2) - 6
        start = date(self.year, 1, 1) + timedelta(days=offset)
        return item.item_id, start, days, item.text