# jardinplan

Gantt-style planning for a garden. The package works out the layout of a
yearly chart, with its grid, its week, weekday and month labels and a
marker for today. It then places task and crop bars on that chart, using
the data in a SQLite database.

There are two planners:

- `Planner` (`jardinplan.planner`) takes the tasks of one phase from the
  `tasks` table and puts them in precedence order. It gives one bar per
  task, plus a second, thin bar for the task's progress. Where a task has
  a date constraint, it also gives a link polyline from the end of the
  previous task.
- `CulturePlanning` (`jardinplan.planning`) takes the crops of one parcel
  from the `cultures` table that start or end in the shown year. Each crop
  gets a bar in the colour of its plant family.

Both return plain data: `SceneItem` values and point tuples. Any front
end can draw them.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Tasks

```python
import sqlite3
from datetime import date

from jardinplan.tasks import TaskStore
from jardinplan.planner import Planner

connection = sqlite3.connect("jardin.sqli")
store = TaskStore(connection)
store.create_schema()              # creates tasks and type_de_tache if missing

planner = Planner(store, 2024, date(2024, 5, 1))   # shows the first phase
planner.select_phase("Semis")      # a task designation; its phase group is shown

for task in planner.rows():        # Task values, tree fully expanded
    print(task.id, task.designation, task.start, task.end)

for bar in planner.bars():         # SceneItem values
    print(bar.item_id, bar.x, bar.y, bar.width, bar.colour, bar.shape)

for points in planner.links():     # ((x, y), (x, y), (x, y))
    print(points)

items = planner.scene()            # grid cells, today's marker, then the bars
task_id, start, end, days = planner.select_bar(planner.bars()[0])
```

`planner.set_year(year)` redraws the chart for another year. If you pass
`select_bar` an item that is not a bar, it raises `ValueError`.

`TaskStore` gives access to the task tables:

- `get` raises `KeyError` for an unknown id.
- `all`, `phase_names`, `phase_parent_of`, `tree` (returns `TaskNode`
  roots, and `TaskNode.walk` yields the tasks in display order) and
  `type_style` (returns a colour and a shape) read tasks and task types.
- `update_dates`, `add_after` (inserts a one-day "nouvelle tache" after a
  task) and `delete` (links the followers to the deleted task's
  predecessor) change tasks. They raise `ValueError` when no task is
  given.
- `update_phases` recomputes the start, end and duration of every phase
  (type 1) from its tasks and saves them.

`aggregate_phases` does the same computation on a list of `Task` values
and does not touch the database.

The `tasks` table stores dates as `dd-MM-yyyy`. Use `parse_date` and
`format_date` to convert them. `parse_date` returns `None` for text it
cannot read.

## Crops

```python
from jardinplan.cultures import CultureStore
from jardinplan.planning import CulturePlanning

crops = CultureStore(connection)
crops.create_schema()              # parcelles, familles, especes, plantes, cultures

view = CulturePlanning(crops, 1, 2024, date(2024, 5, 1))
for culture in view.rows():
    print(culture.designation, culture.sowing, culture.end)
for bar in view.bars():
    print(bar.text, bar.colour, bar.x, bar.width)

culture_id, sowing, days, name = view.select_bar(view.bars()[0])
```

The first row of the chart belongs to the parcel itself, and the crops
start on the row below. `set_parcel(designation)` and `set_year(year)`
change what the chart shows. `CultureStore.family_colour` looks up a
colour through the chain plant → species → family.

The `cultures` table stores sowing dates as `yyyy.MM.dd`. Use
`parse_culture_date` to read them.

## Calendar geometry

`jardinplan.calendar` holds the layout functions:

- `year_parameters(year)` gives the weekday of 1 January (Monday is 1)
  and the number of days in February.
- `build_calendar(day, bis, year, today)` returns a `CalendarLayout`. It
  holds the header labels (`weeks`, `days`, `months`), the horizontal
  scroll offset for today, and `cells(height)` for the background grid.
- `bar_item`, `link_polyline` and `today_marker` place single items.
  `ShapeKind` names the bar shapes that are drawn differently from a
  plain bar.
- `bar_dates` turns a bar's position back into its start date, end date
  and length in days.

A day column is 14 units wide, and a row is 28 units high.

`jardinplan.positions.RowIndex` maps chart rows to the id of the task
shown on each row.

## What it does not do

The package only computes the layout. It does not draw anything, and it
has no window and no command to run. It does not provide editing forms
for tasks, task types, resources or crops. Callers change the data
through the store classes.