"""Project tasks kept in SQLite: phases, their tasks and the precedence tree."""

from __future__ import annotations

import dataclasses
import re
import sqlite3
from dataclasses import dataclass, field
from datetime import date
from typing import Iterator

DATE_FORMAT = "%d-%m-%Y"
_DATE_RE = re.compile(r"(\d{2})-(\d{2})-(\d{4})")

PHASE_TYPE = 1
DEFAULT_TASK_TYPE = 2
NEW_TASK_NAME = "nouvelle tache"

_TASK_COLUMNS = (
    "id, designation, depart, fin, duree, commentaires, precedent, "
    "avancement, phase_parent, type, contrainte_date, id_culture"
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    designation TEXT,
    commentaires TEXT,
    depart TEXT,
    fin TEXT,
    duree INTEGER,
    precedent INTEGER,
    avancement INTEGER,
    projet INTEGER,
    type INTEGER,
    contrainte_date INTEGER,
    phase_parent INTEGER,
    id_culture INTEGER
);
CREATE TABLE IF NOT EXISTS type_de_tache (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    designation TEXT,
    couleur TEXT,
    forme INTEGER
);
"""


def parse_date(text: str | None) -> date | None:
    """Parse a ``dd-MM-yyyy`` date; return None when the text is not a valid date."""
    if not text:
        return None
    match = _DATE_RE.fullmatch(str(text).strip())
    if match is None:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def format_date(value: date | None) -> str:
    """Format a date as ``dd-MM-yyyy``; a missing date gives an empty string."""
    return value.strftime(DATE_FORMAT) if value is not None else ""


def _days_between(start: date | None, end: date | None) -> int:
    if start is None or end is None:
        return 0
    return (end - start).days


def _as_int(value: object) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0


@dataclass
class Task:
    """One row of the task table."""

    id: int
    designation: str = ""
    start: date | None = None
    end: date | None = None
    duration: int = 0
    comments: str = ""
    previous: int = 0
    progress: int = 0
    phase_parent: int = 0
    type: int = 0
    date_constraint: bool = False
    culture_id: int = 0

    @property
    def is_phase(self) -> bool:
        return self.type == PHASE_TYPE

    @classmethod
    def _from_row(cls, row: tuple) -> "Task":
        (task_id, designation, start, end, duration, comments, previous,
         progress, phase_parent, type_, constraint, culture_id) = row
        return cls(
            id=_as_int(task_id),
            designation=designation or "",
            start=parse_date(start),
            end=parse_date(end),
            duration=_as_int(duration),
            comments=comments or "",
            previous=_as_int(previous),
            progress=_as_int(progress),
            phase_parent=_as_int(phase_parent),
            type=_as_int(type_),
            date_constraint=_as_int(constraint) != 0,
            culture_id=_as_int(culture_id),
        )


@dataclass
class TaskNode:
    """A task with the tasks that directly follow it."""

    task: Task
    children: list["TaskNode"] = field(default_factory=list)

    def walk(self) -> Iterator[Task]:
        """Yield this task, then its followers depth first, in display order."""
        yield self.task
        for child in self.children:
            yield from child.walk()


def aggregate_phases(tasks: list[Task]) -> list[Task]:
    """Return every phase with start, end and duration spanning its tasks.

    A phase without tasks keeps its start and duration and ends on its start day.
    """
    updated: list[Task] = []
    for phase in tasks:
        if phase.type != PHASE_TYPE:
            continue
        start = phase.start
        end = phase.start
        duration = phase.duration
        min_start = phase.start
        max_end = phase.start
        seen = False
        for task in tasks:
            if task.type == PHASE_TYPE or task.phase_parent != phase.id:
                continue
            if not seen:
                start = task.start
                end = task.start
            if _days_between(min_start, task.start) <= 1:
                min_start = task.start
                start = min_start
                duration = _days_between(start, task.end)
                seen = True
            if _days_between(max_end, task.end) >= 1:
                max_end = task.end
                end = max_end
                duration = _days_between(start, task.end)
                seen = True
        updated.append(dataclasses.replace(phase, start=start, end=end, duration=duration))
    return updated


class TaskStore:
    """Access to the ``tasks`` and ``type_de_tache`` tables of a project database."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection

    def create_schema(self) -> None:
        """Create the task tables when they do not exist yet."""
        with self.connection:
            self.connection.executescript(_SCHEMA)

    def get(self, task_id: int) -> Task:
        """Return the task with ``task_id``; raise KeyError when there is none."""
        row = self.connection.execute(
            f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id = ?", (task_id,)
        ).fetchone()
        if row is None:
            raise KeyError(task_id)
        return Task._from_row(row)

    def all(self) -> list[Task]:
        """Return every task ordered by id."""
        rows = self.connection.execute(
            f"SELECT {_TASK_COLUMNS} FROM tasks ORDER BY id ASC"
        )
        return [Task._from_row(row) for row in rows]

    def phase_names(self) -> list[str]:
        """Return the designations of all phases ordered by id."""
        rows = self.connection.execute(
            "SELECT designation FROM tasks WHERE type = ? ORDER BY id ASC", (PHASE_TYPE,)
        )
        return [row[0] or "" for row in rows]

    def phase_parent_of(self, designation: str) -> int | None:
        """Return the phase group of the task named ``designation``, or None."""
        row = self.connection.execute(
            "SELECT phase_parent FROM tasks WHERE designation = ?", (designation,)
        ).fetchone()
        return None if row is None else _as_int(row[0])

    def tree(self, phase_parent: int) -> list[TaskNode]:
        """Return the precedence trees of the tasks of one phase group.

        A task with no predecessor is a root; a task whose predecessor has not
        been placed yet (in order of predecessor id) is left out.
        """
        rows = self.connection.execute(
            f"SELECT {_TASK_COLUMNS} FROM tasks WHERE phase_parent = ? "
            "ORDER BY precedent ASC",
            (phase_parent,),
        )
        roots: list[TaskNode] = []
        placed: dict[int, TaskNode] = {}
        for row in rows:
            node = TaskNode(Task._from_row(row))
            if node.task.previous == 0:
                roots.append(node)
            else:
                parent = placed.get(node.task.previous)
                if parent is None:
                    continue
                parent.children.append(node)
            placed.setdefault(node.task.id, node)
        return roots

    def type_style(self, type_id: int) -> tuple[str, int]:
        """Return the colour and shape of a task type; ("", 0) when unknown."""
        row = self.connection.execute(
            "SELECT couleur, forme FROM type_de_tache WHERE id = ?", (type_id,)
        ).fetchone()
        if row is None:
            return "", 0
        return row[0] or "", _as_int(row[1])

    def update_dates(self, task_id: int, designation: str, start: date, end: date,
                     duration: int, date_constraint: bool) -> None:
        """Store new name, dates, duration and date constraint of a task."""
        if not task_id:
            raise ValueError("no task selected")
        with self.connection:
            self.connection.execute(
                "UPDATE tasks SET designation = ?, depart = ?, fin = ?, duree = ?, "
                "contrainte_date = ? WHERE id = ?",
                (designation, format_date(start), format_date(end), int(duration),
                 1 if date_constraint else 0, task_id),
            )

    def add_after(self, previous_id: int, phase_designation: str, start: date) -> int:
        """Insert a one-day task following ``previous_id`` and return its id."""
        if not previous_id or previous_id <= 0:
            raise ValueError("no previous task selected")
        row = self.connection.execute(
            "SELECT phase_parent, id_culture FROM tasks WHERE designation = ?",
            (phase_designation,),
        ).fetchone()
        if row is None:
            raise KeyError(phase_designation)
        phase_parent, culture_id = row
        day = format_date(start)
        with self.connection:
            cursor = self.connection.execute(
                "INSERT INTO tasks (designation, commentaires, depart, fin, duree, "
                "precedent, avancement, type, contrainte_date, phase_parent, id_culture) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (NEW_TASK_NAME, " ", day, day, 1, previous_id, 0, DEFAULT_TASK_TYPE,
                 0, phase_parent, culture_id),
            )
        return int(cursor.lastrowid)

    def delete(self, task_id: int, designation: str) -> None:
        """Delete a task, linking its followers to its own predecessor.

        The row removed is the one named ``designation``.
        """
        if not task_id:
            raise ValueError("no task selected")
        row = self.connection.execute(
            "SELECT precedent FROM tasks WHERE id = ?", (task_id,)
        ).fetchone()
        with self.connection:
            if row is not None:
                self.connection.execute(
                    "UPDATE tasks SET precedent = ? WHERE precedent = ?",
                    (row[0], task_id),
                )
            self.connection.execute(
                "DELETE FROM tasks WHERE designation = ?", (designation,)
            )

    def update_phases(self) -> list[Task]:
        """Recompute and store the span of every phase; return the phases."""
        phases = aggregate_phases(self.all())
        with self.connection:
            self.connection.executemany(
                "UPDATE tasks SET depart = ?, fin = ?, duree = ? WHERE id = ?",
                [(format_date(p.start), format_date(p.end), p.duration, p.id)
                 for p in phases],
            )
        return phases