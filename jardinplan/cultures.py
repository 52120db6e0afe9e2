"""Crops grown on the parcels of a garden, kept in SQLite."""

from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass
from datetime import date, timedelta

_DATE_RE = re.compile(r"(\d{4})\.(\d{2})\.(\d{2})")

_CULTURE_COLUMNS = "id, designation, date_semis, duree, commentaires, parcelle, type_plante"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS parcelles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    designation TEXT
);
CREATE TABLE IF NOT EXISTS familles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    designation TEXT,
    couleur TEXT
);
CREATE TABLE IF NOT EXISTS especes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    designation TEXT,
    famille INTEGER
);
CREATE TABLE IF NOT EXISTS plantes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    designation TEXT,
    espece INTEGER
);
CREATE TABLE IF NOT EXISTS cultures (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    designation TEXT,
    date_semis TEXT,
    duree INTEGER,
    commentaires TEXT,
    parcelle INTEGER,
    type_plante INTEGER
);
"""


def parse_culture_date(text: str | None) -> date | None:
    """Parse a ``yyyy.MM.dd`` date; return None when the text is not a valid date."""
    if not text:
        return None
    match = _DATE_RE.fullmatch(str(text).strip())
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _as_int(value: object) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0


@dataclass
class Culture:
    """One crop sown on a parcel."""

    id: int
    designation: str = ""
    sowing: date | None = None
    duration: int = 0
    comments: str = ""
    parcel: int = 0
    plant_type: int = 0

    @property
    def end(self) -> date | None:
        """Day the crop ends: the sowing date plus its duration."""
        if self.sowing is None:
            return None
        return self.sowing + timedelta(days=self.duration)

    def touches_year(self, year: int) -> bool:
        """Tell whether the crop starts or ends in ``year``."""
        if self.sowing is None:
            return False
        end = self.end
        return self.sowing.year == year or (end is not None and end.year == year)

    @classmethod
    def _from_row(cls, row: tuple) -> "Culture":
        culture_id, designation, sowing, duration, comments, parcel, plant = row
        return cls(
            id=_as_int(culture_id),
            designation=designation or "",
            sowing=parse_culture_date(sowing),
            duration=_as_int(duration),
            comments=comments or "",
            parcel=_as_int(parcel),
            plant_type=_as_int(plant),
        )


class CultureStore:
    """Access to parcels, crops and the plant family colours of a garden database."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection

    def create_schema(self) -> None:
        """Create the parcel, crop and plant tables when they do not exist yet."""
        with self.connection:
            self.connection.executescript(_SCHEMA)

    def parcel_names(self) -> list[str]:
        """Return the designations of all parcels ordered by id."""
        rows = self.connection.execute(
            "SELECT designation FROM parcelles ORDER BY id ASC"
        )
        return [row[0] or "" for row in rows]

    def parcel_id(self, designation: str) -> int | None:
        """Return the id of the parcel named ``designation``, or None."""
        row = self.connection.execute(
            "SELECT id FROM parcelles WHERE designation = ?", (designation,)
        ).fetchone()
        return None if row is None else _as_int(row[0])

    def parcel_name(self, parcel_id: int) -> str | None:
        """Return the designation of parcel ``parcel_id``, or None."""
        row = self.connection.execute(
            "SELECT designation FROM parcelles WHERE id = ?", (parcel_id,)
        ).fetchone()
        return None if row is None else (row[0] or "")

    def get(self, culture_id: int) -> Culture:
        """Return the crop with ``culture_id``; raise KeyError when there is none."""
        row = self.connection.execute(
            f"SELECT {_CULTURE_COLUMNS} FROM cultures WHERE id = ?", (culture_id,)
        ).fetchone()
        if row is None:
            raise KeyError(culture_id)
        return Culture._from_row(row)

    def cultures_in_year(self, parcel_id: int, year: int) -> list[Culture]:
        """Return the crops of a parcel that start or end in ``year``."""
        rows = self.connection.execute(
            f"SELECT {_CULTURE_COLUMNS} FROM cultures WHERE parcelle = ? "
            "ORDER BY parcelle ASC, id ASC",
            (parcel_id,),
        )
        cultures = (Culture._from_row(row) for row in rows)
        return [culture for culture in cultures if culture.touches_year(year)]

    def family_colour(self, plant_id: int) -> str:
        """Return the colour of the family of a plant; empty when unknown."""
        row = self.connection.execute(
            "SELECT familles.couleur FROM plantes "
            "JOIN especes ON especes.id = plantes.espece "
            "JOIN familles ON familles.id = especes.famille "
            "WHERE plantes.id = ?",
            (plant_id,),
        ).fetchone()
        if row is None:
            return ""
        return row[0] or ""