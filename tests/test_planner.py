import sqlite3
from datetime import date

import pytest

from jardinplan.calendar import KIND_BAR, KIND_CELL, KIND_MARKER, SPACE_CASE, ShapeKind
from jardinplan.planner import Planner
from jardinplan.tasks import TaskStore

TODAY = date(2024, 3, 15)


def _store(constraint=1):
    connection = sqlite3.connect(":memory:")
    store = TaskStore(connection)
    store.create_schema()
    rows = [
        (1, "Semis", "01-01-2024", "20-01-2024", 19, 0, 0, 1, 1, 0),
        (2, "Arrosage", "05-01-2024", "10-01-2024", 5, 1, 50, 1, 2, 0),
        (3, "Recolte", "12-01-2024", "20-01-2024", 8, 2, 0, 1, 2, constraint),
    ]
    connection.executemany(
        "INSERT INTO tasks (id, designation, depart, fin, duree, precedent, "
        "avancement, phase_parent, type, contrainte_date) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        rows,
    )
    connection.executemany(
        "INSERT INTO type_de_tache (id, designation, couleur, forme) VALUES (?, ?, ?, ?)",
        [(1, "phase", "gray", 6), (2, "tache", "green", 1)],
    )
    connection.commit()
    return store


def test_rows_follow_precedence_tree():
    planner = Planner(_store(), 2024, TODAY)
    assert planner.phase == "Semis"
    assert [task.id for task in planner.rows()] == [1, 2, 3]
    assert planner.height == 3 * 2 * SPACE_CASE


def test_task_bar_width_matches_task_length():
    store = _store()
    planner = Planner(store, 2024, TODAY)
    main = [b for b in planner.bars() if b.item_id == 2 and b.shape != ShapeKind.PROGRESS]
    assert len(main) == 1
    task = store.get(2)
    assert main[0].width == ((task.end - task.start).days + 1) * SPACE_CASE
    assert main[0].colour == "green"
    assert main[0].mode == 2


def test_progress_bar_is_shorter_and_blue():
    planner = Planner(_store(), 2024, TODAY)
    bars = [b for b in planner.bars() if b.item_id == 2]
    progress = [b for b in bars if b.shape == ShapeKind.PROGRESS]
    main = [b for b in bars if b.shape != ShapeKind.PROGRESS]
    assert len(progress) == 1
    assert progress[0].colour == "blue"
    assert 0 < progress[0].width < main[0].width


def test_phase_bar_uses_phase_shape():
    planner = Planner(_store(), 2024, TODAY)
    phase_bars = [b for b in planner.bars() if b.item_id == 1]
    assert [b.shape for b in phase_bars] == [ShapeKind.PHASE]
    assert phase_bars[0].pen_colour == "blue"


def test_constrained_task_gets_elbow_link():
    planner = Planner(_store(constraint=1), 2024, TODAY)
    links = planner.links()
    assert len(links) == 1
    first, second, third = links[0]
    assert first[1] == second[1]
    assert second[0] == third[0]
    assert third[1] > first[1]


def test_no_link_without_constraint():
    planner = Planner(_store(constraint=0), 2024, TODAY)
    assert planner.links() == []


def test_unknown_phase_shows_nothing():
    planner = Planner(_store(), 2024, TODAY)
    planner.select_phase("inconnue")
    assert planner.rows() == []
    assert planner.bars() == []
    assert planner.links() == []


def test_empty_store():
    connection = sqlite3.connect(":memory:")
    store = TaskStore(connection)
    store.create_schema()
    planner = Planner(store, 2024, TODAY)
    assert planner.phase == ""
    assert planner.rows() == []
    assert [i.kind for i in planner.scene()] == [KIND_MARKER]


def test_scene_holds_cells_marker_and_bars():
    planner = Planner(_store(), 2024, TODAY)
    scene = planner.scene()
    assert sum(1 for i in scene if i.kind == KIND_MARKER) == 1
    assert [i for i in scene if i.kind == KIND_BAR] == planner.bars()
    cells = [i for i in scene if i.kind == KIND_CELL]
    assert cells
    assert all(c.y < planner.height for c in cells)


def test_set_year_moves_marker():
    planner = Planner(_store(), 2024, TODAY)
    before = [i for i in planner.scene() if i.kind == KIND_MARKER][0]
    planner.set_year(2023)
    after = [i for i in planner.scene() if i.kind == KIND_MARKER][0]
    assert planner.layout.year == 2023
    assert after.x > before.x


def test_select_bar_reads_dates():
    planner = Planner(_store(), 2024, TODAY)
    bar = [b for b in planner.bars() if b.item_id == 2][0]
    task_id, start, end, days = planner.select_bar(bar)
    assert task_id == 2
    assert days == bar.width // SPACE_CASE
    assert (end - start).days == days - 1


def test_select_bar_rejects_other_items():
    planner = Planner(_store(), 2024, TODAY)
    marker = [i for i in planner.scene() if i.kind == KIND_MARKER][0]
    with pytest.raises(ValueError):
        planner.select_bar(marker)