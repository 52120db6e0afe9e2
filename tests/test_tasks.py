import sqlite3
from datetime import date

import pytest

from jardinplan.tasks import (
    Task,
    TaskNode,
    TaskStore,
    aggregate_phases,
    format_date,
    parse_date,
)


@pytest.fixture
def store():
    connection = sqlite3.connect(":memory:")
    tasks = TaskStore(connection)
    tasks.create_schema()
    yield tasks
    connection.close()


def _insert(store, task_id, designation, start, end, previous, phase_parent, type_,
            constraint=0, culture_id=0):
    with store.connection:
        store.connection.execute(
            "INSERT INTO tasks (id, designation, commentaires, depart, fin, duree, "
            "precedent, avancement, type, contrainte_date, phase_parent, id_culture) "
            "VALUES (?, ?, '', ?, ?, 1, ?, 0, ?, ?, ?, ?)",
            (task_id, designation, start, end, previous, type_, constraint,
             phase_parent, culture_id),
        )


@pytest.fixture
def project(store):
    _insert(store, 1, "Semis", "01-03-2024", "01-03-2024", 0, 1, 1, culture_id=7)
    _insert(store, 2, "Preparer", "02-03-2024", "04-03-2024", 1, 1, 2)
    _insert(store, 3, "Semer", "05-03-2024", "06-03-2024", 2, 1, 2)
    _insert(store, 4, "Arroser", "07-03-2024", "09-03-2024", 2, 1, 2)
    return store


def test_date_round_trip():
    value = date(2024, 2, 29)
    assert parse_date(format_date(value)) == value
    assert format_date(date(2023, 1, 5)) == "05-01-2023"


@pytest.mark.parametrize("text", ["", None, "2024.01.01", "31-02-2024", "1-1-2024"])
def test_parse_date_invalid(text):
    assert parse_date(text) is None


def test_format_missing_date_is_empty():
    assert format_date(None) == ""


def test_walk_is_depth_first():
    leaf = TaskNode(Task(3))
    middle = TaskNode(Task(2), [leaf])
    root = TaskNode(Task(1), [middle, TaskNode(Task(4))])
    assert [task.id for task in root.walk()] == [1, 2, 3, 4]


def test_aggregate_spans_children():
    phase = Task(1, start=date(2024, 3, 10), end=date(2024, 3, 10), duration=0, type=1)
    first = Task(2, start=date(2024, 3, 5), end=date(2024, 3, 12), phase_parent=1, type=2)
    second = Task(3, start=date(2024, 3, 15), end=date(2024, 3, 20), phase_parent=1, type=2)
    [result] = aggregate_phases([phase, first, second])
    assert result.id == 1
    assert result.start == first.start
    assert result.end == second.end
    assert result.duration == (result.end - result.start).days


def test_aggregate_phase_without_children_ends_on_start():
    phase = Task(1, start=date(2024, 3, 10), end=date(2024, 4, 1), duration=22, type=1)
    other = Task(2, start=date(2024, 1, 1), end=date(2024, 1, 9), phase_parent=9, type=2)
    [result] = aggregate_phases([phase, other])
    assert result.start == phase.start
    assert result.end == phase.start
    assert result.duration == phase.duration


def test_aggregate_ignores_non_phases_and_keeps_input():
    phase = Task(1, start=date(2024, 3, 10), type=1)
    child = Task(2, start=date(2024, 3, 1), end=date(2024, 3, 4), phase_parent=1, type=2)
    results = aggregate_phases([phase, child])
    assert [task.id for task in results] == [1]
    assert phase.end is None


def test_get_and_missing(project):
    task = project.get(2)
    assert task.designation == "Preparer"
    assert task.start == date(2024, 3, 2)
    assert task.previous == 1
    with pytest.raises(KeyError):
        project.get(99)


def test_all_and_phase_names(project):
    assert [task.id for task in project.all()] == [1, 2, 3, 4]
    assert project.phase_names() == ["Semis"]
    assert project.phase_parent_of("Semis") == 1
    assert project.phase_parent_of("inconnu") is None


def test_tree_follows_precedence(project):
    [root] = project.tree(1)
    assert root.task.id == 1
    assert [task.id for task in root.walk()] == [1, 2, 3, 4]
    assert [child.task.id for child in root.children[0].children] == [3, 4]


def test_tree_drops_orphans(project):
    _insert(project, 5, "Orphelin", "01-04-2024", "02-04-2024", 42, 1, 2)
    ids = [task.id for root in project.tree(1) for task in root.walk()]
    assert 5 not in ids
    assert project.tree(77) == []


def test_type_style(store):
    with store.connection:
        store.connection.execute(
            "INSERT INTO type_de_tache (id, designation, couleur, forme) VALUES (2, 't', '#ff0000', 6)"
        )
    assert store.type_style(2) == ("#ff0000", 6)
    assert store.type_style(3) == ("", 0)


def test_update_dates(project):
    project.update_dates(3, "Semer tard", date(2024, 3, 20), date(2024, 3, 22), 3, True)
    task = project.get(3)
    assert task.designation == "Semer tard"
    assert (task.start, task.end, task.duration) == (date(2024, 3, 20), date(2024, 3, 22), 3)
    assert task.date_constraint is True


def test_update_dates_requires_task(project):
    with pytest.raises(ValueError):
        project.update_dates(None, "x", date(2024, 1, 1), date(2024, 1, 1), 1, False)


def test_add_after(project):
    new_id = project.add_after(4, "Semis", date(2024, 3, 12))
    task = project.get(new_id)
    assert task.designation == "nouvelle tache"
    assert task.start == task.end == date(2024, 3, 12)
    assert task.previous == 4
    assert task.phase_parent == 1
    assert task.culture_id == 7
    assert task.duration == 1


def test_add_after_errors(project):
    with pytest.raises(ValueError):
        project.add_after(0, "Semis", date(2024, 3, 12))
    with pytest.raises(KeyError):
        project.add_after(2, "inconnu", date(2024, 3, 12))


def test_delete_relinks_followers(project):
    project.delete(2, "Preparer")
    with pytest.raises(KeyError):
        project.get(2)
    assert project.get(3).previous == 1
    assert project.get(4).previous == 1


def test_delete_requires_task(project):
    with pytest.raises(ValueError):
        project.delete(0, "Semer")


def test_update_phases_stores_span(project):
    [phase] = project.update_phases()
    stored = project.get(1)
    assert stored.start == phase.start
    assert stored.end == date(2024, 3, 9)
    assert stored.duration == (stored.end - stored.start).days