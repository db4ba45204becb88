"""Tests for note create / edit / delete."""
import pytest

from notes_admin import notes
from notes_admin.errors import NotFound, ReferenceNotFound


def test_create_note_copies_names_and_recomputes(store, seeded):
    note = notes.create_note(store, seeded["bob"], seeded["home"], "water plants")
    assert (note.user_name, note.category_name) == ("Bob", "Home")
    counts = {e["user_name"]: e["notes_count"] for e in store.get_summary().user_statistics}
    assert counts == {"Alice": 2, "Bob": 2}


@pytest.mark.parametrize("field", ["user", "category"])
def test_create_note_with_missing_reference_writes_nothing(store, seeded, field):
    user_id = 999 if field == "user" else seeded["alice"]
    category_id = 999 if field == "category" else seeded["work"]
    with pytest.raises(ReferenceNotFound):
        notes.create_note(store, user_id, category_id, "orphan")
    assert len(store.find("notes")) == 3
    assert store.get_summary() is None


def test_resolve_reference(store, seeded):
    assert notes.resolve_reference(store, "users", seeded["alice"]).name == "Alice"
    with pytest.raises(ReferenceNotFound) as excinfo:
        notes.resolve_reference(store, "categories", 999)
    assert excinfo.value.status_code == 404
    assert "category 999" in excinfo.value.message


def test_edit_note_changes_category_but_not_owner(store, seeded):
    note_id = seeded["notes"][0]
    note = notes.edit_note(store, note_id, "annual report", seeded["home"])
    assert note.content == "annual report"
    assert (note.category_id, note.category_name) == (seeded["home"], "Home")
    assert (note.user_id, note.user_name) == (seeded["alice"], "Alice")
    assert store.get_summary() is None


def test_edit_note_with_missing_category_leaves_note_alone(store, seeded):
    note_id = seeded["notes"][0]
    with pytest.raises(ReferenceNotFound):
        notes.edit_note(store, note_id, "changed", 999)
    assert store.find_by_id("notes", note_id).content == "quarterly report"


def test_edit_missing_note(store, seeded):
    with pytest.raises(NotFound):
        notes.edit_note(store, 999, "x", seeded["work"])


def test_delete_note_recomputes(store, seeded):
    notes.delete_note(store, seeded["notes"][2])
    counts = {e["user_name"]: e["notes_count"] for e in store.get_summary().user_statistics}
    assert counts == {"Alice": 2, "Bob": 0}


def test_delete_missing_note(store):
    with pytest.raises(NotFound):
        notes.delete_note(store, 999)
