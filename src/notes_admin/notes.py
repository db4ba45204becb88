"""
Note create / edit / delete with reference resolution and the
statistics follow-up.
"""
from typing import Any

from notes_admin.errors import NotFound, ReferenceNotFound
from notes_admin.models import Note
from notes_admin.statistics import Mutation, after_mutation
from notes_admin.store import DocumentStore


def resolve_reference(store: DocumentStore, collection: str, record_id: int) -> Any:
    """
    Return the referenced user or category.

    Raises:
        ReferenceNotFound if the id does not resolve.
    """
    record = store.find_by_id(collection, record_id)
    if record is None:
        raise ReferenceNotFound(collection, record_id)
    return record


# PUBLIC_INTERFACE
def create_note(store: DocumentStore, user_id: int, category_id: int, content: str) -> Note:
    """
    Create a note carrying the current user and category names, then
    recompute statistics. Both references are resolved before the write.
    """
    user = resolve_reference(store, "users", user_id)
    category = resolve_reference(store, "categories", category_id)
    note = store.create(
        "notes",
        {
            "user_id": user.id,
            "user_name": user.name,
            "category_id": category.id,
            "category_name": category.name,
            "content": content,
        },
    )
    after_mutation(store, Mutation.NOTE_CREATED)
    return note


# PUBLIC_INTERFACE
def edit_note(store: DocumentStore, note_id: int, content: str, category_id: int) -> Note:
    """
    Replace a note's content and category. The owning user is left as is.

    Raises:
        NotFound if the note does not exist.
        ReferenceNotFound if the category does not exist.
    """
    if store.find_by_id("notes", note_id) is None:
        raise NotFound("notes", note_id)
    category = resolve_reference(store, "categories", category_id)
    note = store.update_by_id(
        "notes",
        note_id,
        {"content": content, "category_id": category.id, "category_name": category.name},
    )
    if note is None:
        raise NotFound("notes", note_id)
    after_mutation(store, Mutation.NOTE_UPDATED)
    return note


# PUBLIC_INTERFACE
def delete_note(store: DocumentStore, note_id: int) -> None:
    if not store.delete_by_id("notes", note_id):
        raise NotFound("notes", note_id)
    after_mutation(store, Mutation.NOTE_DELETED)
