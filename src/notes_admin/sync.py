"""
Keeps the user_name / category_name copies on notes in line with the
records they point at.

Renames rewrite the copies on every referencing note; deletions remove the
referencing notes before the parent record. None of these recompute
statistics; callers go through notes_admin.statistics.after_mutation.
"""
import logging
from typing import Optional

from notes_admin.models import Category, User
from notes_admin.store import DocumentStore

logger = logging.getLogger(__name__)


def rename_user(store: DocumentStore, user_id: int, name: str, email: Optional[str] = None) -> Optional[User]:
    """
    Update a user and copy the new name onto all of their notes.

    Returns the updated user, or None when no such user exists (in which
    case no note is touched).
    """
    fields = {"name": name}
    if email is not None:
        fields["email"] = email
    user = store.update_by_id("users", user_id, fields)
    if user is None:
        return None
    updated = store.update_many("notes", {"user_id": user.id}, {"user_name": user.name})
    logger.info("Renamed user %s, updated %d note(s)", user.id, updated)
    return user


def rename_category(store: DocumentStore, category_id: int, name: str) -> Optional[Category]:
    """Update a category and copy the new name onto all notes filed under it."""
    category = store.update_by_id("categories", category_id, {"name": name})
    if category is None:
        return None
    updated = store.update_many("notes", {"category_id": category.id}, {"category_name": category.name})
    logger.info("Renamed category %s, updated %d note(s)", category.id, updated)
    return category


def delete_user(store: DocumentStore, user_id: int) -> bool:
    """Delete a user's notes, then the user. Returns whether the user existed."""
    removed = store.delete_many("notes", {"user_id": user_id})
    existed = store.delete_by_id("users", user_id)
    logger.info("Deleted user %s and %d note(s)", user_id, removed)
    return existed


def delete_category(store: DocumentStore, category_id: int) -> bool:
    """Delete the notes filed under a category, then the category."""
    removed = store.delete_many("notes", {"category_id": category_id})
    existed = store.delete_by_id("categories", category_id)
    logger.info("Deleted category %s and %d note(s)", category_id, removed)
    return existed
