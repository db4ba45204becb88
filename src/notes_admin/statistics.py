"""
Per-user note count summary and the list of mutations that rebuild it.
"""
import enum
import logging
from typing import Dict, List

from notes_admin.store import DocumentStore

logger = logging.getLogger(__name__)


class Mutation(str, enum.Enum):
    NOTE_CREATED = "note_created"
    NOTE_UPDATED = "note_updated"
    NOTE_DELETED = "note_deleted"
    USER_CREATED = "user_created"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"
    CATEGORY_CREATED = "category_created"
    CATEGORY_UPDATED = "category_updated"
    CATEGORY_DELETED = "category_deleted"


# Mutations after which the summary is rebuilt. Category changes and note
# edits leave per-user counts alone and are deliberately absent.
STATISTICS_TRIGGERS = frozenset({
    Mutation.NOTE_CREATED,
    Mutation.NOTE_DELETED,
    Mutation.USER_UPDATED,
    Mutation.USER_DELETED,
})


def current_user_statistics(store: DocumentStore) -> List[Dict]:
    """Note count for every user, zero included, ordered by user id."""
    return [row._asdict() for row in store.aggregate_user_note_counts()]


def recompute_statistics(store: DocumentStore) -> List[Dict]:
    """Rebuild the summary from users and notes and replace the stored one."""
    entries = current_user_statistics(store)
    store.replace_summary(entries)
    logger.debug("Statistics recomputed for %d user(s)", len(entries))
    return entries


def after_mutation(store: DocumentStore, mutation: Mutation) -> bool:
    """
    Run the follow-up work for a completed mutation.

    Returns True when the statistics summary was recomputed.
    """
    if mutation not in STATISTICS_TRIGGERS:
        return False
    recompute_statistics(store)
    return True
