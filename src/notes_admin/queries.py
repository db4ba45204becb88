import enum
from typing import Any, Dict, List, Optional

from notes_admin.models import Note
from notes_admin.store import DocumentStore


class SortBy(str, enum.Enum):
    user = "user"
    category = "category"


SORT_FIELDS = {
    SortBy.user: "user_name",
    SortBy.category: "category_name",
}


def build_note_filter(user_id: Optional[int] = None, category_id: Optional[int] = None) -> Dict[str, Any]:
    """Equality filter for the given ids; absent ids do not constrain."""
    note_filter = {}
    if user_id is not None:
        note_filter["user_id"] = user_id
    if category_id is not None:
        note_filter["category_id"] = category_id
    return note_filter


# PUBLIC_INTERFACE
def list_notes(
    store: DocumentStore,
    user_id: Optional[int] = None,
    category_id: Optional[int] = None,
    sort_by: Optional[SortBy] = None,
) -> List[Note]:
    """
    Notes matching both filters when given, ascending by the copied user or
    category name when sort_by is set, else in insertion order.
    """
    sort = [SORT_FIELDS[SortBy(sort_by)]] if sort_by else None
    return store.find("notes", build_note_filter(user_id, category_id), sort=sort)
