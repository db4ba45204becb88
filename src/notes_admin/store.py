"""
Document-style data access over a SQLAlchemy session.

Records are addressed by collection name ("users", "categories", "notes")
with equality filters given as plain dicts. Every write commits on its own;
multi-step cascades built on top of this are not atomic.
"""
import functools
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

from notes_admin.errors import StoreUnavailable
from notes_admin.models import SUMMARY_ID, Category, Note, Statistics, User

COLLECTIONS = {
    "users": User,
    "categories": Category,
    "notes": Note,
}


class UserNoteCount(NamedTuple):
    user_id: int
    user_name: str
    notes_count: int


def _translate_errors(method):
    """Turn connectivity failures into StoreUnavailable."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            self.db.rollback()
            raise StoreUnavailable(f"Data store unavailable: {exc.orig}") from exc

    return wrapper


class DocumentStore:
    """
    Per-collection CRUD plus the user/note aggregation and the statistics
    summary upsert.
    """

    def __init__(self, db: Session):
        self.db = db

    # -------- helpers --------

    @staticmethod
    def _model(collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise KeyError(f"Unknown collection: {collection!r}") from None

    @staticmethod
    def _column(model, field: str):
        if field not in model.__table__.columns:
            raise ValueError(f"{model.__tablename__} has no field {field!r}")
        return getattr(model, field)

    def _query(self, model, filter: Optional[Mapping[str, Any]]):
        query = self.db.query(model)
        for field, value in (filter or {}).items():
            query = query.filter(self._column(model, field) == value)
        return query

    def _check_fields(self, model, fields: Mapping[str, Any]) -> Dict[str, Any]:
        for field in fields:
            self._column(model, field)
        return dict(fields)

    # -------- reads --------

    @_translate_errors
    def find(
        self,
        collection: str,
        filter: Optional[Mapping[str, Any]] = None,
        sort: Optional[Sequence[str]] = None,
    ) -> List[Any]:
        """Return records matching every filter field, ordered by the sort fields (ascending) then id."""
        model = self._model(collection)
        query = self._query(model, filter)
        order = [self._column(model, field) for field in (sort or [])]
        return query.order_by(*order, model.id).all()

    @_translate_errors
    def find_by_id(self, collection: str, record_id: int) -> Optional[Any]:
        model = self._model(collection)
        return self.db.query(model).filter(model.id == record_id).first()

    # -------- writes --------

    @_translate_errors
    def create(self, collection: str, fields: Mapping[str, Any]) -> Any:
        model = self._model(collection)
        record = model(**self._check_fields(model, fields))
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    @_translate_errors
    def update_by_id(self, collection: str, record_id: int, fields: Mapping[str, Any]) -> Optional[Any]:
        """Apply fields to one record. Returns the updated record, or None when absent."""
        model = self._model(collection)
        values = self._check_fields(model, fields)
        record = self.db.query(model).filter(model.id == record_id).first()
        if record is None:
            return None
        for field, value in values.items():
            setattr(record, field, value)
        self.db.commit()
        self.db.refresh(record)
        return record

    @_translate_errors
    def update_many(self, collection: str, filter: Mapping[str, Any], fields: Mapping[str, Any]) -> int:
        model = self._model(collection)
        values = self._check_fields(model, fields)
        count = self._query(model, filter).update(values, synchronize_session=False)
        self.db.commit()
        return count

    @_translate_errors
    def delete_by_id(self, collection: str, record_id: int) -> bool:
        model = self._model(collection)
        count = self.db.query(model).filter(model.id == record_id).delete(synchronize_session=False)
        self.db.commit()
        return count > 0

    @_translate_errors
    def delete_many(self, collection: str, filter: Mapping[str, Any]) -> int:
        model = self._model(collection)
        count = self._query(model, filter).delete(synchronize_session=False)
        self.db.commit()
        return count

    # -------- statistics --------

    @_translate_errors
    def aggregate_user_note_counts(self) -> List[UserNoteCount]:
        """
        Left join of users against notes grouped by owner.

        Every user appears, users without notes with a count of 0.
        """
        rows = (
            self.db.query(User.id, User.name, func.count(Note.id))
            .outerjoin(Note, Note.user_id == User.id)
            .group_by(User.id, User.name)
            .order_by(User.id)
            .all()
        )
        return [UserNoteCount(user_id, user_name, notes_count) for user_id, user_name, notes_count in rows]

    @_translate_errors
    def replace_summary(self, entries: Iterable[Mapping[str, Any]]) -> Statistics:
        """Upsert the single statistics record, replacing its whole content."""
        user_statistics = [dict(e) for e in entries]
        try:
            summary = self.db.merge(Statistics(id=SUMMARY_ID, user_statistics=user_statistics))
            self.db.commit()
        except IntegrityError:
            # Another session inserted the row after merge looked for it.
            self.db.rollback()
            summary = self.db.query(Statistics).filter(Statistics.id == SUMMARY_ID).one()
            summary.user_statistics = user_statistics
            self.db.commit()
        self.db.refresh(summary)
        return summary

    @_translate_errors
    def get_summary(self) -> Optional[Statistics]:
        return self.db.query(Statistics).filter(Statistics.id == SUMMARY_ID).first()
