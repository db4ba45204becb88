from sqlalchemy import JSON, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# The statistics table only ever holds this row.
SUMMARY_ID = 1


class User(Base):
    """
    Note author with display name and contact email.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, default="")


class Note(Base):
    """
    Note owned by one user and filed under one category.

    user_name and category_name are copies of the referenced records' names,
    kept in sync by notes_admin.sync.
    """
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user_name = Column(String(255), nullable=False, default="")
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    category_name = Column(String(255), nullable=False, default="")
    content = Column(Text, default="", nullable=False)


class Statistics(Base):
    """
    Single summary row: list of {user_id, user_name, notes_count} entries.
    """
    __tablename__ = "statistics"

    id = Column(Integer, primary_key=True, default=SUMMARY_ID)
    user_statistics = Column(JSON, nullable=False, default=list)
