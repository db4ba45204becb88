"""Tests for connection diagnostics and store failure responses."""
import logging

from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from notes_admin import main
from notes_admin.database import check_connection
from notes_admin.errors import StoreUnavailable
from notes_admin.store import DocumentStore


def test_check_connection_logs_success(engine, caplog):
    with caplog.at_level(logging.INFO, logger="notes_admin.database"):
        assert check_connection(engine) is True
    assert "Database connected" in caplog.text


def test_check_connection_logs_failure(tmp_path, caplog):
    broken = create_engine(f"sqlite:///{tmp_path}/missing/dir/notes.db")
    with caplog.at_level(logging.ERROR, logger="notes_admin.database"):
        assert check_connection(broken) is False
    assert "Database connection error" in caplog.text


def test_store_unavailable_maps_to_503(client, monkeypatch):
    def unavailable(self, *args, **kwargs):
        raise StoreUnavailable()

    monkeypatch.setattr(DocumentStore, "find", unavailable)
    response = client.get("/users")
    assert response.status_code == 503
    assert response.json() == {"detail": "Data store unavailable"}


def test_startup_creates_tables_when_database_reachable(monkeypatch):
    fresh = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    monkeypatch.setattr(main, "engine", fresh)
    main.on_startup()
    assert {"users", "categories", "notes", "statistics"} <= set(inspect(fresh).get_table_names())


def test_startup_logs_and_survives_unreachable_database(tmp_path, monkeypatch, caplog):
    broken = create_engine(f"sqlite:///{tmp_path}/missing/dir/notes.db")
    monkeypatch.setattr(main, "engine", broken)
    with caplog.at_level(logging.ERROR, logger="notes_admin.database"):
        main.on_startup()
    assert "Database connection error" in caplog.text
