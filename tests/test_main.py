# tests/test_main.py
# End-to-end demo walkthrough on SQLite

from __future__ import annotations

import logging

import main
from db.connection import SqliteDataSource


def test_main_walkthrough(monkeypatch, tmp_path, caplog):
    monkeypatch.setattr(main, "create_data_source", lambda: SqliteDataSource(tmp_path / "demo.db"))
    with caplog.at_level(logging.INFO):
        main.main()
    assert "Saved: #1 Ada Lovelace (36)" in caplog.text
    assert "Deleted: True" in caplog.text
