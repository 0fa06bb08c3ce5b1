"""Tests for backup/restore (ledgernotes.core.backup and Notebook.restore)."""

import json
from datetime import date, datetime, timezone

import pytest

from ledgernotes.core.backup import backup_filename, dump_notes, parse_backup
from ledgernotes.core.notebook import Notebook
from ledgernotes.protocols import RestoreError
from ledgernotes.types import NoteMode


class TestDump:
    def test_interchange_shape(self, make_note):
        note = make_note(id=5, title="A", tags=["x"], mode=NoteMode.TASK)
        data = json.loads(dump_notes([note]))
        assert data == [
            {
                "id": 5,
                "title": "A",
                "content": "<p>Hello</p>",
                "tags": ["x"],
                "mode": "Task",
                "createdAt": 1714554000000,
                "updatedAt": 1714554000000,
            }
        ]

    def test_pretty_printed(self, make_note):
        assert "\n  " in dump_notes([make_note()])

    def test_filename(self):
        assert backup_filename(date(2024, 5, 1)) == "notes_backup_2024-05-01.json"


class TestParseBackup:
    def test_strips_ids_and_reads_timestamps(self):
        text = json.dumps(
            [
                {
                    "id": 9,
                    "title": "T",
                    "content": "c",
                    "tags": ["a"],
                    "mode": "Diary",
                    "createdAt": 1714554000000,
                    "updatedAt": "2024-05-02T10:00:00Z",
                }
            ]
        )
        (note,) = parse_backup(text)
        assert note.id is None
        assert note.mode is NoteMode.DIARY
        assert note.created_at == datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
        assert note.updated_at == datetime(2024, 5, 2, 10, 0, tzinfo=timezone.utc)

    def test_defaults(self):
        (note,) = parse_backup('[{"title": "T", "content": ""}]')
        assert note.mode is NoteMode.NOTE
        assert note.tags == []
        assert note.created_at is not None
        assert note.updated_at == note.created_at

    def test_round_trip_through_dump(self, make_note):
        notes = [make_note(id=1, title="one"), make_note(id=2, title="two", mode=NoteMode.LEDGER)]
        parsed = parse_backup(dump_notes(notes))
        assert [(n.title, n.mode) for n in parsed] == [("one", NoteMode.NOTE), ("two", NoteMode.LEDGER)]

    @pytest.mark.parametrize(
        "text,message",
        [
            ("not json", "not valid JSON"),
            ('{"title": "x"}', "expected a JSON array"),
            ('[{"title": "x"}]', "content"),
            ('[{"title": 1, "content": ""}]', "0.title"),
            ('[{"title": "x", "content": "", "mode": "Poem"}]', "0.mode"),
            ('[{"title": "x", "content": "", "tags": [1]}]', "0.tags.0"),
            ('[{"title": "x", "content": "", "createdAt": "yesterday"}]', "bad timestamp"),
        ],
    )
    def test_invalid_backups_rejected(self, text, message):
        with pytest.raises(RestoreError, match=message):
            parse_backup(text)


class TestNotebookBackupRestore:
    def test_backup_and_restore(self, notebook, tmp_path):
        notebook.create_note("First")
        notebook.create_note("Second", mode=NoteMode.LEDGER)
        path = notebook.backup(tmp_path / "backup.json")

        notebook.create_note("Added later")
        assert notebook.restore(path) == 2
        assert sorted(n.title for n in notebook.list_notes()) == ["First", "Second"]

    def test_backup_to_directory_uses_default_name(self, notebook, tmp_path):
        path = notebook.backup(tmp_path, today=date(2024, 5, 1))
        assert path == tmp_path / "notes_backup_2024-05-01.json"
        assert json.loads(path.read_text(encoding="utf-8")) == []

    def test_invalid_restore_writes_nothing(self, notebook, tmp_path):
        notebook.create_note("Keep me")
        bad = tmp_path / "bad.json"
        bad.write_text('[{"title": "ok", "content": ""}, {"title": "broken"}]', encoding="utf-8")

        with pytest.raises(RestoreError):
            notebook.restore(bad)
        assert [n.title for n in notebook.list_notes()] == ["Keep me"]

    def test_missing_file(self, notebook, tmp_path):
        with pytest.raises(RestoreError, match="Cannot read backup"):
            notebook.restore(tmp_path / "nope.json")

    def test_restore_into_sqlite(self, sqlite_store, settings, tmp_path, make_note):
        nb = Notebook(store=sqlite_store, settings=settings)
        nb.create_note("old")
        backup = tmp_path / "b.json"
        backup.write_text(dump_notes([make_note(id=50, title="restored")]), encoding="utf-8")

        assert nb.restore(backup) == 1
        (note,) = nb.list_notes()
        assert note.title == "restored"
