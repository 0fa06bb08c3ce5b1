"""Tests for the ledgernotes command-line interface."""

import json
from argparse import Namespace
from unittest.mock import MagicMock

import pytest

from ledgernotes.cli.__main__ import build_parser, main
from ledgernotes.cli.commands.backup import cmd_backup, cmd_restore
from ledgernotes.cli.commands.export import cmd_export
from ledgernotes.cli.commands.ledger import _resolve_row_id, cmd_ledger
from ledgernotes.cli.commands.notes import cmd_delete, cmd_edit, cmd_list, cmd_new, cmd_show
from ledgernotes.cli.commands.stats import cmd_stats
from ledgernotes.export.writer import ExportResult
from ledgernotes.ledger.engine import LedgerEngine
from ledgernotes.ledger.migration import decode_ledger
from ledgernotes.protocols import ExportError, LedgerNotesError
from ledgernotes.types import NoteMode


def _ledger_args(note_id, action, **extra):
    return Namespace(id=note_id, ledger_action=action, **extra)


class TestNoteCommands:
    def test_new_and_list(self, notebook, capsys):
        cmd_new(Namespace(title="Groceries", mode="Ledger", tags="food, weekly"), notebook)
        assert "✓ Created note 1: Groceries (Ledger)" in capsys.readouterr().out

        cmd_list(Namespace(json=False), notebook)
        out = capsys.readouterr().out
        assert "Groceries" in out
        assert "[food, weekly]" in out

    def test_list_empty(self, notebook, capsys):
        cmd_list(Namespace(json=False), notebook)
        assert "No notes yet." in capsys.readouterr().out

    def test_list_json(self, notebook, capsys):
        notebook.create_note("One", tags=["a"])
        cmd_list(Namespace(json=True), notebook)
        (entry,) = json.loads(capsys.readouterr().out)
        assert entry["title"] == "One"
        assert entry["tags"] == ["a"]
        assert isinstance(entry["updatedAt"], int)

    def test_show_markdown(self, notebook, capsys):
        note = notebook.create_note("Trip", content="<p>Pack light</p>", tags="travel")
        cmd_show(Namespace(id=note.id, json=False), notebook)
        out = capsys.readouterr().out
        assert out.startswith("# Trip")
        assert "**Tags:** travel" in out
        assert "Pack light" in out

    def test_delete(self, notebook, capsys):
        note = notebook.create_note("Bye")
        cmd_delete(Namespace(id=note.id), notebook)
        assert "✓ Deleted note" in capsys.readouterr().out
        assert notebook.list_notes() == []

    def test_edit_saves_changes(self, notebook, capsys):
        note = notebook.create_note("Old")
        args = Namespace(id=note.id, title="New", tags="x,y", mode="Diary", content="<p>body</p>")
        cmd_edit(args, notebook)
        assert f"✓ Saved note {note.id}" in capsys.readouterr().out
        stored = notebook.get_note(note.id)
        assert (stored.title, stored.tags, stored.mode) == ("New", ["x", "y"], NoteMode.DIARY)
        assert stored.content == "<p>body</p>"

    def test_edit_without_changes(self, notebook, capsys):
        note = notebook.create_note("Same")
        cmd_edit(Namespace(id=note.id, title="Same", tags=None, mode=None, content=None), notebook)
        assert "No changes." in capsys.readouterr().out

    def test_edit_reports_save_failure(self, notebook, store):
        note = notebook.create_note("Doomed")
        # Fails the explicit flush and the retry on close
        store.fail_next = 2
        args = Namespace(id=note.id, title="Changed", tags=None, mode=None, content=None)
        with pytest.raises(OSError, match="disk full"):
            cmd_edit(args, notebook)


class TestLedgerCommands:
    @pytest.fixture
    def ledger_id(self, notebook):
        return notebook.create_note("Expenses", mode=NoteMode.LEDGER).id

    def _data(self, notebook, note_id):
        return decode_ledger(notebook.get_note(note_id).content)

    def test_show_initialises_default_ledger(self, notebook, ledger_id, capsys):
        cmd_ledger(_ledger_args(ledger_id, "show", json=False), notebook)
        out = capsys.readouterr().out
        assert "| Date | Name | Transport | Work Result | Notes |" in out
        assert "Total Rows: 1" in out
        assert self._data(notebook, ledger_id) is not None

    def test_show_json(self, notebook, ledger_id, capsys):
        cmd_ledger(_ledger_args(ledger_id, "show", json=True), notebook)
        data = json.loads(capsys.readouterr().out)
        assert data["sumColumnIndices"] == [2, 3]

    def test_set_and_totals(self, notebook, ledger_id, capsys):
        cmd_ledger(_ledger_args(ledger_id, "set", row=0, column=2, value="12.5"), notebook)
        cmd_ledger(_ledger_args(ledger_id, "add-row"), notebook)
        cmd_ledger(_ledger_args(ledger_id, "set", row=1, column=2, value="7.5"), notebook)
        capsys.readouterr()

        cmd_ledger(_ledger_args(ledger_id, "show", json=False), notebook)
        out = capsys.readouterr().out
        assert "| **Total Transport** |  | **20.00** |" in out

    def test_columns(self, notebook, ledger_id):
        cmd_ledger(_ledger_args(ledger_id, "add-column", name="Fuel"), notebook)
        cmd_ledger(_ledger_args(ledger_id, "rename-column", column=5, name="Petrol"), notebook)
        cmd_ledger(_ledger_args(ledger_id, "toggle-sum", column=5), notebook)
        cmd_ledger(_ledger_args(ledger_id, "remove-column", column=1), notebook)
        data = self._data(notebook, ledger_id)
        assert data.headers == ["Date", "Transport", "Work Result", "Notes", "Petrol"]
        assert data.sum_column_indices == [1, 2, 4]

    def test_remove_row_by_position(self, notebook, ledger_id, capsys):
        cmd_ledger(_ledger_args(ledger_id, "add-row"), notebook)
        first_id = self._data(notebook, ledger_id).rows[0].id
        cmd_ledger(_ledger_args(ledger_id, "remove-row", row="0"), notebook)
        assert f"✓ Removed row {first_id}" in capsys.readouterr().out
        assert len(self._data(notebook, ledger_id).rows) == 1

    def test_bad_column_index(self, notebook, ledger_id):
        with pytest.raises(IndexError):
            cmd_ledger(_ledger_args(ledger_id, "toggle-sum", column=9), notebook)

    def test_rich_note_rejected(self, notebook):
        note = notebook.create_note("plain")
        with pytest.raises(LedgerNotesError, match="not in Ledger mode"):
            cmd_ledger(_ledger_args(note.id, "add-row"), notebook)


class TestResolveRowId:
    def _engine(self, make_ledger):
        return LedgerEngine(make_ledger(["A"], [["x"], ["y"]], []))

    def test_exact_id(self, make_ledger):
        assert _resolve_row_id(self._engine(make_ledger), "r1") == "r1"

    def test_position(self, make_ledger):
        assert _resolve_row_id(self._engine(make_ledger), "1") == "r1"

    def test_out_of_range(self, make_ledger):
        with pytest.raises(ValueError, match="out of range"):
            _resolve_row_id(self._engine(make_ledger), "5")

    def test_unknown_id(self, make_ledger):
        with pytest.raises(ValueError, match="No row with id"):
            _resolve_row_id(self._engine(make_ledger), "zzz")


class TestExportCommand:
    def test_single_format(self, notebook, tmp_path, capsys):
        note = notebook.create_note("Out", content="<p>x</p>")
        cmd_export(Namespace(id=note.id, format="html", out=str(tmp_path)), notebook)
        assert "✓ Exported to" in capsys.readouterr().out
        assert (tmp_path / "Out.html").exists()

    def test_all_formats(self, notebook, tmp_path, capsys):
        note = notebook.create_note("Out", content="<p>x</p>")
        cmd_export(Namespace(id=note.id, format="all", out=str(tmp_path)), notebook)
        out = capsys.readouterr().out
        assert "✓ md:" in out
        assert "✓ docx:" in out

    def test_partial_failure_exits_nonzero(self, tmp_path, capsys):
        nb = MagicMock()
        nb.export_all.return_value = ExportResult(
            written={"md": tmp_path / "a.md"},
            errors={"docx": ExportError("docx", "boom")},
        )
        with pytest.raises(SystemExit) as exc:
            cmd_export(Namespace(id=1, format="all", out=None), nb)
        assert exc.value.code == 1
        out = capsys.readouterr().out
        assert "✓ md:" in out
        assert "✗ docx:" in out


class TestBackupCommands:
    def test_backup_and_restore(self, notebook, tmp_path, capsys):
        notebook.create_note("Saved")
        target = tmp_path / "backup.json"
        cmd_backup(Namespace(path=str(target)), notebook)
        assert "✓ Backed up 1 notes" in capsys.readouterr().out

        notebook.create_note("Extra")
        cmd_restore(Namespace(path=str(target), yes=True), notebook)
        assert "✓ Restored 1 notes" in capsys.readouterr().out
        assert [n.title for n in notebook.list_notes()] == ["Saved"]

    def test_restore_requires_confirmation(self, notebook, tmp_path, capsys):
        notebook.create_note("Keep")
        with pytest.raises(SystemExit):
            cmd_restore(Namespace(path=str(tmp_path / "x.json"), yes=False), notebook)
        assert "--yes" in capsys.readouterr().out
        assert len(notebook.list_notes()) == 1


class TestStatsCommand:
    def test_text_output(self, notebook, capsys):
        notebook.create_note("One", content="<p>three little words</p>")
        cmd_stats(Namespace(json=False), notebook)
        out = capsys.readouterr().out
        assert "Total notes:   1" in out
        assert "Total words:   3" in out
        assert "Last 7 days:" in out

    def test_json_output(self, notebook, capsys):
        cmd_stats(Namespace(json=True), notebook)
        data = json.loads(capsys.readouterr().out)
        assert data["total_notes"] == 0
        assert len(data["activity"]) == 7


class TestMain:
    """End-to-end runs through argument parsing and dispatch."""

    def test_parser_rejects_bad_id(self):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["show", "abc"])
        assert exc.value.code == 2

    def test_round_trip_through_sqlite(self, tmp_path, capsys):
        db = str(tmp_path / "cli.db")
        main(["--db", db, "new", "Groceries", "--mode", "Ledger"])
        main(["--db", db, "ledger", "1", "set", "0", "2", "4.25"])
        capsys.readouterr()

        main(["--db", db, "list", "--json"])
        (entry,) = json.loads(capsys.readouterr().out)
        assert entry["mode"] == "Ledger"
        assert decode_ledger(entry["content"]).rows[0].data[2] == "4.25"

    def test_missing_note_exits_1(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["--db", str(tmp_path / "cli.db"), "show", "99"])
        assert exc.value.code == 1

    def test_logging_file_created(self, tmp_path, data_home):
        main(["--db", str(tmp_path / "cli.db"), "stats"])
        assert list((data_home / "logs").glob("local-*.log"))
