"""Tests for the Notebook entry point and editing sessions."""

import pytest

from ledgernotes.core.autosave import ManualTimer
from ledgernotes.core.notebook import DEFAULT_TITLE, EditingSession, Notebook
from ledgernotes.core.reconciler import EditorState
from ledgernotes.ledger.migration import DEFAULT_HEADERS, decode_ledger
from ledgernotes.protocols import LedgerNotesError, NoteNotFoundError
from ledgernotes.storage.sqlite import SQLiteNoteStore
from ledgernotes.types import NoteMode


class TestNotebookCrud:
    def test_default_store_is_sqlite_under_data_home(self, data_home):
        nb = Notebook()
        assert isinstance(nb.store, SQLiteNoteStore)
        assert nb.store.db_path == data_home / "notes.db"

    def test_create_note_defaults(self, notebook):
        note = notebook.create_note()
        assert note.id is not None
        assert note.title == DEFAULT_TITLE
        assert note.mode is NoteMode.NOTE
        assert note.content == ""
        assert note.created_at == note.updated_at

    def test_create_note_normalises_input(self, notebook):
        note = notebook.create_note("Trip\x00", mode="Diary", tags="travel, , travel, plans")
        stored = notebook.get_note(note.id)
        assert stored.title == "Trip"
        assert stored.mode is NoteMode.DIARY
        assert stored.tags == ["travel", "plans"]

    def test_create_note_rejects_unknown_mode(self, notebook):
        with pytest.raises(ValueError):
            notebook.create_note("x", mode="Poem")

    def test_get_missing_note(self, notebook):
        with pytest.raises(NoteNotFoundError):
            notebook.get_note(404)

    def test_list_most_recent_first(self, notebook):
        first = notebook.create_note("first")
        second = notebook.create_note("second")
        # Equal timestamps fall back to the higher id first
        assert [n.id for n in notebook.list_notes()] == [second.id, first.id]

    def test_delete(self, notebook):
        note = notebook.create_note("bye")
        notebook.delete_note(note.id)
        assert notebook.list_notes() == []


class TestEditingSession:
    def test_rich_edit_saved_on_close(self, notebook, store):
        note = notebook.create_note("Journal", mode=NoteMode.DIARY)
        with notebook.open(note.id) as session:
            assert session.state is EditorState.RICH_EDITING
            session.set_content("<p>Dear diary</p>")
            assert store.updates == []
        assert notebook.get_note(note.id).content == "<p>Dear diary</p>"
        assert len(store.updates) == 1

    def test_surface_typing_is_saved(self, notebook, surface):
        note = notebook.create_note("Typed")
        session = notebook.open(note.id, surface=surface)
        surface.type("<p>typed text</p>")
        session.close()
        assert notebook.get_note(note.id).content == "<p>typed text</p>"

    def test_new_ledger_gets_default_on_first_open(self, notebook, store):
        note = notebook.create_note("Expenses", mode=NoteMode.LEDGER)
        with notebook.open(note.id) as session:
            assert session.state is EditorState.LEDGER_EDITING
            assert session.ledger.headers == DEFAULT_HEADERS
        data = decode_ledger(notebook.get_note(note.id).content)
        assert data.headers == DEFAULT_HEADERS
        assert len(data.rows) == 1

    def test_ledger_edits_persist(self, notebook):
        note = notebook.create_note("Expenses", mode=NoteMode.LEDGER)
        with notebook.open(note.id) as session:
            session.ledger.set_cell(0, 2, "12.5")
            session.ledger.add_row()
        data = decode_ledger(notebook.get_note(note.id).content)
        assert data.rows[0].data[2] == "12.5"
        assert len(data.rows) == 2

    def test_ledger_unavailable_for_rich_notes(self, notebook):
        note = notebook.create_note("plain")
        with notebook.open(note.id) as session:
            with pytest.raises(LedgerNotesError):
                session.ledger

    def test_mode_switch_to_ledger(self, notebook):
        note = notebook.create_note("Was text", content="<p>words</p>")
        with notebook.open(note.id) as session:
            session.set_mode(NoteMode.LEDGER)
            assert session.state is EditorState.LEDGER_EDITING
        stored = notebook.get_note(note.id)
        assert stored.mode is NoteMode.LEDGER
        assert decode_ledger(stored.content).headers == DEFAULT_HEADERS

    def test_title_and_tags(self, notebook):
        note = notebook.create_note("Old")
        with notebook.open(note.id) as session:
            session.set_title("New")
            session.set_tags(["a", "b"])
        stored = notebook.get_note(note.id)
        assert (stored.title, stored.tags) == ("New", ["a", "b"])

    def test_no_change_no_write(self, notebook, store):
        note = notebook.create_note("Quiet")
        with notebook.open(note.id) as session:
            session.set_title("Quiet")
        assert store.updates == []

    def test_debounced_save_with_timer(self, notebook, store):
        note = notebook.create_note("Timed")
        timer = ManualTimer()
        session = notebook.open(note.id, timer=timer)
        session.set_content("<p>a</p>")
        timer.advance(0.5)
        session.set_content("<p>ab</p>")
        timer.advance(0.9)
        assert store.updates == []
        timer.advance(0.2)
        assert [u.content for u in store.updates] == ["<p>ab</p>"]
        session.close()
        assert len(store.updates) == 1

    def test_switch_flushes_previous_note(self, notebook, store):
        first = notebook.create_note("first")
        second = notebook.create_note("second")
        session = notebook.open(first.id)
        session.set_content("<p>unsaved</p>")
        session.switch(notebook.get_note(second.id))
        assert notebook.get_note(first.id).content == "<p>unsaved</p>"
        assert session.note.id == second.id
        session.close()

    def test_close_is_idempotent(self, notebook):
        note = notebook.create_note("x")
        session = notebook.open(note.id)
        session.close()
        session.close()
        assert session.state is EditorState.CLOSED

    def test_session_uses_configured_debounce(self, store, settings):
        settings.debounce_ms = 250
        nb = Notebook(store=store, settings=settings)
        note = nb.create_note("x")
        timer = ManualTimer()
        session = nb.open(note.id, timer=timer)
        session.set_content("<p>y</p>")
        assert timer.deadline == pytest.approx(0.25)
        session.close()

    def test_direct_construction(self, store, make_note, today):
        note = make_note(mode=NoteMode.LEDGER, content="")
        note.id = store.add(note)
        session = EditingSession(store.get(note.id), store, today_fn=today)
        assert session.ledger.rows[0].data[0] == "2024-05-01"
        session.close()


class TestNotebookExport:
    def test_export_defaults_to_settings_dir(self, notebook, settings):
        note = notebook.create_note("My Note", content="<p>hi</p>")
        path = notebook.export(note.id)
        assert path == settings.export_dir / "My_Note.md"
        assert "hi" in path.read_text(encoding="utf-8")

    def test_export_all(self, notebook, tmp_path):
        note = notebook.create_note("All", content="<p>hi</p>")
        result = notebook.export_all(note.id, tmp_path / "out")
        assert result.ok
        assert (tmp_path / "out" / "All.docx").exists()

    def test_export_missing_note(self, notebook, tmp_path):
        with pytest.raises(NoteNotFoundError):
            notebook.export(12, "md", tmp_path)
