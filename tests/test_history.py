"""Tests for the undo/redo history."""

import unittest

import blockmark.history
from blockmark import document
from blockmark.document import Document
from blockmark.editor import Editor
from blockmark.history import History
from blockmark.ids import SequentialIds
from blockmark.intent import Action, Intent
from blockmark.selection import Selection
from blockmark.settings import EditorSettings


class TestHistory(unittest.TestCase):
    """Tests for the History value."""

    def setUp(self):
        self.a = Document(id="a")
        self.b = Document(id="b")
        self.c = Document(id="c")

    def test_empty_history_is_a_noop(self):
        history = History()
        self.assertFalse(history.can_undo())
        self.assertFalse(history.can_redo())
        self.assertIsNone(history.undo(self.a))
        self.assertIsNone(history.redo(self.a))

    def test_undo_then_redo(self):
        history = History().record(self.a)
        history, restored = history.undo(self.b)
        self.assertIs(restored, self.a)
        self.assertTrue(history.can_redo())
        history, restored = history.redo(self.a)
        self.assertIs(restored, self.b)
        self.assertTrue(history.can_undo())
        self.assertFalse(history.can_redo())

    def test_record_clears_future(self):
        history = History().record(self.a)
        history, _ = history.undo(self.b)
        history = history.record(self.c)
        self.assertFalse(history.can_redo())

    def test_limit_drops_oldest(self):
        history = History(limit=2).record(self.a).record(self.b).record(self.c)
        self.assertEqual(history.past, (self.b, self.c))

    def test_clear(self):
        history = History().record(self.a).clear()
        self.assertFalse(history.can_undo())

    def test_module_has_docstring(self):
        self.assertIn("Undo/redo", blockmark.history.__doc__)


class TestEditorUndo(unittest.TestCase):
    """Undo/redo through the editor session."""

    def setUp(self):
        self.editor = Editor(ids=SequentialIds())
        # doc "1", heading "2"/"3", paragraph "4"/"5"
        self.original = self.editor.document

    def split_title(self):
        return self.editor.dispatch(Intent(
            Action.SPLIT_BLOCK, block_index=0, selection=Selection.caret("3", 4),
        ))

    def test_split_then_undo_restores(self):
        self.split_title()
        self.assertEqual(
            [b.text for b in self.editor.document.blocks],
            ["This", " is the title of your page", "This is your first paragraph."],
        )
        result = self.editor.dispatch(Intent(Action.UNDO))
        self.assertEqual(result.message, "Undone")
        self.assertEqual(self.editor.document, self.original)
        self.assertEqual(result.removed, ("6",))

    def test_redo_after_undo(self):
        self.split_title()
        split = self.editor.document
        self.editor.undo()
        self.assertTrue(self.editor.redo())
        self.assertEqual(self.editor.document, split)
        self.editor.undo()
        self.assertEqual(self.editor.document, self.original)

    def test_noop_undo_and_redo(self):
        result = self.editor.dispatch(Intent(Action.UNDO))
        self.assertFalse(result.modified)
        self.assertEqual(result.message, "Nothing to undo")
        result = self.editor.dispatch(Intent(Action.REDO))
        self.assertEqual(result.message, "Nothing to redo")
        self.assertIs(self.editor.document, self.original)

    def test_clipboard_survives_undo(self):
        self.split_title()
        self.editor.dispatch(Intent(Action.COPY_BLOCKS, block_ids=("4",)))
        clipboard = self.editor.document.clipboard
        self.assertEqual([b.text for b in clipboard], ["This is your first paragraph."])

        self.editor.undo()
        self.assertEqual(self.editor.document, self.original)
        self.assertIs(self.editor.document.clipboard, clipboard)

    def test_new_edit_clears_redo(self):
        self.split_title()
        self.editor.undo()
        self.editor.dispatch(Intent(
            Action.UPDATE_CELL, block_index=1,
            payload={"cell_id": "5", "text": "changed"},
        ))
        self.assertFalse(self.editor.history.can_redo())

    def test_update_with_same_text_is_not_recorded(self):
        result = self.editor.dispatch(Intent(
            Action.UPDATE_CELL, block_index=1, selection=Selection.caret("5", 2),
            payload={"text": "This is your first paragraph."},
        ))
        self.assertFalse(result.modified)
        self.assertFalse(result.changed)
        self.assertFalse(self.editor.history.can_undo())
        # the caret still moves
        self.assertEqual(self.editor.document.selection, Selection.caret("5", 2))

    def test_history_limit_comes_from_settings(self):
        editor = Editor(settings=EditorSettings(history_limit=2), ids=SequentialIds())
        for text in ("a", "b", "c"):
            editor.dispatch(Intent(
                Action.UPDATE_CELL, block_index=1, payload={"cell_id": "5", "text": text},
            ))
        self.assertTrue(editor.undo())
        self.assertTrue(editor.undo())
        self.assertFalse(editor.undo())
        self.assertEqual(editor.document.blocks[1].text, "a")

    def test_selection_changes_are_not_recorded(self):
        self.editor.dispatch(Intent(Action.SET_SELECTION, selection=Selection.caret("5", 1)))
        self.editor.dispatch(Intent(Action.SELECT_BLOCKS, block_ids=("2",)))
        self.assertFalse(self.editor.history.can_undo())
        self.assertEqual(self.editor.document, document.new(SequentialIds()))
