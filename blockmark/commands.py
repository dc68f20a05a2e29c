"""Command pattern implementation for editor intents."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Optional

from . import document as doc_ops
from .errors import InvalidSelection, UnsupportedOperation
from .intent import Action

if TYPE_CHECKING:
    from .editor import Editor
    from .intent import Intent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', intent: 'Intent') -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            intent: The intent that triggered this command

        Returns:
            True if the command modified the document
        """
        pass


class EditCommand(EditorCommand):
    """Base class for editing commands."""

    def execute(self, editor: 'Editor', intent: 'Intent') -> bool:
        """Editing commands modify the document."""
        # Capture snapshot before edit
        before = editor.document
        self._edit(editor, intent)
        # Caret or clipboard moves alone are not undoable edits
        if editor.document == before:
            return False
        editor.history = editor.history.record(before)
        return True

    @abstractmethod
    def _edit(self, editor: 'Editor', intent: 'Intent'):
        """Perform the edit."""
        pass


class SystemCommand(EditorCommand):
    """Base class for commands that leave the undo history alone."""

    def execute(self, editor: 'Editor', intent: 'Intent') -> bool:
        return bool(self._execute_system(editor, intent))

    @abstractmethod
    def _execute_system(self, editor: 'Editor', intent: 'Intent') -> Optional[bool]:
        """Perform the action."""
        pass


def _selection(intent: 'Intent'):
    if intent.selection is None:
        raise InvalidSelection(f"{intent.action.value} needs a selection")
    return intent.selection


def _payload(intent: 'Intent', key: str):
    try:
        return intent.payload[key]
    except KeyError:
        raise InvalidSelection(f"{intent.action.value} needs payload '{key}'") from None


class UpdateCellCommand(EditCommand):
    def _edit(self, editor, intent):
        cell_id = intent.payload.get("cell_id")
        if cell_id is None:
            cell_id = _selection(intent).start_cell
        editor.document = doc_ops.update_cell(
            editor.document, editor.target_index(intent), cell_id,
            _payload(intent, "text"), intent.selection,
        )


class SplitBlockCommand(EditCommand):
    def _edit(self, editor, intent):
        editor.document = doc_ops.split_block(
            editor.document, editor.target_index(intent), _selection(intent), editor.ids
        )


class SplitLineCommand(EditCommand):
    def _edit(self, editor, intent):
        editor.document = doc_ops.split_line(
            editor.document, editor.target_index(intent), _selection(intent)
        )


class BackspaceFromStartCommand(EditCommand):
    def _edit(self, editor, intent):
        editor.document = doc_ops.backspace_from_start(
            editor.document, editor.target_index(intent), editor.ids
        )


class PasteBlocksCommand(EditCommand):
    def _edit(self, editor, intent):
        editor.document = doc_ops.paste_blocks(
            editor.document, editor.target_index(intent), _selection(intent), editor.ids
        )


class PasteTextCommand(EditCommand):
    def _edit(self, editor, intent):
        text = intent.payload.get("text")
        if text is None:
            text = editor.clipboard.paste_text()
        blocks = doc_ops.blocks_from_text(text, editor.ids)
        if not blocks:
            editor.status_message = "Clipboard is empty"
            return
        editor.document = doc_ops.insert_blocks(
            editor.document, editor.target_index(intent), _selection(intent), blocks, editor.ids
        )


class DeleteBlocksCommand(EditCommand):
    def _edit(self, editor, intent):
        block_ids = intent.block_ids or tuple(editor.document.selected_block_ids)
        if not block_ids:
            editor.status_message = "No blocks selected"
            return
        editor.document = doc_ops.delete_blocks(editor.document, block_ids, editor.ids)


class CutBlocksCommand(EditCommand):
    def _edit(self, editor, intent):
        block_ids = intent.block_ids or editor.selected_in_order()
        if not block_ids:
            editor.status_message = "No blocks selected"
            return
        editor.copy_to_clipboard(block_ids)
        editor.document = doc_ops.delete_blocks(editor.document, block_ids, editor.ids)
        editor.status_message = "Blocks cut"


class UpdateCodeCommand(EditCommand):
    def _edit(self, editor, intent):
        editor.document = doc_ops.update_code(
            editor.document, editor.target_id(intent),
            content=intent.payload.get("content"),
            language=intent.payload.get("language"),
        )


class UpdateTableCellCommand(EditCommand):
    def _edit(self, editor, intent):
        editor.document = doc_ops.update_table_cell(
            editor.document, editor.target_id(intent),
            _payload(intent, "row"), _payload(intent, "column"), _payload(intent, "value"),
            header=bool(intent.payload.get("header", False)),
        )


class AddTableRowCommand(EditCommand):
    def _edit(self, editor, intent):
        editor.document = doc_ops.add_table_row(
            editor.document, editor.target_id(intent),
            row=intent.payload.get("row"), index=intent.payload.get("index"),
        )


class RemoveTableRowCommand(EditCommand):
    def _edit(self, editor, intent):
        editor.document = doc_ops.remove_table_row(
            editor.document, editor.target_id(intent), _payload(intent, "index")
        )


class SelectBlocksCommand(SystemCommand):
    def _execute_system(self, editor, intent):
        editor.document = doc_ops.select_blocks(editor.document, intent.block_ids)


class SetSelectionCommand(SystemCommand):
    def _execute_system(self, editor, intent):
        editor.document = doc_ops.set_selection(editor.document, intent.selection)


class CopyBlocksCommand(SystemCommand):
    def _execute_system(self, editor, intent):
        block_ids = intent.block_ids or editor.selected_in_order()
        if not block_ids:
            editor.status_message = "No blocks selected"
            return
        editor.copy_to_clipboard(block_ids)
        editor.status_message = "Blocks copied"


class UndoCommand(SystemCommand):
    def _execute_system(self, editor, intent):
        if editor.undo():
            editor.status_message = "Undone"
            return True
        editor.status_message = "Nothing to undo"
        return False


class RedoCommand(SystemCommand):
    def _execute_system(self, editor, intent):
        if editor.redo():
            editor.status_message = "Redone"
            return True
        editor.status_message = "Nothing to redo"
        return False


class CommandRegistry:
    """Registry for mapping actions to commands."""

    def __init__(self):
        self._commands: Dict[Action, EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Text and structure
        self.register(Action.UPDATE_CELL, UpdateCellCommand())
        self.register(Action.SPLIT_BLOCK, SplitBlockCommand())
        self.register(Action.SPLIT_LINE, SplitLineCommand())
        self.register(Action.BACKSPACE_FROM_START, BackspaceFromStartCommand())
        self.register(Action.DELETE_BLOCKS, DeleteBlocksCommand())

        # Clipboard
        self.register(Action.COPY_BLOCKS, CopyBlocksCommand())
        self.register(Action.CUT_BLOCKS, CutBlocksCommand())
        self.register(Action.PASTE_BLOCKS, PasteBlocksCommand())
        self.register(Action.PASTE_TEXT, PasteTextCommand())

        # Selection state
        self.register(Action.SELECT_BLOCKS, SelectBlocksCommand())
        self.register(Action.SET_SELECTION, SetSelectionCommand())

        # Table and code payloads
        self.register(Action.UPDATE_CODE, UpdateCodeCommand())
        self.register(Action.UPDATE_TABLE_CELL, UpdateTableCellCommand())
        self.register(Action.ADD_TABLE_ROW, AddTableRowCommand())
        self.register(Action.REMOVE_TABLE_ROW, RemoveTableRowCommand())

        # Undo/redo
        self.register(Action.UNDO, UndoCommand())
        self.register(Action.REDO, RedoCommand())

    def register(self, action: Action, command: EditorCommand):
        """Register a command for an action."""
        self._commands[action] = command

    def get_command(self, action: Action) -> Optional[EditorCommand]:
        """Get the command for an action."""
        return self._commands.get(action)

    def execute(self, editor: 'Editor', intent: 'Intent') -> bool:
        """Execute the command for the given intent.

        Returns:
            True if the document was modified
        """
        command = self.get_command(intent.action)
        if command is None:
            raise UnsupportedOperation(f"No command registered for {intent.action.value}")
        return command.execute(editor, intent)
