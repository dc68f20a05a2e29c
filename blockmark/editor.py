"""Editor session: the current document, its history and the dispatcher.

Hosts turn raw input into an ``Intent`` and call ``Editor.dispatch``; the
returned ``EditResult`` names the blocks that need re-rendering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

from . import document as doc_ops
from .clipboard import ClipboardManager
from .commands import CommandRegistry
from .document import Document
from .errors import InvalidSelection
from .history import History
from .ids import IdGenerator, from_strategy
from .intent import Intent
from .serializer import normalize, serialize
from .settings import EditorSettings, get_settings_store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditResult:
    """The document after an intent plus what changed in it."""
    document: Document
    inserted: tuple[str, ...] = ()
    updated: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    modified: bool = False
    message: Optional[str] = None

    @property
    def changed(self) -> bool:
        return bool(self.inserted or self.updated or self.removed)


def describe_changes(before: Document, after: Document) -> tuple[tuple[str, ...], ...]:
    """Return ``(inserted, updated, removed)`` block ids between two documents."""
    old = {b.id: b for b in before.blocks}
    new_ids = {b.id for b in after.blocks}
    inserted = tuple(b.id for b in after.blocks if b.id not in old)
    updated = tuple(b.id for b in after.blocks if b.id in old and old[b.id] != b)
    removed = tuple(b.id for b in before.blocks if b.id not in new_ids)
    return inserted, updated, removed


class Editor:
    """Editing session controller."""

    def __init__(self, document: Optional[Document] = None,
                 settings: Optional[EditorSettings] = None,
                 ids: Optional[IdGenerator] = None,
                 clipboard: Optional[ClipboardManager] = None):
        if settings is None:
            settings = get_settings_store().load()
        self.settings = settings
        self.ids = ids or from_strategy(self.settings.id_strategy)
        if document is None:
            document = doc_ops.new(self.ids, title=self.settings.seed_title,
                                   paragraph=self.settings.seed_paragraph)
        self.document = document
        self.history = History(limit=self.settings.history_limit)
        self.clipboard = clipboard or ClipboardManager()
        self.command_registry = CommandRegistry()
        self.modified = False
        self.status_message: Optional[str] = None

    @classmethod
    def from_json(cls, data: Any, **kwargs) -> "Editor":
        """Start a session on a persisted document (canonical JSON shape)."""
        ids = kwargs.get("ids")
        return cls(document=normalize(data, ids), **kwargs)

    def to_json(self) -> dict:
        return serialize(self.document)

    def dispatch(self, intent: Intent) -> EditResult:
        """Apply an intent and describe the outcome.

        Errors (InvalidSelection, UnsupportedOperation) propagate; the
        document is left untouched when they do.
        """
        before = self.document
        self.status_message = None
        logger.debug(f"dispatch {intent.action.value} block_index={intent.block_index} "
                     f"block_id={intent.block_id}")
        was_modified = self.command_registry.execute(self, intent)
        if was_modified:
            self.modified = True
        inserted, updated, removed = describe_changes(before, self.document)
        return EditResult(
            document=self.document,
            inserted=inserted,
            updated=updated,
            removed=removed,
            modified=was_modified,
            message=self.status_message,
        )

    def undo(self) -> bool:
        result = self.history.undo(self.document)
        if result is None:
            logger.info("Nothing to undo")
            return False
        self.history, restored = result
        # The clipboard is session state and survives undo
        self.document = replace(restored, clipboard=self.document.clipboard)
        return True

    def redo(self) -> bool:
        result = self.history.redo(self.document)
        if result is None:
            logger.info("Nothing to redo")
            return False
        self.history, restored = result
        self.document = replace(restored, clipboard=self.document.clipboard)
        return True

    # --- helpers used by commands ---

    def target_index(self, intent: Intent) -> int:
        if intent.block_index is not None:
            return intent.block_index
        if intent.block_id is not None:
            try:
                return doc_ops.block_index(self.document, intent.block_id)
            except KeyError as e:
                raise InvalidSelection(e.args[0]) from None
        raise InvalidSelection(f"{intent.action.value} needs block_index or block_id")

    def target_id(self, intent: Intent) -> str:
        if intent.block_id is not None:
            return intent.block_id
        return doc_ops.block_at(self.document, self.target_index(intent)).id

    def selected_in_order(self) -> tuple[str, ...]:
        """Selected block ids in document order."""
        selected = self.document.selected_block_ids
        return tuple(b.id for b in self.document.blocks if b.id in selected)

    def copy_to_clipboard(self, block_ids: Sequence[str]) -> None:
        self.document = doc_ops.copy_blocks(self.document, block_ids, self.ids)
        if self.settings.mirror_system_clipboard:
            self.clipboard.copy_blocks(self.document.clipboard or ())
