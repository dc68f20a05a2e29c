"""Undo/redo history of document snapshots."""

from dataclasses import dataclass, replace
from typing import Optional

from .constants import EditorConstants
from .document import Document


@dataclass(frozen=True)
class History:
    past: tuple[Document, ...] = ()
    future: tuple[Document, ...] = ()
    limit: int = EditorConstants.DEFAULT_HISTORY_LIMIT

    def record(self, snapshot: Document) -> "History":
        past = self.past + (snapshot,)
        # Cap history
        if len(past) > self.limit:
            past = past[len(past) - self.limit:]
        # Any new edit invalidates redo history
        return replace(self, past=past, future=())

    def clear(self) -> "History":
        return replace(self, past=(), future=())

    def can_undo(self) -> bool:
        return bool(self.past)

    def can_redo(self) -> bool:
        return bool(self.future)

    def undo(self, current: Document) -> Optional[tuple["History", Document]]:
        if not self.past:
            return None
        restored = self.past[-1]
        return replace(self, past=self.past[:-1], future=self.future + (current,)), restored

    def redo(self, current: Document) -> Optional[tuple["History", Document]]:
        if not self.future:
            return None
        restored = self.future[-1]
        return replace(self, past=self.past + (current,), future=self.future[:-1]), restored
