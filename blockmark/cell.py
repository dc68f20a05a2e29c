"""Cells: the smallest editable text run inside a block."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from .constants import CellKind
from .errors import InvalidSelection
from .ids import IdGenerator, resolve


@dataclass(frozen=True)
class Modifier:
    """Inline format marker covering ``text[start:end]``."""
    type: str
    start: int
    end: int

    def shifted(self, delta: int) -> "Modifier":
        return Modifier(self.type, self.start + delta, self.end + delta)

    def clipped(self, start: int, end: int) -> Optional["Modifier"]:
        """Restrict to ``[start, end)``; None if nothing is left."""
        lo = max(self.start, start)
        hi = min(self.end, end)
        if lo >= hi:
            return None
        return Modifier(self.type, lo, hi)


class CellBackspace(Enum):
    """What the owning block has to do after a cell handled backspace."""
    NONE = "none"
    DELETE = "delete"
    JOIN_TO_PREVIOUS = "join_to_previous"


def _window(modifiers, start: int, end: int) -> tuple[Modifier, ...]:
    # Clip to [start, end) and rebase so the window starts at 0
    out = []
    for m in modifiers:
        c = m.clipped(start, end)
        if c is not None:
            out.append(c.shifted(-start))
    return tuple(out)


@dataclass(frozen=True)
class Cell:
    id: str
    text: str = ""
    modifiers: tuple[Modifier, ...] = field(default_factory=tuple)
    kind: CellKind = CellKind.SPAN

    @classmethod
    def create(cls, text: str = "", ids: Optional[IdGenerator] = None,
               kind: CellKind = CellKind.SPAN) -> "Cell":
        return cls(id=resolve(ids)(), text=text, kind=kind)

    def __len__(self) -> int:
        return len(self.text)

    def check_offset(self, offset: int) -> None:
        """Raise InvalidSelection unless ``0 <= offset <= len(text)``."""
        if not isinstance(offset, int) or offset < 0 or offset > len(self.text):
            raise InvalidSelection(
                f"Offset {offset!r} out of bounds for cell {self.id} "
                f"(length {len(self.text)})"
            )


def update(cell: Cell, text: str) -> Cell:
    """Replace the text, keeping the id and whatever modifiers still fit."""
    return replace(cell, text=text, modifiers=_window(cell.modifiers, 0, len(text)))


def join(target: Cell, source: Cell) -> Cell:
    """Append ``source`` to ``target``; the result keeps target's id."""
    offset = len(target.text)
    modifiers = target.modifiers + tuple(m.shifted(offset) for m in source.modifiers)
    return replace(target, text=target.text + source.text, modifiers=modifiers)


def trim(cell: Cell, prefix_length: int) -> Cell:
    """Drop the first ``prefix_length`` characters (markdown wildcards)."""
    return slice_cell(cell, prefix_length, len(cell.text))


def slice_cell(cell: Cell, start: int, end: int) -> Cell:
    """Restrict the cell to ``text[start:end]``, keeping its id."""
    start = max(0, min(start, len(cell.text)))
    end = max(start, min(end, len(cell.text)))
    return replace(cell, text=cell.text[start:end],
                   modifiers=_window(cell.modifiers, start, end))


def clone(cell: Cell, ids: Optional[IdGenerator] = None) -> Cell:
    """Copy with a fresh id, so pasted content never collides."""
    return replace(cell, id=resolve(ids)())


def retag(cell: Cell, kind: CellKind) -> Cell:
    if cell.kind is kind:
        return cell
    return replace(cell, kind=kind)


def insert_text(cell: Cell, offset: int, text: str) -> Cell:
    """Insert ``text`` at ``offset``; modifiers after the caret move right."""
    cell.check_offset(offset)
    moved = []
    for m in cell.modifiers:
        if m.start >= offset:
            moved.append(m.shifted(len(text)))
        elif m.end > offset:
            moved.append(Modifier(m.type, m.start, m.end + len(text)))
        else:
            moved.append(m)
    new_text = cell.text[:offset] + text + cell.text[offset:]
    return replace(cell, text=new_text, modifiers=tuple(moved))


def backspace(cell: Cell, offset: int = 0) -> tuple[CellBackspace, Cell]:
    """Backspace with the caret at ``offset`` inside ``cell``.

    Returns the signal for the owning block together with the (possibly
    shortened) cell. An empty cell asks to be deleted, a caret at 0 asks
    to be joined into the previous cell, anything else deletes one
    character locally.
    """
    cell.check_offset(offset)
    if not cell.text:
        return CellBackspace.DELETE, cell
    if offset == 0:
        return CellBackspace.JOIN_TO_PREVIOUS, cell
    head = slice_cell(cell, 0, offset - 1)
    tail = slice_cell(cell, offset, len(cell.text))
    return CellBackspace.NONE, join(head, tail)
