"""Blocks: typed sections of a document.

A ``ContentBlock`` holds an ordered, non-empty sequence of cells and owns
the markdown-like auto-transform, the backspace/downgrade state machine,
splitting and joining. ``TableBlock`` and ``CodeBlock`` carry their own
payloads instead of cells; they serialize, clone and render like any
other block but refuse the structural text operations.
"""

from __future__ import annotations

import html
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Union

from . import cell as cells_
from .cell import Cell, CellBackspace
from .constants import (
    BlockType,
    CellKind,
    DOWNGRADES,
    TEXT_BLOCK_TYPES,
    TRANSFORM_RULES,
)
from .errors import InvalidSelection, UnsupportedOperation
from .ids import IdGenerator, resolve
from .selection import Selection

_TAG_RE = re.compile(r"<[^>]*>")


def leaf_kind(block_type: BlockType) -> CellKind:
    """Cell kind every cell of a block of ``block_type`` carries."""
    if block_type is BlockType.UNORDERED_LIST_ITEM:
        return CellKind.LIST_ITEM
    return CellKind.SPAN


class Block(ABC):
    """Common capabilities of every block variant."""

    id: str

    @property
    @abstractmethod
    def type(self) -> BlockType:
        """Semantic type of the block."""

    @abstractmethod
    def clone(self, ids: Optional[IdGenerator] = None) -> "Block":
        """Deep copy with fresh ids."""

    @abstractmethod
    def to_html(self) -> str:
        """Render the block as an HTML fragment."""

    @abstractmethod
    def to_text(self) -> str:
        """Plain text content of the block."""


@dataclass(frozen=True)
class ContentBlock(Block):
    id: str
    type: BlockType = BlockType.PARAGRAPH
    cells: tuple[Cell, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.type not in TEXT_BLOCK_TYPES:
            raise ValueError(f"{self.type} is not a text block type")
        if not self.cells:
            raise ValueError(f"Block {self.id} has no cells")

    @classmethod
    def create(cls, type: BlockType = BlockType.PARAGRAPH,
               ids: Optional[IdGenerator] = None, text: str = "") -> "ContentBlock":
        gen = resolve(ids)
        block_id = gen()
        return cls(id=block_id, type=type,
                   cells=(Cell.create(text, gen, kind=leaf_kind(type)),))

    @property
    def text(self) -> str:
        return "".join(c.text for c in self.cells)

    @property
    def is_empty(self) -> bool:
        return not any(c.text for c in self.cells)

    def cell_index(self, cell_id: str) -> int:
        for i, c in enumerate(self.cells):
            if c.id == cell_id:
                return i
        raise InvalidSelection(f"Cell {cell_id} not found in block {self.id}")

    def clone(self, ids: Optional[IdGenerator] = None) -> "ContentBlock":
        gen = resolve(ids)
        block_id = gen()
        return replace(self, id=block_id,
                       cells=tuple(cells_.clone(c, gen) for c in self.cells))

    def to_html(self) -> str:
        tag = self.type.value
        inner = "".join(f"<span>{c.text}</span>" for c in self.cells)
        return f"<{tag}>{inner}</{tag}>"

    def to_text(self) -> str:
        # Cell text is HTML-flavoured (entities such as &nbsp;)
        return "".join(html.unescape(_TAG_RE.sub("", c.text)) for c in self.cells)


@dataclass(frozen=True)
class TableBlock(Block):
    id: str
    header_rows: tuple[tuple[str, ...], ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()

    @property
    def type(self) -> BlockType:
        return BlockType.TABLE

    @classmethod
    def create(cls, header_rows: Sequence[Sequence[str]] = (),
               rows: Sequence[Sequence[str]] = (),
               ids: Optional[IdGenerator] = None) -> "TableBlock":
        return cls(id=resolve(ids)(),
                   header_rows=tuple(tuple(r) for r in header_rows),
                   rows=tuple(tuple(r) for r in rows))

    def clone(self, ids: Optional[IdGenerator] = None) -> "TableBlock":
        return replace(self, id=resolve(ids)())

    def with_cell(self, row: int, column: int, value: str, header: bool = False) -> "TableBlock":
        table = self.header_rows if header else self.rows
        if not 0 <= row < len(table) or not 0 <= column < len(table[row]):
            raise InvalidSelection(
                f"No {'header ' if header else ''}cell at ({row}, {column}) in table {self.id}"
            )
        new_row = table[row][:column] + (value,) + table[row][column + 1:]
        new_table = table[:row] + (new_row,) + table[row + 1:]
        if header:
            return replace(self, header_rows=new_table)
        return replace(self, rows=new_table)

    def with_row(self, row: Optional[Sequence[str]] = None,
                 index: Optional[int] = None) -> "TableBlock":
        """Insert a body row; by default an empty row as wide as the table."""
        if row is None:
            width = max((len(r) for r in self.header_rows + self.rows), default=1)
            row = ("",) * width
        if index is None:
            index = len(self.rows)
        if not 0 <= index <= len(self.rows):
            raise InvalidSelection(f"Row index {index} out of range in table {self.id}")
        return replace(self, rows=self.rows[:index] + (tuple(row),) + self.rows[index:])

    def without_row(self, index: int) -> "TableBlock":
        if not 0 <= index < len(self.rows):
            raise InvalidSelection(f"Row index {index} out of range in table {self.id}")
        return replace(self, rows=self.rows[:index] + self.rows[index + 1:])

    def to_html(self) -> str:
        def cells(row, tag):
            return "".join(f"<{tag}>{html.escape(v)}</{tag}>" for v in row)

        head = "".join(f"<tr>{cells(r, 'th')}</tr>" for r in self.header_rows)
        body = "".join(f"<tr>{cells(r, 'td')}</tr>" for r in self.rows)
        return f"<table><thead>{head}</thead><tbody>{body}</tbody></table>"

    def to_text(self) -> str:
        return "".join("".join(r) for r in self.header_rows + self.rows)


@dataclass(frozen=True)
class CodeBlock(Block):
    id: str
    content: str = ""
    language: str = ""

    @property
    def type(self) -> BlockType:
        return BlockType.CODE

    @classmethod
    def create(cls, content: str = "", language: str = "",
               ids: Optional[IdGenerator] = None) -> "CodeBlock":
        return cls(id=resolve(ids)(), content=content, language=language)

    def clone(self, ids: Optional[IdGenerator] = None) -> "CodeBlock":
        return replace(self, id=resolve(ids)())

    def to_html(self) -> str:
        lang = html.escape(self.language)
        return f'<pre><code class="language-{lang}">{html.escape(self.content)}</code></pre>'

    def to_text(self) -> str:
        return self.content


# --- Backspace result -------------------------------------------------------

@dataclass(frozen=True)
class Removed:
    """The whole block should leave the document."""


@dataclass(frozen=True)
class Replaced:
    """The block survives in a new shape."""
    block: ContentBlock


BackspaceResult = Union[Removed, Replaced]


# --- Operations ---------------------------------------------------------------

def require_content(block: Block, operation: str) -> ContentBlock:
    """Return ``block`` if it has cells, else raise UnsupportedOperation."""
    if not isinstance(block, ContentBlock):
        raise UnsupportedOperation(f"Cannot {operation} a {block.type.value} block")
    return block


def update_cell(block: ContentBlock, cell_id: str, text: str) -> ContentBlock:
    """Replace one cell's text. Does not run the auto-transform."""
    block = require_content(block, "edit cells of")
    i = block.cell_index(cell_id)
    new_cells = block.cells[:i] + (cells_.update(block.cells[i], text),) + block.cells[i + 1:]
    return replace(block, cells=new_cells)


def match_transform(block: ContentBlock) -> Optional[tuple[str, BlockType]]:
    """Return the ``(prefix, type)`` rule the block would trigger, if any.

    Only paragraphs are transformed. A heading, quote, preformatted or list
    block keeps its type even when its text starts with a trigger prefix,
    so ``"# x"`` typed into an h2 stays an h2 with that literal text. This
    also means running the transform on its own output never matches again.
    """
    block = require_content(block, "transform")
    if block.type is not BlockType.PARAGRAPH:
        return None
    first = block.cells[0].text
    for prefix, target in TRANSFORM_RULES:
        if first.startswith(prefix):
            return prefix, target
    return None


def resolve_transform(block: ContentBlock) -> ContentBlock:
    """Apply the markdown-like prefix rules to the block's first cell."""
    match = match_transform(block)
    if match is None:
        return block
    prefix, target = match
    first, rest = block.cells[0], block.cells[1:]
    new_cells = (cells_.trim(first, len(prefix)),) + rest
    if target is BlockType.UNORDERED_LIST_ITEM:
        new_cells = tuple(cells_.retag(c, CellKind.LIST_ITEM) for c in new_cells)
    return replace(block, type=target, cells=new_cells)


def downgrade(block: ContentBlock) -> ContentBlock:
    """One step down h1 > h2 > h3 > p; pre and li go straight to p."""
    block = require_content(block, "downgrade")
    return replace(block, type=DOWNGRADES.get(block.type, block.type))


def _retag_all(block: ContentBlock, kind: CellKind) -> ContentBlock:
    return replace(block, cells=tuple(cells_.retag(c, kind) for c in block.cells))


def backspace(block: ContentBlock, cell_id: str, offset: int = 0) -> BackspaceResult:
    """Backspace with the caret at ``offset`` in the cell ``cell_id``.

    At the very start of the block a paragraph asks to be removed and any
    other type is downgraded one step, its cells stripped back to plain
    spans. Inside a later cell the cell decides: an empty cell is
    deleted, a caret at 0 joins the cell into its predecessor.
    """
    block = require_content(block, "backspace in")
    i = block.cell_index(cell_id)
    target = block.cells[i]
    target.check_offset(offset)

    if i == 0 and offset == 0:
        if block.type is BlockType.PARAGRAPH:
            return Removed()
        return Replaced(_retag_all(downgrade(block), CellKind.SPAN))

    signal, new_cell = cells_.backspace(target, offset)
    cells = block.cells
    if signal is CellBackspace.DELETE:
        cells = cells[:i] + cells[i + 1:]
    elif signal is CellBackspace.JOIN_TO_PREVIOUS:
        joined = cells_.join(cells[i - 1], target)
        cells = cells[:i - 1] + (joined,) + cells[i + 1:]
    else:
        cells = cells[:i] + (new_cell,) + cells[i + 1:]
    return Replaced(replace(block, cells=cells))


def split(block: ContentBlock, selection: Selection,
          ids: Optional[IdGenerator] = None) -> tuple[ContentBlock, ContentBlock]:
    """Cut ``block`` at ``selection`` into a ``(pre, post)`` pair.

    ``pre`` keeps the block id, type and the boundary cell's id. ``post``
    is a fresh paragraph whose boundary cell gets a fresh id. Selected
    text belongs to neither half.
    """
    block = require_content(block, "split")
    gen = resolve(ids)
    si, so, ei, eo = selection.resolve(block)
    start_cell, end_cell = block.cells[si], block.cells[ei]

    head = block.cells[:si] + (cells_.slice_cell(start_cell, 0, so),)
    pre = replace(block, cells=head)

    post_id = gen()
    boundary = cells_.clone(cells_.slice_cell(end_cell, eo, len(end_cell.text)), gen)
    tail = (boundary,) + block.cells[ei + 1:]
    post = ContentBlock(
        id=post_id,
        type=BlockType.PARAGRAPH,
        cells=tuple(cells_.retag(c, CellKind.SPAN) for c in tail),
    )
    return pre, post


def join_blocks(target: ContentBlock, source: ContentBlock) -> ContentBlock:
    """Splice ``source``'s text onto the end of ``target``.

    The first source cell is joined into target's last cell; remaining
    source cells are appended with target's leaf kind.
    """
    target = require_content(target, "join into")
    source = require_content(source, "join")
    kind = leaf_kind(target.type)
    last = cells_.join(target.cells[-1], source.cells[0])
    rest = tuple(cells_.retag(c, kind) for c in source.cells[1:])
    return replace(target, cells=target.cells[:-1] + (last,) + rest)
