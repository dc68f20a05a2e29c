"""Document model and the edit operations that cross block boundaries.

Every function here is pure: it takes a ``Document`` (plus the intent's
arguments) and returns a new ``Document``. Blocks are addressed by their
index in ``doc.blocks`` for caret-driven operations and by id for the
payload edits of table and code blocks.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Sequence

from . import block as blocks_
from . import cell as cells_
from .block import Block, CodeBlock, ContentBlock, Removed, TableBlock
from .constants import BlockType, EditorConstants
from .errors import InvalidSelection, UnsupportedOperation
from .ids import IdGenerator, resolve
from .selection import Selection


@dataclass(frozen=True)
class Document:
    """An ordered sequence of blocks plus editing state.

    Equality only looks at ``id`` and ``blocks``; the clipboard, the
    selected blocks and the caret are session state, not content.
    """
    id: str
    blocks: tuple[Block, ...] = ()
    selected_block_ids: frozenset = field(default_factory=frozenset, compare=False)
    clipboard: Optional[tuple[Block, ...]] = field(default=None, compare=False)
    selection: Optional[Selection] = field(default=None, compare=False)

    def __len__(self) -> int:
        return len(self.blocks)

    @property
    def block_ids(self) -> list[str]:
        return [b.id for b in self.blocks]


def new(ids: Optional[IdGenerator] = None,
        title: str = EditorConstants.SEED_TITLE,
        paragraph: str = EditorConstants.SEED_PARAGRAPH) -> Document:
    """A fresh document seeded with a heading and a paragraph."""
    gen = resolve(ids)
    doc_id = gen()
    heading = ContentBlock.create(BlockType.HEADING_1, gen, text=title)
    body = ContentBlock.create(BlockType.PARAGRAPH, gen, text=paragraph)
    return Document(id=doc_id, blocks=(heading, body))


def empty(ids: Optional[IdGenerator] = None) -> Document:
    """A document with a single empty paragraph to type into."""
    gen = resolve(ids)
    doc_id = gen()
    return Document(id=doc_id, blocks=(ContentBlock.create(ids=gen),))


# --- Lookup -----------------------------------------------------------------

def block_index(doc: Document, block_id: str) -> int:
    for i, b in enumerate(doc.blocks):
        if b.id == block_id:
            return i
    raise KeyError(f"Block {block_id} not found in document {doc.id}")


def block_at(doc: Document, index: int) -> Block:
    if not 0 <= index < len(doc.blocks):
        raise InvalidSelection(
            f"Block index {index} out of range (document has {len(doc.blocks)} blocks)"
        )
    return doc.blocks[index]


def _splice(doc: Document, index: int, new_blocks: Sequence[Block], **changes) -> Document:
    blocks = doc.blocks[:index] + tuple(new_blocks) + doc.blocks[index + 1:]
    return replace(doc, blocks=blocks, **changes)


def _caret_at_start(block: Block) -> Optional[Selection]:
    if isinstance(block, ContentBlock):
        return Selection.caret(block.cells[0].id, 0)
    return None


def _caret_at_end(block: Block) -> Optional[Selection]:
    if isinstance(block, ContentBlock):
        last = block.cells[-1]
        return Selection.caret(last.id, len(last.text))
    return None


# --- Selection state ----------------------------------------------------------

def select_blocks(doc: Document, block_ids: Iterable[str]) -> Document:
    return replace(doc, selected_block_ids=frozenset(block_ids))


def set_selection(doc: Document, selection: Optional[Selection]) -> Document:
    return replace(doc, selection=selection)


# --- Clipboard ------------------------------------------------------------------

def copy_blocks(doc: Document, block_ids: Iterable[str],
                ids: Optional[IdGenerator] = None) -> Document:
    """Put deep clones of the given blocks on the clipboard.

    Clones follow the order of ``block_ids``; unknown ids are skipped.
    """
    gen = resolve(ids)
    by_id = {b.id: b for b in doc.blocks}
    clipboard = tuple(by_id[bid].clone(gen) for bid in block_ids if bid in by_id)
    return replace(doc, clipboard=clipboard)


def insert_blocks(doc: Document, index: int, selection: Selection,
                  blocks: Sequence[Block], ids: Optional[IdGenerator] = None) -> Document:
    """Split the block at ``index`` at the selection and splice ``blocks`` in.

    Halves left without any text are dropped, so pasting at the end of a
    block adds exactly ``len(blocks)`` blocks.
    """
    if not blocks:
        return split_block(doc, index, selection, ids)
    target = blocks_.require_content(block_at(doc, index), "paste into")
    pre, post = blocks_.split(target, selection, ids)

    parts: list[Block] = []
    if not pre.is_empty:
        parts.append(pre)
    parts.extend(blocks)
    if not post.is_empty:
        parts.append(post)
        caret = _caret_at_start(post)
    else:
        caret = _caret_at_end(blocks[-1])
    return _splice(doc, index, parts, selection=caret)


def paste_blocks(doc: Document, index: int, selection: Selection,
                 ids: Optional[IdGenerator] = None) -> Document:
    """Paste the clipboard at the selection inside the block at ``index``.

    Clipboard blocks are cloned again so the same clipboard can be pasted
    any number of times without id collisions.
    """
    gen = resolve(ids)
    pasted = tuple(b.clone(gen) for b in (doc.clipboard or ()))
    return insert_blocks(doc, index, selection, pasted, gen)


def blocks_from_text(text: str, ids: Optional[IdGenerator] = None) -> tuple[ContentBlock, ...]:
    """One paragraph per line, each run through the auto-transform."""
    if not text:
        return ()
    gen = resolve(ids)
    return tuple(
        blocks_.resolve_transform(ContentBlock.create(ids=gen, text=line))
        for line in text.split("\n")
    )


# --- Structural edits -----------------------------------------------------------

def split_block(doc: Document, index: int, selection: Selection,
                ids: Optional[IdGenerator] = None) -> Document:
    """Break the block at ``index`` into two at the selection.

    Text before the selection stays in the original block; text after it
    moves into a new paragraph and the caret follows it. The
    auto-transform is not run on either half.
    """
    target = blocks_.require_content(block_at(doc, index), "split")
    pre, post = blocks_.split(target, selection, ids)
    return _splice(doc, index, (pre, post), selection=_caret_at_start(post))


def split_line(doc: Document, index: int, selection: Selection) -> Document:
    """Insert a soft line break at the selection, inside the start cell.

    A range is deleted first. At the end of a cell two breaks are
    inserted, since a single trailing break does not show as a line.
    """
    target = blocks_.require_content(block_at(doc, index), "split lines in")
    si, so, ei, eo = selection.resolve(target)
    head = cells_.slice_cell(target.cells[si], 0, so)
    tail = cells_.slice_cell(target.cells[ei], eo, len(target.cells[ei].text))

    brk = EditorConstants.LINE_BREAK
    if not tail.text and not head.text.endswith(brk):
        brk = brk * 2
    merged = cells_.join(cells_.insert_text(head, so, brk), tail)

    cells = target.cells[:si] + (merged,) + target.cells[ei + 1:]
    new_block = replace(target, cells=cells)
    caret = Selection.caret(merged.id, so + 1)
    return _splice(doc, index, (new_block,), selection=caret)


def update_cell(doc: Document, index: int, cell_id: str, text: str,
                selection: Optional[Selection] = None) -> Document:
    """Replace a cell's text, then run the auto-transform on its block.

    When a markdown prefix is stripped the caret moves left with the text.
    """
    target = blocks_.require_content(block_at(doc, index), "edit cells of")
    updated = blocks_.update_cell(target, cell_id, text)
    match = blocks_.match_transform(updated)
    transformed = blocks_.resolve_transform(updated)

    sel = selection if selection is not None else doc.selection
    if match is not None and sel is not None:
        first = transformed.cells[0]
        sel = _shift_selection(sel, first.id, len(match[0]), len(first.text))
    return _splice(doc, index, (transformed,), selection=sel)


def _shift_selection(sel: Selection, cell_id: str, delta: int, limit: int) -> Selection:
    def shift(cid, offset):
        if cid != cell_id:
            return offset
        return max(0, min(offset - delta, limit))

    return Selection(sel.start_cell, shift(sel.start_cell, sel.start_offset),
                     sel.end_cell, shift(sel.end_cell, sel.end_offset))


def backspace_from_start(doc: Document, index: int,
                         ids: Optional[IdGenerator] = None) -> Document:
    """Backspace with the caret at the very start of the block at ``index``.

    A downgraded block replaces the original in place. A removed block's
    text is joined onto the preceding text block. The document never ends
    up without blocks.
    """
    target = blocks_.require_content(block_at(doc, index), "backspace in")
    result = blocks_.backspace(target, target.cells[0].id, 0)

    if not isinstance(result, Removed):
        return _splice(doc, index, (result.block,), selection=_caret_at_start(result.block))

    previous = doc.blocks[index - 1] if index > 0 else None
    if isinstance(previous, ContentBlock):
        merged = blocks_.join_blocks(previous, target)
        blocks = doc.blocks[:index - 1] + (merged,) + doc.blocks[index + 1:]
        return replace(doc, blocks=blocks, selection=_caret_at_end(previous))

    if previous is not None and not target.is_empty:
        # Text cannot flow into a table or code block
        return doc

    remaining = doc.blocks[:index] + doc.blocks[index + 1:]
    return _ensure_not_empty(replace(doc, blocks=remaining, selection=None), ids)


def delete_blocks(doc: Document, block_ids: Iterable[str],
                  ids: Optional[IdGenerator] = None) -> Document:
    doomed = set(block_ids)
    remaining = tuple(b for b in doc.blocks if b.id not in doomed)
    return _ensure_not_empty(
        replace(doc, blocks=remaining,
                selected_block_ids=doc.selected_block_ids - doomed),
        ids,
    )


def _ensure_not_empty(doc: Document, ids: Optional[IdGenerator]) -> Document:
    if doc.blocks:
        return doc
    fresh = ContentBlock.create(ids=ids)
    return replace(doc, blocks=(fresh,), selection=_caret_at_start(fresh))


# --- Table and code payloads --------------------------------------------------

def _payload_block(doc: Document, block_id: str, cls: type, operation: str):
    try:
        index = block_index(doc, block_id)
    except KeyError as e:
        raise InvalidSelection(e.args[0]) from None
    target = doc.blocks[index]
    if not isinstance(target, cls):
        raise UnsupportedOperation(f"Cannot {operation} a {target.type.value} block")
    return index, target


def update_code(doc: Document, block_id: str, content: Optional[str] = None,
                language: Optional[str] = None) -> Document:
    index, target = _payload_block(doc, block_id, CodeBlock, "edit code in")
    changes = {}
    if content is not None:
        changes["content"] = content
    if language is not None:
        changes["language"] = language
    return _splice(doc, index, (replace(target, **changes),))


def update_table_cell(doc: Document, block_id: str, row: int, column: int,
                      value: str, header: bool = False) -> Document:
    index, target = _payload_block(doc, block_id, TableBlock, "edit table cells in")
    return _splice(doc, index, (target.with_cell(row, column, value, header),))


def add_table_row(doc: Document, block_id: str, row: Optional[Sequence[str]] = None,
                  index: Optional[int] = None) -> Document:
    pos, target = _payload_block(doc, block_id, TableBlock, "add rows to")
    return _splice(doc, pos, (target.with_row(row, index),))


def remove_table_row(doc: Document, block_id: str, index: int) -> Document:
    pos, target = _payload_block(doc, block_id, TableBlock, "remove rows from")
    return _splice(doc, pos, (target.without_row(index),))
