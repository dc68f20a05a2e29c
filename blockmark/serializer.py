"""Canonical JSON round trip and the plain-text/HTML projections.

Shape::

    Document := {"id": str, "blocks": [Block, ...]}
    Block    := {"id", "type": p|h1|h2|h3|blockquote|pre|li, "content": [Cell, ...]}
              | {"id", "type": "table", "header_rows": [[str]], "rows": [[str]]}
              | {"id", "type": "code", "content": str, "language": str}
    Cell     := {"id", "modifiers": [{"type", "start", "end"}], "text": str}

Hosts (renderers, persistence) only ever see this shape.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from .block import Block, CodeBlock, ContentBlock, TableBlock, leaf_kind
from .cell import Cell, Modifier
from .constants import BlockType, TEXT_BLOCK_TYPES, TYPE_ALIASES
from .document import Document
from .errors import MalformedDocument
from .ids import IdGenerator, resolve


# --- serialize -------------------------------------------------------------------

def serialize(doc: Document) -> dict:
    return {"id": doc.id, "blocks": [serialize_block(b) for b in doc.blocks]}


def serialize_block(block: Block) -> dict:
    if isinstance(block, ContentBlock):
        return {
            "id": block.id,
            "type": block.type.value,
            "content": [serialize_cell(c) for c in block.cells],
        }
    if isinstance(block, TableBlock):
        return {
            "id": block.id,
            "type": BlockType.TABLE.value,
            "header_rows": [list(r) for r in block.header_rows],
            "rows": [list(r) for r in block.rows],
        }
    if isinstance(block, CodeBlock):
        return {
            "id": block.id,
            "type": BlockType.CODE.value,
            "content": block.content,
            "language": block.language,
        }
    raise TypeError(f"Cannot serialize {block!r}")


def serialize_cell(cell: Cell) -> dict:
    return {
        "id": cell.id,
        "modifiers": [{"type": m.type, "start": m.start, "end": m.end} for m in cell.modifiers],
        "text": cell.text,
    }


def dumps(doc: Document, **kwargs) -> str:
    return json.dumps(serialize(doc), **kwargs)


# --- normalize -------------------------------------------------------------------

def _require(data: Mapping, key: str, kind: type, where: str):
    if key not in data:
        raise MalformedDocument(f"{where} is missing '{key}'")
    value = data[key]
    if not isinstance(value, kind):
        raise MalformedDocument(
            f"{where}: '{key}' must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _block_type(raw: Any, where: str) -> BlockType:
    if isinstance(raw, str):
        if raw in TYPE_ALIASES:
            return TYPE_ALIASES[raw]
        try:
            return BlockType(raw)
        except ValueError:
            pass
    raise MalformedDocument(f"{where}: unknown block type {raw!r}")


def normalize(data: Any, ids: Optional[IdGenerator] = None) -> Document:
    """Build a Document from its canonical JSON shape.

    A missing top-level id gets a fresh one. Anything else that is missing
    or unrecognised raises MalformedDocument.
    """
    if not isinstance(data, Mapping):
        raise MalformedDocument(f"Document must be an object, got {type(data).__name__}")
    blocks_data = _require(data, "blocks", list, "document")
    doc_id = data.get("id")
    if doc_id is None:
        doc_id = resolve(ids)()
    elif not isinstance(doc_id, str):
        raise MalformedDocument("document: 'id' must be str")

    blocks = tuple(normalize_block(b, f"blocks[{i}]") for i, b in enumerate(blocks_data))
    _check_unique_ids(blocks)
    return Document(id=doc_id, blocks=blocks)


def normalize_block(data: Any, where: str = "block") -> Block:
    if not isinstance(data, Mapping):
        raise MalformedDocument(f"{where} must be an object")
    block_id = _require(data, "id", str, where)
    block_type = _block_type(data.get("type"), where)

    if block_type in TEXT_BLOCK_TYPES:
        content = _require(data, "content", list, where)
        if not content:
            raise MalformedDocument(f"{where} has no cells")
        kind = leaf_kind(block_type)
        cells = tuple(
            normalize_cell(c, kind, f"{where}.content[{i}]") for i, c in enumerate(content)
        )
        return ContentBlock(id=block_id, type=block_type, cells=cells)

    if block_type is BlockType.TABLE:
        header_rows = _rows(data.get("header_rows", []), f"{where}.header_rows")
        rows = _rows(data.get("rows", []), f"{where}.rows")
        return TableBlock(id=block_id, header_rows=header_rows, rows=rows)

    content = _require(data, "content", str, where)
    language = _require(data, "language", str, where)
    return CodeBlock(id=block_id, content=content, language=language)


def _rows(raw: Any, where: str) -> tuple[tuple[str, ...], ...]:
    if not isinstance(raw, list) or not all(
        isinstance(r, list) and all(isinstance(v, str) for v in r) for r in raw
    ):
        raise MalformedDocument(f"{where} must be a list of lists of strings")
    return tuple(tuple(r) for r in raw)


def normalize_cell(data: Any, kind, where: str = "cell") -> Cell:
    if not isinstance(data, Mapping):
        raise MalformedDocument(f"{where} must be an object")
    cell_id = _require(data, "id", str, where)
    text = _require(data, "text", str, where)
    raw_modifiers = _require(data, "modifiers", list, where)
    modifiers = tuple(
        _modifier(m, len(text), f"{where}.modifiers[{i}]") for i, m in enumerate(raw_modifiers)
    )
    return Cell(id=cell_id, text=text, modifiers=modifiers, kind=kind)


def _modifier(raw: Any, length: int, where: str) -> Modifier:
    # A bare string marks the whole cell
    if isinstance(raw, str):
        return Modifier(raw, 0, length)
    if isinstance(raw, Mapping):
        mtype = _require(raw, "type", str, where)
        start = raw.get("start", 0)
        end = raw.get("end", length)
        if (isinstance(start, int) and isinstance(end, int)
                and 0 <= start <= end <= length):
            return Modifier(mtype, start, end)
        raise MalformedDocument(f"{where}: range {start!r}..{end!r} outside text")
    raise MalformedDocument(f"{where} must be a string or an object")


def _check_unique_ids(blocks) -> None:
    seen = set()
    for b in blocks:
        owned = [b.id] + [c.id for c in getattr(b, "cells", ())]
        for i in owned:
            if i in seen:
                raise MalformedDocument(f"Duplicate id {i!r}")
            seen.add(i)


def loads(text: str, ids: Optional[IdGenerator] = None) -> Document:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDocument(f"Invalid JSON: {e}") from e
    return normalize(data, ids)


# --- projections -----------------------------------------------------------------

def to_plain_text(doc: Document) -> str:
    """All text in document order. Blocks are not separated."""
    return "".join(b.to_text() for b in doc.blocks)


def to_html(doc: Document) -> str:
    """One element per block, no whitespace between blocks."""
    return "".join(b.to_html() for b in doc.blocks)
