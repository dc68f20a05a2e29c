"""Blockmark - the editing core of a block-structured rich-text document."""

from .block import Block, CodeBlock, ContentBlock, Removed, Replaced, TableBlock
from .cell import Cell, Modifier
from .constants import BlockType, CellKind
from .document import Document
from .editor import Editor, EditResult
from .errors import EditorError, InvalidSelection, MalformedDocument, UnsupportedOperation
from .history import History
from .ids import RandomIds, SequentialIds
from .intent import Action, Intent
from .selection import Selection
from .serializer import normalize, serialize, to_html, to_plain_text

__all__ = [
    'Action',
    'Block',
    'BlockType',
    'Cell',
    'CellKind',
    'CodeBlock',
    'ContentBlock',
    'Document',
    'EditResult',
    'Editor',
    'EditorError',
    'History',
    'Intent',
    'InvalidSelection',
    'MalformedDocument',
    'Modifier',
    'RandomIds',
    'Removed',
    'Replaced',
    'Selection',
    'SequentialIds',
    'TableBlock',
    'UnsupportedOperation',
    'normalize',
    'serialize',
    'to_html',
    'to_plain_text',
]
