"""Structured edit intents sent by a host."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .selection import Selection


class Action(Enum):
    """Things a host can ask the editor to do."""
    UPDATE_CELL = "update_cell"
    SPLIT_BLOCK = "split_block"
    SPLIT_LINE = "split_line"
    BACKSPACE_FROM_START = "backspace_from_start"
    SELECT_BLOCKS = "select_blocks"
    SET_SELECTION = "set_selection"
    COPY_BLOCKS = "copy_blocks"
    CUT_BLOCKS = "cut_blocks"
    PASTE_BLOCKS = "paste_blocks"
    PASTE_TEXT = "paste_text"
    DELETE_BLOCKS = "delete_blocks"
    UPDATE_CODE = "update_code"
    UPDATE_TABLE_CELL = "update_table_cell"
    ADD_TABLE_ROW = "add_table_row"
    REMOVE_TABLE_ROW = "remove_table_row"
    UNDO = "undo"
    REDO = "redo"


@dataclass
class Intent:
    """A parsed input event: what to do and where.

    The target block is given either by ``block_index`` or by
    ``block_id``. ``payload`` carries action-specific values such as the
    new cell text or a table coordinate.
    """
    action: Action
    block_index: Optional[int] = None
    block_id: Optional[str] = None
    selection: Optional[Selection] = None
    block_ids: tuple[str, ...] = ()
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Intent":
        """Build an intent from a host message such as
        ``{"action": "split_block", "block_index": 0, "selection": {...}}``.
        """
        selection = data.get("selection")
        return cls(
            action=Action(data["action"]),
            block_index=data.get("block_index"),
            block_id=data.get("block_id"),
            selection=Selection.from_dict(selection) if selection else None,
            block_ids=tuple(data.get("block_ids", ())),
            payload=dict(data.get("payload", {})),
        )
