"""Selections expressed as (cell id, offset) pairs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

from .errors import InvalidSelection

if TYPE_CHECKING:
    from .block import ContentBlock


@dataclass(frozen=True)
class Selection:
    start_cell: str
    start_offset: int
    end_cell: str
    end_offset: int

    @classmethod
    def caret(cls, cell_id: str, offset: int) -> "Selection":
        return cls(cell_id, offset, cell_id, offset)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Selection":
        """Accept ``start_cell``/``start_id`` style keys from a host."""
        try:
            start = data.get("start_cell", data.get("start_id"))
            end = data.get("end_cell", data.get("end_id"))
            if start is None or end is None:
                raise KeyError("start_cell/end_cell")
            return cls(start, int(data["start_offset"]), end, int(data["end_offset"]))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidSelection(f"Cannot read selection from {data!r}: {e}") from e

    def to_dict(self) -> dict:
        return {
            "start_cell": self.start_cell,
            "start_offset": self.start_offset,
            "end_cell": self.end_cell,
            "end_offset": self.end_offset,
        }

    @property
    def is_collapsed(self) -> bool:
        return self.start_cell == self.end_cell and self.start_offset == self.end_offset

    def resolve(self, block: "ContentBlock") -> tuple[int, int, int, int]:
        """Map the selection onto ``block``.

        Returns ``(start_index, start_offset, end_index, end_offset)`` with
        start before end in document order. Raises InvalidSelection when a
        cell is missing from the block or an offset is out of bounds.
        """
        start_index = block.cell_index(self.start_cell)
        end_index = block.cell_index(self.end_cell)
        block.cells[start_index].check_offset(self.start_offset)
        block.cells[end_index].check_offset(self.end_offset)
        start = (start_index, self.start_offset)
        end = (end_index, self.end_offset)
        # Backward selections (anchor after focus) are normalized
        if end < start:
            start, end = end, start
        return start[0], start[1], end[0], end[1]
