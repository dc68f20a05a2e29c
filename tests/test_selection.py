"""Tests for selections."""

import pytest

from blockmark.block import ContentBlock
from blockmark.cell import Cell
from blockmark.errors import InvalidSelection
from blockmark.selection import Selection

BLOCK = ContentBlock(id="b", cells=(Cell("a", "abc"), Cell("z", "de")))


def test_caret_is_collapsed():
    assert Selection.caret("a", 1).is_collapsed
    assert not Selection("a", 1, "a", 2).is_collapsed


def test_resolve_forward_and_backward():
    assert Selection("a", 1, "z", 2).resolve(BLOCK) == (0, 1, 1, 2)
    assert Selection("z", 2, "a", 1).resolve(BLOCK) == (0, 1, 1, 2)
    assert Selection("a", 3, "a", 1).resolve(BLOCK) == (0, 1, 0, 3)


@pytest.mark.parametrize("selection", [
    Selection.caret("missing", 0),
    Selection.caret("a", 4),
    Selection.caret("a", -1),
    Selection("a", 0, "z", 3),
])
def test_resolve_fails_fast(selection):
    with pytest.raises(InvalidSelection):
        selection.resolve(BLOCK)


def test_dict_round_trip():
    selection = Selection("a", 1, "z", 2)
    assert Selection.from_dict(selection.to_dict()) == selection


def test_from_dict_rejects_incomplete_input():
    with pytest.raises(InvalidSelection):
        Selection.from_dict({"start_cell": "a", "start_offset": 0})
    with pytest.raises(InvalidSelection):
        Selection.from_dict({"start_cell": "a", "start_offset": "x",
                             "end_cell": "a", "end_offset": 0})
