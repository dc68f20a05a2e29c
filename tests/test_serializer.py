"""Tests for the canonical JSON round trip and text/HTML projections."""

import json

import pytest

from blockmark import serializer
from blockmark.block import CodeBlock, ContentBlock, TableBlock, resolve_transform
from blockmark.cell import Cell, Modifier
from blockmark.constants import BlockType, CellKind
from blockmark.document import Document
from blockmark.errors import MalformedDocument
from blockmark.ids import SequentialIds
from blockmark.selection import Selection


def rich_doc():
    return Document(id="doc", blocks=(
        ContentBlock(id="h", type=BlockType.HEADING_1, cells=(Cell("h-1", "Title"),)),
        ContentBlock(id="p", cells=(
            Cell("p-1", "plain "),
            Cell("p-2", "bold", (Modifier("strong", 0, 4),)),
        )),
        ContentBlock(id="l", type=BlockType.UNORDERED_LIST_ITEM,
                     cells=(Cell("l-1", "item", kind=CellKind.LIST_ITEM),)),
        TableBlock(id="t", header_rows=(("a", "b"),), rows=(("1", "2"), ("3", "4"))),
        CodeBlock(id="k", content="x < 1", language="python"),
    ))


def test_serialize_shape():
    doc = Document(id="d", blocks=(
        ContentBlock(id="b", cells=(Cell("c", "hi", (Modifier("em", 0, 2),)),)),
    ))
    assert serializer.serialize(doc) == {
        "id": "d",
        "blocks": [{
            "id": "b",
            "type": "p",
            "content": [{"id": "c", "modifiers": [{"type": "em", "start": 0, "end": 2}],
                         "text": "hi"}],
        }],
    }


def test_payload_blocks_serialize():
    data = serializer.serialize(rich_doc())
    assert data["blocks"][3] == {
        "id": "t", "type": "table",
        "header_rows": [["a", "b"]], "rows": [["1", "2"], ["3", "4"]],
    }
    assert data["blocks"][4] == {
        "id": "k", "type": "code", "content": "x < 1", "language": "python",
    }


def test_round_trip():
    """Test normalize(serialize(doc)) == doc for every block variant."""
    doc = rich_doc()
    assert serializer.normalize(serializer.serialize(doc)) == doc
    assert serializer.loads(serializer.dumps(doc)) == doc


def test_round_trip_ignores_editing_state():
    doc = Document(id="d", blocks=rich_doc().blocks, selection=Selection.caret("h-1", 1),
                   clipboard=rich_doc().blocks[:1])
    assert serializer.normalize(serializer.serialize(doc)) == doc


def test_list_cells_are_tagged_on_normalize():
    data = {"id": "d", "blocks": [{
        "id": "l", "type": "ul",
        "content": [{"id": "c", "modifiers": [], "text": "x"}],
    }]}
    doc = serializer.normalize(data)
    assert doc.blocks[0].cells[0].kind is CellKind.LIST_ITEM


def test_list_items_serialize_as_li():
    """Test that transformed list items go out as "li" and stay that way."""
    block = resolve_transform(ContentBlock(id="b", cells=(Cell("c", "* x"),)))
    data = serializer.serialize(Document(id="d", blocks=(block,)))
    assert data["blocks"][0]["type"] == "li"
    again = serializer.serialize(serializer.normalize(data))
    assert again["blocks"][0]["type"] == "li"
    assert serializer.to_html(Document(id="d", blocks=(block,))) == "<li><span>x</span></li>"


@pytest.mark.parametrize("alias, expected", [
    ("paragraph", BlockType.PARAGRAPH),
    ("heading-1", BlockType.HEADING_1),
    ("heading-2", BlockType.HEADING_2),
    ("heading-3", BlockType.HEADING_3),
    ("preformatted", BlockType.PREFORMATTED),
    ("unordered-list-item", BlockType.UNORDERED_LIST_ITEM),
    ("ul", BlockType.UNORDERED_LIST_ITEM),
    ("blockquote", BlockType.BLOCKQUOTE),
])
def test_type_aliases(alias, expected):
    data = {"id": "d", "blocks": [{
        "id": "b", "type": alias, "content": [{"id": "c", "modifiers": [], "text": ""}],
    }]}
    block = serializer.normalize(data).blocks[0]
    assert block.type is expected
    assert serializer.serialize_block(block)["type"] == expected.value


def test_missing_document_id_is_generated():
    doc = serializer.normalize({"blocks": []}, SequentialIds("gen"))
    assert doc.id == "gen1"


def test_table_rows_default_to_empty():
    doc = serializer.normalize({"id": "d", "blocks": [{"id": "t", "type": "table"}]})
    assert doc.blocks[0] == TableBlock(id="t")


def test_bare_string_modifier_covers_cell():
    data = {"id": "d", "blocks": [{
        "id": "b", "type": "p", "content": [{"id": "c", "modifiers": ["strong"], "text": "abc"}],
    }]}
    cell = serializer.normalize(data).blocks[0].cells[0]
    assert cell.modifiers == (Modifier("strong", 0, 3),)


def _cell(**overrides):
    cell = {"id": "c", "modifiers": [], "text": "x"}
    cell.update(overrides)
    return cell


@pytest.mark.parametrize("data", [
    [],
    {"id": "d"},
    {"id": 5, "blocks": []},
    {"id": "d", "blocks": ["p"]},
    {"id": "d", "blocks": [{"type": "p", "content": [_cell()]}]},
    {"id": "d", "blocks": [{"id": "b", "type": "h9", "content": [_cell()]}]},
    {"id": "d", "blocks": [{"id": "b", "content": [_cell()]}]},
    {"id": "d", "blocks": [{"id": "b", "type": "p", "content": []}]},
    {"id": "d", "blocks": [{"id": "b", "type": "p"}]},
    {"id": "d", "blocks": [{"id": "b", "type": "p", "content": [{"id": "c", "modifiers": []}]}]},
    {"id": "d", "blocks": [{"id": "b", "type": "p", "content": [_cell(text=3)]}]},
    {"id": "d", "blocks": [{"id": "b", "type": "p",
                            "content": [_cell(modifiers=[{"type": "em", "start": 0, "end": 9}])]}]},
    {"id": "d", "blocks": [{"id": "b", "type": "table", "rows": [["a", 1]]}]},
    {"id": "d", "blocks": [{"id": "b", "type": "code", "content": "x"}]},
])
def test_malformed_input_raises(data):
    with pytest.raises(MalformedDocument):
        serializer.normalize(data)


def test_duplicate_ids_raise():
    data = {"id": "d", "blocks": [
        {"id": "b", "type": "p", "content": [_cell(id="x")]},
        {"id": "x", "type": "p", "content": [_cell(id="y")]},
    ]}
    with pytest.raises(MalformedDocument, match="Duplicate"):
        serializer.normalize(data)


def test_loads_rejects_invalid_json():
    with pytest.raises(MalformedDocument):
        serializer.loads("{not json")


def test_malformed_is_a_value_error():
    with pytest.raises(ValueError):
        serializer.loads("[]")


def test_dumps_is_json():
    assert json.loads(serializer.dumps(rich_doc()))["id"] == "doc"


class TestProjections:
    """Tests for to_plain_text and to_html."""

    def test_plain_text_has_no_separators(self):
        doc = Document(id="d", blocks=(
            ContentBlock(id="1", type=BlockType.HEADING_1, cells=(Cell("1-1", "Foo"),)),
            ContentBlock(id="2", cells=(Cell("2-1", "Bar"),)),
        ))
        assert serializer.to_plain_text(doc) == "FooBar"

    def test_plain_text_unescapes_entities(self):
        doc = Document(id="d", blocks=(
            ContentBlock(id="1", cells=(Cell("a", "a&nbsp;b"), Cell("c", "<b>x</b> &amp; y"))),
        ))
        assert serializer.to_plain_text(doc) == "a\xa0bx & y"

    def test_plain_text_includes_payloads(self):
        assert serializer.to_plain_text(rich_doc()) == "Titleplain bolditemab1234x < 1"

    def test_html(self):
        doc = Document(id="d", blocks=(
            ContentBlock(id="1", type=BlockType.HEADING_1, cells=(Cell("1-1", "Foo"),)),
            ContentBlock(id="2", cells=(Cell("2-1", "Bar"), Cell("2-2", "Baz"))),
        ))
        assert serializer.to_html(doc) == (
            "<h1><span>Foo</span></h1><p><span>Bar</span><span>Baz</span></p>"
        )

    def test_html_escapes_payloads(self):
        html = serializer.to_html(Document(id="d", blocks=rich_doc().blocks[3:]))
        assert html == (
            "<table><thead><tr><th>a</th><th>b</th></tr></thead>"
            "<tbody><tr><td>1</td><td>2</td></tr><tr><td>3</td><td>4</td></tr></tbody></table>"
            '<pre><code class="language-python">x &lt; 1</code></pre>'
        )
