"""Constants and configuration for the blockmark editing core."""

from enum import Enum


class BlockType(Enum):
    """Semantic block types. Values are the wire/HTML tag names."""
    PARAGRAPH = "p"
    HEADING_1 = "h1"
    HEADING_2 = "h2"
    HEADING_3 = "h3"
    BLOCKQUOTE = "blockquote"
    PREFORMATTED = "pre"
    UNORDERED_LIST_ITEM = "li"
    TABLE = "table"
    CODE = "code"


class CellKind(Enum):
    """Leaf tag carried by every cell."""
    SPAN = "span"  # plain inline text
    LIST_ITEM = "li"


# Types whose payload is a cell sequence
TEXT_BLOCK_TYPES = frozenset({
    BlockType.PARAGRAPH,
    BlockType.HEADING_1,
    BlockType.HEADING_2,
    BlockType.HEADING_3,
    BlockType.BLOCKQUOTE,
    BlockType.PREFORMATTED,
    BlockType.UNORDERED_LIST_ITEM,
})

# Extra spellings accepted by normalize()
TYPE_ALIASES = {
    "paragraph": BlockType.PARAGRAPH,
    "heading-1": BlockType.HEADING_1,
    "heading-2": BlockType.HEADING_2,
    "heading-3": BlockType.HEADING_3,
    "preformatted": BlockType.PREFORMATTED,
    "unordered-list-item": BlockType.UNORDERED_LIST_ITEM,
    "ul": BlockType.UNORDERED_LIST_ITEM,
}

NBSP = "\xa0"
NBSP_ENTITY = "&nbsp;"


def _variants(marker: str) -> list[str]:
    return [marker + " ", marker + NBSP, marker + NBSP_ENTITY]


# Auto-transform rules, evaluated top to bottom, first match wins
TRANSFORM_RULES: tuple[tuple[str, BlockType], ...] = tuple(
    [(p, BlockType.HEADING_1) for p in _variants("#")]
    + [(p, BlockType.HEADING_2) for p in _variants("##")]
    + [(p, BlockType.HEADING_3) for p in _variants("###")]
    + [("```", BlockType.PREFORMATTED)]
    + [(p, BlockType.UNORDERED_LIST_ITEM) for p in _variants("*")]
)

# Backspace at the start of a block walks down this chain
DOWNGRADES = {
    BlockType.HEADING_1: BlockType.HEADING_2,
    BlockType.HEADING_2: BlockType.HEADING_3,
    BlockType.HEADING_3: BlockType.PARAGRAPH,
    BlockType.PREFORMATTED: BlockType.PARAGRAPH,
    BlockType.UNORDERED_LIST_ITEM: BlockType.PARAGRAPH,
}


class EditorConstants:
    """Central configuration constants for the editor."""

    # Seed content for Document.new()
    SEED_TITLE = "This is the title of your page"
    SEED_PARAGRAPH = "This is your first paragraph."

    # Undo history
    DEFAULT_HISTORY_LIMIT = 500
    MIN_HISTORY_LIMIT = 1
    MAX_HISTORY_LIMIT = 10000

    # Id generation strategies understood by ids.from_strategy()
    ID_STRATEGIES = ("random", "sequential")

    # Line break inserted by split_line()
    LINE_BREAK = "\n"

    # Settings file
    SETTINGS_APP_NAME = "blockmark"
    SETTINGS_FILENAME = "settings.json"
