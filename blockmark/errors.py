"""Exceptions raised by the editing core."""


class EditorError(Exception):
    """Base class for every error the editing core raises."""


class MalformedDocument(EditorError, ValueError):
    """Input to normalize() is missing fields or carries an unknown type tag."""


class InvalidSelection(EditorError, ValueError):
    """A selection references a cell that is not in the block, or an
    offset outside the cell's text.

    The model fails fast instead of clamping: a bad selection means the
    host and the document have drifted apart.
    """


class UnsupportedOperation(EditorError, TypeError):
    """A structural operation was attempted on a table or code block."""
