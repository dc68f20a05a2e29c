"""System clipboard bridge.

The editor's own clipboard holds cloned blocks inside the Document. This
module mirrors copied blocks to the system clipboard as plain text, one
line per block, and reads plain text back for pasting.
"""

import logging
from typing import Sequence

import pyperclip

from .block import Block

logger = logging.getLogger(__name__)


class ClipboardManager:
    """Plain-text access to the system clipboard via pyperclip."""

    @staticmethod
    def blocks_to_text(blocks: Sequence[Block]) -> str:
        """Text for the system clipboard: one line per block."""
        return "\n".join(b.to_text() for b in blocks)

    def copy_blocks(self, blocks: Sequence[Block]) -> bool:
        """Copy the blocks' text to the system clipboard.

        Returns:
            True if the clipboard was written
        """
        return self.copy_text(self.blocks_to_text(blocks))

    def copy_text(self, text: str) -> bool:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            # Headless sessions have no clipboard mechanism
            logger.warning(f"Could not write system clipboard: {e}")
            return False
        return True

    def paste_text(self) -> str:
        """Read plain text from the system clipboard ('' if unavailable)."""
        try:
            content = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            logger.warning(f"Could not read system clipboard: {e}")
            return ""
        return content or ""
