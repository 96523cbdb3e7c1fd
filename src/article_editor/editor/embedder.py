"""Image insertion at the text cursor."""

from __future__ import annotations

import logging

from article_editor.editor.session import EditorSession
from article_editor.models import Block, Cursor, ImageNode, TextRun, ValidationError

logger = logging.getLogger(__name__)


class Embedder:
    """Inserts images into the session document at the cursor."""

    def __init__(self, session: EditorSession) -> None:
        self.session = session

    def insert(
        self,
        url: str,
        alt_text: str = "",
        width: float | None = None,
        height: float | None = None,
    ) -> ImageNode:
        """Insert a new image at the current cursor position.

        If the cursor is not inside a paragraph, the image is wrapped in a
        new paragraph appended to the document. A text run containing the
        cursor is split at the cursor offset. The cursor ends up right
        after the image. Any existing selection is cleared and the new
        image is not selected.

        Args:
            url: Image URL (must not be blank)
            alt_text: Alternative text
            width: Rendered width (default from settings)
            height: Rendered height (default from settings)

        Returns:
            The inserted ImageNode

        Raises:
            ValidationError: If url is blank or a size is not positive
            PreconditionError: If the session is not editable or a modal is open
        """
        url = url.strip() if isinstance(url, str) else ""
        if not url:
            raise ValidationError("Image URL cannot be empty")
        for label, value in (("width", width), ("height", height)):
            if value is not None and value <= 0:
                raise ValidationError(f"Image {label} must be positive", details={label: value})

        self.session.require_editable()
        self.session.require_no_pending()

        settings = self.session.settings
        image = ImageNode(
            source_url=url,
            alt_text=alt_text or "",
            width=width if width is not None else settings.default_image_width,
            height=height if height is not None else settings.default_image_height,
        )

        self.session.record_history()
        self.session.set_selection(None)

        cursor = self.session.cursor
        blocks = self.session.document.blocks
        if cursor.block_index is None or not 0 <= cursor.block_index < len(blocks):
            blocks.append(Block(inlines=[image]))
            self.session.cursor = Cursor(block_index=len(blocks) - 1, inline_index=1)
        else:
            block = blocks[cursor.block_index]
            index = self._split_at_cursor(block, cursor)
            block.inlines.insert(index, image)
            self.session.cursor = Cursor(block_index=cursor.block_index, inline_index=index + 1)

        logger.info(f"Inserted image {image.node_id} ({url})")
        return image

    @staticmethod
    def _split_at_cursor(block: Block, cursor: Cursor) -> int:
        """Split a text run at the cursor if needed.

        Returns:
            Inline index where new content should be inserted
        """
        index = min(max(cursor.inline_index, 0), len(block.inlines))
        if index == len(block.inlines):
            return index

        node = block.inlines[index]
        if not isinstance(node, TextRun):
            return index

        offset = min(max(cursor.char_offset, 0), len(node.text))
        if offset == 0:
            return index
        if offset == len(node.text):
            return index + 1

        head, tail = node.text[:offset], node.text[offset:]
        node.text = head
        block.inlines.insert(index + 1, TextRun(text=tail))
        return index + 1
