"""Block alignment for the selected image."""

from __future__ import annotations

import logging

from article_editor.editor.session import EditorSession
from article_editor.models import Alignment, Block, ValidationError

logger = logging.getLogger(__name__)


class AlignmentApplier:
    """Applies text alignment to the block containing the selected image.

    Alignment is a property of the block, not of the image: setting it
    replaces whatever alignment the block had.
    """

    def __init__(self, session: EditorSession) -> None:
        self.session = session

    def set_alignment(self, direction: Alignment | str) -> Block:
        """Align the paragraph that contains the selected image.

        Args:
            direction: 'left', 'center' or 'right'

        Returns:
            The aligned block

        Raises:
            ValidationError: If direction is not a known alignment
            PreconditionError: If no image is selected
        """
        try:
            alignment = Alignment(direction)
        except ValueError as e:
            raise ValidationError(f"Unknown alignment: {direction}", details={"direction": direction}) from e

        self.session.require_editable()
        self.session.require_no_pending()
        node = self.session.require_selection()

        location = self.session.document.locate(node.node_id)
        # require_selection guarantees the node is in the document
        assert location is not None
        block = self.session.document.blocks[location[0]]

        if block.alignment is not alignment:
            self.session.record_history()
            block.alignment = alignment
        logger.info(f"Block {location[0]} aligned {alignment.value}")
        return block
