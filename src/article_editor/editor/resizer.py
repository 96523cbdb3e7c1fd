"""Resizing the selected image by dragging a corner handle.

A drag is modelled as explicit begin/update/end calls. Every update
writes the new size to the image so the resize is continuous; the drag
is committed to the undo history on end.
"""

from __future__ import annotations

import logging

from article_editor.editor.session import DragState, EditorSession
from article_editor.models import ErrorCode, HandleCorner, ImageNode, PreconditionError, ValidationError

logger = logging.getLogger(__name__)


class Resizer:
    """Converts handle drags into width/height changes keeping the aspect ratio."""

    def __init__(self, session: EditorSession) -> None:
        self.session = session

    @property
    def active(self) -> bool:
        """True while a drag is in progress."""
        return self.session.drag is not None

    def begin_drag(self, handle: HandleCorner | str, node: ImageNode | None = None) -> None:
        """Start dragging a resize handle of the selected image.

        Args:
            handle: Corner handle grabbed
            node: Image the handle belongs to (default: the selected image)

        Raises:
            PreconditionError: If no image is selected, node is not the
                selected image, or a drag is already active
            ValidationError: If handle is not a known corner
        """
        self.session.require_editable()
        self.session.require_no_pending()
        try:
            corner = HandleCorner(handle)
        except ValueError as e:
            raise ValidationError(f"Unknown resize handle: {handle}", code=ErrorCode.INVALID_HANDLE) from e

        selected = self.session.require_selection()
        if node is not None and node.node_id != selected.node_id:
            raise PreconditionError(
                "Handle does not belong to the selected image",
                code=ErrorCode.INVALID_HANDLE,
                details={"node_id": node.node_id, "selected": selected.node_id},
            )
        if self.session.drag is not None:
            raise PreconditionError("A resize drag is already active", code=ErrorCode.DRAG_ACTIVE)

        self.session.drag = DragState(
            node_id=selected.node_id,
            handle=corner,
            start_width=selected.width,
            start_height=selected.height,
            snapshot=self.session.snapshot(),
        )
        logger.debug(f"Drag started on {corner.value} of {selected.node_id} ({selected.width}x{selected.height})")

    def update_drag(self, delta_x: float, delta_y: float) -> tuple[float, float]:
        """Apply one pointer movement to the active drag.

        Deltas accumulate over the drag. The width follows the horizontal
        movement (inverted for left handles) and the height keeps the
        starting aspect ratio. Both are clamped to the minimum size.

        Args:
            delta_x: Horizontal movement since the previous update
            delta_y: Vertical movement since the previous update

        Returns:
            The (width, height) now applied to the image

        Raises:
            PreconditionError: If no drag is active
        """
        drag = self._require_drag()
        drag.delta_x += delta_x
        drag.delta_y += delta_y

        node = self.session.document.find_image(drag.node_id)
        if node is None:
            self.session.drag = None
            raise PreconditionError("Resized image is no longer in the document", code=ErrorCode.NODE_NOT_FOUND)

        width, height = self._compute_size(drag)
        node.width = width
        node.height = height
        return width, height

    def end_drag(self) -> ImageNode | None:
        """Finish the drag, committing the final size.

        Returns:
            The resized image, or None if it disappeared during the drag

        Raises:
            PreconditionError: If no drag is active
        """
        drag = self._require_drag()
        self.session.drag = None

        node = self.session.document.find_image(drag.node_id)
        if node is None:
            logger.warning(f"Drag ended on missing image {drag.node_id}")
            return None

        if (node.width, node.height) != (drag.start_width, drag.start_height):
            self.session.record_history(drag.snapshot)
        logger.info(f"Resized image {node.node_id}: {drag.start_width}x{drag.start_height} -> {node.width}x{node.height}")
        return node

    def _require_drag(self) -> DragState:
        if self.session.drag is None:
            raise PreconditionError("No resize drag is active", code=ErrorCode.DRAG_NOT_ACTIVE)
        return self.session.drag

    def _compute_size(self, drag: DragState) -> tuple[float, float]:
        minimum = self.session.settings.min_image_size
        direction = 1 if drag.handle.grows_right else -1
        width = drag.start_width + direction * drag.delta_x
        aspect = drag.start_height / drag.start_width
        width = max(width, minimum)
        height = max(width * aspect, minimum)
        return width, height
