"""Editor session state.

An EditorSession owns everything one editing surface needs: the document,
the text cursor, the current image selection, the pending confirmation,
the in-progress resize drag and the undo history. Components receive the
session by reference, so several independent editors can coexist.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from article_editor.config import EditorSettings
from article_editor.models import (
    ConfirmationRequest,
    Cursor,
    Document,
    ErrorCode,
    HandleCorner,
    ImageNode,
    PreconditionError,
)
from article_editor.utils.html_codec import serialize_document

logger = logging.getLogger(__name__)

SelectionListener = Callable[[str | None, str | None], None]


class DocumentSink(Protocol):
    """Persistence collaborator receiving the serialized document."""

    def save(self, content: str) -> None:
        """Store the serialized document blob."""
        ...


@dataclass
class DragState:
    """An active resize drag.

    Attributes:
        node_id: Image being resized
        handle: Corner handle the drag started on
        start_width: Width when the drag began
        start_height: Height when the drag began
        delta_x: Accumulated horizontal pointer movement
        delta_y: Accumulated vertical pointer movement
        snapshot: Document state before the drag, recorded on commit
    """

    node_id: str
    handle: HandleCorner
    start_width: float
    start_height: float
    delta_x: float = 0.0
    delta_y: float = 0.0
    snapshot: Document | None = None


@dataclass
class _HistoryEntry:
    document: Document
    cursor: Cursor


class EditorSession:
    """State shared by all editor components.

    Attributes:
        document: The edited document
        settings: Editor settings
        cursor: Current text insertion point
        pending: Confirmation request awaiting an answer, None if no modal is open
        drag: Active resize drag, None when not dragging
        editable: Whether the surface is in edit mode
    """

    def __init__(
        self,
        document: Document | None = None,
        settings: EditorSettings | None = None,
        editable: bool = True,
    ) -> None:
        self.document = document if document is not None else Document()
        self.settings = settings or EditorSettings()
        self.cursor = Cursor()
        self.pending: ConfirmationRequest | None = None
        self.drag: DragState | None = None
        self.editable = editable
        self._selection: str | None = None
        self._listeners: list[SelectionListener] = []
        self._undo_stack: list[_HistoryEntry] = []
        self._redo_stack: list[_HistoryEntry] = []
        self._edit_snapshot: Document | None = self.document.model_copy(deep=True) if editable else None

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def selection(self) -> str | None:
        """Node id of the selected image, None when nothing is selected."""
        return self._selection

    def set_selection(self, node_id: str | None) -> None:
        """Replace the selection in a single step and notify listeners.

        Args:
            node_id: Image to select, or None to clear the selection
        """
        previous = self._selection
        if previous == node_id:
            return
        self._selection = node_id
        logger.debug(f"Selection changed: {previous} -> {node_id}")
        for listener in list(self._listeners):
            listener(previous, node_id)

    def add_selection_listener(self, listener: SelectionListener) -> None:
        """Register a callback receiving (previous, current) on every change."""
        self._listeners.append(listener)

    def remove_selection_listener(self, listener: SelectionListener) -> None:
        """Unregister a selection callback."""
        self._listeners.remove(listener)

    def selected_node(self) -> ImageNode | None:
        """Return the selected image.

        A selection naming a node that is no longer in the document is
        cleared.
        """
        if self._selection is None:
            return None
        node = self.document.find_image(self._selection)
        if node is None:
            logger.debug(f"Dropping stale selection: {self._selection}")
            self.set_selection(None)
        return node

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def place_cursor(self, block_index: int | None, inline_index: int = 0, char_offset: int = 0) -> None:
        """Move the text cursor.

        Args:
            block_index: Block to place the cursor in, None for outside any paragraph
            inline_index: Inline node within the block
            char_offset: Character offset inside a text run
        """
        self.cursor = Cursor(block_index=block_index, inline_index=inline_index, char_offset=char_offset)

    def move_cursor_to_end(self) -> None:
        """Place the cursor after the last inline node of the last block."""
        if not self.document.blocks:
            self.cursor = Cursor()
            return
        last = len(self.document.blocks) - 1
        self.cursor = Cursor(block_index=last, inline_index=len(self.document.blocks[last].inlines))

    # ------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------

    def require_editable(self) -> None:
        """Raise PreconditionError unless the session is in edit mode."""
        if not self.editable:
            raise PreconditionError("Editor is not in edit mode", code=ErrorCode.NOT_EDITABLE)

    def require_no_pending(self) -> None:
        """Raise PreconditionError while a confirmation modal is open."""
        if self.pending is not None:
            raise PreconditionError(
                f"A {self.pending.action.value} confirmation is pending",
                code=ErrorCode.CONFIRMATION_PENDING,
                details={"target_id": self.pending.target_id},
            )

    def require_selection(self) -> ImageNode:
        """Return the selected image or raise PreconditionError.

        Raises:
            PreconditionError: If no image is selected
        """
        node = self.selected_node()
        if node is None:
            raise PreconditionError("No image is selected", code=ErrorCode.NO_SELECTION)
        return node

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def snapshot(self) -> Document:
        """Deep copy of the current document."""
        return self.document.model_copy(deep=True)

    def record_history(self, snapshot: Document | None = None) -> None:
        """Push an undo step. Call before mutating the document.

        Args:
            snapshot: Pre-mutation document, default the current one
        """
        limit = self.settings.history_limit
        if limit == 0:
            return
        document = snapshot if snapshot is not None else self.snapshot()
        self._undo_stack.append(_HistoryEntry(document, self.cursor.model_copy()))
        if len(self._undo_stack) > limit:
            del self._undo_stack[0]
        self._redo_stack.clear()

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def undo(self) -> bool:
        """Restore the previous document state.

        Returns:
            True if a step was undone, False if the history is empty
        """
        self.require_editable()
        self.require_no_pending()
        if not self._undo_stack:
            return False
        self._redo_stack.append(_HistoryEntry(self.snapshot(), self.cursor.model_copy()))
        self._restore(self._undo_stack.pop())
        logger.info("Undo")
        return True

    def redo(self) -> bool:
        """Re-apply the last undone step.

        Returns:
            True if a step was redone, False if there is nothing to redo
        """
        self.require_editable()
        self.require_no_pending()
        if not self._redo_stack:
            return False
        self._undo_stack.append(_HistoryEntry(self.snapshot(), self.cursor.model_copy()))
        self._restore(self._redo_stack.pop())
        logger.info("Redo")
        return True

    def _restore(self, entry: _HistoryEntry) -> None:
        self.drag = None
        self.document = entry.document
        self.cursor = entry.cursor
        # Keep the selection only if its node survived
        self.selected_node()

    # ------------------------------------------------------------------
    # Edit mode
    # ------------------------------------------------------------------

    def begin_edit(self) -> None:
        """Enter edit mode, remembering the content to restore on cancel."""
        if self.editable:
            return
        self.editable = True
        self._edit_snapshot = self.snapshot()
        self._undo_stack.clear()
        self._redo_stack.clear()
        logger.info("Edit mode started")

    def finish_edit(self, sink: DocumentSink | None = None) -> str:
        """Leave edit mode keeping the changes.

        Args:
            sink: Persistence collaborator to hand the serialized document to

        Returns:
            The serialized document
        """
        self._leave_edit_mode()
        content = self.serialize()
        if sink is not None:
            sink.save(content)
            logger.info(f"Saved document ({len(content)} chars)")
        return content

    def cancel_edit(self) -> None:
        """Leave edit mode discarding every change made since begin_edit."""
        snapshot = self._edit_snapshot
        self._leave_edit_mode()
        if snapshot is not None:
            self.document = snapshot
            self.cursor = Cursor()
        logger.info("Edit mode cancelled, changes discarded")

    def _leave_edit_mode(self) -> None:
        self.pending = None
        self.drag = None
        self.set_selection(None)
        self.editable = False
        self._edit_snapshot = None
        self._undo_stack.clear()
        self._redo_stack.clear()

    def serialize(self, include_node_ids: bool = False) -> str:
        """Serialize the document to HTML."""
        return serialize_document(self.document, include_node_ids=include_node_ids)
