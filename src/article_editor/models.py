"""Pydantic data models for article-editor.

This module defines the document tree edited by the article editor
(blocks, text runs, embedded images), the value objects exchanged with
the UI (cursor, confirmation requests) and the error types.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


def new_node_id() -> str:
    """Generate an identifier for a newly created node."""
    return str(uuid.uuid4())


class Alignment(str, Enum):
    """Block-level text alignment."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class HandleCorner(str, Enum):
    """Resize handle rendered on a corner of the selected image."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"

    @property
    def grows_right(self) -> bool:
        """True if dragging this handle to the right enlarges the image."""
        return self in (HandleCorner.TOP_RIGHT, HandleCorner.BOTTOM_RIGHT)


class SelectionState(str, Enum):
    """State of the image selection state machine."""

    IDLE = "idle"
    SELECTED = "selected"


class ConfirmAction(str, Enum):
    """Action awaiting user confirmation."""

    DELETE = "delete"
    LINK = "link"
    ALT_TEXT = "alt_text"


class ConfirmOutcome(str, Enum):
    """Answer of a confirmation modal.

    DEFERRED means the modal is open and will be answered by a later
    input event (the event loop is never blocked by a modal).
    """

    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    DEFERRED = "deferred"


class TextRun(BaseModel):
    """A contiguous run of plain text inside a block."""

    kind: Literal["text"] = "text"
    text: str = ""


class ImageNode(BaseModel):
    """An image embedded in the document.

    Attributes:
        node_id: Stable identifier used for selection and click resolution
        source_url: Image URL (required, non-empty)
        alt_text: Alternative text (may be empty)
        width: Rendered width, independent of intrinsic size once resized
        height: Rendered height
        link_target: Hyperlink wrapping the image, None if not linked
    """

    model_config = ConfigDict(validate_assignment=True)

    kind: Literal["image"] = "image"
    node_id: str = Field(default_factory=new_node_id)
    source_url: str = Field(min_length=1)
    alt_text: str = ""
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    link_target: str | None = None

    @property
    def is_linked(self) -> bool:
        """True if the image is wrapped in a hyperlink."""
        return self.link_target is not None

    @property
    def aspect_ratio(self) -> float:
        """Height divided by width."""
        return self.height / self.width


InlineNode = Annotated[TextRun | ImageNode, Field(discriminator="kind")]


class Block(BaseModel):
    """A block-level node (paragraph or heading) owning inline nodes.

    Attributes:
        tag: HTML tag of the block ("p", "h1" ... "h6")
        alignment: Text alignment applied to the block, None for the default
        inlines: Ordered inline content
    """

    tag: str = "p"
    alignment: Alignment | None = None
    inlines: list[InlineNode] = []

    def images(self) -> list[ImageNode]:
        """Return the images owned by this block, in order."""
        return [node for node in self.inlines if isinstance(node, ImageNode)]

    def is_empty(self) -> bool:
        """True if the block holds no image and no visible text."""
        return all(isinstance(node, TextRun) and not node.text.strip() for node in self.inlines)

    def text(self) -> str:
        """Concatenated text of all text runs."""
        return "".join(node.text for node in self.inlines if isinstance(node, TextRun))


class Document(BaseModel):
    """Ordered sequence of blocks. The single owner of every node."""

    blocks: list[Block] = []

    def iter_images(self) -> Iterator[tuple[Block, ImageNode]]:
        """Yield (block, image) pairs in document order."""
        for block in self.blocks:
            for image in block.images():
                yield block, image

    def find_image(self, node_id: str) -> ImageNode | None:
        """Find an image by node id.

        Args:
            node_id: Identifier of the image

        Returns:
            The image, or None if it is not part of the document
        """
        for _, image in self.iter_images():
            if image.node_id == node_id:
                return image
        return None

    def locate(self, node_id: str) -> tuple[int, int] | None:
        """Return (block_index, inline_index) of an image, None if absent."""
        for block_index, block in enumerate(self.blocks):
            for inline_index, node in enumerate(block.inlines):
                if isinstance(node, ImageNode) and node.node_id == node_id:
                    return block_index, inline_index
        return None

    def count_images(self, alt_text: str | None = None) -> int:
        """Count images, optionally only those with the given alt text."""
        return sum(1 for _, image in self.iter_images() if alt_text is None or image.alt_text == alt_text)


class Cursor(BaseModel):
    """Text insertion point.

    Attributes:
        block_index: Index of the block holding the cursor, None when the
            cursor is not inside any paragraph
        inline_index: Index of the inline node the cursor is in (or before)
        char_offset: Character offset within a text run at inline_index
    """

    block_index: int | None = None
    inline_index: int = 0
    char_offset: int = 0


class ConfirmationRequest(BaseModel):
    """A pending destructive or navigation-altering action.

    Attributes:
        action: What will happen on confirmation
        target_id: Node id of the image the action applies to
        value: Proposed new value (alt text or link URL), None for delete
        initial_value: Value the modal is pre-populated with
        message: Text shown in the modal
    """

    model_config = ConfigDict(frozen=True)

    action: ConfirmAction
    target_id: str
    value: str | None = None
    initial_value: str | None = None
    message: str = ""


class ErrorCode(str, Enum):
    """Error codes for editor errors."""

    INVALID_INPUT = "invalid_input"
    NO_SELECTION = "no_selection"
    NODE_NOT_FOUND = "node_not_found"
    NOT_EDITABLE = "not_editable"
    INVALID_HANDLE = "invalid_handle"
    DRAG_ACTIVE = "drag_active"
    DRAG_NOT_ACTIVE = "drag_not_active"
    CONFIRMATION_PENDING = "confirmation_pending"
    NOTHING_PENDING = "nothing_pending"
    PARSE_ERROR = "parse_error"


class EditorError(Exception):
    """Base exception for editor errors.

    Attributes:
        code: Error code
        message: Human-readable error message
        details: Additional error details
    """

    default_code = ErrorCode.INVALID_INPUT

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message
            code: Error code, defaults to the class default
            details: Additional context (e.g., offending value)
        """
        self.code = code or self.default_code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(EditorError):
    """Invalid input supplied by the caller. Nothing was modified."""

    default_code = ErrorCode.INVALID_INPUT


class PreconditionError(EditorError):
    """Operation is unavailable in the current editor state."""

    default_code = ErrorCode.NO_SELECTION
