"""Image selection state machine.

States are IDLE (no selection) and SELECTED(node). Clicking an image
selects it, clicking anything else returns to IDLE. Switching from one
image to another is a single transition; listeners never observe an
intermediate IDLE state. Linked images select like any other image, the
click is never treated as navigation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from article_editor.editor.session import EditorSession
from article_editor.models import Document, HandleCorner, ImageNode, SelectionState

logger = logging.getLogger(__name__)

TargetResolver = Callable[[Document, object], str | None]

RESIZE_HANDLES: tuple[HandleCorner, ...] = (
    HandleCorner.TOP_LEFT,
    HandleCorner.TOP_RIGHT,
    HandleCorner.BOTTOM_LEFT,
    HandleCorner.BOTTOM_RIGHT,
)


def resolve_click_target(document: Document, target: object) -> str | None:
    """Map a click target reported by the surface to an image node id.

    Accepts an ImageNode or a node id string (as carried by the
    data-node-id attribute of rendered images). Anything that does not
    name an image in the document resolves to None.

    Args:
        document: Document the click happened in
        target: Click target reported by the rendering surface

    Returns:
        Node id of the clicked image, or None for a click outside images
    """
    if isinstance(target, ImageNode):
        node_id = target.node_id
    elif isinstance(target, str):
        node_id = target
    else:
        return None
    return node_id if document.find_image(node_id) is not None else None


@dataclass(frozen=True)
class SelectionAffordance:
    """What the surface renders around the selected image.

    Attributes:
        node_id: Selected image
        handles: Resize handles, one per corner
        menu_visible: Whether the context action menu is shown
    """

    node_id: str
    handles: tuple[HandleCorner, ...] = RESIZE_HANDLES
    menu_visible: bool = True


class SelectionTracker:
    """Tracks the single selected image of a session."""

    def __init__(self, session: EditorSession, resolve_target: TargetResolver = resolve_click_target) -> None:
        self.session = session
        self._resolve_target = resolve_target

    @property
    def state(self) -> SelectionState:
        """Current state of the selection state machine."""
        if self.session.selected_node() is None:
            return SelectionState.IDLE
        return SelectionState.SELECTED

    @property
    def selected_node(self) -> ImageNode | None:
        return self.session.selected_node()

    @property
    def affordance(self) -> SelectionAffordance | None:
        """Handles and menu to render, None when idle."""
        node = self.session.selected_node()
        if node is None:
            return None
        return SelectionAffordance(node_id=node.node_id)

    def click(self, target: object) -> SelectionState:
        """Handle a click on the editable surface.

        Args:
            target: Element identity reported by the surface

        Returns:
            The state after the click
        """
        if not self.session.editable:
            logger.debug("Click ignored: editor is not in edit mode")
            return self.state

        node_id = self._resolve_target(self.session.document, target)
        if node_id is None:
            self.clear()
        else:
            self.select(node_id)
        return self.state

    def select(self, node_id: str) -> None:
        """Select an image, replacing any previous selection.

        Args:
            node_id: Image to select

        Raises:
            KeyError: If node_id is not an image in the document
        """
        if self.session.document.find_image(node_id) is None:
            raise KeyError(node_id)
        self.session.set_selection(node_id)
        logger.debug(f"Selected image {node_id}")

    def clear(self) -> None:
        """Return to IDLE, hiding handles and menu."""
        self.session.set_selection(None)
