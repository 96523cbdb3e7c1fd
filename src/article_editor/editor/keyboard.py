"""Delete/Backspace handling while an image is selected."""

from __future__ import annotations

import logging

from article_editor.editor.context_actions import ContextActions
from article_editor.editor.session import EditorSession

logger = logging.getLogger(__name__)

DELETE_KEYS = frozenset({"Delete", "Backspace"})


class KeyboardDeleteHandler:
    """Routes delete keys to the image delete confirmation.

    With an image selected, Delete and Backspace open the same confirmation
    as the context menu's delete action and the native text deletion is
    suppressed. Without a selection the key is left to native editing.
    """

    def __init__(self, session: EditorSession, actions: ContextActions) -> None:
        self.session = session
        self.actions = actions

    def handle_key(self, key: str) -> bool:
        """Handle a key press on the editable surface.

        Args:
            key: Key name as reported by the surface (e.g. "Delete")

        Returns:
            True if the key was consumed (native behaviour must not run)
        """
        if key not in DELETE_KEYS:
            return False
        if not self.session.editable or self.session.selected_node() is None:
            return False
        if self.session.pending is not None:
            logger.debug(f"{key} ignored: a confirmation is already pending")
            return False

        logger.debug(f"{key} pressed with image selected, routing to delete confirmation")
        self.actions.delete()
        return True
