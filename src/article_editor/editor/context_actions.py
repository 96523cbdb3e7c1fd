"""Context menu actions on the selected image.

Alt text edits, link insertion and deletion. Destructive or
navigation-altering actions go through a ConfirmationRequest stored on the
session. The interaction provider may answer the modal immediately or
leave it open; an open modal is answered later through resolve().
"""

from __future__ import annotations

import logging

from article_editor.editor.interaction import InteractionProvider
from article_editor.editor.session import EditorSession
from article_editor.models import (
    ConfirmAction,
    ConfirmationRequest,
    ConfirmOutcome,
    Cursor,
    ErrorCode,
    ImageNode,
    PreconditionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Menu entries, in display order
MENU_ACTIONS: tuple[str, ...] = ("edit_alt_text", "insert_link", "delete")

LINK_PROMPT_MESSAGE = "Enter the link URL:"


class ContextActions:
    """Applies context menu actions to the selected image."""

    def __init__(self, session: EditorSession, interaction: InteractionProvider) -> None:
        self.session = session
        self.interaction = interaction

    def available_actions(self) -> tuple[str, ...]:
        """Menu actions currently enabled. Empty when nothing is selected."""
        if not self.session.editable or self.session.pending is not None:
            return ()
        if self.session.selected_node() is None:
            return ()
        return MENU_ACTIONS

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def edit_alt_text(self, new_text: str) -> bool:
        """Replace the alt text of the selected image after confirmation.

        The modal is pre-populated with the current alt text.

        Args:
            new_text: Alt text to apply on confirmation

        Returns:
            True if the alt text was changed, False if cancelled or still pending

        Raises:
            PreconditionError: If no image is selected
        """
        node = self._require_target()
        request = self.open_confirmation(
            ConfirmAction.ALT_TEXT,
            value=new_text,
            initial_value=node.alt_text,
            message="Edit alt text",
        )
        return self._ask(request)

    def insert_link(self, target_url: str | None = None) -> bool:
        """Wrap the selected image in a hyperlink.

        Without target_url the user is prompted for one; a cancelled or
        blank prompt leaves the image unchanged. Re-applying replaces the
        existing link instead of nesting a second one.

        Args:
            target_url: Link target, None to prompt for it

        Returns:
            True if the link was applied

        Raises:
            PreconditionError: If no image is selected
            ValidationError: If target_url is given but blank
        """
        node = self._require_target()
        if target_url is None:
            answer = self.interaction.prompt(LINK_PROMPT_MESSAGE, default=self.session.settings.link_prompt_default)
            if answer is None or not answer.strip():
                logger.info("Link prompt cancelled")
                return False
            target_url = answer

        url = target_url.strip()
        if not url:
            raise ValidationError("Link URL cannot be empty")

        if self.session.settings.confirm_links:
            request = self.open_confirmation(
                ConfirmAction.LINK,
                value=url,
                initial_value=node.link_target,
                message=f"Link image to {url}?",
            )
            return self._ask(request)

        self._apply_link(node, url)
        return True

    def delete(self) -> bool:
        """Delete the selected image after confirmation.

        Returns:
            True if the image was removed, False if cancelled or still pending

        Raises:
            PreconditionError: If no image is selected
        """
        node = self._require_target()
        label = node.alt_text or node.source_url
        request = self.open_confirmation(ConfirmAction.DELETE, message=f"Delete image '{label}'?")
        return self._ask(request)

    # ------------------------------------------------------------------
    # Confirmation flow
    # ------------------------------------------------------------------

    def open_confirmation(
        self,
        action: ConfirmAction,
        value: str | None = None,
        initial_value: str | None = None,
        message: str = "",
    ) -> ConfirmationRequest:
        """Open a confirmation for the selected image without answering it.

        Args:
            action: Action to confirm
            value: Proposed new value
            initial_value: Value the modal is pre-populated with
            message: Text shown in the modal

        Returns:
            The pending request, also stored on the session

        Raises:
            PreconditionError: If no image is selected or a modal is already open
        """
        node = self._require_target()
        request = ConfirmationRequest(
            action=action,
            target_id=node.node_id,
            value=value,
            initial_value=initial_value,
            message=message,
        )
        self.session.pending = request
        logger.debug(f"Confirmation opened: {action.value} on {node.node_id}")
        return request

    def resolve(self, outcome: ConfirmOutcome) -> bool:
        """Answer the pending confirmation.

        Args:
            outcome: CONFIRMED applies the action, CANCELLED discards it,
                DEFERRED leaves the modal open

        Returns:
            True if the action was applied

        Raises:
            PreconditionError: If no confirmation is pending
        """
        request = self.session.pending
        if request is None:
            raise PreconditionError("No confirmation is pending", code=ErrorCode.NOTHING_PENDING)
        if outcome is ConfirmOutcome.DEFERRED:
            return False

        self.session.pending = None
        if outcome is ConfirmOutcome.CANCELLED:
            logger.info(f"{request.action.value} cancelled for {request.target_id}")
            return False

        node = self.session.document.find_image(request.target_id)
        if node is None:
            logger.warning(f"Confirmed {request.action.value} target {request.target_id} no longer exists")
            return False

        if request.action is ConfirmAction.DELETE:
            return self._apply_delete(node)
        if request.action is ConfirmAction.ALT_TEXT:
            self._apply_alt_text(node, request.value or "")
            return True
        if request.action is ConfirmAction.LINK and request.value:
            self._apply_link(node, request.value)
            return True
        return False

    def cancel_pending(self) -> bool:
        """Cancel the open modal, if any.

        Returns:
            True if a pending confirmation was discarded
        """
        if self.session.pending is None:
            return False
        self.resolve(ConfirmOutcome.CANCELLED)
        return True

    def _ask(self, request: ConfirmationRequest) -> bool:
        outcome = self.interaction.confirm(request)
        if outcome is ConfirmOutcome.DEFERRED:
            logger.debug(f"Confirmation for {request.action.value} left open")
            return False
        return self.resolve(outcome)

    def _require_target(self) -> ImageNode:
        self.session.require_editable()
        self.session.require_no_pending()
        return self.session.require_selection()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _apply_alt_text(self, node: ImageNode, text: str) -> None:
        self.session.record_history()
        node.alt_text = text
        logger.info(f"Alt text of {node.node_id} set to '{text}'")

    def _apply_link(self, node: ImageNode, url: str) -> None:
        self.session.record_history()
        node.link_target = url
        logger.info(f"Image {node.node_id} linked to {url}")

    def _apply_delete(self, node: ImageNode) -> bool:
        location = self.session.document.locate(node.node_id)
        if location is None:
            return False
        block_index, inline_index = location

        self.session.record_history()
        blocks = self.session.document.blocks
        block = blocks[block_index]
        del block.inlines[inline_index]
        if block.is_empty():
            del blocks[block_index]
            self.session.cursor = Cursor()
        else:
            self.session.cursor = Cursor(block_index=block_index, inline_index=inline_index)

        self.session.set_selection(None)
        logger.info(f"Deleted image {node.node_id}")
        return True
