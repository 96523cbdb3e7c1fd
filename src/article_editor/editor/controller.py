"""Event routing for the article editor.

ArticleEditor wires the components to one session and processes input
events one at a time. While a confirmation modal is open only the modal
answer (or Escape, which cancels it) is accepted, and while a resize drag
is active only pointer moves and the pointer release are. Everything else
is ignored so no second mutation can interleave with the one in progress.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from article_editor.decorators import unavailable_is_noop
from article_editor.editor.alignment import AlignmentApplier
from article_editor.editor.context_actions import ContextActions
from article_editor.editor.embedder import Embedder
from article_editor.editor.events import (
    AlignCommand,
    Click,
    HistoryCommand,
    InputEvent,
    InsertImage,
    KeyPress,
    MenuCommand,
    ModalResponse,
    PointerDown,
    PointerMove,
    PointerUp,
)
from article_editor.editor.interaction import DeferredInteraction, InteractionProvider
from article_editor.editor.keyboard import KeyboardDeleteHandler
from article_editor.editor.resizer import Resizer
from article_editor.editor.selection import SelectionTracker, TargetResolver, resolve_click_target
from article_editor.editor.session import EditorSession
from article_editor.models import ConfirmOutcome

logger = logging.getLogger(__name__)

CANCEL_KEY = "Escape"


class ArticleEditor:
    """One editing surface: a session plus the components acting on it.

    Attributes:
        session: Shared editor state
        interaction: Prompt/confirmation collaborator
        embedder: Image insertion
        selection: Selection state machine
        resizer: Handle drag resizing
        actions: Context menu actions
        alignment: Block alignment
        keyboard: Delete key routing
    """

    def __init__(
        self,
        session: EditorSession | None = None,
        interaction: InteractionProvider | None = None,
        resolve_target: TargetResolver = resolve_click_target,
    ) -> None:
        self.session = session or EditorSession()
        self.interaction = interaction or DeferredInteraction()
        self.embedder = Embedder(self.session)
        self.selection = SelectionTracker(self.session, resolve_target)
        self.resizer = Resizer(self.session)
        self.actions = ContextActions(self.session, self.interaction)
        self.alignment = AlignmentApplier(self.session)
        self.keyboard = KeyboardDeleteHandler(self.session, self.actions)

        self._handlers: dict[type, Callable[..., bool | None]] = {
            InsertImage: self._on_insert_image,
            Click: self._on_click,
            PointerDown: self._on_pointer_down,
            PointerMove: self._on_pointer_move,
            PointerUp: self._on_pointer_up,
            KeyPress: self._on_key_press,
            MenuCommand: self._on_menu_command,
            AlignCommand: self._on_align,
            ModalResponse: self._on_modal_response,
            HistoryCommand: self._on_history,
        }

    def dispatch(self, event: InputEvent) -> bool:
        """Process one input event start to finish.

        Args:
            event: Typed input event from the surface

        Returns:
            True if the event was handled, False if it was ignored or
            unavailable in the current state

        Raises:
            ValidationError: If the event carries invalid input
        """
        if self.session.pending is not None and not self._accepted_while_pending(event):
            logger.info(f"Ignoring {event.type}: a confirmation is pending")
            return False
        if self.resizer.active and not isinstance(event, (PointerMove, PointerUp)):
            logger.info(f"Ignoring {event.type}: a resize drag is active")
            return False

        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event: {type(event).__name__}")
        return bool(handler(event))

    def render(self) -> str:
        """HTML of the document with node ids, for the rendering surface."""
        return self.session.serialize(include_node_ids=True)

    @staticmethod
    def _accepted_while_pending(event: InputEvent) -> bool:
        if isinstance(event, ModalResponse):
            return True
        return isinstance(event, KeyPress) and event.key == CANCEL_KEY

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    @unavailable_is_noop
    def _on_insert_image(self, event: InsertImage) -> bool:
        self.embedder.insert(event.url, event.alt_text, width=event.width, height=event.height)
        return True

    def _on_click(self, event: Click) -> bool:
        self.selection.click(event.target)
        return True

    @unavailable_is_noop
    def _on_pointer_down(self, event: PointerDown) -> bool:
        self.resizer.begin_drag(event.handle)
        return True

    @unavailable_is_noop
    def _on_pointer_move(self, event: PointerMove) -> bool:
        if not self.resizer.active:
            return False
        self.resizer.update_drag(event.delta_x, event.delta_y)
        return True

    @unavailable_is_noop
    def _on_pointer_up(self, event: PointerUp) -> bool:
        if not self.resizer.active:
            return False
        self.resizer.end_drag()
        return True

    def _on_key_press(self, event: KeyPress) -> bool:
        if event.key == CANCEL_KEY:
            return self.actions.cancel_pending()
        return self.keyboard.handle_key(event.key)

    @unavailable_is_noop
    def _on_menu_command(self, event: MenuCommand) -> bool:
        if event.command == "edit_alt_text":
            self.actions.edit_alt_text(event.value or "")
        elif event.command == "insert_link":
            self.actions.insert_link(event.value)
        else:
            self.actions.delete()
        return True

    @unavailable_is_noop
    def _on_align(self, event: AlignCommand) -> bool:
        self.alignment.set_alignment(event.direction)
        return True

    @unavailable_is_noop
    def _on_modal_response(self, event: ModalResponse) -> bool:
        outcome = ConfirmOutcome.CONFIRMED if event.confirmed else ConfirmOutcome.CANCELLED
        self.actions.resolve(outcome)
        return True

    @unavailable_is_noop
    def _on_history(self, event: HistoryCommand) -> bool:
        if event.command == "undo":
            return self.session.undo()
        return self.session.redo()
