"""Unit tests for ArticleEditor event dispatch."""

from __future__ import annotations

from collections.abc import Callable

import pydantic
import pytest

from article_editor.editor.controller import ArticleEditor
from article_editor.editor.events import (
    AlignCommand,
    Click,
    HistoryCommand,
    InsertImage,
    KeyPress,
    MenuCommand,
    ModalResponse,
    PointerDown,
    PointerMove,
    PointerUp,
    parse_event,
)
from article_editor.editor.interaction import DeferredInteraction
from article_editor.editor.session import EditorSession
from article_editor.models import Alignment, ConfirmAction, HandleCorner, ImageNode, SelectionState, ValidationError


@pytest.fixture
def deferred_editor(session: EditorSession) -> ArticleEditor:
    """Editor whose modals stay open until a ModalResponse arrives."""
    return ArticleEditor(session, interaction=DeferredInteraction())


def _insert(editor: ArticleEditor, alt: str = "A") -> ImageNode:
    editor.dispatch(InsertImage(url="https://x/1.png", alt_text=alt))
    _, image = list(editor.session.document.iter_images())[-1]
    return image


class TestParseEvent:
    """Tests for parse_event function."""

    def test_parses_by_type(self) -> None:
        event = parse_event({"type": "pointer_down", "handle": "top-left"})
        assert isinstance(event, PointerDown)
        assert event.handle == HandleCorner.TOP_LEFT

    def test_unknown_type(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            parse_event({"type": "scroll"})

    def test_invalid_alignment(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            parse_event({"type": "align", "direction": "justify"})


class TestDispatch:
    """Tests for ArticleEditor.dispatch."""

    def test_insert_and_click(self, editor: ArticleEditor) -> None:
        image = _insert(editor)
        assert editor.dispatch(Click(target=image.node_id)) is True
        assert editor.selection.state == SelectionState.SELECTED

    def test_invalid_insert_raises(self, editor: ArticleEditor) -> None:
        with pytest.raises(ValidationError):
            editor.dispatch(InsertImage(url=" "))

    def test_unavailable_command_is_noop(self, editor: ArticleEditor) -> None:
        """Menu and toolbar commands without a selection do nothing."""
        _insert(editor)
        before = editor.session.document.model_copy(deep=True)

        assert editor.dispatch(AlignCommand(direction=Alignment.CENTER)) is False
        assert editor.dispatch(MenuCommand(command="delete")) is False
        assert editor.dispatch(PointerDown(handle=HandleCorner.BOTTOM_RIGHT)) is False

        assert editor.session.document == before

    def test_resize_drag(self, editor: ArticleEditor) -> None:
        image = _insert(editor)
        editor.dispatch(Click(target=image.node_id))

        assert editor.dispatch(PointerDown(handle=HandleCorner.BOTTOM_RIGHT)) is True
        assert editor.dispatch(PointerMove(delta_x=30, delta_y=0)) is True
        assert editor.dispatch(PointerUp()) is True

        assert image.width == 330
        assert image.height == 165

    def test_pointer_events_without_drag_ignored(self, editor: ArticleEditor) -> None:
        assert editor.dispatch(PointerMove(delta_x=1, delta_y=1)) is False
        assert editor.dispatch(PointerUp()) is False

    def test_click_during_drag_ignored(self, editor: ArticleEditor) -> None:
        image = _insert(editor)
        editor.dispatch(Click(target=image.node_id))
        editor.dispatch(PointerDown(handle=HandleCorner.BOTTOM_RIGHT))

        assert editor.dispatch(Click(target=None)) is False
        assert editor.session.selection == image.node_id

    def test_align(self, editor: ArticleEditor) -> None:
        image = _insert(editor)
        editor.dispatch(Click(target=image.node_id))
        assert editor.dispatch(AlignCommand(direction=Alignment.RIGHT)) is True
        assert editor.session.document.blocks[0].alignment == Alignment.RIGHT

    def test_menu_link_prompts(self, editor: ArticleEditor) -> None:
        """insert_link without a value uses the interaction prompt."""
        image = _insert(editor)
        editor.dispatch(Click(target=image.node_id))
        editor.dispatch(MenuCommand(command="insert_link"))
        assert image.link_target == "https://example.com"

    def test_history(self, editor: ArticleEditor) -> None:
        _insert(editor)
        assert editor.dispatch(HistoryCommand(command="undo")) is True
        assert editor.session.document.count_images() == 0
        assert editor.dispatch(HistoryCommand(command="redo")) is True
        assert editor.session.document.count_images() == 1
        assert editor.dispatch(HistoryCommand(command="redo")) is False

    def test_render_includes_node_ids(self, editor: ArticleEditor) -> None:
        image = _insert(editor)
        assert f'data-node-id="{image.node_id}"' in editor.render()

    def test_unknown_event_type(self, editor: ArticleEditor) -> None:
        with pytest.raises(TypeError):
            editor.dispatch(object())  # type: ignore[arg-type]

    def test_default_collaborators(self) -> None:
        editor = ArticleEditor()
        assert isinstance(editor.interaction, DeferredInteraction)
        assert editor.session.document.blocks == []


class TestPendingConfirmation:
    """Tests for dispatch while a modal is open."""

    @pytest.fixture
    def pending(self, deferred_editor: ArticleEditor) -> ImageNode:
        image = _insert(deferred_editor)
        deferred_editor.dispatch(Click(target=image.node_id))
        deferred_editor.dispatch(KeyPress(key="Delete"))
        return image

    def test_delete_key_opens_modal(self, deferred_editor: ArticleEditor, pending: ImageNode) -> None:
        assert deferred_editor.session.pending is not None
        assert deferred_editor.session.pending.action == ConfirmAction.DELETE

    @pytest.mark.parametrize(
        "event",
        [
            InsertImage(url="https://x/2.png"),
            Click(target=None),
            AlignCommand(direction=Alignment.CENTER),
            MenuCommand(command="edit_alt_text", value="B"),
            KeyPress(key="Delete"),
            HistoryCommand(command="undo"),
            PointerDown(handle=HandleCorner.BOTTOM_RIGHT),
        ],
    )
    def test_other_events_ignored(
        self,
        deferred_editor: ArticleEditor,
        pending: ImageNode,
        event: InsertImage | Click | AlignCommand | MenuCommand | KeyPress | HistoryCommand | PointerDown,
    ) -> None:
        before = deferred_editor.session.document.model_copy(deep=True)

        assert deferred_editor.dispatch(event) is False

        assert deferred_editor.session.document == before
        assert deferred_editor.session.selection == pending.node_id
        assert deferred_editor.session.pending is not None

    def test_confirm(self, deferred_editor: ArticleEditor, pending: ImageNode) -> None:
        assert deferred_editor.dispatch(ModalResponse(confirmed=True)) is True
        assert deferred_editor.session.document.find_image(pending.node_id) is None
        assert deferred_editor.selection.state == SelectionState.IDLE

    def test_cancel(self, deferred_editor: ArticleEditor, pending: ImageNode) -> None:
        assert deferred_editor.dispatch(ModalResponse(confirmed=False)) is True
        assert deferred_editor.session.document.find_image(pending.node_id) is pending
        assert deferred_editor.session.pending is None

    def test_escape_cancels(self, deferred_editor: ArticleEditor, pending: ImageNode) -> None:
        assert deferred_editor.dispatch(KeyPress(key="Escape")) is True
        assert deferred_editor.session.pending is None
        assert deferred_editor.session.document.find_image(pending.node_id) is pending

    def test_modal_response_without_modal(self, deferred_editor: ArticleEditor) -> None:
        assert deferred_editor.dispatch(ModalResponse(confirmed=True)) is False


class TestActiveDrag:
    """Tests for dispatch while a resize drag is in progress."""

    @pytest.fixture
    def dragging(self, editor: ArticleEditor) -> ImageNode:
        image = _insert(editor)
        editor.dispatch(Click(target=image.node_id))
        editor.dispatch(PointerDown(handle=HandleCorner.BOTTOM_RIGHT))
        editor.dispatch(PointerMove(delta_x=10, delta_y=0))
        return image

    @pytest.mark.parametrize(
        "event",
        [
            KeyPress(key="Delete"),
            KeyPress(key="Backspace"),
            MenuCommand(command="delete"),
            MenuCommand(command="edit_alt_text", value="B"),
            AlignCommand(direction=Alignment.CENTER),
            InsertImage(url="https://x/2.png"),
            HistoryCommand(command="undo"),
            Click(target=None),
            PointerDown(handle=HandleCorner.TOP_LEFT),
        ],
    )
    def test_other_events_ignored(
        self,
        editor: ArticleEditor,
        dragging: ImageNode,
        event: KeyPress | MenuCommand | AlignCommand | InsertImage | HistoryCommand | Click | PointerDown,
    ) -> None:
        """Only pointer moves and the release reach a drag in progress."""
        before = editor.session.document.model_copy(deep=True)

        assert editor.dispatch(event) is False

        assert editor.session.document == before
        assert editor.session.selection == dragging.node_id
        assert editor.resizer.active is True

        assert editor.dispatch(PointerMove(delta_x=10, delta_y=0)) is True
        assert editor.dispatch(PointerUp()) is True
        assert (dragging.width, dragging.height) == (320, 160)

        assert editor.dispatch(HistoryCommand(command="undo")) is True
        restored = editor.session.document.find_image(dragging.node_id)
        assert restored is not None
        assert (restored.width, restored.height) == (300, 150)
        assert restored.alt_text == "A"
        assert editor.session.document.blocks[0].alignment is None

    def test_image_removed_mid_drag_ends_drag(self, editor: ArticleEditor, dragging: ImageNode) -> None:
        """A move on an image that vanished is a no-op instead of an error."""
        editor.session.document.blocks[0].inlines.remove(dragging)

        assert editor.dispatch(PointerMove(delta_x=5, delta_y=0)) is False
        assert editor.resizer.active is False
        assert editor.dispatch(PointerUp()) is False


def test_insert_and_select_fixture(insert_and_select: Callable[..., ImageNode], editor: ArticleEditor) -> None:
    """Shared fixture leaves the new image selected."""
    image = insert_and_select(alt="Z")
    assert editor.selection.selected_node is image
