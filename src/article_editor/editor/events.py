"""Typed input events delivered by the editing surface."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter

from article_editor.models import Alignment, HandleCorner


class InsertImage(BaseModel):
    """Image modal confirmed with a URL and alt text."""

    type: Literal["insert_image"] = "insert_image"
    url: str
    alt_text: str = ""
    width: float | None = None
    height: float | None = None


class Click(BaseModel):
    """Click on the editable surface.

    Attributes:
        target: Node id of the clicked image, None for a click outside images
    """

    type: Literal["click"] = "click"
    target: str | None = None


class PointerDown(BaseModel):
    """Pointer pressed on a resize handle of the selected image."""

    type: Literal["pointer_down"] = "pointer_down"
    handle: HandleCorner


class PointerMove(BaseModel):
    """Pointer moved by (delta_x, delta_y) since the previous event."""

    type: Literal["pointer_move"] = "pointer_move"
    delta_x: float
    delta_y: float


class PointerUp(BaseModel):
    type: Literal["pointer_up"] = "pointer_up"


class KeyPress(BaseModel):
    type: Literal["key_press"] = "key_press"
    key: str


class MenuCommand(BaseModel):
    """Context menu entry activated.

    Attributes:
        command: Menu entry
        value: New alt text or link URL; for insert_link None prompts for it
    """

    type: Literal["menu_command"] = "menu_command"
    command: Literal["edit_alt_text", "insert_link", "delete"]
    value: str | None = None


class AlignCommand(BaseModel):
    """Toolbar alignment button pressed."""

    type: Literal["align"] = "align"
    direction: Alignment


class ModalResponse(BaseModel):
    """The open confirmation modal was answered."""

    type: Literal["modal_response"] = "modal_response"
    confirmed: bool


class HistoryCommand(BaseModel):
    type: Literal["history"] = "history"
    command: Literal["undo", "redo"]


InputEvent = Annotated[
    InsertImage
    | Click
    | PointerDown
    | PointerMove
    | PointerUp
    | KeyPress
    | MenuCommand
    | AlignCommand
    | ModalResponse
    | HistoryCommand,
    Field(discriminator="type"),
]

_EVENT_ADAPTER: TypeAdapter[InputEvent] = TypeAdapter(InputEvent)


def parse_event(data: dict[str, object]) -> InputEvent:
    """Validate a raw mapping into a typed input event.

    Raises:
        pydantic.ValidationError: If data does not describe a known event
    """
    return _EVENT_ADAPTER.validate_python(data)
