"""Scripted editing sessions.

A replay script is a YAML document listing editor interactions in the
order a user would perform them:

    answers:
      - https://example.com      # answers for link prompts, in order
    steps:
      - insert_image: {url: https://x/1.png, alt: A}
      - click: {alt: A}          # or {index: 0}, or the string "outside"
      - drag: {handle: bottom-right, dx: 50, dy: 50, moves: 5}
      - edit_alt_text: B
      - confirm                  # answer the open modal
      - insert_link: null        # null prompts for the URL
      - align: center
      - key: Delete
      - cancel
      - undo

Confirmation modals stay open until a confirm or cancel step.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from article_editor.editor.controller import ArticleEditor
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
from article_editor.models import ErrorCode, HandleCorner, SelectionState, ValidationError

logger = logging.getLogger(__name__)


class ReplayScript(BaseModel):
    """Parsed replay script.

    Attributes:
        answers: Prompt answers consumed in order (None cancels a prompt)
        steps: Raw steps, each a one-key mapping or a bare step name
    """

    answers: list[str | None] = []
    steps: list[dict[str, Any] | str] = []


class StepResult(BaseModel):
    """Outcome of one replayed step."""

    index: int
    name: str
    handled: bool
    state: SelectionState
    pending: str | None = None


def load_script(path: Path) -> ReplayScript:
    """Load a replay script from a YAML file.

    Args:
        path: Script file

    Returns:
        Parsed ReplayScript

    Raises:
        ValidationError: If the file is not a valid script
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in {path}: {e}", code=ErrorCode.PARSE_ERROR) from e

    if data is None:
        data = {}
    if isinstance(data, list):
        data = {"steps": data}
    try:
        return ReplayScript.model_validate(data)
    except PydanticValidationError as e:
        message = e.errors()[0]["msg"]
        raise ValidationError(f"Invalid replay script {path}: {message}", code=ErrorCode.PARSE_ERROR) from e


def _split_step(step: dict[str, Any] | str) -> tuple[str, Any]:
    if isinstance(step, str):
        return step, None
    if len(step) != 1:
        raise ValidationError(f"Each step must have exactly one action: {step}", code=ErrorCode.PARSE_ERROR)
    name, argument = next(iter(step.items()))
    return str(name), argument


def _resolve_image(editor: ArticleEditor, argument: Any) -> str | None:
    """Turn a click argument into a node id (None for outside)."""
    if argument is None or argument == "outside":
        return None
    images = [image for _, image in editor.session.document.iter_images()]
    if isinstance(argument, dict) and "alt" in argument:
        for image in images:
            if image.alt_text == argument["alt"]:
                return image.node_id
        raise ValidationError(f"No image with alt text '{argument['alt']}'")
    if isinstance(argument, dict) and "index" in argument:
        index = int(argument["index"])
        if not 0 <= index < len(images):
            raise ValidationError(f"No image at index {index}")
        return images[index].node_id
    raise ValidationError(f"Unsupported click target: {argument}", code=ErrorCode.PARSE_ERROR)


def step_to_events(editor: ArticleEditor, step: dict[str, Any] | str) -> tuple[str, list[InputEvent]]:
    """Translate one script step into input events.

    Image references are resolved against the current document, so this
    must be called right before the events are dispatched.

    Returns:
        Tuple of (step name, events)

    Raises:
        ValidationError: If the step is malformed
    """
    name, argument = _split_step(step)
    try:
        return name, _build_events(editor, name, argument)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Invalid arguments for step {name}: {e}", code=ErrorCode.PARSE_ERROR) from e


def _build_events(editor: ArticleEditor, name: str, argument: Any) -> list[InputEvent]:
    events: list[InputEvent]

    if name == "insert_image":
        if not isinstance(argument, dict):
            raise ValidationError("insert_image needs a mapping with url and alt", code=ErrorCode.PARSE_ERROR)
        events = [
            InsertImage(
                url=str(argument.get("url", "")),
                alt_text=str(argument.get("alt", "")),
                width=argument.get("width"),
                height=argument.get("height"),
            )
        ]
    elif name == "click":
        events = [Click(target=_resolve_image(editor, argument))]
    elif name == "outside":
        events = [Click(target=None)]
    elif name == "drag":
        argument = argument or {}
        if not isinstance(argument, dict):
            raise ValidationError("drag needs a mapping with handle, dx and dy", code=ErrorCode.PARSE_ERROR)
        moves = max(int(argument.get("moves", 1)), 1)
        dx = float(argument.get("dx", 0)) / moves
        dy = float(argument.get("dy", 0)) / moves
        handle = HandleCorner(argument.get("handle", HandleCorner.BOTTOM_RIGHT.value))
        events = [PointerDown(handle=handle)]
        events.extend(PointerMove(delta_x=dx, delta_y=dy) for _ in range(moves))
        events.append(PointerUp())
    elif name == "edit_alt_text":
        events = [MenuCommand(command="edit_alt_text", value="" if argument is None else str(argument))]
    elif name == "insert_link":
        events = [MenuCommand(command="insert_link", value=None if argument is None else str(argument))]
    elif name == "delete":
        events = [MenuCommand(command="delete")]
    elif name == "align":
        events = [AlignCommand(direction=argument)]
    elif name == "key":
        events = [KeyPress(key=str(argument))]
    elif name in ("confirm", "cancel"):
        events = [ModalResponse(confirmed=name == "confirm")]
    elif name in ("undo", "redo"):
        events = [HistoryCommand(command=name)]
    else:
        raise ValidationError(f"Unknown step: {name}", code=ErrorCode.PARSE_ERROR)
    return events


def run_script(editor: ArticleEditor, script: ReplayScript) -> list[StepResult]:
    """Replay every step of script against editor.

    Args:
        editor: Editor to drive; its interaction provider should leave
            modals open so confirm/cancel steps can answer them
        script: Parsed script

    Returns:
        One StepResult per step
    """
    queue_answer = getattr(editor.interaction, "queue_answer", None)
    if script.answers:
        if queue_answer is None:
            logger.warning("Interaction provider does not accept prepared answers; ignoring them")
        else:
            for answer in script.answers:
                queue_answer(answer)

    results: list[StepResult] = []
    for index, step in enumerate(script.steps):
        name, events = step_to_events(editor, step)
        handled = False
        for event in events:
            handled = editor.dispatch(event) or handled
        pending = editor.session.pending
        results.append(
            StepResult(
                index=index,
                name=name,
                handled=handled,
                state=editor.selection.state,
                pending=pending.action.value if pending is not None else None,
            )
        )
        logger.debug(f"Step {index} {name}: handled={handled}")
    return results
