"""Pytest configuration and shared fixtures for article-editor tests.

This module provides common fixtures used across unit and integration tests.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from article_editor.config import EditorSettings
from article_editor.editor.controller import ArticleEditor
from article_editor.editor.interaction import AutoConfirmInteraction
from article_editor.editor.session import EditorSession
from article_editor.models import Block, ConfirmOutcome, Document, ImageNode, TextRun

INITIAL_TEXT = "Ini adalah konten awal untuk pengujian. "


# ============================================================================
# Session Fixtures
# ============================================================================


@pytest.fixture
def settings() -> EditorSettings:
    """Default editor settings."""
    return EditorSettings()


@pytest.fixture
def document() -> Document:
    """A document holding one paragraph of text."""
    return Document(blocks=[Block(inlines=[TextRun(text=INITIAL_TEXT)])])


@pytest.fixture
def session(document: Document, settings: EditorSettings) -> EditorSession:
    """An editable session with the cursor at the end of the document."""
    editor_session = EditorSession(document, settings=settings)
    editor_session.move_cursor_to_end()
    return editor_session


# ============================================================================
# Interaction Fixtures
# ============================================================================


@pytest.fixture
def confirming_interaction() -> AutoConfirmInteraction:
    """Interaction provider confirming every modal."""
    return AutoConfirmInteraction(ConfirmOutcome.CONFIRMED, prompt_answer="https://example.com")


@pytest.fixture
def cancelling_interaction() -> AutoConfirmInteraction:
    """Interaction provider cancelling every modal and prompt."""
    return AutoConfirmInteraction(ConfirmOutcome.CANCELLED, prompt_answer=None)


@pytest.fixture
def editor(session: EditorSession, confirming_interaction: AutoConfirmInteraction) -> ArticleEditor:
    """Editor whose modals are confirmed immediately."""
    return ArticleEditor(session, interaction=confirming_interaction)


# ============================================================================
# Helpers
# ============================================================================


@pytest.fixture
def insert_and_select(editor: ArticleEditor) -> Callable[..., ImageNode]:
    """Insert an image and click it, as the user does before any image action.

    Returns:
        A function (url, alt) -> ImageNode acting on the editor fixture.
    """

    def _insert_and_select(url: str = "https://x/1.png", alt: str = "A") -> ImageNode:
        image = editor.embedder.insert(url, alt)
        editor.selection.click(image.node_id)
        return image

    return _insert_and_select
