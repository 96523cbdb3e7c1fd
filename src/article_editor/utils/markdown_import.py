"""Markdown to editor document conversion.

Article drafts come back from the generation service as Markdown. This
module loads them into the editor's document model using markdown-it-py.
Only what the editor models is kept: paragraphs, headings, images and
image links. Link text, emphasis and code lose their markup.
"""

from __future__ import annotations

import logging

from markdown_it import MarkdownIt
from markdown_it.token import Token

from article_editor.config import EditorSettings
from article_editor.models import Block, Document, ImageNode, TextRun

logger = logging.getLogger(__name__)

_BLOCK_OPEN_TYPES = ("paragraph_open", "heading_open")


def _append_text(block: Block, text: str) -> None:
    if not text:
        return
    if block.inlines and isinstance(block.inlines[-1], TextRun):
        block.inlines[-1].text += text
    else:
        block.inlines.append(TextRun(text=text))


def _fill_block(block: Block, children: list[Token], settings: EditorSettings) -> None:
    """Convert the children of an inline token into block content."""
    link_stack: list[str | None] = []
    for token in children:
        if token.type == "text" or token.type == "code_inline":
            _append_text(block, token.content)
        elif token.type == "softbreak":
            _append_text(block, " ")
        elif token.type == "hardbreak":
            _append_text(block, "\n")
        elif token.type == "link_open":
            href = token.attrGet("href")
            link_stack.append(str(href) if href is not None else None)
        elif token.type == "link_close":
            if link_stack:
                link_stack.pop()
        elif token.type == "image":
            src = token.attrGet("src")
            if not src:
                logger.warning("Skipping image without src in Markdown")
                continue
            block.inlines.append(
                ImageNode(
                    source_url=str(src),
                    alt_text=token.content,
                    width=settings.default_image_width,
                    height=settings.default_image_height,
                    link_target=link_stack[-1] if link_stack else None,
                )
            )


def markdown_to_document(content: str, settings: EditorSettings | None = None) -> Document:
    """Convert Markdown text to an editor document.

    Args:
        content: Markdown source
        settings: Editor settings used for default image dimensions

    Returns:
        Document with one block per paragraph, heading or code block
    """
    settings = settings or EditorSettings()
    md = MarkdownIt("commonmark")
    tokens = md.parse(content)

    document = Document()
    current: Block | None = None
    for token in tokens:
        if token.type in _BLOCK_OPEN_TYPES:
            current = Block(tag=token.tag if token.type == "heading_open" else "p")
        elif token.type == "inline" and current is not None:
            _fill_block(current, token.children or [], settings)
        elif token.type in ("paragraph_close", "heading_close") and current is not None:
            document.blocks.append(current)
            current = None
        elif token.type in ("fence", "code_block"):
            document.blocks.append(Block(inlines=[TextRun(text=token.content.rstrip("\n"))]))

    logger.debug(f"Imported Markdown: {len(document.blocks)} block(s), {document.count_images()} image(s)")
    return document
