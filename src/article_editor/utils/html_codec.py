"""HTML serialization of editor documents.

The editor hands its content to the persistence layer as an HTML blob and
loads saved articles back from one. Parsing uses BeautifulSoup; only the
structure the editor models survives (blocks, alignment, text, images and
image links). Inline formatting such as <strong> is flattened to text.
"""

from __future__ import annotations

import html
import logging
import re

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, Doctype, PageElement

from article_editor.models import (
    Alignment,
    Block,
    Document,
    ErrorCode,
    ImageNode,
    TextRun,
    ValidationError,
)

logger = logging.getLogger(__name__)

BLOCK_TAGS = ("p", "h1", "h2", "h3", "h4", "h5", "h6")
NODE_ID_ATTR = "data-node-id"

# Containers whose children are parsed as blocks
_CONTAINER_TAGS = ("html", "body", "main", "div", "section", "article")
_SKIPPED_TAGS = ("head", "script", "style")

_TEXT_ALIGN_PATTERN = re.compile(r"text-align\s*:\s*(left|center|right)", re.IGNORECASE)
_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)(?:px)?\s*$")

# Used when a saved <img> carries no usable size attributes
_FALLBACK_WIDTH = 300.0
_FALLBACK_HEIGHT = 150.0


def _format_size(value: float) -> str:
    """Format a dimension without a trailing .0 for whole numbers."""
    rounded = round(value, 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return str(rounded)


def _serialize_image(image: ImageNode, include_node_ids: bool) -> str:
    attrs = [
        f'src="{html.escape(image.source_url)}"',
        f'alt="{html.escape(image.alt_text)}"',
        f'width="{_format_size(image.width)}"',
        f'height="{_format_size(image.height)}"',
    ]
    if include_node_ids:
        attrs.append(f'{NODE_ID_ATTR}="{html.escape(image.node_id)}"')
    img = f"<img {' '.join(attrs)}>"
    if image.link_target is not None:
        return f'<a href="{html.escape(image.link_target)}">{img}</a>'
    return img


def serialize_block(block: Block, include_node_ids: bool = False) -> str:
    """Serialize one block to HTML.

    Args:
        block: Block to serialize
        include_node_ids: Emit data-node-id on images so a rendering surface
            can report click targets

    Returns:
        HTML string for the block
    """
    style = f' style="text-align: {block.alignment.value};"' if block.alignment is not None else ""
    parts: list[str] = []
    for node in block.inlines:
        if isinstance(node, ImageNode):
            parts.append(_serialize_image(node, include_node_ids))
        else:
            # Line breaks are parsed from <br>
            parts.append(html.escape(node.text, quote=False).replace("\n", "<br>"))
    return f"<{block.tag}{style}>{''.join(parts)}</{block.tag}>"


def serialize_document(document: Document, include_node_ids: bool = False) -> str:
    """Serialize a document to the HTML blob handed to persistence.

    Args:
        document: Document to serialize
        include_node_ids: Emit data-node-id on images

    Returns:
        HTML string, one block per line
    """
    return "\n".join(serialize_block(block, include_node_ids) for block in document.blocks)


def _parse_size(value: object) -> float | None:
    if not isinstance(value, str):
        return None
    match = _SIZE_PATTERN.match(value)
    if not match:
        return None
    size = float(match.group(1))
    return size if size > 0 else None


def _image_from_tag(tag: Tag, link_target: str | None) -> ImageNode | None:
    src = tag.get("src")
    if not isinstance(src, str) or not src.strip():
        logger.warning("Skipping <img> without src")
        return None

    alt = tag.get("alt")
    width = _parse_size(tag.get("width"))
    height = _parse_size(tag.get("height"))
    # Missing dimensions keep the fallback aspect ratio
    if width is None and height is None:
        width, height = _FALLBACK_WIDTH, _FALLBACK_HEIGHT
    elif width is None and height is not None:
        width = height * _FALLBACK_WIDTH / _FALLBACK_HEIGHT
    elif height is None and width is not None:
        height = width * _FALLBACK_HEIGHT / _FALLBACK_WIDTH

    kwargs: dict[str, object] = {}
    node_id = tag.get(NODE_ID_ATTR)
    if isinstance(node_id, str) and node_id:
        kwargs["node_id"] = node_id

    return ImageNode(
        source_url=src.strip(),
        alt_text=alt if isinstance(alt, str) else "",
        width=width,
        height=height,
        link_target=link_target,
        **kwargs,  # type: ignore[arg-type]
    )


def _append_text(block: Block, text: str) -> None:
    if not text:
        return
    if block.inlines and isinstance(block.inlines[-1], TextRun):
        block.inlines[-1].text += text
    else:
        block.inlines.append(TextRun(text=text))


def _collect_node(node: PageElement, block: Block, link_target: str | None = None) -> None:
    """Append one inline node (and its descendants) to block."""
    if isinstance(node, (Comment, Doctype)):
        return
    if isinstance(node, NavigableString):
        _append_text(block, str(node))
    elif isinstance(node, Tag):
        if node.name == "img":
            image = _image_from_tag(node, link_target)
            if image is not None:
                block.inlines.append(image)
        elif node.name == "br":
            _append_text(block, "\n")
        elif node.name == "a":
            href = node.get("href")
            _collect_inlines(node, block, href if isinstance(href, str) else link_target)
        else:
            _collect_inlines(node, block, link_target)


def _collect_inlines(element: Tag, block: Block, link_target: str | None = None) -> None:
    """Walk inline content of element, appending to block."""
    for child in element.children:
        _collect_node(child, block, link_target)


def _alignment_from_style(tag: Tag) -> Alignment | None:
    style = tag.get("style")
    if not isinstance(style, str):
        return None
    match = _TEXT_ALIGN_PATTERN.search(style)
    if not match:
        return None
    return Alignment(match.group(1).lower())


def parse_document(content: str) -> Document:
    """Parse an HTML blob into a document.

    Top-level inline content outside any block is wrapped in an implicit
    paragraph. Whitespace-only text between blocks is dropped.

    Args:
        content: HTML produced by serialize_document or a compatible editor

    Returns:
        Parsed Document

    Raises:
        ValidationError: If content is not a string
    """
    if not isinstance(content, str):
        raise ValidationError(
            "HTML content must be a string",
            code=ErrorCode.PARSE_ERROR,
            details={"type": type(content).__name__},
        )

    soup = BeautifulSoup(content, "html.parser")
    document = Document()
    pending: Block | None = None

    def flush_pending() -> None:
        nonlocal pending
        if pending is not None and not pending.is_empty():
            document.blocks.append(pending)
        pending = None

    for child in soup.children:
        if isinstance(child, Tag) and child.name in BLOCK_TAGS:
            flush_pending()
            block = Block(tag=child.name, alignment=_alignment_from_style(child))
            _collect_inlines(child, block)
            document.blocks.append(block)
        elif isinstance(child, Tag) and child.name in _SKIPPED_TAGS:
            continue
        elif isinstance(child, Tag) and child.name in _CONTAINER_TAGS:
            flush_pending()
            nested = parse_document(child.decode_contents())
            document.blocks.extend(nested.blocks)
        elif isinstance(child, (Comment, Doctype)):
            continue
        elif isinstance(child, NavigableString) and not str(child).strip():
            continue
        else:
            if pending is None:
                pending = Block()
            _collect_node(child, pending)
    flush_pending()

    logger.debug(f"Parsed {len(document.blocks)} block(s), {document.count_images()} image(s)")
    return document
