"""Utility modules for article-editor."""

from article_editor.utils.html_codec import parse_document, serialize_document
from article_editor.utils.logging import get_logger, setup_logging
from article_editor.utils.markdown_import import markdown_to_document

__all__ = ["parse_document", "serialize_document", "markdown_to_document", "setup_logging", "get_logger"]
