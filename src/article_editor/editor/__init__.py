"""Editor module for article-editor.

Provides the image embedding and selection state machine and the
components acting on the selected image.
"""

from article_editor.editor.controller import ArticleEditor
from article_editor.editor.session import EditorSession

__all__ = ["ArticleEditor", "EditorSession"]
