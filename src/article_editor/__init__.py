"""article-editor: headless model of an article editor's image editing."""

from article_editor.editor import ArticleEditor, EditorSession

__version__ = "0.1.0"

__all__ = ["ArticleEditor", "EditorSession", "__version__"]
