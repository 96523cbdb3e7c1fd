"""Entry point for article-editor.

Run with: python -m article_editor --help
"""

from __future__ import annotations

from article_editor.cli import app


def main() -> None:
    """Run the command line interface."""
    app()


if __name__ == "__main__":
    main()
