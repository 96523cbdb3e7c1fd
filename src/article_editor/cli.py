"""Command line interface for article-editor.

Provides commands to inspect and convert editor documents and to replay
scripted editing sessions headlessly.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from article_editor.config import EditorSettings
from article_editor.editor.controller import ArticleEditor
from article_editor.editor.interaction import DeferredInteraction
from article_editor.editor.session import EditorSession
from article_editor.models import Document, EditorError, ImageNode
from article_editor.utils.html_codec import parse_document, serialize_document
from article_editor.utils.logging import setup_logging
from article_editor.utils.markdown_import import markdown_to_document

app = typer.Typer(
    name="article-editor",
    help="Headless article editor - inspect, convert and replay image editing sessions",
)

_MARKDOWN_SUFFIXES = (".md", ".markdown")


class FileSink:
    """Document sink writing the serialized document to a file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def save(self, content: str) -> None:
        self.path.write_text(content + "\n", encoding="utf-8")


def load_document(path: Path, settings: EditorSettings) -> Document:
    """Load an editor document from an HTML or Markdown file.

    Args:
        path: Source file; .md/.markdown is read as Markdown, anything else as HTML
        settings: Settings used for default image sizes

    Returns:
        Parsed Document
    """
    content = path.read_text(encoding="utf-8")
    if path.suffix.lower() in _MARKDOWN_SUFFIXES:
        return markdown_to_document(content, settings)
    return parse_document(content)


def describe_document(document: Document) -> list[str]:
    """Human-readable outline of a document, one line per block."""
    lines: list[str] = []
    for index, block in enumerate(document.blocks):
        align = f" [{block.alignment.value}]" if block.alignment is not None else ""
        parts: list[str] = []
        for node in block.inlines:
            if isinstance(node, ImageNode):
                link = f" -> {node.link_target}" if node.link_target else ""
                parts.append(f"<img alt={node.alt_text!r} {node.width:g}x{node.height:g}{link}>")
            elif node.text.strip():
                text = node.text.strip()
                parts.append(repr(text if len(text) <= 40 else text[:37] + "..."))
        lines.append(f"{index:3d} {block.tag}{align}: {' '.join(parts)}")
    return lines


def _configure(verbose: bool) -> EditorSettings:
    setup_logging(logging.DEBUG if verbose else logging.WARNING)
    return EditorSettings.from_env()


@app.command()
def render(
    file: Annotated[Path, typer.Argument(help="HTML or Markdown document", exists=True, dir_okay=False)],
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Print an outline of a document's blocks and images."""
    try:
        settings = _configure(verbose)
        document = load_document(file, settings)
    except EditorError as e:
        typer.echo(f"❌ Error [{e.code.value}]: {e.message}", err=True)
        raise typer.Exit(1) from e

    for line in describe_document(document):
        typer.echo(line)
    typer.echo(f"{len(document.blocks)} block(s), {document.count_images()} image(s)")


@app.command()
def convert(
    file: Annotated[Path, typer.Argument(help="HTML or Markdown document", exists=True, dir_okay=False)],
    output: Annotated[Path, typer.Option("--output", "-o", help="Output HTML file")],
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Convert a Markdown or HTML document to editor HTML."""
    try:
        settings = _configure(verbose)
        document = load_document(file, settings)
    except EditorError as e:
        typer.echo(f"❌ Error [{e.code.value}]: {e.message}", err=True)
        raise typer.Exit(1) from e

    FileSink(output).save(serialize_document(document))
    typer.echo(f"✅ Wrote {output}")


@app.command()
def replay(
    script: Annotated[Path, typer.Argument(help="YAML replay script", exists=True, dir_okay=False)],
    input_file: Annotated[
        Path | None,
        typer.Option("--input", "-i", help="Document to start from (HTML or Markdown)", exists=True, dir_okay=False),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the resulting HTML here"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Replay a scripted editing session and report each step.

    Example:
        article-editor replay session.yaml --input draft.md --output article.html
    """
    from article_editor.replay import load_script, run_script

    try:
        settings = _configure(verbose)
        document = load_document(input_file, settings) if input_file is not None else Document()
        session = EditorSession(document, settings=settings)
        session.move_cursor_to_end()
        editor = ArticleEditor(session, interaction=DeferredInteraction())
        results = run_script(editor, load_script(script))
    except EditorError as e:
        typer.echo(f"❌ Error [{e.code.value}]: {e.message}", err=True)
        raise typer.Exit(1) from e

    for result in results:
        mark = "✓" if result.handled else "·"
        pending = f" (pending {result.pending})" if result.pending else ""
        typer.echo(f"{mark} {result.index:3d} {result.name:<14} {result.state.value}{pending}")

    typer.echo()
    for line in describe_document(session.document):
        typer.echo(line)

    if session.pending is not None:
        typer.echo(f"⚠️  Unanswered {session.pending.action.value} confirmation discarded", err=True)
    sink = FileSink(output) if output is not None else None
    session.finish_edit(sink)
    if output is not None:
        typer.echo(f"✅ Wrote {output}")
