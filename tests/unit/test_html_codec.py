"""Unit tests for HTML serialization and parsing of documents."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from article_editor.models import Alignment, Block, Document, ErrorCode, ImageNode, TextRun, ValidationError
from article_editor.utils.html_codec import NODE_ID_ATTR, parse_document, serialize_block, serialize_document


def _image(**kwargs: object) -> ImageNode:
    data: dict[str, object] = {"source_url": "https://x/1.png", "alt_text": "A", "width": 300, "height": 150}
    data.update(kwargs)
    return ImageNode.model_validate(data)


class TestSerialize:
    """Tests for serialize_block and serialize_document."""

    def test_paragraph_with_image(self) -> None:
        block = Block(inlines=[TextRun(text="Hi "), _image()])
        assert serialize_block(block) == '<p>Hi <img src="https://x/1.png" alt="A" width="300" height="150"></p>'

    def test_alignment_style(self) -> None:
        block = Block(alignment=Alignment.CENTER, inlines=[_image()])
        soup = BeautifulSoup(serialize_block(block), "html.parser")
        paragraph = soup.find("p")
        assert paragraph is not None
        assert paragraph.get("style") == "text-align: center;"

    def test_linked_image_wrapped_once(self) -> None:
        soup = BeautifulSoup(serialize_block(Block(inlines=[_image(link_target="https://example.com")])), "html.parser")
        links = soup.find_all("a")
        assert len(links) == 1
        assert links[0].get("href") == "https://example.com"
        assert links[0].find("img") is not None

    def test_fractional_sizes(self) -> None:
        html = serialize_block(Block(inlines=[_image(width=120.5, height=60.25)]))
        assert 'width="120.5"' in html
        assert 'height="60.25"' in html

    def test_escapes_text_and_attributes(self) -> None:
        block = Block(inlines=[TextRun(text="a < b & c"), _image(alt_text='say "hi"')])
        html = serialize_block(block)
        assert "a &lt; b &amp; c" in html
        assert 'alt="say &quot;hi&quot;"' in html

    def test_node_ids_optional(self) -> None:
        image = _image()
        document = Document(blocks=[Block(inlines=[image])])
        assert NODE_ID_ATTR not in serialize_document(document)
        assert f'{NODE_ID_ATTR}="{image.node_id}"' in serialize_document(document, include_node_ids=True)

    def test_node_id_escaped(self) -> None:
        image = _image(node_id='img"1')
        html = serialize_block(Block(inlines=[image]), include_node_ids=True)

        img = BeautifulSoup(html, "html.parser").find("img")
        assert img is not None
        assert img.get(NODE_ID_ATTR) == 'img"1'

    def test_line_break_survives_reload(self) -> None:
        """Text line breaks are written as <br> and parsed back."""
        document = Document(blocks=[Block(inlines=[TextRun(text="one\ntwo")])])

        html = serialize_document(document)

        assert html == "<p>one<br>two</p>"
        assert parse_document(html).blocks[0].text() == "one\ntwo"

    def test_heading_and_block_per_line(self) -> None:
        document = Document(blocks=[Block(tag="h2", inlines=[TextRun(text="Title")]), Block(inlines=[_image()])])
        lines = serialize_document(document).splitlines()
        assert lines[0] == "<h2>Title</h2>"
        assert lines[1].startswith("<p><img")

    def test_empty_document(self) -> None:
        assert serialize_document(Document()) == ""


class TestParse:
    """Tests for parse_document."""

    def test_parses_serialized_output(self) -> None:
        image = _image(link_target="https://example.com", width=120.5)
        original = Document(
            blocks=[
                Block(tag="h1", inlines=[TextRun(text="Title")]),
                Block(alignment=Alignment.RIGHT, inlines=[TextRun(text="Hi "), image]),
            ]
        )

        parsed = parse_document(serialize_document(original, include_node_ids=True))

        assert parsed == original

    def test_image_attributes(self) -> None:
        document = parse_document('<p><img src="https://x/1.png" alt="A" width="640px" height="480"></p>')
        image = document.blocks[0].images()[0]
        assert (image.source_url, image.alt_text, image.width, image.height) == ("https://x/1.png", "A", 640, 480)
        assert image.link_target is None

    def test_missing_sizes_use_fallback_ratio(self) -> None:
        document = parse_document(
            '<p><img src="https://x/1.png"><img src="https://x/2.png" width="100"><img src="https://x/3.png" height="30"></p>'
        )
        sizes = [(image.width, image.height) for _, image in document.iter_images()]
        assert sizes == [(300, 150), (100, 50), (60, 30)]

    def test_img_without_src_skipped(self) -> None:
        document = parse_document('<p>text<img alt="broken"></p>')
        assert document.count_images() == 0
        assert document.blocks[0].text() == "text"

    def test_top_level_image_gets_implicit_paragraph(self) -> None:
        document = parse_document('<img src="https://x/1.png"><p>after</p>')
        assert len(document.blocks) == 2
        assert document.blocks[0].tag == "p"
        assert document.blocks[0].images()[0].source_url == "https://x/1.png"

    def test_containers_flattened(self) -> None:
        content = "<!DOCTYPE html><html><head><title>x</title></head><body><div><p>one</p></div><p>two</p></body></html>"
        document = parse_document(content)
        assert [block.text() for block in document.blocks] == ["one", "two"]

    def test_inline_formatting_flattened(self) -> None:
        document = parse_document("<p>a <strong>bold</strong> word<br>next<!-- note --></p>")
        assert document.blocks[0].text() == "a bold word\nnext"
        assert len(document.blocks[0].inlines) == 1

    def test_whitespace_between_blocks_dropped(self) -> None:
        document = parse_document("<p>a</p>\n\n<p>b</p>\n")
        assert len(document.blocks) == 2

    def test_unknown_alignment_ignored(self) -> None:
        document = parse_document('<p style="text-align: justify">x</p>')
        assert document.blocks[0].alignment is None

    def test_non_string_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_document(b"<p>x</p>")  # type: ignore[arg-type]
        assert exc_info.value.code == ErrorCode.PARSE_ERROR
