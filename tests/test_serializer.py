"""
Serializer tests

Tests markup produced for editor blocks, escaping, and the skip/strict
handling of blocks without a markup form.
"""

import pytest

from lessonmark.lib.errors import (
    InvalidBlockError,
    SerializeError,
    UnsupportedBlockTypeError,
)
from lessonmark.lib.parser import parse
from lessonmark.lib.serializer import Serializer, attr_escape, serialize, text_escape
from lessonmark.models.editor import EditorBlock
from lessonmark.models.nodes import (
    Carousel,
    Code,
    CodeCollection,
    Example,
    Heading,
    Image,
    ImageRef,
    Note,
    Paragraph,
    Snippet,
)


class TestBlockMarkup:
    """Test the markup of each block type"""

    def test_heading_and_paragraph(self):
        """Blocks are joined by newlines"""
        markup = serialize([
            {"type": "heading", "text": "Intro", "level": 1},
            {"type": "paragraph", "text": "Hello"},
        ])
        assert markup == '<heading level="1">Intro</heading>\n<paragraph>Hello</paragraph>'

    def test_heading_level_default(self):
        """Missing or invalid level is written as 2"""
        assert serialize([{"type": "heading", "text": "x"}]) == '<heading level="2">x</heading>'
        assert serialize([{"type": "heading", "text": "x", "level": 8}]) == '<heading level="2">x</heading>'

    def test_code_in_cdata(self):
        """Code bodies are always CDATA"""
        markup = serialize([{"type": "code", "language": "python", "code": "print(1)"}])
        assert markup == '<code language="python"><![CDATA[print(1)]]></code>'

    def test_code_default_language(self):
        markup = serialize([{"type": "code", "code": "x"}])
        assert markup == '<code language="plaintext"><![CDATA[x]]></code>'

    def test_code_terminator_split(self):
        """A ]]> inside code is split across CDATA sections"""
        markup = serialize([{"type": "code", "language": "c", "code": "a[b[0]]>1"}])
        assert markup == '<code language="c"><![CDATA[a[b[0]]]]><![CDATA[>1]]></code>'

    def test_example_without_title(self):
        """Empty attributes are omitted"""
        assert serialize([{"type": "example", "text": "x"}]) == "<example>x</example>"

    def test_carousel_layout(self):
        """Carousel images are written one per line"""
        markup = serialize([{
            "type": "carousel",
            "caption": "Steps",
            "images": [{"src": "a.png", "alt": "First"}, {"src": "b.png"}],
        }])
        assert markup == (
            '<carousel caption="Steps">\n'
            '  <img alt="First">a.png</img>\n'
            "  <img>b.png</img>\n"
            "</carousel>"
        )

    def test_editor_block_instances(self):
        """EditorBlock instances are accepted as well as dicts"""
        block = EditorBlock(type="note", fields={"text": "Hi"})
        assert Serializer([block]).serialize() == "<note>Hi</note>"

    def test_empty_input(self):
        assert serialize([]) == ""


class TestRoundTrip:
    """Serialized markup parses back to the same nodes"""

    def test_simple_blocks(self):
        doc = parse(serialize([
            {"type": "heading", "text": "Intro", "level": 3},
            {"type": "paragraph", "text": "Hello"},
            {"type": "note", "text": "Tip"},
            {"type": "example", "title": "Loop", "text": "for x in y"},
            {"type": "image", "src": "a.png", "alt": "A"},
        ]))
        assert list(doc) == [
            Heading(level=3, text="Intro"),
            Paragraph(text="Hello"),
            Note(text="Tip"),
            Example(text="for x in y", title="Loop"),
            Image(src="a.png", alt="A"),
        ]

    def test_code_verbatim(self):
        """Code with markup characters survives exactly"""
        code = 'if a < b && c > d:\n    print("]]>")'
        doc = parse(serialize([{"type": "code", "language": "python", "code": code}]))
        assert doc[0] == Code(text=code, language="python")

    def test_code_collection(self):
        doc = parse(serialize([{
            "type": "code-collection",
            "title": "Hello",
            "snippets": [
                {"language": "python", "code": "print(1)"},
                {"language": "java", "code": "System.out.println(1);"},
            ],
        }]))
        assert doc[0] == CodeCollection(
            title="Hello",
            snippets=(
                Snippet(text="print(1)", language="python"),
                Snippet(text="System.out.println(1);", language="java"),
            ),
        )

    def test_carousel(self):
        doc = parse(serialize([{
            "type": "carousel",
            "caption": "Steps",
            "images": [{"src": "a.png", "alt": "First"}, {"src": "b.png"}],
        }]))
        assert doc[0] == Carousel(
            caption="Steps",
            images=(ImageRef(src="a.png", alt="First"), ImageRef(src="b.png", alt="")),
        )

    def test_text_with_markup_characters(self):
        """Inline text holding <, > or & comes back unchanged"""
        doc = parse(serialize([{"type": "paragraph", "text": "5 < 6 & 7 > 3"}]))
        assert doc[0] == Paragraph(text="5 < 6 & 7 > 3")

    def test_attribute_escaping(self):
        """Attribute values with special characters come back unchanged"""
        title = 'Tom & "Jerry" <3>'
        doc = parse(serialize([{"type": "example", "title": title, "text": "x"}]))
        assert doc[0].title == title


class TestEscaping:
    """Test escaping helpers"""

    def test_attr_escape(self):
        assert attr_escape('Tom & "Jerry" <3') == "Tom &amp; &quot;Jerry&quot; &lt;3"

    def test_attr_escape_ampersand_first(self):
        """Existing entities are escaped again, not kept"""
        assert attr_escape("&lt;") == "&amp;lt;"

    def test_text_escape_plain(self):
        assert text_escape("plain words") == "plain words"

    def test_text_escape_special(self):
        assert text_escape("a & b") == "<![CDATA[a & b]]>"


class TestUnserializableBlocks:
    """Test blocks without a markup form"""

    def test_unsupported_type_skipped(self):
        """Unsupported blocks are skipped and recorded"""
        serializer = Serializer([
            {"type": "note", "text": "kept"},
            {"type": "gallery", "images": []},
            {"type": "note", "text": "also kept"},
        ], strict=False)

        assert serializer.serialize() == "<note>kept</note>\n<note>also kept</note>"
        assert len(serializer.errors) == 1
        error = serializer.errors[0]
        assert isinstance(error, UnsupportedBlockTypeError)
        assert error.index == 1
        assert error.block_type == "gallery"

    def test_image_without_source(self):
        """An image block with no src is invalid"""
        serializer = Serializer([{"type": "image", "alt": "x"}], strict=False)
        assert serializer.serialize() == ""
        assert isinstance(serializer.errors[0], InvalidBlockError)

    def test_carousel_image_without_source(self):
        serializer = Serializer([
            {"type": "carousel", "images": [{"src": "a.png"}, {"alt": "no src"}]},
        ], strict=False)
        serializer.serialize()
        assert isinstance(serializer.errors[0], InvalidBlockError)
        assert serializer.errors[0].block_type == "carousel"

    def test_strict_raises(self):
        """Strict mode raises on the first bad block"""
        with pytest.raises(UnsupportedBlockTypeError) as exc_info:
            Serializer([{"type": "note", "text": "a"}, {"type": "video"}], strict=True).serialize()
        assert exc_info.value.index == 1

    def test_errors_share_base(self):
        for error in (UnsupportedBlockTypeError, InvalidBlockError):
            assert issubclass(error, SerializeError)

    def test_missing_type(self):
        """A dict without a type is unsupported"""
        serializer = Serializer([{"text": "orphan"}], strict=False)
        serializer.serialize()
        assert serializer.errors[0].block_type == ""

    def test_image_entry_not_mapping(self):
        """A carousel image given as a bare string is invalid; later blocks survive"""
        serializer = Serializer([
            {"type": "carousel", "images": ["a.png"]},
            {"type": "note", "text": "kept"},
        ], strict=False)

        assert serializer.serialize() == "<note>kept</note>"
        error = serializer.errors[0]
        assert isinstance(error, InvalidBlockError)
        assert (error.index, error.block_type) == (0, "carousel")

    def test_snippet_entry_none(self):
        """A None snippet is invalid; later blocks survive"""
        serializer = Serializer([
            {"type": "code-collection", "snippets": [None]},
            {"type": "note", "text": "kept"},
        ], strict=False)

        assert serializer.serialize() == "<note>kept</note>"
        error = serializer.errors[0]
        assert isinstance(error, InvalidBlockError)
        assert (error.index, error.block_type) == (0, "code-collection")

    def test_block_not_mapping(self):
        """A block that is not a mapping is invalid; later blocks survive"""
        serializer = Serializer(["oops", {"type": "note", "text": "kept"}], strict=False)

        assert serializer.serialize() == "<note>kept</note>"
        error = serializer.errors[0]
        assert isinstance(error, InvalidBlockError)
        assert error.index == 0

    def test_scalar_images_field(self):
        """An images field that is not a list is rejected, not iterated"""
        serializer = Serializer([{"type": "carousel", "images": "a.png"}], strict=False)
        serializer.serialize()
        assert isinstance(serializer.errors[0], InvalidBlockError)

    def test_block_not_mapping_strict(self):
        with pytest.raises(InvalidBlockError):
            Serializer([42], strict=True).serialize()
