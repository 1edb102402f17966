"""
Renderer tests

Tests the mapping from nodes to presentation blocks, tab and slide
selection from caller state, and delegation to the highlighter.
"""

import pytest

from lessonmark.lib.parser import parse
from lessonmark.lib.renderer import Renderer, render
from lessonmark.models.presentation import (
    CarouselBlock,
    CodeBlock,
    CodeCollectionBlock,
    ContainerBlock,
    ExampleBlock,
    GalleryBlock,
    HeadingBlock,
    ImageBlock,
    NoteBlock,
    ParagraphBlock,
    Slide,
    Tile,
)


def fake_highlight(text: str, language: str) -> str:
    """Highlighter stand-in that records its inputs"""
    return f"[{language}]{text}"


COLLECTION = (
    '<code-collection title="Hello">'
    '<snippet language="python">print(1)</snippet>'
    '<snippet language="java">System.out.println(1);</snippet>'
    '<snippet language="c">printf("1");</snippet>'
    "</code-collection>"
)

CAROUSEL = (
    '<carousel caption="Steps">'
    '<img alt="One">1.png</img>'
    "<img>2.png</img>"
    '<img alt="Three">3.png</img>'
    "</carousel>"
)


class TestSimpleBlocks:
    """Test one-to-one node mappings"""

    def test_heading_and_paragraph(self):
        """Intro scenario renders a heading and a paragraph"""
        doc = parse('<heading level="1">Intro</heading><paragraph>Hello</paragraph>')
        assert render(doc, highlighter=fake_highlight) == [
            HeadingBlock(1, "Intro"),
            ParagraphBlock("Hello"),
        ]

    def test_keys_follow_positions(self):
        """Each block's key is its node's index"""
        doc = parse("<note>a</note><note>b</note>")
        assert [block.key for block in render(doc, highlighter=fake_highlight)] == [0, 1]

    def test_code_delegates_highlighting(self):
        """Code blocks carry the highlighter's output"""
        doc = parse('<code language="python"><![CDATA[x < 1]]></code>')
        assert render(doc, highlighter=fake_highlight) == [
            CodeBlock(language="python", text="x < 1", highlighted="[python]x < 1"),
        ]

    def test_image(self):
        """Image attributes are passed through"""
        doc = parse('<image alt="Chart" width="50%">c.png</image>')
        assert render(doc, highlighter=fake_highlight) == [
            ImageBlock(src="c.png", alt="Chart", width="50%"),
        ]

    def test_note(self):
        assert render(parse("<note>Tip</note>"), highlighter=fake_highlight) == [NoteBlock("Tip")]

    def test_example_title_fallback(self):
        """Example without title is displayed as Example"""
        blocks = render(parse("<example>x</example>"), highlighter=fake_highlight)
        assert blocks == [ExampleBlock(title="Example", text="x")]

    def test_example_title(self):
        blocks = render(parse('<example title="Loop">x</example>'), highlighter=fake_highlight)
        assert blocks[0].title == "Loop"

    def test_gallery(self):
        """Gallery images become tiles"""
        doc = parse('<gallery caption="G"><img alt="a">1.png</img><img>2.png</img></gallery>')
        assert render(doc, highlighter=fake_highlight) == [
            GalleryBlock(caption="G", tiles=(Tile("1.png", "a"), Tile("2.png", ""))),
        ]

    def test_default_highlighter_is_pygments(self):
        """Without a highlighter, Pygments HTML is produced"""
        block = render(parse('<code language="python">x = 1</code>'))[0]
        assert block.highlighted.startswith('<div class="highlight"')


class TestCodeCollectionTabs:
    """Test tab selection"""

    def test_default_tab_is_first_snippet(self):
        """No state entry selects the first snippet's language"""
        block = render(parse(COLLECTION), highlighter=fake_highlight)[0]

        assert isinstance(block, CodeCollectionBlock)
        assert block.active_tab == "python"
        assert [tab.active for tab in block.tabs] == [True, False, False]

    def test_selected_tab(self):
        """State entry for the node index selects that language"""
        block = render(parse(COLLECTION), tab_state={0: "java"}, highlighter=fake_highlight)[0]

        assert block.active_tab == "java"
        assert block.activeTab_get().code.text == "System.out.println(1);"

    def test_selection_for_other_index_ignored(self):
        """State keyed by another index does not apply"""
        doc = parse("<note>n</note>" + COLLECTION)
        block = render(doc, tab_state={0: "java"}, highlighter=fake_highlight)[1]
        assert block.active_tab == "python"

    def test_unknown_language_falls_back(self):
        """Selecting a language the collection lacks selects the first"""
        block = render(parse(COLLECTION), tab_state={0: "rust"}, highlighter=fake_highlight)[0]
        assert block.active_tab == "python"

    def test_tab_labels_and_code(self):
        """Tabs are labelled by upper-cased language and highlighted"""
        block = render(parse(COLLECTION), highlighter=fake_highlight)[0]

        assert [tab.label for tab in block.tabs] == ["PYTHON", "JAVA", "C"]
        assert block.tabs[2].code.highlighted == '[c]printf("1");'
        assert block.title == "Hello"

    def test_duplicate_language_single_active_tab(self):
        """Two snippets in the selected language leave only the first active"""
        doc = parse(
            "<code-collection>"
            '<snippet language="python">a</snippet>'
            '<snippet language="java">b</snippet>'
            '<snippet language="java">c</snippet>'
            "</code-collection>"
        )
        block = render(doc, tab_state={0: "java"}, highlighter=fake_highlight)[0]

        assert [tab.active for tab in block.tabs] == [False, True, False]
        assert block.activeTab_get().code.text == "b"

    def test_empty_collection(self):
        """A collection without snippets renders with no active tab"""
        block = render(parse("<code-collection></code-collection>"), highlighter=fake_highlight)[0]
        assert block == CodeCollectionBlock(title=None, tabs=(), active_tab=None)


class TestCarouselSlides:
    """Test slide selection"""

    def test_default_slide(self):
        """First slide is active by default"""
        block = render(parse(CAROUSEL), highlighter=fake_highlight)[0]

        assert isinstance(block, CarouselBlock)
        assert block.active_index == 0
        assert [slide.active for slide in block.slides] == [True, False, False]

    def test_selected_slide(self):
        """Slide state picks the active slide"""
        block = render(parse(CAROUSEL), slide_state={0: 2}, highlighter=fake_highlight)[0]
        assert block.active_index == 2
        assert block.slides[2].active

    @pytest.mark.parametrize("selected", [3, -1, 99])
    def test_out_of_range_slide(self, selected):
        """Out-of-range selections fall back to the first slide"""
        block = render(parse(CAROUSEL), slide_state={0: selected}, highlighter=fake_highlight)[0]
        assert block.active_index == 0

    def test_alt_fallback(self):
        """Slides without alt are labelled by position"""
        block = render(parse(CAROUSEL), highlighter=fake_highlight)[0]
        assert block.slides[1] == Slide(src="2.png", alt="Image 2", active=False)

    def test_empty_carousel(self):
        """An empty carousel renders as an empty container"""
        block = render(parse('<carousel caption="c"></carousel>'), highlighter=fake_highlight)[0]
        assert block == CarouselBlock(caption="c", slides=(), active_index=None)


class TestUnknownContainers:
    """Test pass-through rendering of unknown tags"""

    def test_children_rendered(self):
        """Unknown containers render their children"""
        doc = parse("<aside><note>n</note>text</aside>")
        assert render(doc, highlighter=fake_highlight) == [
            ContainerBlock(tag="aside", children=(NoteBlock("n"), ParagraphBlock("text"))),
        ]

    def test_nested_collection_uses_defaults(self):
        """Selection state does not reach into containers"""
        doc = parse("<aside>" + COLLECTION + "</aside>")
        container = render(doc, tab_state={0: "java"}, highlighter=fake_highlight)[0]
        assert container.children[0].active_tab == "python"


class TestPurity:
    """Test that rendering has no hidden state"""

    def test_repeat_render_equal(self):
        """Rendering twice gives equal output"""
        doc = parse(COLLECTION + CAROUSEL)
        renderer = Renderer(doc, tab_state={0: "c"}, highlighter=fake_highlight)
        assert renderer.render() == renderer.render()

    def test_state_not_mutated(self):
        """Caller state is read, never written"""
        tab_state = {0: "rust"}
        render(parse(COLLECTION), tab_state=tab_state, highlighter=fake_highlight)
        assert tab_state == {0: "rust"}
