"""
Renderer for lesson Documents

Transforms a Document into presentation descriptors.

The renderer is a pure function of its inputs: the document, the caller's
selection state (active tab per code collection, active slide per carousel)
and a highlighter. It keeps no state between calls and performs no I/O.
"""

from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Type

from ..config import appsettings
from ..models.nodes import (
    Carousel,
    Code,
    CodeCollection,
    Document,
    Example,
    Gallery,
    Heading,
    Image,
    Node,
    Note,
    Paragraph,
    Unknown,
)
from ..models.presentation import (
    Block,
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
    Tab,
    Tile,
)
from .highlight import HighlightFn, Highlighter
from .log import LOG

# Node index -> selected language
TabState = Mapping[int, str]

# Node index -> selected slide
SlideState = Mapping[int, int]


class Renderer:
    """
    Renders a Document to a list of presentation blocks

    Responsibilities:
    - Map each node type to its block type
    - Resolve the active tab and slide from caller state
    - Delegate code highlighting
    - Render unknown containers recursively
    """

    def __init__(
        self,
        document: Document,
        tab_state: Optional[TabState] = None,
        slide_state: Optional[SlideState] = None,
        highlighter: Optional[HighlightFn] = None,
    ) -> None:
        """
        Initialize renderer

        Args:
            document: Parsed document
            tab_state: Selected language per code-collection index
            slide_state: Selected slide per carousel index
            highlighter: (text, language) -> HTML; Pygments by default
        """
        self.document = document
        self.tab_state: TabState = tab_state or {}
        self.slide_state: SlideState = slide_state or {}
        self.highlighter: HighlightFn = highlighter or Highlighter()

        self.handlers: Dict[Type, Callable[[Node, bool], Block]] = {
            Heading: self.heading_render,
            Paragraph: self.paragraph_render,
            Code: self.code_render,
            CodeCollection: self.codeCollection_render,
            Image: self.image_render,
            Carousel: self.carousel_render,
            Gallery: self.gallery_render,
            Note: self.note_render,
            Example: self.example_render,
            Unknown: self.unknown_render,
        }

    def render(self) -> List[Block]:
        """
        Render every top-level node

        Returns:
            Blocks in document order
        """
        blocks = self.nodes_render(self.document.nodes, top_level=True)
        LOG(f"Rendered {len(blocks)} block(s)", level=2)
        return blocks

    def nodes_render(self, nodes: Sequence[Node], top_level: bool = False) -> List[Block]:
        """
        Render a sequence of sibling nodes

        Selection state only applies at the top level; nodes nested in an
        unknown container use default selections.
        """
        return [self.node_render(node, top_level) for node in nodes]

    def node_render(self, node: Node, top_level: bool = False) -> Block:
        """Dispatch one node to its render method"""
        handler = self.handlers.get(type(node))
        if handler is None:
            raise TypeError(f"No renderer for node type {type(node).__name__}")
        return handler(node, top_level)

    def codeBlock_make(self, text: str, language: str, key: int = 0) -> CodeBlock:
        return CodeBlock(
            language=language,
            text=text,
            highlighted=self.highlighter(text, language),
            key=key,
        )

    def heading_render(self, node: Heading, top_level: bool) -> Block:
        return HeadingBlock(level=node.level, text=node.text, key=node.index)

    def paragraph_render(self, node: Paragraph, top_level: bool) -> Block:
        return ParagraphBlock(text=node.text, key=node.index)

    def code_render(self, node: Code, top_level: bool) -> Block:
        return self.codeBlock_make(node.text, node.language, key=node.index)

    def codeCollection_render(self, node: CodeCollection, top_level: bool) -> Block:
        """
        Render a code collection as tabs

        The active language is the caller's selection for this node when
        the collection has a snippet in that language, otherwise the first
        snippet's language.
        """
        languages = [snippet.language for snippet in node.snippets]
        selected = self.tab_state.get(node.index) if top_level else None

        if selected in languages:
            active: Optional[str] = selected
        else:
            active = languages[0] if languages else None

        # Only the first snippet in the active language is the active tab
        active_position = languages.index(active) if active is not None else None

        tabs = tuple(
            Tab(
                language=snippet.language,
                label=snippet.language.upper(),
                code=self.codeBlock_make(snippet.text, snippet.language, key=snippet.index),
                active=position == active_position,
            )
            for position, snippet in enumerate(node.snippets)
        )
        return CodeCollectionBlock(title=node.title, tabs=tabs, active_tab=active, key=node.index)

    def image_render(self, node: Image, top_level: bool) -> Block:
        return ImageBlock(
            src=node.src,
            alt=node.alt,
            width=node.width,
            height=node.height,
            key=node.index,
        )

    def carousel_render(self, node: Carousel, top_level: bool) -> Block:
        """
        Render a carousel with one active slide

        Slides without alt text are labelled "Image N".
        """
        active = self.slideIndex_resolve(node, top_level)
        slides: Tuple[Slide, ...] = tuple(
            Slide(src=image.src, alt=image.alt or f"Image {i + 1}", active=i == active)
            for i, image in enumerate(node.images)
        )
        return CarouselBlock(caption=node.caption, slides=slides, active_index=active, key=node.index)

    def slideIndex_resolve(self, node: Carousel, top_level: bool) -> Optional[int]:
        """Caller's slide for this carousel if in range, else 0 (None if empty)"""
        if not node.images:
            return None
        selected = self.slide_state.get(node.index, 0) if top_level else 0
        if isinstance(selected, int) and 0 <= selected < len(node.images):
            return selected
        return 0

    def gallery_render(self, node: Gallery, top_level: bool) -> Block:
        tiles = tuple(Tile(src=image.src, alt=image.alt) for image in node.images)
        return GalleryBlock(caption=node.caption, tiles=tiles, key=node.index)

    def note_render(self, node: Note, top_level: bool) -> Block:
        return NoteBlock(text=node.text, key=node.index)

    def example_render(self, node: Example, top_level: bool) -> Block:
        return ExampleBlock(
            title=node.title or appsettings.default_example_title,
            text=node.text,
            key=node.index,
        )

    def unknown_render(self, node: Unknown, top_level: bool) -> Block:
        children = tuple(self.nodes_render(node.children))
        return ContainerBlock(tag=node.tag, children=children, key=node.index)


def render(
    document: Document,
    tab_state: Optional[TabState] = None,
    slide_state: Optional[SlideState] = None,
    highlighter: Optional[HighlightFn] = None,
) -> List[Block]:
    """Render a document with the given selection state"""
    return Renderer(document, tab_state, slide_state, highlighter).render()
