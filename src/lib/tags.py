"""
Tag implementations for the lesson dialect

Each tag builds one typed Node from a parsed XML element, applying the
per-attribute defaults. Uses TagSpec for metadata and dispatch.
"""

import xml.etree.ElementTree as ET
from typing import Callable, Dict, Optional, Tuple

from ..config import appsettings
from ..models.nodes import (
    Carousel,
    Code,
    CodeCollection,
    Example,
    Gallery,
    Heading,
    Image,
    ImageRef,
    Node,
    Note,
    Paragraph,
    Snippet,
)
from ..models.tags import TagCategory, TagSpec


def text_content(element: ET.Element) -> str:
    """All text under an element (CDATA included), with one outer strip"""
    return "".join(element.itertext()).strip()


def attr_get(element: ET.Element, name: str) -> Optional[str]:
    """Attribute value, or None when missing or empty"""
    value = element.get(name)
    return value if value else None


def level_coerce(value: Optional[str]) -> int:
    """
    Coerce a heading level attribute to 1..6

    Missing, non-numeric, and out-of-range values give the default level.

    Example:
        >>> level_coerce("3"), level_coerce("9"), level_coerce("x")
        (3, 2, 2)
    """
    default = appsettings.default_heading_level
    if value is None:
        return default
    try:
        level = int(value.strip())
    except ValueError:
        return default
    return level if 1 <= level <= 6 else default


def language_get(element: ET.Element) -> str:
    return attr_get(element, "language") or appsettings.default_language


def source_get(element: ET.Element) -> str:
    """Image source: element text, falling back to a src attribute"""
    return text_content(element) or (element.get("src") or "").strip()


def images_collect(element: ET.Element) -> Tuple[ImageRef, ...]:
    """Every nested <img>, in document order"""
    return tuple(
        ImageRef(src=source_get(img), alt=img.get("alt") or "")
        for img in element.iter("img")
    )


class TagRegistry:
    """
    Registry of tag specifications and node builders

    Maps tag names to TagSpec objects containing metadata and the
    function that turns an element into a Node.
    """

    def __init__(self) -> None:
        """Initialize the registry and register the whole vocabulary"""
        self.specs: Dict[str, TagSpec] = {}
        self.textTags_register()
        self.codeTags_register()
        self.mediaTags_register()
        self.calloutTags_register()

    def register(self, spec: TagSpec) -> None:
        """Register a tag specification"""
        self.specs[spec.name] = spec
        for alias in spec.aliases:
            self.specs[alias] = spec

    def get(self, name: str) -> Optional[Callable[[ET.Element, int], Node]]:
        """
        Get the node builder for a tag name

        Args:
            name: Tag name exactly as written (case-sensitive)

        Returns:
            Builder function or None for tags outside the vocabulary
        """
        spec = self.specs.get(name)
        return spec.handler if spec else None

    def spec_get(self, name: str) -> Optional[TagSpec]:
        """Get full tag specification by name"""
        return self.specs.get(name)

    def tags_listByCategory(self, category: TagCategory) -> list[TagSpec]:
        """Get all tags in a category (aliases listed once)"""
        unique = {id(spec): spec for spec in self.specs.values()}
        return [spec for spec in unique.values() if spec.category == category]

    def textTags_register(self) -> None:
        """Register <heading> and <paragraph>"""

        def heading_handler(element: ET.Element, position: int) -> Node:
            return Heading(
                level=level_coerce(element.get("level")),
                text=text_content(element),
                index=position,
            )

        def paragraph_handler(element: ET.Element, position: int) -> Node:
            return Paragraph(text=text_content(element), index=position)

        self.register(TagSpec(
            name="heading",
            category=TagCategory.TEXT,
            description="Section heading, level 1-6 (default 2)",
            handler=heading_handler,
            attributes=["level"],
            examples=['<heading level="1">Intro</heading>'],
        ))

        self.register(TagSpec(
            name="paragraph",
            category=TagCategory.TEXT,
            description="Paragraph of inline text",
            handler=paragraph_handler,
            examples=["<paragraph>Hello</paragraph>"],
        ))

    def codeTags_register(self) -> None:
        """Register <code> and <code-collection>"""

        def code_handler(element: ET.Element, position: int) -> Node:
            return Code(
                text=text_content(element),
                language=language_get(element),
                index=position,
            )

        def collection_handler(element: ET.Element, position: int) -> Node:
            snippets = tuple(
                Snippet(text=text_content(snippet), language=language_get(snippet), index=i)
                for i, snippet in enumerate(element.iter("snippet"))
            )
            return CodeCollection(
                snippets=snippets,
                title=attr_get(element, "title"),
                index=position,
            )

        self.register(TagSpec(
            name="code",
            category=TagCategory.CODE,
            description="Verbatim code block, read from CDATA",
            handler=code_handler,
            attributes=["language"],
            examples=['<code language="python"><![CDATA[print("hi")]]></code>'],
        ))

        self.register(TagSpec(
            name="code-collection",
            category=TagCategory.CODE,
            description="Tabbed set of snippets, one per language",
            handler=collection_handler,
            attributes=["title"],
            child_tag="snippet",
            examples=[
                '<code-collection title="Hello">'
                '<snippet language="python"><![CDATA[print(1)]]></snippet>'
                '</code-collection>'
            ],
        ))

    def mediaTags_register(self) -> None:
        """Register <image>, <carousel> and <gallery>"""

        def image_handler(element: ET.Element, position: int) -> Node:
            return Image(
                src=source_get(element),
                alt=element.get("alt") or appsettings.default_image_alt,
                width=attr_get(element, "width"),
                height=attr_get(element, "height"),
                index=position,
            )

        def carousel_handler(element: ET.Element, position: int) -> Node:
            return Carousel(
                images=images_collect(element),
                caption=attr_get(element, "caption"),
                index=position,
            )

        def gallery_handler(element: ET.Element, position: int) -> Node:
            return Gallery(
                images=images_collect(element),
                caption=attr_get(element, "caption"),
                index=position,
            )

        self.register(TagSpec(
            name="image",
            category=TagCategory.MEDIA,
            description="Single image; the element text is the source URL",
            handler=image_handler,
            attributes=["alt", "width", "height"],
            examples=['<image alt="Diagram">https://example.com/d.png</image>'],
            aliases=["img"],
        ))

        self.register(TagSpec(
            name="carousel",
            category=TagCategory.MEDIA,
            description="Slideshow of images, one visible at a time",
            handler=carousel_handler,
            attributes=["caption"],
            child_tag="img",
            examples=['<carousel caption="Steps"><img alt="1">a.png</img></carousel>'],
        ))

        self.register(TagSpec(
            name="gallery",
            category=TagCategory.MEDIA,
            description="Grid of image tiles",
            handler=gallery_handler,
            attributes=["caption"],
            child_tag="img",
            examples=['<gallery caption="Shots"><img alt="1">a.png</img></gallery>'],
        ))

    def calloutTags_register(self) -> None:
        """Register <note> and <example>"""

        def note_handler(element: ET.Element, position: int) -> Node:
            return Note(text=text_content(element), index=position)

        def example_handler(element: ET.Element, position: int) -> Node:
            return Example(
                text=text_content(element),
                title=attr_get(element, "title"),
                index=position,
            )

        self.register(TagSpec(
            name="note",
            category=TagCategory.CALLOUT,
            description="Highlighted tip",
            handler=note_handler,
            examples=["<note>Remember to save</note>"],
        ))

        self.register(TagSpec(
            name="example",
            category=TagCategory.CALLOUT,
            description="Worked example with optional title",
            handler=example_handler,
            attributes=["title"],
            examples=['<example title="Loop">for i in range(3): ...</example>'],
        ))
