"""
Document model

A Document is the ordered sequence of typed Nodes parsed from one payload.
Each node class corresponds to one tag of the dialect:

    <heading level="2">        → Heading
    <paragraph>                → Paragraph
    <code language="python">   → Code
    <code-collection title=""> → CodeCollection (of Snippet)
    <image alt="">             → Image
    <carousel caption="">      → Carousel (of ImageRef)
    <gallery caption="">       → Gallery (of ImageRef)
    <note>                     → Note
    <example title="">         → Example
    anything else              → Unknown

Nodes are frozen. Every node carries `index`, its position among its
siblings, which is excluded from equality: two nodes with the same content
compare equal wherever they sit in a document.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple, Union


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    index: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Paragraph:
    text: str
    index: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Code:
    """Verbatim code block; `text` keeps internal whitespace exactly"""
    text: str
    language: str = "plaintext"
    index: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Snippet:
    """One language variant inside a CodeCollection"""
    text: str
    language: str = "plaintext"
    index: int = field(default=0, compare=False)


@dataclass(frozen=True)
class CodeCollection:
    snippets: Tuple[Snippet, ...] = ()
    title: Optional[str] = None
    index: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ImageRef:
    """An <img> inside a carousel or gallery"""
    src: str
    alt: str = ""


@dataclass(frozen=True)
class Image:
    src: str
    alt: str = "Image"
    width: Optional[str] = None
    height: Optional[str] = None
    index: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Carousel:
    images: Tuple[ImageRef, ...] = ()
    caption: Optional[str] = None
    index: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Gallery:
    images: Tuple[ImageRef, ...] = ()
    caption: Optional[str] = None
    index: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Note:
    text: str
    index: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Example:
    text: str
    title: Optional[str] = None
    index: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Unknown:
    """
    Element outside the vocabulary

    Its content is parsed with the same rules as the top level, so known
    tags nested inside it still become typed nodes.
    """
    tag: str
    children: Tuple["Node", ...] = ()
    index: int = field(default=0, compare=False)


Node = Union[
    Heading,
    Paragraph,
    Code,
    CodeCollection,
    Image,
    Carousel,
    Gallery,
    Note,
    Example,
    Unknown,
]


@dataclass(frozen=True)
class Document:
    """
    Ordered, immutable sequence of nodes

    Attributes:
        nodes: Nodes in render order
        document_id: Content hash of the payload the document came from,
                     used to key caller-owned view state
    """
    nodes: Tuple[Node, ...] = ()
    document_id: str = ""

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, position: int) -> Node:
        return self.nodes[position]
