"""
Presentation descriptors

Backend-agnostic blocks produced by the Renderer. A UI layer (web template,
terminal, native widget) maps each block type to its own widgets; nothing
here carries markup or styling.

Every block has `key`: the positional index of the node it came from, which
is also the key callers use for tab and slide selection. Keys are left out
of equality, like node indices.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class HeadingBlock:
    level: int
    text: str
    key: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ParagraphBlock:
    text: str
    key: int = field(default=0, compare=False)


@dataclass(frozen=True)
class CodeBlock:
    """
    Attributes:
        language: Language name as written in the markup
        text: Verbatim code
        highlighted: HTML fragment from the highlighter collaborator
    """
    language: str
    text: str
    highlighted: str = ""
    key: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ImageBlock:
    src: str
    alt: str
    width: Optional[str] = None
    height: Optional[str] = None
    key: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Slide:
    src: str
    alt: str
    active: bool = False


@dataclass(frozen=True)
class CarouselBlock:
    """`active_index` is None only when there are no slides"""
    caption: Optional[str]
    slides: Tuple[Slide, ...]
    active_index: Optional[int]
    key: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Tile:
    src: str
    alt: str


@dataclass(frozen=True)
class GalleryBlock:
    caption: Optional[str]
    tiles: Tuple[Tile, ...]
    key: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Tab:
    """
    Attributes:
        language: Snippet language, the selection value
        label: Display label for the tab button
        code: Rendered snippet
        active: Whether this tab's language is the selected one
    """
    language: str
    label: str
    code: CodeBlock
    active: bool = False


@dataclass(frozen=True)
class CodeCollectionBlock:
    """`active_tab` is None only when there are no tabs"""
    title: Optional[str]
    tabs: Tuple[Tab, ...]
    active_tab: Optional[str]
    key: int = field(default=0, compare=False)

    def activeTab_get(self) -> Optional[Tab]:
        """First tab whose language is selected"""
        for tab in self.tabs:
            if tab.active:
                return tab
        return None


@dataclass(frozen=True)
class NoteBlock:
    text: str
    key: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ExampleBlock:
    title: str
    text: str
    key: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ContainerBlock:
    """Rendered content of a tag outside the vocabulary"""
    tag: str
    children: Tuple["Block", ...]
    key: int = field(default=0, compare=False)


@dataclass(frozen=True)
class NoticeBlock:
    """
    Error notice shown in place of content that failed to parse

    Attributes:
        message: Human-readable reason
        raw: The text that could not be parsed
    """
    message: str
    raw: str = ""
    key: int = field(default=0, compare=False)


Block = Union[
    HeadingBlock,
    ParagraphBlock,
    CodeBlock,
    ImageBlock,
    CarouselBlock,
    GalleryBlock,
    CodeCollectionBlock,
    NoteBlock,
    ExampleBlock,
    ContainerBlock,
    NoticeBlock,
]
