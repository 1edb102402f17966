"""
Serializer for editor blocks

Inverse of the parser for the block types the structured editor offers:
turns a list of EditorBlocks into canonical dialect markup.

Escaping rules:
- Attribute values: &, <, >, " become entities
- Code and snippet bodies: always in CDATA, ]]> split
- Inline text and image sources: in CDATA when they contain <, > or &,
  otherwise written as is

Text never carries entities outside a tag, so the payload also survives the
envelope's entity decoding unchanged.

Example:
    >>> serialize([{"type": "heading", "text": "Intro", "level": 1}])
    '<heading level="1">Intro</heading>'
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from ..config import appsettings
from ..models.editor import EditorBlock
from .envelope import cdata_wrap
from .errors import InvalidBlockError, SerializeError, UnsupportedBlockTypeError
from .log import LOG
from .tags import level_coerce

BlockInput = Union[EditorBlock, Mapping[str, Any]]

TEXT_SPECIALS = ("<", ">", "&")


def attr_escape(value: str) -> str:
    """
    Escape a value for a double-quoted attribute

    Example:
        >>> attr_escape('Tom & "Jerry" <3')
        'Tom &amp; &quot;Jerry&quot; &lt;3'
    """
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def text_escape(text: str) -> str:
    """Inline text as is, or in CDATA when it holds markup characters"""
    if any(char in text for char in TEXT_SPECIALS):
        return cdata_wrap(text)
    return text


def attrs_format(**attrs: Optional[str]) -> str:
    """
    Format attributes in keyword order, skipping empty values

    Example:
        >>> attrs_format(title="A", caption=None)
        ' title="A"'
    """
    return "".join(
        f' {name}="{attr_escape(value)}"' for name, value in attrs.items() if value
    )


class Serializer:
    """
    Serializes editor blocks to dialect markup

    A block that cannot be serialized is skipped and its error recorded in
    `errors`, so one bad block does not lose the rest of the document. In
    strict mode the first error is raised instead.
    """

    def __init__(self, blocks: Sequence[BlockInput], strict: Optional[bool] = None) -> None:
        """
        Initialize serializer

        Args:
            blocks: EditorBlocks, or dicts in the editor's JSON shape
            strict: Raise on the first bad block (default: settings.strict_mode)
        """
        self.blocks: List[BlockInput] = list(blocks)
        self.strict = appsettings.strict_mode if strict is None else strict
        self.errors: List[SerializeError] = []

        self.handlers: Dict[str, Callable[[EditorBlock, int], str]] = {
            "heading": self.heading_serialize,
            "paragraph": self.paragraph_serialize,
            "code": self.code_serialize,
            "note": self.note_serialize,
            "example": self.example_serialize,
            "image": self.image_serialize,
            "carousel": self.carousel_serialize,
            "code-collection": self.codeCollection_serialize,
        }

    def serialize(self) -> str:
        """
        Serialize every block

        Returns:
            Markup with one top-level element per serialized block

        Raises:
            SerializeError: Only in strict mode
        """
        self.errors = []
        parts: List[str] = []

        for position, raw in enumerate(self.blocks):
            try:
                block = self.block_coerce(raw, position)
                parts.append(self.block_serialize(block, position))
            except SerializeError as exc:
                if self.strict:
                    raise
                LOG(f"Skipped block {position}: {exc}", level=2)
                self.errors.append(exc)

        LOG(f"Serialized {len(parts)} of {len(self.blocks)} block(s)", level=2)
        return "\n".join(parts)

    def block_coerce(self, raw: Any, position: int) -> EditorBlock:
        """EditorBlock from an editor dict; anything else is an invalid block"""
        if isinstance(raw, EditorBlock):
            return raw
        if not isinstance(raw, Mapping):
            raise InvalidBlockError(
                f"Block {position} is a {type(raw).__name__}, not a mapping",
                index=position,
                block_type=None,
            )
        return EditorBlock.from_dict(raw)

    def item_require(self, item: Any, block: EditorBlock, position: int) -> Mapping[str, Any]:
        """A list entry (image, snippet) must be a mapping"""
        if not isinstance(item, Mapping):
            raise InvalidBlockError(
                f"Block {position} ({block.type}) has a {type(item).__name__} entry, not a mapping",
                index=position,
                block_type=block.type,
            )
        return item

    def block_serialize(self, block: EditorBlock, position: int) -> str:
        """Dispatch one block to its serialize method"""
        handler = self.handlers.get(block.type)
        if handler is None:
            raise UnsupportedBlockTypeError(
                f"Block type '{block.type}' cannot be serialized",
                index=position,
                block_type=block.type,
            )
        return handler(block, position)

    def heading_serialize(self, block: EditorBlock, position: int) -> str:
        level = level_coerce(block.text_get("level") or None)
        return f'<heading level="{level}">{text_escape(block.text_get("text"))}</heading>'

    def paragraph_serialize(self, block: EditorBlock, position: int) -> str:
        return f"<paragraph>{text_escape(block.text_get('text'))}</paragraph>"

    def code_serialize(self, block: EditorBlock, position: int) -> str:
        code = block.text_get("code") or block.text_get("text")
        language = block.text_get("language") or appsettings.default_language
        return f"<code{attrs_format(language=language)}>{cdata_wrap(code)}</code>"

    def note_serialize(self, block: EditorBlock, position: int) -> str:
        return f"<note>{text_escape(block.text_get('text'))}</note>"

    def example_serialize(self, block: EditorBlock, position: int) -> str:
        attrs = attrs_format(title=block.text_get("title"))
        return f"<example{attrs}>{text_escape(block.text_get('text'))}</example>"

    def source_require(self, item: Mapping[str, Any], block: EditorBlock, position: int) -> str:
        src = str(item.get("src") or "").strip()
        if not src:
            raise InvalidBlockError(
                f"Block {position} ({block.type}) has an image without a source",
                index=position,
                block_type=block.type,
            )
        return src

    def image_serialize(self, block: EditorBlock, position: int) -> str:
        src = self.source_require(block.fields, block, position)
        attrs = attrs_format(alt=block.text_get("alt"))
        return f"<image{attrs}>{text_escape(src)}</image>"

    def carousel_serialize(self, block: EditorBlock, position: int) -> str:
        lines = [f"<carousel{attrs_format(caption=block.text_get('caption'))}>"]
        for entry in block.items_get("images"):
            item = self.item_require(entry, block, position)
            src = self.source_require(item, block, position)
            attrs = attrs_format(alt=str(item.get("alt") or ""))
            lines.append(f"  <img{attrs}>{text_escape(src)}</img>")
        lines.append("</carousel>")
        return "\n".join(lines)

    def codeCollection_serialize(self, block: EditorBlock, position: int) -> str:
        lines = [f"<code-collection{attrs_format(title=block.text_get('title'))}>"]
        for entry in block.items_get("snippets"):
            item = self.item_require(entry, block, position)
            language = str(item.get("language") or appsettings.default_language)
            code = str(item.get("code") or item.get("text") or "")
            lines.append(f"  <snippet{attrs_format(language=language)}>{cdata_wrap(code)}</snippet>")
        lines.append("</code-collection>")
        return "\n".join(lines)


def serialize(blocks: Sequence[BlockInput]) -> str:
    """Serialize blocks, skipping (and logging) those that cannot be"""
    return Serializer(blocks).serialize()
