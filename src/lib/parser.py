"""
Parser for the lesson dialect

Transforms an unwrapped payload into a Document of typed nodes.

The parser operates in two phases:
1. Tree building: wrap the payload in a synthetic root and parse it as XML
2. Walking: visit the root's children in order and dispatch each element
   through the TagRegistry

Key features:
- Several top-level tags without a mandatory root element
- Loose top-level text becomes an implicit Paragraph
- Unknown tags become Unknown containers whose content is walked the same way
- Code bodies read verbatim from CDATA sections
- Line/column reporting with a caret for malformed markup

Example:
    >>> doc = Parser('<heading level="1">Intro</heading><paragraph>Hello</paragraph>').parse()
    >>> doc[0]
    Heading(level=1, text='Intro', index=0)
    >>> doc[1].text
    'Hello'
"""

import hashlib
import xml.etree.ElementTree as ET
from typing import List, NoReturn, Optional

from ..config import appsettings
from ..models.nodes import Document, Node, Paragraph, Unknown
from ..models.tags import child_is
from .errors import EmptyPayloadError, ParseSyntaxError
from .log import LOG
from .tags import TagRegistry


class Parser:
    """
    Parser for lesson dialect payloads

    Handles:
    - Multiple top-level siblings
    - Implicit paragraphs from loose text
    - Unknown tags (kept, with their content parsed recursively)
    - Error reporting with line numbers
    """

    def __init__(self, payload: str, registry: Optional[TagRegistry] = None):
        """
        Initialize parser with payload text

        Args:
            payload: Dialect markup, as returned by envelope.unwrap()
            registry: Optional TagRegistry; the built-in vocabulary by default
        """
        self.payload = payload
        self.registry = registry if registry is not None else TagRegistry()
        self.root_tag = appsettings.synthetic_root

    def parse(self) -> Document:
        """
        Parse payload into a Document

        Returns:
            Document whose nodes follow payload order

        Raises:
            EmptyPayloadError: Payload is empty or whitespace only
            ParseSyntaxError: Payload is not well-formed markup
        """
        if self.payload is None or not self.payload.strip():
            raise EmptyPayloadError("Payload is empty")

        root = self.tree_build()
        nodes = self.children_parse(root)
        LOG(f"Parsed {len(nodes)} top-level node(s)", level=2)

        return Document(nodes=tuple(nodes), document_id=self.documentId_make())

    def documentId_make(self) -> str:
        """Content hash of the payload, used to key view state"""
        return hashlib.sha256(self.payload.encode("utf-8")).hexdigest()

    def tree_build(self) -> ET.Element:
        """
        Parse the payload inside the synthetic root element

        Returns:
            The synthetic root element
        """
        wrapped = f"<{self.root_tag}>{self.payload}</{self.root_tag}>"
        try:
            return ET.fromstring(wrapped)
        except ET.ParseError as exc:
            self.error(exc)

    def children_parse(self, element: ET.Element) -> List[Node]:
        """
        Turn an element's content into a list of nodes

        Text between child elements becomes a Paragraph unless it is
        whitespace only. Each node's index is its position in the list.

        Args:
            element: Element whose content to walk (root or Unknown)

        Returns:
            Nodes in document order
        """
        nodes: List[Node] = []

        def text_add(text: Optional[str]) -> None:
            if text and text.strip():
                nodes.append(Paragraph(text=text.strip(), index=len(nodes)))

        text_add(element.text)
        for child in element:
            nodes.append(self.element_parse(child, len(nodes)))
            text_add(child.tail)

        return nodes

    def element_parse(self, element: ET.Element, position: int) -> Node:
        """
        Dispatch one element to its node builder

        Args:
            element: Element to convert
            position: Index the node gets among its siblings

        Returns:
            Typed node, or Unknown for tags outside the vocabulary
        """
        handler = self.registry.get(element.tag)
        if handler is not None:
            return handler(element, position)

        if child_is(element.tag):
            LOG(f"<{element.tag}> outside its collection kept as container", level=3)
        else:
            LOG(f"Unknown tag <{element.tag}> kept as container", level=3)

        return Unknown(
            tag=element.tag,
            children=tuple(self.children_parse(element)),
            index=position,
        )

    def error(self, exc: ET.ParseError) -> NoReturn:
        """
        Report parser error with source context

        Converts an XML error position (which counts the synthetic root)
        back to payload coordinates and raises with a caret excerpt.

        Raises:
            ParseSyntaxError: Always (this is an error reporting function)

        Example output:
            ParseSyntaxError:
            mismatched tag
            Line 1, column 16
            Context: <heading>Intro</note>
                                     ^
        """
        line, column = getattr(exc, "position", (1, 0))
        if line == 1:
            column = max(0, column - len(f"<{self.root_tag}>"))

        lines = self.payload.splitlines() or [""]
        line = min(max(line, 1), len(lines))
        context = lines[line - 1]
        column = min(column, len(context))
        reason = str(exc).split(":")[0]

        raise ParseSyntaxError(
            f"\n{reason}\n"
            f"Line {line}, column {column}\n"
            f"Context: {context}\n"
            f"         {' ' * column}^",
            line=line,
            column=column,
        ) from exc


def parse(payload: str) -> Document:
    """Parse a payload with the built-in vocabulary"""
    return Parser(payload).parse()
