"""
Tag specification and metadata models

Defines the structure and categories of dialect tags for the parser's
dispatch registry and for documentation of the vocabulary.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set


class TagCategory(Enum):
    """
    Categories of dialect tags

    Used for organization and documentation generation.
    """
    TEXT = "text"            # <heading>, <paragraph>
    CODE = "code"            # <code>, <code-collection>
    MEDIA = "media"          # <image>, <carousel>, <gallery>
    CALLOUT = "callout"      # <note>, <example>


@dataclass
class TagSpec:
    """
    Specification for a dialect tag

    Attributes:
        name: Tag name as written in markup (lowercase)
        category: Category for organization
        description: Human-readable description
        handler: Builder function (element, position) -> Node
        attributes: Attribute names the tag reads
        child_tag: Name of the repeated child element, if any
        examples: Example usage strings
        aliases: Alternative names for the tag
    """
    name: str
    category: TagCategory
    description: str
    handler: Callable
    attributes: List[str] = field(default_factory=list)
    child_tag: Optional[str] = None
    examples: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)

    def matches(self, tag_name: str) -> bool:
        """
        Check if this spec matches a tag name

        Matching is case-sensitive: <Heading> is not <heading>.
        """
        return tag_name == self.name or tag_name in self.aliases


# Tags that only carry meaning inside a parent collection
CHILD_TAGS: Set[str] = {
    'snippet',  # inside <code-collection>
}


def child_is(tag_name: str) -> bool:
    """Check if a tag is only meaningful inside a collection"""
    return tag_name in CHILD_TAGS
