"""
lessonmark codec components

envelope → parser → renderer, and serializer → envelope.
"""

from .envelope import unwrap, wrap
from .parser import Parser, parse
from .renderer import Renderer, render
from .serializer import Serializer, serialize
from .tags import TagRegistry
from .highlight import Highlighter, highlight
from .content import content_render, topic_render, blocks_publish
from .log import LOG, state_connectToLogger

__all__ = [
    "unwrap",
    "wrap",
    "Parser",
    "parse",
    "Renderer",
    "render",
    "Serializer",
    "serialize",
    "TagRegistry",
    "Highlighter",
    "highlight",
    "content_render",
    "topic_render",
    "blocks_publish",
    "LOG",
    "state_connectToLogger",
]
