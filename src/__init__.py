"""
lessonmark - Lesson markup codec

Unwraps lesson envelopes, parses the lesson dialect into typed documents,
renders them to presentation blocks, and serializes editor blocks back.
"""

__version__ = "1.0.0"

from .lib import (
    Parser,
    Renderer,
    Serializer,
    TagRegistry,
    Highlighter,
    LOG,
    state_connectToLogger,
    parse,
    render,
    serialize,
    unwrap,
    wrap,
    content_render,
)

__all__ = [
    "Parser",
    "Renderer",
    "Serializer",
    "TagRegistry",
    "Highlighter",
    "LOG",
    "state_connectToLogger",
    "parse",
    "render",
    "serialize",
    "unwrap",
    "wrap",
    "content_render",
    "__version__",
]
