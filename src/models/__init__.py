"""
Models package for lessonmark

Contains the data structures passed between codec stages.
"""

from .state import CodecState, ViewState, pipeline
from .tags import TagSpec, TagCategory, CHILD_TAGS
from .editor import EditorBlock
from .nodes import Document

__all__ = [
    "CodecState",
    "ViewState",
    "pipeline",
    "TagSpec",
    "TagCategory",
    "CHILD_TAGS",
    "EditorBlock",
    "Document",
]
