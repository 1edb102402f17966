"""
Codec state model and pipeline helper

Defines CodecState for the functional pipeline pattern, ViewState for
caller-owned selections, and the pipeline() helper for composing stages.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar
from dataclasses import dataclass, field

from .nodes import Document


CS = TypeVar("CS", bound="CodecState")


@dataclass
class ViewState:
    """
    Interactive selections owned by the UI layer

    Keys are (document_id, node_index). A document_id is a content hash, so
    an edited document starts with fresh, default selections instead of
    inheriting selections meant for other nodes.

    Example:
        >>> view = ViewState()
        >>> view.tab_select("abc", 3, "java")
        >>> view.tabs_get("abc")
        {3: 'java'}
    """
    tabs: Dict[Tuple[str, int], str] = field(default_factory=dict)
    slides: Dict[Tuple[str, int], int] = field(default_factory=dict)

    def tab_select(self, document_id: str, index: int, language: str) -> None:
        self.tabs[(document_id, index)] = language

    def slide_select(self, document_id: str, index: int, slide: int) -> None:
        self.slides[(document_id, index)] = slide

    def tabs_get(self, document_id: str) -> Dict[int, str]:
        """Tab selections for one document, keyed by node index"""
        return {index: value for (doc, index), value in self.tabs.items() if doc == document_id}

    def slides_get(self, document_id: str) -> Dict[int, int]:
        """Slide selections for one document, keyed by node index"""
        return {index: value for (doc, index), value in self.slides.items() if doc == document_id}


@dataclass
class CodecState:
    """
    Central state container for the content pipeline (state bus pattern).

    Carries the content through the stages, each stage adding the fields
    it produces.

    Pipeline stages and their state additions:
        - Initial: envelope, verbosity, view
        - envelope_unwrap: payload
        - payload_parse: document
        - document_render: presentation
        - error is set by the first stage that fails

    Attributes:
        envelope: Raw envelope text from the content store
        verbosity: Logging verbosity level (0-3)
        view: Caller-owned selections
        payload: Unwrapped dialect payload
        document: Parsed Document
        presentation: Rendered blocks
        error: Error recovered by a stage, if any
    """

    envelope: str = field(default="")
    verbosity: int = field(default=1)
    view: ViewState = field(default_factory=ViewState)

    payload: Optional[str] = field(default=None)
    document: Optional[Document] = field(default=None)
    presentation: Optional[List[Any]] = field(default=None)  # List[Block] at runtime
    error: Optional[Exception] = field(default=None)

    def copy(self: CS) -> CS:
        """
        Creates a shallow copy of the CodecState instance.

        Returns:
            A new CodecState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: CodecState, *stages: Callable[[CodecState], CodecState]
) -> CodecState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (CodecState) -> CodecState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting CodecState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final CodecState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            envelope_unwrap,
            payload_parse,
            document_render,
        )

    This is equivalent to:
        document_render(payload_parse(envelope_unwrap(initial_state)))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
