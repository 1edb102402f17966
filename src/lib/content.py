"""
Content pipeline

Connects the codec stages the way the surrounding application uses them:

    envelope → envelope_unwrap → payload_parse → document_render → blocks
    blocks   → serialize → wrap → store

The codec functions raise typed errors; this module is the caller that
decides the fallbacks:
- empty envelope: nothing to display (empty block list)
- CodecError: the raw envelope text is shown as one paragraph
- ParseError: a notice block carrying the raw payload
Unknown tags and skipped editor blocks are logged here as warnings.
"""

import hashlib
from typing import List, Optional, Sequence

from ..models.nodes import Document, Node, Paragraph, Unknown
from ..models.presentation import Block, NoticeBlock
from ..models.state import CodecState, ViewState, pipeline
from .envelope import unwrap, wrap
from .errors import CodecError, ParseError, SerializeError
from .log import LOG, state_connectToLogger
from .parser import Parser
from .renderer import Renderer
from .serializer import BlockInput, Serializer
from .store import ContentStore


def unknownTags_warn(nodes: Sequence[Node]) -> None:
    """Log a warning for every unknown tag, nested ones included"""
    for node in nodes:
        if isinstance(node, Unknown):
            LOG(f"Unknown tag <{node.tag}> at position {node.index}", level=1, warning=True)
            unknownTags_warn(node.children)


def envelope_unwrap(inputstate: CodecState) -> CodecState:
    """
    Unwrap the envelope into a payload.

    Returns:
        CodecState with payload set; on a CodecError, document holds the
        raw envelope as a single paragraph and error holds the exception
    """
    state = inputstate.copy()
    state_connectToLogger(state)

    if not state.envelope or not state.envelope.strip():
        LOG("Empty envelope, nothing to display", level=2)
        state.payload = ""
        return state

    try:
        state.payload = unwrap(state.envelope)
    except CodecError as exc:
        LOG(f"Envelope not usable ({type(exc).__name__}: {exc}), showing raw text", level=1, warning=True)
        raw = state.envelope.strip()
        state.error = exc
        state.document = Document(
            nodes=(Paragraph(text=raw),),
            document_id=hashlib.sha256(raw.encode("utf-8")).hexdigest(),
        )

    return state


def payload_parse(inputstate: CodecState) -> CodecState:
    """
    Parse the payload into a Document.

    Returns:
        CodecState with document set; on a ParseError, presentation holds
        a notice block and error holds the exception
    """
    state = inputstate.copy()
    state_connectToLogger(state)

    if state.document is not None or state.payload is None:
        return state

    if not state.payload.strip():
        state.document = Document()
        return state

    try:
        state.document = Parser(state.payload).parse()
    except ParseError as exc:
        LOG(f"Payload not parseable: {exc}", level=1, warning=True)
        state.error = exc
        state.presentation = [
            NoticeBlock(message="Error rendering lesson content.", raw=state.payload)
        ]
        return state

    unknownTags_warn(state.document.nodes)
    return state


def document_render(inputstate: CodecState) -> CodecState:
    """
    Render the Document with the caller's selections.

    Returns:
        CodecState with presentation set
    """
    state = inputstate.copy()
    state_connectToLogger(state)

    if state.presentation is not None:
        return state

    if state.document is None:
        state.presentation = []
        return state

    document_id = state.document.document_id
    state.presentation = Renderer(
        state.document,
        tab_state=state.view.tabs_get(document_id),
        slide_state=state.view.slides_get(document_id),
    ).render()
    return state


def content_process(
    envelope: str, view: Optional[ViewState] = None, verbosity: int = 1
) -> CodecState:
    """Run the full read pipeline and return the final state"""
    initial = CodecState(envelope=envelope, verbosity=verbosity, view=view or ViewState())
    return pipeline(initial, envelope_unwrap, payload_parse, document_render)


def content_render(
    envelope: str, view: Optional[ViewState] = None, verbosity: int = 1
) -> List[Block]:
    """
    Render envelope text with all fallbacks applied

    Example:
        >>> content_render(wrap('<note>Hi</note>'))
        [NoteBlock(text='Hi', key=0)]
    """
    return content_process(envelope, view, verbosity).presentation or []


def topic_render(
    store: ContentStore, topic_key: str, view: Optional[ViewState] = None, verbosity: int = 1
) -> List[Block]:
    """Fetch a topic's envelope from the store and render it"""
    return content_render(store.get_content(topic_key), view, verbosity)


def blocks_publish(
    store: ContentStore, topic_key: str, blocks: Sequence[BlockInput], verbosity: int = 1
) -> List[SerializeError]:
    """
    Serialize editor blocks, wrap them and store the envelope

    Returns:
        Errors of the blocks that were skipped (empty when all were stored)
    """
    state_connectToLogger(CodecState(verbosity=verbosity))

    serializer = Serializer(blocks)
    markup = serializer.serialize()
    for error in serializer.errors:
        LOG(f"Block {error.index} not published: {error}", level=1, warning=True)

    store.put_content(topic_key, wrap(markup))
    LOG(f"Stored {len(blocks) - len(serializer.errors)} block(s) under '{topic_key}'", level=2)
    return serializer.errors
