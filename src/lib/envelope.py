"""
Envelope codec

Lesson content is persisted as an XML envelope whose single <section>
carries the dialect payload in a CDATA section:

    <?xml version="1.0" encoding="UTF-8"?>
    <content>
      <section><![CDATA[
    <heading level="1">Intro</heading>
      ]]></section>
    </content>

The rich-text authoring surface tends to entity-escape the payload and to
wrap it in <p>/<br> tags. unwrap() undoes both, once; wrap() produces the
canonical envelope.

Decoding works in three steps, mirroring the parser's protect/restore
approach for code blocks:
1. Protect: nested <![CDATA[...]]> sections are swapped for placeholders
2. Clean: entities are decoded outside raw tags, editor wrappers stripped
3. Restore: placeholders are swapped back for the untouched sections

Example:
    >>> unwrap(wrap('<paragraph>Hello</paragraph>'))
    '<paragraph>Hello</paragraph>'
"""

import re
import xml.etree.ElementTree as ET
from typing import Dict, Tuple

from ..config import appsettings
from .errors import MalformedEnvelopeError, MissingSectionError, UnterminatedCdataError
from .log import LOG

CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"

# Closes the running CDATA section after "]]" and reopens it before ">"
CDATA_SPLIT = "]]]]><![CDATA[>"

ENVELOPE_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    "<content>\n"
    "  <section><![CDATA[\n"
    "{payload}\n"
    "  ]]></section>\n"
    "</content>"
)

# Applied in this order, once; &amp; last so it cannot produce new entities
ENTITY_ORDER: Tuple[Tuple[str, str], ...] = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
)

CDATA_PATTERN = re.compile(r"<!\[CDATA\[.*?\]\]>", re.DOTALL)
RAW_TAG_PATTERN = re.compile(r"<[^<>]*>")
EDITOR_WRAPPER_PATTERN = re.compile(r"</?p>|<br\s*/?>")


def cdata_guard(text: str) -> str:
    """
    Split every literal ]]> so the text can sit inside one CDATA section

    Example:
        >>> cdata_guard('a]]>b')
        'a]]]]><![CDATA[>b'
    """
    return text.replace(CDATA_CLOSE, CDATA_SPLIT)


def cdata_wrap(text: str) -> str:
    """Wrap text in a CDATA section, guarding any ]]> it contains"""
    return f"{CDATA_OPEN}{cdata_guard(text)}{CDATA_CLOSE}"


def entities_decode(text: str) -> str:
    """
    Decode &lt; &gt; &amp; in a single pass

    Example:
        >>> entities_decode('&amp;lt;b&amp;gt;')
        '&lt;b&gt;'
    """
    for entity, char in ENTITY_ORDER:
        text = text.replace(entity, char)
    return text


def cdata_checkTerminated(text: str) -> None:
    """
    Verify every <![CDATA[ in text has a matching ]]>

    Raises:
        UnterminatedCdataError: With the position of the open marker
    """
    pos = 0
    while True:
        start = text.find(CDATA_OPEN, pos)
        if start == -1:
            return
        end = text.find(CDATA_CLOSE, start + len(CDATA_OPEN))
        if end == -1:
            raise UnterminatedCdataError(start)
        pos = end + len(CDATA_CLOSE)


def cdata_protect(text: str) -> Tuple[str, Dict[int, str]]:
    """
    Replace nested CDATA sections with placeholders

    Returns:
        Text with placeholders, and a dict mapping placeholder index to the
        original section (markers included)
    """
    sections: Dict[int, str] = {}

    def protect(match: "re.Match[str]") -> str:
        section_id = len(sections)
        sections[section_id] = match.group(0)
        return appsettings.placeHolder_make(section_id)

    return CDATA_PATTERN.sub(protect, text), sections


def cdata_restore(text: str, sections: Dict[int, str]) -> str:
    """Swap placeholders produced by cdata_protect() back for their sections"""

    def restore(match: "re.Match[str]") -> str:
        section_id = int(match.group(1))
        return sections.get(section_id, match.group(0))

    return re.sub(appsettings.placeHolder_pattern(), restore, text)


def text_decode(text: str) -> str:
    """
    Decode entities everywhere except inside raw tags

    Attribute values of tags already present in the payload keep their
    escaping; escaped markup (&lt;heading&gt;) becomes real markup.
    """
    pieces = []
    pos = 0
    for match in RAW_TAG_PATTERN.finditer(text):
        pieces.append(entities_decode(text[pos:match.start()]))
        pieces.append(match.group(0))
        pos = match.end()
    pieces.append(entities_decode(text[pos:]))
    return "".join(pieces)


def wrappers_strip(text: str) -> str:
    """
    Remove the editor's <p>, </p> and <br> wrappers, and only those

    Example:
        >>> wrappers_strip('<p><paragraph>Hi</paragraph><br></p>')
        '<paragraph>Hi</paragraph>'
    """
    return EDITOR_WRAPPER_PATTERN.sub("", text)


def payload_clean(raw: str) -> str:
    """
    Turn a section's character data into a dialect payload

    Args:
        raw: Text content of the <section> element

    Returns:
        Decoded payload with outer whitespace removed
    """
    protected, sections = cdata_protect(raw)
    LOG(f"Protected {len(sections)} nested CDATA section(s)", level=3)

    cleaned = text_decode(protected)
    if appsettings.strip_editor_wrappers:
        cleaned = wrappers_strip(cleaned)

    return cdata_restore(cleaned, sections).strip()


def unwrap(envelope: str) -> str:
    """
    Extract the dialect payload from an envelope

    Args:
        envelope: Envelope text as stored by the content store

    Returns:
        Decoded payload string

    Raises:
        MalformedEnvelopeError: Envelope empty or not well-formed XML
        MissingSectionError: No <section> element in the envelope
        UnterminatedCdataError: A CDATA section is never closed

    Example:
        >>> unwrap('<content><section>&lt;note&gt;Hi&lt;/note&gt;</section></content>')
        '<note>Hi</note>'
    """
    if not envelope or not envelope.strip():
        raise MalformedEnvelopeError("Envelope is empty")

    text = envelope.strip()
    cdata_checkTerminated(text)

    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise MalformedEnvelopeError(f"Envelope is not well-formed XML: {exc}") from exc

    section = root if root.tag == "section" else root.find(".//section")
    if section is None:
        raise MissingSectionError(f"Envelope <{root.tag}> has no <section> element")

    raw = "".join(section.itertext())
    LOG(f"Section holds {len(raw)} characters", level=3)

    payload = payload_clean(raw)
    LOG(f"Unwrapped payload of {len(payload)} characters", level=2)
    return payload


def wrap(payload: str) -> str:
    """
    Build the canonical envelope around a payload

    The payload is stripped and placed verbatim in a CDATA section; only
    literal ]]> sequences are split.

    Example:
        >>> print(wrap('<note>Hi</note>'))
        <?xml version="1.0" encoding="UTF-8"?>
        <content>
          <section><![CDATA[
        <note>Hi</note>
          ]]></section>
        </content>
    """
    body = cdata_guard((payload or "").strip())
    return ENVELOPE_TEMPLATE.format(payload=body)
