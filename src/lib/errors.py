"""
Error taxonomy for the markup codec

Envelope, parse and serialize failures each have their own base class so a
caller can pick a fallback per stage:

    LessonmarkError
    ├── CodecError
    │   ├── MissingSectionError
    │   ├── MalformedEnvelopeError
    │   └── UnterminatedCdataError
    ├── ParseError
    │   ├── ParseSyntaxError
    │   └── EmptyPayloadError
    └── SerializeError
        ├── UnsupportedBlockTypeError
        └── InvalidBlockError
"""

from typing import Optional


class LessonmarkError(Exception):
    """Base class for every error raised by the codec"""
    pass


class CodecError(LessonmarkError):
    """Raised when the outer envelope cannot be unwrapped"""
    pass


class MissingSectionError(CodecError):
    """The envelope parsed as XML but holds no <section> element"""
    pass


class MalformedEnvelopeError(CodecError):
    """The envelope is empty or is not well-formed XML"""
    pass


class UnterminatedCdataError(CodecError):
    """A <![CDATA[ section is opened but never closed"""

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"Unterminated CDATA section starting at position {position}")


class ParseError(LessonmarkError):
    """Raised when a payload cannot be turned into a Document"""
    pass


class ParseSyntaxError(ParseError):
    """
    The payload is not well-formed markup

    Attributes:
        line: 1-based line of the error within the payload
        column: 0-based column of the error within that line
    """

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.line = line
        self.column = column
        super().__init__(message)


class EmptyPayloadError(ParseError):
    """The payload is empty or whitespace only"""
    pass


class SerializeError(LessonmarkError):
    """
    Raised (or recorded) when one editor block cannot be serialized

    Attributes:
        index: Position of the offending block in the serializer input
        block_type: The block's type string
    """

    def __init__(self, message: str, index: int = -1, block_type: Optional[str] = None):
        self.index = index
        self.block_type = block_type
        super().__init__(message)


class UnsupportedBlockTypeError(SerializeError):
    """The block type has no markup form"""
    pass


class InvalidBlockError(SerializeError):
    """The block type is supported but a required field is missing"""
    pass
