"""
Custom Pygments lexer for lesson dialect highlighting

Provides syntax highlighting for lesson markup when a lesson shows its own
source, e.g. <code language="lessonmark">.

Token types:
- Keyword.Declaration: Structural tags (heading, paragraph)
- Name.Function: Code tags (code, code-collection, snippet)
- Literal.Number: Media tags (image, img, carousel, gallery)
- Name.Decorator: Callout tags (note, example)
- Name.Tag: Any other tag
- Name.Attribute / String: Attribute names and quoted values
- Comment.Preproc: CDATA markers; String.Other: CDATA content
"""

import re

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Literal,
    Comment,
    Operator,
)


class LessonmarkLexer(RegexLexer):
    """
    Lexer for lesson dialect markup

    Example:
        <heading level="1">Intro</heading>

    Tokens:
        < → Punctuation
        heading → Keyword.Declaration
        level → Name.Attribute
        "1" → String
        Intro → Text
    """

    name = 'Lessonmark'
    aliases = ['lessonmark', 'lesson']
    filenames = ['*.lesson']
    flags = re.MULTILINE | re.DOTALL

    tokens = {
        'root': [
            # Comments
            (r'<!--.*?-->', Comment),

            # CDATA: markers and verbatim body
            (r'(<!\[CDATA\[)(.*?)(\]\]>)',
             bygroups(Comment.Preproc, String.Other, Comment.Preproc)),

            # XML declaration
            (r'<\?.*?\?>', Comment.Preproc),

            # Structural tags
            (r'(</?)(heading|paragraph)\b',
             bygroups(Punctuation, Keyword.Declaration), 'tag'),

            # Code tags
            (r'(</?)(code-collection|code|snippet)\b',
             bygroups(Punctuation, Name.Function), 'tag'),

            # Media tags
            (r'(</?)(image|img|carousel|gallery)\b',
             bygroups(Punctuation, Literal.Number), 'tag'),

            # Callout tags
            (r'(</?)(note|example)\b',
             bygroups(Punctuation, Name.Decorator), 'tag'),

            # Any other tag (envelope, unknown)
            (r'(</?)([a-zA-Z_][\w.-]*)', bygroups(Punctuation, Name.Tag), 'tag'),

            # Entities
            (r'&\w+;', Name.Entity),

            # Everything else is text
            (r'[^<&]+', Text),
            (r'.', Text),
        ],

        'tag': [
            (r'\s+', Text),

            # Attribute with quoted value
            (r'([\w-]+)(\s*)(=)(\s*)("[^"]*"|\'[^\']*\')',
             bygroups(Name.Attribute, Text, Operator, Text, String)),

            # Closing of tag
            (r'/?>', Punctuation, '#pop'),

            (r'.', Text),
        ],
    }


def get_lexer() -> LessonmarkLexer:
    """
    Get the LessonmarkLexer instance

    Returns:
        LessonmarkLexer instance ready for use with Pygments
    """
    return LessonmarkLexer()
