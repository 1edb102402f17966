"""
Syntax highlighting collaborator

The renderer only hands over (text, language) and stores whatever HTML
comes back. This module provides the default implementation on Pygments;
any callable with the same signature can replace it.
"""

from typing import Callable, Optional

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from ..config import appsettings
from .lexer import LessonmarkLexer, get_lexer
from .log import LOG

# (text, language) -> HTML fragment
HighlightFn = Callable[[str, str], str]


def lexer_get(language: str) -> Lexer:
    """
    Get a Pygments lexer for a language name

    Unknown names (including "plaintext") fall back to TextLexer.
    """
    name = (language or "").strip().lower()
    if name in LessonmarkLexer.aliases:
        return get_lexer()
    try:
        return get_lexer_by_name(name)
    except ClassNotFound:
        LOG(f"No lexer for '{language}', using plain text", level=3)
        return TextLexer()


class Highlighter:
    """
    Pygments highlighter producing self-contained HTML

    Uses inline styles (noclasses=True) so fragments need no stylesheet.

    Example:
        >>> html = Highlighter()("print(1)", "python")
        >>> html.startswith('<div class="highlight"')
        True
    """

    def __init__(self, style: Optional[str] = None) -> None:
        self.style = style or appsettings.highlight_style
        self.formatter = HtmlFormatter(style=self.style, noclasses=True)

    def __call__(self, text: str, language: str) -> str:
        return pygments_highlight(text, lexer_get(language), self.formatter)


def highlight(text: str, language: str) -> str:
    """Highlight with the configured style"""
    return Highlighter()(text, language)
