"""
Text Utilities

Helper functions for text cleanup in business exports.
"""

import re

_BLOCK_BREAK_RE = re.compile(r'</p>|<br\s*/?>', re.IGNORECASE)
_TAG_RE = re.compile(r'<[^>]+>')
_WHITESPACE_RE = re.compile(r'\s+')
_PERIOD_RE = re.compile(r'\s*\.\s*')
_REPEATED_PERIODS_RE = re.compile(r'(?:\.\s*){2,}')
_WORD_RE = re.compile(r'\w\S*')


def to_proper_case(text: str) -> str:
    """
    Capitalize the first letter of each word and lowercase the rest.

    Example:
        >>> to_proper_case("CAMISA de ALGODÓN")
        'Camisa De Algodón'
    """
    if not text:
        return ''
    return _WORD_RE.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


def clean_html_description(html: str) -> str:
    """
    Convert an HTML description to a single line of plain sentences.

    Paragraph ends and line breaks become sentence breaks, remaining
    tags are dropped and whitespace/periods are normalized.

    Example:
        >>> clean_html_description("<p>Hello</p><br>World")
        'Hello. World.'
    """
    if not html:
        return ''

    text = _BLOCK_BREAK_RE.sub('. ', html)
    text = _TAG_RE.sub('', text)
    text = _WHITESPACE_RE.sub(' ', text)
    text = _PERIOD_RE.sub('. ', text)
    text = _REPEATED_PERIODS_RE.sub('. ', text)
    text = text.strip()

    if text.startswith('.'):
        text = text.lstrip('. ')
    if text and text[-1].isalnum():
        text += '.'
    return text
