"""
Cleanup of abstracts delivered as JATS XML or HTML fragments.
"""

import re
from typing import Optional


JATS_TAG = re.compile(r'</?jats:[^>]+>')
ANY_TAG = re.compile(r'<[^>]+>')
WHITESPACE = re.compile(r'\s+')

# &amp; last so that "&amp;lt;" decodes to "&lt;" in one pass
HTML_ENTITIES = [
    ('&lt;', '<'),
    ('&gt;', '>'),
    ('&quot;', '"'),
    ('&apos;', "'"),
    ('&amp;', '&'),
]


def _clean_once(text: str) -> str:
    cleaned = JATS_TAG.sub('', text)
    cleaned = ANY_TAG.sub('', cleaned)
    for entity, char in HTML_ENTITIES:
        cleaned = cleaned.replace(entity, char)
    return WHITESPACE.sub(' ', cleaned).strip()


def clean_abstract(markup: Optional[str]) -> str:
    """Strip JATS/HTML tags, decode the basic entities and collapse whitespace.

    Repeats until the text stops changing, so the result is a fixed point
    and cleaning it again returns it unchanged.

    Args:
        markup: Abstract text that may contain XML tags

    Returns:
        Plain text abstract ('' for empty input)
    """
    if not markup:
        return ''

    previous = None
    cleaned = markup
    while cleaned != previous:
        previous = cleaned
        cleaned = _clean_once(cleaned)
    return cleaned
