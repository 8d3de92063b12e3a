"""
HTML to plain text normalization for regex extraction.
"""
import re

_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")

# Decoded after tags are removed so a literal &lt;b&gt; is not stripped as a tag
_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
)


def strip_html(html: str) -> str:
    """Replace tags with spaces, decode common entities, collapse whitespace."""
    if not html:
        return ""
    text = _TAG.sub(" ", html)
    for entity, replacement in _ENTITIES:
        text = text.replace(entity, replacement)
    return _WHITESPACE.sub(" ", text).strip()
