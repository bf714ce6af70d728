"""Title extraction from HTML using CSS selectors."""

import html

from selectolax.parser import HTMLParser

SOFT_HYPHEN = "\xad"

SNIPPET_LENGTH = 500


def strip_soft_hyphens(text: str) -> str:
    return text.replace(SOFT_HYPHEN, "")


def decode_entities(markup: str) -> str:
    """Decode HTML character entities in raw markup, dropping soft hyphens entirely."""
    return strip_soft_hyphens(html.unescape(markup))


class Extractor:
    """Extract text from a parsed HTML document."""

    def __init__(self, document: str | HTMLParser):
        self.tree = document if isinstance(document, HTMLParser) else HTMLParser(document)

    def text(self, selector: str) -> str:
        """Concatenated text of every node matching ``selector``."""
        return "".join(node.text(deep=True) for node in self.tree.css(selector))

    def first_text(self, selector: str) -> str | None:
        node = self.tree.css_first(selector)
        return node.text(deep=True) if node is not None else None

    def title(self, selector: str) -> str:
        """Selector text without soft hyphens, as stored in the catalog.

        The parser has already decoded entities, so the text is not decoded again.
        """
        return strip_soft_hyphens(self.text(selector))

    def snippet(self, length: int = SNIPPET_LENGTH) -> str:
        """Start of the serialized document, for error messages."""
        return snippet(self.tree.html or "", length)


def snippet(content: str, length: int = SNIPPET_LENGTH) -> str:
    content = " ".join(content.split())
    if len(content) <= length:
        return content
    return content[:length] + "..."
