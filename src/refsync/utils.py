"""Utility functions for refsync."""

from typing import Hashable, Iterable, TypeVar

from bs4 import BeautifulSoup

T = TypeVar("T", bound=Hashable)


def html_to_text(html: str) -> str:
    """
    Strip markup from an HTML fragment and return its text content.

    Args:
        html: HTML (or plain text) to parse

    Returns:
        The concatenated text nodes, or an empty string

    Example:
        >>> html_to_text("<p>Hello <b>world</b></p>")
        'Hello world'
        >>> html_to_text("")
        ''
    """
    if not html:
        return ""
    return BeautifulSoup(html, "html.parser").get_text() or ""


def unique(values: Iterable[T]) -> list[T]:
    """
    Drop repeated values while keeping first-seen order.

    Example:
        >>> unique([3, 1, 3, 2, 1])
        [3, 1, 2]
    """
    return list(dict.fromkeys(values))
