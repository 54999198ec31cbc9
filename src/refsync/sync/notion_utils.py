"""Helpers for Notion API responses and errors."""

from dataclasses import dataclass
from typing import Any, Union

from notion_client.errors import APIErrorCode, APIResponseError
from notion_client.helpers import is_full_page


@dataclass(frozen=True)
class FullPage:
    """A page response carrying the complete page representation."""

    page_id: str
    url: str
    properties: dict[str, Any]


@dataclass(frozen=True)
class PartialPage:
    """A page response without content, returned when the integration can't read pages."""

    page_id: str


PageResult = Union[FullPage, PartialPage]


def to_page_result(response: dict[str, Any]) -> PageResult:
    """Classify a create/update page response."""
    if is_full_page(response):
        return FullPage(
            page_id=response["id"],
            url=response["url"],
            properties=response.get("properties", {}),
        )
    return PartialPage(page_id=response["id"])


def convert_web_url_to_app_url(url: str) -> str:
    """Turn a notion.so web URL into a ``notion://`` URL that opens the desktop app.

    Example:
        >>> convert_web_url_to_app_url("https://www.notion.so/Page-0123")
        'notion://www.notion.so/Page-0123'
    """
    if url.startswith("https:"):
        return "notion:" + url[len("https:"):]
    return url


def is_notion_error_with_code(error: BaseException, code: APIErrorCode) -> bool:
    """Check whether an exception is a Notion API error with the given code."""
    return isinstance(error, APIResponseError) and error.code == code
