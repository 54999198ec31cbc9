"""Citation formatting for library items.

Renders plain-text APA (7th edition) bibliography entries and in-text
citations. Citation formats are quick-copy strings such as
``bibliography=http://www.zotero.org/styles/apa``; only the APA style is
implemented and other styles are rendered as APA.
"""

import logging
from typing import Optional

from .db.models import Item
from .db.schemas import CreatorSchema, CreatorType, ItemType

logger = logging.getLogger(__name__)

SUPPORTED_STYLES = {"apa"}

# APA lists up to 20 authors before eliding
MAX_LISTED_AUTHORS = 20


def style_id(citation_format: str) -> str:
    """Extract the style ID from a quick-copy citation format.

    Example:
        >>> style_id("bibliography=http://www.zotero.org/styles/apa")
        'apa'
    """
    _, _, value = citation_format.partition("=")
    value = value or citation_format
    return value.rstrip("/").rsplit("/", 1)[-1]


def _check_style(citation_format: str) -> None:
    style = style_id(citation_format)
    if style not in SUPPORTED_STYLES:
        logger.debug("Citation style %s is not supported, using APA", style)


def _initials(first_name: str) -> str:
    parts = first_name.replace(".", " ").split()
    initials = []
    for part in parts:
        pieces = [p for p in part.split("-") if p]
        initials.append("-".join(f"{p[0].upper()}." for p in pieces))
    return " ".join(initials)


def _reference_name(creator: CreatorSchema) -> str:
    initials = _initials(creator.first_name)
    return f"{creator.last_name}, {initials}" if initials else creator.last_name


def _join_reference_names(names: list[str]) -> str:
    if len(names) == 1:
        return names[0]
    if len(names) > MAX_LISTED_AUTHORS:
        return ", ".join(names[: MAX_LISTED_AUTHORS - 1]) + ", . . . " + names[-1]
    return ", ".join(names[:-1]) + ", & " + names[-1]


def _primary_creators(item: Item) -> tuple[list[CreatorSchema], bool]:
    """Authors if any, else editors. The flag is True for editors."""
    authors = item.get_creators_of_type(CreatorType.AUTHOR)
    if authors:
        return authors, False
    return item.get_creators_of_type(CreatorType.EDITOR), True


def _year_text(item: Item) -> str:
    year = item.get_year()
    return str(year) if year else "n.d."


def _sentence(text: str) -> str:
    text = text.strip()
    if not text:
        return ""
    return text if text[-1] in ".?!" else f"{text}."


def _doi_url(doi: str) -> str:
    doi = doi.strip()
    if doi.lower().startswith("http"):
        return doi
    return f"https://doi.org/{doi}"


def _source_text(item: Item) -> str:
    """Container, volume, issue and pages for the reference entry."""
    if item.item_type == ItemType.JOURNAL_ARTICLE.value and item.publication:
        source = item.publication
        if item.volume:
            source += f", {item.volume}"
            if item.issue:
                source += f"({item.issue})"
        if item.pages:
            source += f", {item.pages}"
        return _sentence(source)

    parts = []
    if item.publication:
        parts.append(_sentence(item.publication))
    if item.publisher and item.publisher != item.publication:
        parts.append(_sentence(item.publisher))
    return " ".join(parts)


def format_citation(item: Item, citation_format: str) -> str:
    """Render a bibliography entry for an item."""
    _check_style(citation_format)

    creators, editors = _primary_creators(item)
    title = _sentence(item.title or item.short_title or "")
    year = f"({_year_text(item)})."

    parts = []
    if creators:
        names = _join_reference_names([_reference_name(c) for c in creators])
        if editors:
            names += " (Eds.)." if len(creators) > 1 else " (Ed.)."
        else:
            names = _sentence(names)
        parts.extend([names, year, title])
    else:
        parts.extend([title, year])

    source = _source_text(item)
    if source:
        parts.append(source)

    if item.doi:
        parts.append(_doi_url(item.doi))
    elif item.url:
        parts.append(item.url)

    return " ".join(part for part in parts if part)


def _narrative_names(item: Item) -> Optional[str]:
    creators, _ = _primary_creators(item)
    if not creators:
        return None
    if len(creators) == 1:
        return creators[0].last_name
    if len(creators) == 2:
        return f"{creators[0].last_name} & {creators[1].last_name}"
    return f"{creators[0].last_name} et al."


def format_in_text_citation(item: Item, citation_format: str) -> str:
    """Render a parenthetical in-text citation, e.g. ``(Smith & Doe, 2020)``."""
    _check_style(citation_format)

    names = _narrative_names(item)
    if names is None:
        names = f'"{item.short_title or item.title}"'
    return f"({names}, {_year_text(item)})"


def format_author_date_citation(item: Item) -> str:
    """Render ``Authors (Year) Title`` for use as a page title."""
    names = _narrative_names(item)
    title = item.title or item.short_title or ""
    if names is None:
        return f"({_year_text(item)}) {title}".strip()
    return f"{names} ({_year_text(item)}) {title}".strip()
