"""
Heuristic localization of a thesis abstract within extracted pages.

Thai theses label the abstract with a heading (Thai or English) and the
abstract itself spans one to three pages right after it.
"""

from collections.abc import Sequence

# Handle both package imports and standalone imports
try:
    from ..models import AbstractSelection, Page
except ImportError:
    from models import AbstractSelection, Page

ABSTRACT_KEYWORDS: tuple[str, ...] = ("บทคัดย่อ", "บท คัดย่อ", "ABSTRACT", "Abstract")

# Heading page plus up to two following pages
ABSTRACT_WINDOW = 3
FALLBACK_PAGE_COUNT = 3

PAGE_SEPARATOR = "\n\n"

_LOWERED_KEYWORDS = tuple(keyword.lower() for keyword in ABSTRACT_KEYWORDS)


def has_abstract_heading(text: str) -> bool:
    """Case-insensitively check a page's text for any abstract keyword."""
    lowered = text.lower()
    return any(keyword in lowered for keyword in _LOWERED_KEYWORDS)


def find_abstract_pages(pages: Sequence[Page]) -> list[int]:
    """
    Find the abstract by its first heading.

    Only the first matching page counts; later mentions (table of contents,
    bibliography) are never reached.

    Args:
        pages: Extracted pages in document order.

    Returns:
        0-based indices of the heading page and up to two following pages,
        or an empty list when no page carries a heading.
    """
    for index, page in enumerate(pages):
        if has_abstract_heading(page.text):
            end = min(index + ABSTRACT_WINDOW, len(pages))
            return list(range(index, end))
    return []


def select_abstract_pages(pages: Sequence[Page]) -> AbstractSelection:
    """
    Choose the pages to classify, falling back to the leading pages.

    Returns:
        AbstractSelection that is non-empty whenever pages is non-empty.
    """
    indices = find_abstract_pages(pages)
    heading_found = bool(indices)
    if not heading_found:
        indices = list(range(min(FALLBACK_PAGE_COUNT, len(pages))))

    return AbstractSelection(
        indices=indices,
        page_numbers=[pages[i].page_number for i in indices],
        heading_found=heading_found,
    )


def join_page_text(pages: Sequence[Page], indices: Sequence[int]) -> str:
    """Join the selected pages' text in index order with a blank line between pages."""
    return PAGE_SEPARATOR.join(pages[i].text for i in indices)
