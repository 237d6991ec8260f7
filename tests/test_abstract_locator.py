"""Tests for abstract page localization."""

from app.backend.services.abstract_locator import (
    find_abstract_pages,
    has_abstract_heading,
    join_page_text,
    select_abstract_pages,
)

from .fakes import pages_from


class TestHasAbstractHeading:
    """Tests for keyword matching on a single page."""

    def test_thai_heading(self):
        assert has_abstract_heading("บทคัดย่อ โครงงานนี้พัฒนาระบบ")

    def test_thai_spaced_heading(self):
        assert has_abstract_heading("บท คัดย่อ")

    def test_english_heading_any_case(self):
        """Test that matching is case-insensitive."""
        assert has_abstract_heading("ABSTRACT")
        assert has_abstract_heading("Abstract")
        assert has_abstract_heading("an abstract of the work")
        assert has_abstract_heading("AbStRaCt")

    def test_no_heading(self):
        assert not has_abstract_heading("Table of contents")
        assert not has_abstract_heading("")


class TestFindAbstractPages:
    """Tests for heading-based page selection."""

    def test_heading_in_middle_page_clamped_at_end(self):
        """Test 3 pages with the heading on page 2 selects indices [1, 2]."""
        pages = pages_from("Cover", "ABSTRACT This thesis ...", "Chapter 1")
        assert find_abstract_pages(pages) == [1, 2]

    def test_heading_selects_up_to_two_following_pages(self):
        pages = pages_from("Cover", "Approval", "บทคัดย่อ", "cont.", "Abstract (English)", "TOC")
        assert find_abstract_pages(pages) == [2, 3, 4]

    def test_only_first_match_is_used(self):
        """Test that later mentions, e.g. in a bibliography, are ignored."""
        pages = pages_from("Abstract", "a", "b", "c", "Abstract again")
        assert find_abstract_pages(pages) == [0, 1, 2]

    def test_heading_on_last_page(self):
        pages = pages_from("Cover", "Intro", "Abstract")
        assert find_abstract_pages(pages) == [2]

    def test_no_pages_before_first_match_included(self):
        pages = pages_from("x", "y", "z", "abstract", "w")
        indices = find_abstract_pages(pages)
        assert indices[0] == 3
        assert all(i >= 3 for i in indices)

    def test_no_heading_returns_empty(self):
        pages = pages_from("Cover", "Intro", "Chapter 1", "Chapter 2")
        assert find_abstract_pages(pages) == []

    def test_empty_document(self):
        assert find_abstract_pages([]) == []


class TestSelectAbstractPages:
    """Tests for selection with fallback."""

    def test_heading_found(self):
        pages = pages_from("Cover", "ABSTRACT", "Chapter 1")
        selection = select_abstract_pages(pages)
        assert selection.heading_found is True
        assert selection.indices == [1, 2]
        assert selection.page_numbers == [2, 3]

    def test_fallback_to_first_three_pages(self):
        pages = pages_from("p1", "p2", "p3", "p4", "p5")
        selection = select_abstract_pages(pages)
        assert selection.heading_found is False
        assert selection.indices == [0, 1, 2]
        assert selection.page_numbers == [1, 2, 3]

    def test_fallback_with_short_document(self):
        """Test that the fallback never reports pages the document lacks."""
        for count in (1, 2):
            pages = pages_from(*[f"page {i}" for i in range(count)])
            selection = select_abstract_pages(pages)
            assert selection.indices == list(range(count))
            assert selection.page_numbers == list(range(1, count + 1))

    def test_selection_never_empty_for_non_empty_document(self):
        selection = select_abstract_pages(pages_from(""))
        assert selection.indices == [0]


class TestJoinPageText:
    """Tests for joining selected page text."""

    def test_joined_with_blank_line(self):
        pages = pages_from("one", "two", "three")
        assert join_page_text(pages, [1, 2]) == "two\n\nthree"

    def test_single_page(self):
        pages = pages_from("only")
        assert join_page_text(pages, [0]) == "only"
