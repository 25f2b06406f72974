"""Tests for tender_cli.paging (list windows and scrolling)."""

from tender_cli.paging import clamp_offset, page_footer, page_window, scroll_down, scroll_up


def test_clamp_offset():
    assert clamp_offset(-3, 10, 8) == 0
    assert clamp_offset(5, 0, 8) == 0
    assert clamp_offset(16, 10, 8) == 8
    assert clamp_offset(8, 16, 8) == 8
    assert clamp_offset(8, 8, 8) == 0


def test_page_window_pads_with_none():
    items = list("abcdefghij")
    assert page_window(items, 0, 8) == list("abcdefgh")
    assert page_window(items, 8, 8) == ["i", "j", None, None, None, None, None, None]
    assert page_window([], 0, 3) == [None, None, None]


def test_page_footer():
    assert page_footer(0, 10, 8) == "Showing 1-8 of 10 (page 1/2)"
    assert page_footer(8, 10, 8) == "Showing 9-10 of 10 (page 2/2)"
    assert page_footer(0, 3, 6) == "Showing 1-3 of 3 (page 1/1)"
    assert page_footer(0, 0, 6) == "Showing 0 items"


def test_scroll_edges_are_noops():
    assert scroll_up(0, 8) is None
    assert scroll_up(8, 8) == 0
    assert scroll_down(0, 10, 8) == 8
    assert scroll_down(8, 10, 8) is None
    assert scroll_down(0, 8, 8) is None
