from travelblog.services.pagination import Page, page_window


def test_page_offsets_and_counts():
    page = Page(page=3, limit=10, total=45)
    assert page.offset == 20
    assert page.pages == 5
    assert page.has_prev
    assert page.has_next
    assert page.to_dict() == {"total": 45, "page": 3, "limit": 10, "pages": 5}


def test_last_page_has_no_next():
    page = Page(page=5, limit=10, total=45)
    assert not page.has_next


def test_empty_result_has_no_pages():
    assert Page(page=1, limit=10).pages == 0


def test_page_window_small_totals_show_every_page():
    assert page_window(1, 0) == []
    assert page_window(2, 4) == [1, 2, 3, 4]


def test_page_window_collapses_with_ellipses():
    assert page_window(1, 20) == [1, 2, 3, 4, None, 20]
    assert page_window(10, 20) == [1, None, 9, 10, 11, None, 20]
    assert page_window(20, 20) == [1, None, 17, 18, 19, 20]
