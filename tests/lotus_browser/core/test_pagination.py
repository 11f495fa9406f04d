from lotus_browser.core.pagination import clamp_page, page, page_bounds, total_pages


def test_total_pages():
    assert total_pages(0, 20) == 1
    assert total_pages(20, 20) == 1
    assert total_pages(21, 20) == 2
    assert total_pages(25, 20) == 2
    assert total_pages(5, 0) == 1


def test_page_slices_one_based():
    rows = list(range(25))

    assert page(rows, 1, 20) == list(range(20))
    assert page(rows, 2, 20) == [20, 21, 22, 23, 24]
    assert page(rows, 3, 20) == []
    assert page(rows, 0, 20) == []


def test_clamp_page():
    assert clamp_page(0, 1) == 1
    assert clamp_page(5, 1) == 1
    assert clamp_page(5, 3) == 3
    assert clamp_page(-2, 3) == 1
    assert clamp_page(2, 0) == 1
    assert clamp_page(2, 3) == 2


def test_page_bounds():
    assert page_bounds(1, 20, 25) == (1, 20)
    assert page_bounds(2, 20, 25) == (21, 25)
    assert page_bounds(1, 20, 0) == (0, 0)
    assert page_bounds(3, 20, 25) == (0, 0)
