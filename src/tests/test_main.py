from hn_glance.main import resolve_start_page


def test_start_page_from_argument_wins():
    assert resolve_start_page(3, {"start_page": 7}) == 3


def test_start_page_from_config_string():
    assert resolve_start_page(None, {"start_page": "2"}) == 2


def test_start_page_falls_back_on_bad_config():
    assert resolve_start_page(None, {"start_page": "abc"}) == 1
    assert resolve_start_page(None, {"start_page": [2]}) == 1
    assert resolve_start_page(None, {"start_page": -4}) == 1
    assert resolve_start_page(None, {}) == 1
