# tests/test_resolvers.py
from bs4 import BeautifulSoup

from services.extraction.dimension_resolver import parse_int, resolve_dimensions
from services.extraction.source_resolver import first_srcset_entry, raw_sources, resolve_source


def _img(markup: str):
    return BeautifulSoup(markup, "html.parser").find("img")


# -------------------------------------------------------------------
# Source resolution
# -------------------------------------------------------------------
def test_direct_source_wins():
    img = _img('<img src="https://a/direct.jpg" data-src="https://a/lazy.jpg">')
    assert resolve_source(img) == "https://a/direct.jpg"


def test_lazy_then_alternate_lazy():
    assert resolve_source(_img('<img data-src="https://a/lazy.jpg" data-lazy-src="https://a/alt.jpg">')) == "https://a/lazy.jpg"
    assert resolve_source(_img('<img src="" data-lazy-src="https://a/alt.jpg">')) == "https://a/alt.jpg"


def test_srcset_is_last_resort():
    img = _img('<img srcset="https://a/small.jpg 320w, https://a/big.jpg 1280w">')
    assert resolve_source(img) == "https://a/small.jpg"


def test_nothing_resolves_to_none():
    assert resolve_source(_img('<img alt="x">')) is None
    assert resolve_source(_img('<img src="  " srcset="">')) is None


def test_raw_sources_keeps_priority_order():
    img = _img('<img data-src="https://a/lazy.jpg" srcset="https://a/s.jpg 1x">')
    assert raw_sources(img) == [None, "https://a/lazy.jpg", None, "https://a/s.jpg"]


def test_first_srcset_entry_handles_descriptorless_entries():
    assert first_srcset_entry("https://a/only.jpg") == "https://a/only.jpg"
    assert first_srcset_entry("") is None
    assert first_srcset_entry(" , https://a/b.jpg 2x") is None


# -------------------------------------------------------------------
# Dimension resolution
# -------------------------------------------------------------------
def test_explicit_attributes_win_over_natural_size():
    img = _img('<img width="640" height="480" data-natural-width="1280" data-natural-height="960">')
    size = resolve_dimensions(img)
    assert (size.width, size.height) == (640, 480)


def test_natural_size_used_when_attributes_missing():
    img = _img('<img data-natural-width="1280" data-natural-height="960">')
    size = resolve_dimensions(img)
    assert (size.width, size.height) == (1280, 960)


def test_each_axis_resolves_independently():
    img = _img('<img width="800" data-computed-height="450px">')
    size = resolve_dimensions(img)
    assert (size.width, size.height) == (800, 450)


def test_inline_style_is_the_last_resort():
    img = _img('<img style="max-width: 100px; width: 320px; height:180px">')
    size = resolve_dimensions(img)
    assert (size.width, size.height) == (320, 180)


def test_unknown_size_defaults_to_zero():
    size = resolve_dimensions(_img('<img width="auto">'))
    assert (size.width, size.height) == (0, 0)


def test_parse_int():
    assert parse_int("300px") == 300
    assert parse_int("300.7") == 300
    assert parse_int("-5") == 0
    assert parse_int(None) == 0
