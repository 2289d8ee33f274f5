# tests/test_snapshot.py
from services.extraction.snapshot import (
    COMMENT_MARKER,
    MAIN_POST_MARKER,
    ancestry_markers,
    closest,
    iter_ancestors,
    unique,
)


def test_container_prefers_first_selector(make_snapshot):
    snap = make_snapshot(
        '<div class="main-feed-activity-card" id="card"></div><article id="post"></article>'
    )
    assert snap.container(["article", "div.main-feed-activity-card"])["id"] == "post"
    assert snap.container(["section"]) is None


def test_invalid_selector_matches_nothing(make_snapshot):
    snap = make_snapshot("<p>hello</p>")
    assert snap.select("p[") == []


def test_ancestor_walk_is_depth_limited(make_snapshot):
    body = '<div class="comment">' + "<div>" * 12 + '<img id="x">' + "</div>" * 12 + "</div>"
    img = make_snapshot(body).select("#x")[0]

    assert len(list(iter_ancestors(img, 5))) == 5
    assert ancestry_markers(img, ["comment"], ["main-feed"], max_depth=10) == frozenset()
    assert COMMENT_MARKER in ancestry_markers(img, ["comment"], ["main-feed"], max_depth=15)


def test_markers_accumulate_and_never_reset(make_snapshot):
    body = (
        '<div class="main-feed-activity-card">'
        '<section class="comments-comment-item"><div><img id="x"></div></section>'
        "</div>"
    )
    img = make_snapshot(body).select("#x")[0]
    markers = ancestry_markers(img, ["comment"], ["main-feed-activity-card"], max_depth=10)
    assert markers == frozenset({COMMENT_MARKER, MAIN_POST_MARKER})


def test_comment_wins_within_a_single_level(make_snapshot):
    img = make_snapshot(
        '<div class="main-feed-activity-card comment-thread"><img id="x"></div>'
    ).select("#x")[0]
    markers = ancestry_markers(img, ["comment"], ["main-feed-activity-card"], max_depth=10)
    assert markers == frozenset({COMMENT_MARKER})


def test_closest_includes_the_element_itself(make_snapshot):
    snap = make_snapshot('<section class="comment"><p class="comment-text" id="p">x</p></section>')
    p = snap.select("#p")[0]
    assert closest(p, '[class*="comment"]') is p
    assert closest(p, "section.comment").name == "section"
    assert closest(p, "article") is None


def test_unique_keeps_first_seen_order():
    assert unique(["b", "a", None, "", "b", "c", "a"]) == ["b", "a", "c"]
