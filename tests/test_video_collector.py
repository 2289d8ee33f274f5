# tests/test_video_collector.py
import pytest

from services.extraction.video_collector import collect_videos, parse_sources_attribute


def test_single_data_sources_video(make_snapshot, profile):
    body = """<article><video data-sources='[{"src":"https://dms.licdn.com/v1"}]'></video></article>"""
    assert collect_videos(make_snapshot(body), profile) == ["https://dms.licdn.com/v1"]


def test_data_sources_then_nested_source_tags(make_snapshot, profile):
    body = (
        "<article>"
        """<video data-sources='[{"src":"https://dms.licdn.com/hd"},{"src":"https://dms.licdn.com/sd"}]'>"""
        '<source src="https://dms.licdn.com/fallback.mp4" type="video/mp4">'
        "<source>"
        "</video>"
        "</article>"
    )
    assert collect_videos(make_snapshot(body), profile) == [
        "https://dms.licdn.com/hd",
        "https://dms.licdn.com/sd",
        "https://dms.licdn.com/fallback.mp4",
    ]


def test_wrapper_sources_follow_video_sources(make_snapshot, profile):
    body = (
        "<article>"
        """<div class="video-wrapper" data-sources='[{"src":"https://dms.licdn.com/wrapped"}]'>"""
        '<video><source src="https://dms.licdn.com/direct"></video>'
        "</div>"
        "</article>"
    )
    assert collect_videos(make_snapshot(body), profile) == [
        "https://dms.licdn.com/direct",
        "https://dms.licdn.com/wrapped",
    ]


def test_wrappers_outside_the_article_are_ignored(make_snapshot, profile):
    body = (
        """<aside data-sources='[{"src":"https://dms.licdn.com/ad"}]'></aside>"""
        "<article><p>text</p></article>"
    )
    assert collect_videos(make_snapshot(body), profile) == []


def test_videos_outside_the_post_are_ignored(make_snapshot, profile):
    body = (
        "<main><article><p>post</p></article>"
        """<aside><video data-sources='[{"src":"https://dms.licdn.com/other-post"}]'>"""
        '<source src="https://dms.licdn.com/other-post.mp4"></video></aside>'
        "</main>"
    )
    assert collect_videos(make_snapshot(body), profile) == []


def test_no_container_means_no_videos(make_snapshot, profile):
    body = """<video data-sources='[{"src":"https://dms.licdn.com/v1"}]'></video>"""
    assert collect_videos(make_snapshot(body), profile) == []


def test_video_seen_by_both_passes_is_listed_once(make_snapshot, profile):
    body = """<article><video data-sources='[{"src":"https://dms.licdn.com/v1"}]'></video></article>"""
    assert collect_videos(make_snapshot(body), profile) == ["https://dms.licdn.com/v1"]


def test_malformed_descriptor_contributes_nothing(make_snapshot, profile):
    body = (
        "<article>"
        "<video data-sources='[{\"src\": '><source src=\"https://dms.licdn.com/ok\"></video>"
        "</article>"
    )
    assert collect_videos(make_snapshot(body), profile) == ["https://dms.licdn.com/ok"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, []),
        ("", []),
        ("not json", []),
        ('{"src": "https://x"}', []),
        ('[{"src": ""}, {"type": "mp4"}, null, "https://bare", {"src": 7}]', []),
        ('[{"src": "https://a"}, {"src": "https://b", "type": "video/mp4"}]', ["https://a", "https://b"]),
    ],
)
def test_parse_sources_attribute(raw, expected):
    assert parse_sources_attribute(raw) == expected
