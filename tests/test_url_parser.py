import pytest

from lecture_queue.url_parser import extract_video_id, watch_url


@pytest.mark.parametrize("url", [
    "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    "https://youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
    "https://m.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
    "https://www.youtube.com/embed/dQw4w9WgXcQ",
    "https://www.youtube.com/shorts/dQw4w9WgXcQ",
    "https://youtu.be/dQw4w9WgXcQ",
    "https://youtu.be/dQw4w9WgXcQ?t=10",
])
def test_common_formats(url):
    assert extract_video_id(url) == "dQw4w9WgXcQ"


def test_short_link_returns_path_segment_verbatim():
    assert extract_video_id("https://youtu.be/abc") == "abc"
    assert extract_video_id("https://youtu.be/nO-__jXlf0I") == "nO-__jXlf0I"


def test_short_link_uses_first_segment_only():
    assert extract_video_id("https://youtu.be/abc/def") == "abc"


def test_short_link_host_must_match_exactly():
    assert extract_video_id("https://www.youtu.be/abc") is None
    assert extract_video_id("https://youtu.be/") is None


def test_query_param_wins_over_path():
    assert extract_video_id("https://www.youtube.com/shorts/other?v=xyz") == "xyz"


def test_empty_v_falls_back_to_path():
    assert extract_video_id("https://www.youtube.com/embed/abc123?v=") == "abc123"


def test_shorts_without_id():
    assert extract_video_id("https://www.youtube.com/shorts/") is None


def test_regional_and_sub_domains_match():
    assert extract_video_id("https://music.youtube.com/watch?v=abc") == "abc"
    assert extract_video_id("https://www.youtube.com.br/watch?v=abc") == "abc"


@pytest.mark.parametrize("url", [
    "https://example.com/watch?v=xyz",
    "https://vimeo.com/123456",
    "https://www.youtube.com/feed/subscriptions",
    "not a url",
    "youtube.com/watch?v=abc",
    "http://[::1",
    "",
])
def test_no_match(url):
    assert extract_video_id(url) is None


def test_non_string_input_is_no_match():
    assert extract_video_id(None) is None
    assert extract_video_id(42) is None


def test_watch_url():
    assert watch_url("abc123") == "https://www.youtube.com/watch?v=abc123"
