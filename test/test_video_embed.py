"""
Tests for video provider detection and embed markup
"""

import pytest

from sitewidgets.utils.video_embed import build_embed_html, detect_provider, embed_src


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", ("youtube", "dQw4w9WgXcQ")),
        ("https://youtu.be/dQw4w9WgXcQ", ("youtube", "dQw4w9WgXcQ")),
        ("https://vimeo.com/76979871", ("vimeo", "76979871")),
        ("https://www.dailymotion.com/video/x7tgad0", ("dailymotion", "x7tgad0")),
        ("https://streamable.com/abc123", ("streamable", "abc123")),
        ("https://videopress.com/v/kUJmAcSf", ("videopress", "kUJmAcSf")),
        ("https://home.wistia.com/medias/e4a27b971d", ("wistia", "e4a27b971d")),
        ("https://play.vidyard.com/Wv9JnzCdPqk2xNRJ", ("vidyard", "Wv9JnzCdPqk2xNRJ")),
        ("https://www.kaltura.com/index.php/extwidget/preview/entry_id/1_abcd1234", ("kaltura", "1_abcd1234")),
    ],
)
def test_detect_provider(url, expected):
    assert detect_provider(url) == expected


def test_unknown_provider():
    assert detect_provider("https://example.com/video.mp4") is None
    assert build_embed_html("https://example.com/video.mp4") == ""


class TestEmbedSrc:
    def test_youtube_uses_privacy_domain_and_flags(self):
        src = embed_src("https://youtu.be/dQw4w9WgXcQ", autoplay=True, muted=True, controls=False, start=30)
        assert src.startswith("https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ?")
        assert "autoplay=1" in src
        assert "mute=1" in src
        assert "controls=0" in src
        assert "start=30" in src

    def test_youtube_omits_zero_start(self):
        assert "start=" not in embed_src("https://youtu.be/dQw4w9WgXcQ")

    def test_vimeo_start_fragment(self):
        assert embed_src("https://vimeo.com/76979871", start=15) == "https://player.vimeo.com/video/76979871#t=15s"

    def test_kaltura_needs_partner_and_player(self):
        url = "https://www.kaltura.com/p/1/entry_id/1_abcd1234"
        assert embed_src(url) == ""
        src = embed_src(url, kaltura_partner_id="123", kaltura_uiconf_id="456")
        assert "/p/123/" in src
        assert "uiconf_id/456" in src
        assert src.endswith("entry_id=1_abcd1234")


def test_build_embed_html_escapes_src():
    html = build_embed_html("https://youtu.be/dQw4w9WgXcQ", autoplay=True)
    assert html.startswith('<div class="video-embed"')
    assert "&amp;" in html
    assert "allowfullscreen" in html
