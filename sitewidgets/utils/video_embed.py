"""Video provider detection and iframe embed markup."""

import html
import re
from urllib.parse import urlencode

PROVIDER_PATTERNS = {
    "youtube": re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([A-Za-z0-9_-]{6,})", re.I),
    "vimeo": re.compile(r"vimeo\.com/(?:video/)?(\d+)", re.I),
    "dailymotion": re.compile(r"dailymotion\.com/video/([a-z0-9]+)", re.I),
    "streamable": re.compile(r"streamable\.com/([a-z0-9]+)(?:$|[?#])", re.I),
    "videopress": re.compile(r"videopress\.com/v/([a-z0-9]+)", re.I),
    "wistia": re.compile(r"(?:wistia\.com|wi\.st)/.*(?:medias|embed)/([a-z0-9]+)$", re.I),
    "vidyard": re.compile(r"play\.vidyard\.com/([A-Za-z0-9_-]+)", re.I),
    "kaltura": re.compile(r"kaltura\.com/.*entry_id/([A-Za-z0-9_]+)", re.I),
}

PROVIDER_LABELS = "YouTube, Vimeo, Dailymotion, Streamable, VideoPress, Wistia, Vidyard or Kaltura"

IFRAME_ALLOW = "accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture; web-share"


def detect_provider(url: str) -> tuple[str, str] | None:
    """Return ``(provider, video_id)`` for a recognised URL, else None."""
    for provider, pattern in PROVIDER_PATTERNS.items():
        match = pattern.search(url)
        if match:
            return provider, match.group(1)
    return None


def embed_src(
    url: str,
    autoplay: bool = False,
    muted: bool = False,
    controls: bool = True,
    start: int = 0,
    kaltura_partner_id: str = "",
    kaltura_uiconf_id: str = "",
) -> str:
    detected = detect_provider(url)
    if not detected:
        return ""
    provider, video_id = detected
    start = max(0, start)

    if provider == "youtube":
        params = {
            "autoplay": "1" if autoplay else "0",
            "mute": "1" if muted else "0",
            "controls": "1" if controls else "0",
            "rel": "0",
            "modestbranding": "1",
        }
        if start > 0:
            params["start"] = str(start)
        return f"https://www.youtube-nocookie.com/embed/{video_id}?{urlencode(params)}"
    if provider == "vimeo":
        suffix = f"#t={start}s" if start > 0 else ""
        return f"https://player.vimeo.com/video/{video_id}{suffix}"
    if provider == "dailymotion":
        return f"https://www.dailymotion.com/embed/video/{video_id}"
    if provider == "streamable":
        return f"https://streamable.com/o/{video_id}"
    if provider == "videopress":
        return f"https://videopress.com/embed/{video_id}"
    if provider == "wistia":
        return f"https://fast.wistia.net/embed/iframe/{video_id}"
    if provider == "vidyard":
        return f"https://play.vidyard.com/{video_id}.html"
    if provider == "kaltura":
        # Kaltura players cannot be addressed without a partner and player config
        if not (kaltura_partner_id and kaltura_uiconf_id):
            return ""
        pid = kaltura_partner_id
        return (
            f"https://cdnapisec.kaltura.com/p/{pid}/sp/{pid}00/embedIframeJs/uiconf_id/{kaltura_uiconf_id}"
            f"/partner_id/{pid}?iframeembed=true&entry_id={video_id}"
        )
    return ""


def build_embed_html(url: str, **options) -> str:
    """Responsive iframe wrapper for a known provider, or '' when unknown."""
    src = embed_src(url, **options)
    if not src:
        return ""
    return (
        '<div class="video-embed" style="position:relative;padding-top:56.25%;height:0;overflow:hidden;">'
        f'<iframe src="{html.escape(src)}" loading="lazy" allow="{IFRAME_ALLOW}" allowfullscreen '
        'style="position:absolute;top:0;left:0;width:100%;height:100%;border:0;"></iframe>'
        "</div>"
    )
