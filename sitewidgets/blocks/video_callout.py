"""
Video Callout Block

Heading, body text, an optional button and an embedded video from one of
the supported providers.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from sitewidgets.blocks.base import BlockMeta, BlockPlugin, SettingField
from sitewidgets.utils.sanitize import INLINE_TAGS, sanitize_html, sanitize_url
from sitewidgets.utils.video_embed import PROVIDER_LABELS, build_embed_html, detect_provider

_META = BlockMeta(
    plugin_id="video_callout",
    label="Video callout",
    description="Text callout with an embedded video",
)


def _is_absolute_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class VideoCalloutBlock(BlockPlugin):
    settings_fields = [
        SettingField("title_html", "Heading", kind="textarea", required=True),
        SettingField("body_text", "Body text", kind="textarea"),
        SettingField("link_text", "Button text"),
        SettingField("link_url", "Button URL", kind="url"),
        SettingField("video_url", "Video URL", kind="url"),
        SettingField("autoplay", "Autoplay", kind="bool"),
        SettingField("muted", "Muted", kind="bool"),
        SettingField("controls", "Show controls", kind="bool"),
        SettingField("start_sec", "Start at (seconds)", kind="int", minimum=0),
        SettingField("kaltura_partner_id", "Kaltura partner id"),
        SettingField("kaltura_uiconf_id", "Kaltura player id"),
    ]

    @property
    def meta(self) -> BlockMeta:
        return _META

    def default_configuration(self) -> dict[str, Any]:
        return {
            "title_html": "",
            "body_text": "",
            "link_text": "",
            "link_url": "",
            "video_url": "",
            "autoplay": False,
            "muted": False,
            "controls": True,
            "start_sec": 0,
            "kaltura_partner_id": "",
            "kaltura_uiconf_id": "",
        }

    def clean_settings(self, values):
        clean = super().clean_settings(values)
        clean["title_html"] = sanitize_html(clean["title_html"], tags=INLINE_TAGS)
        clean["link_url"] = sanitize_url(clean["link_url"])
        if "controls" not in values:
            clean["controls"] = True
        clean["start_sec"] = max(0, clean["start_sec"] or 0)
        return clean

    def validate(self, settings, rows):
        errors = super().validate(settings, rows)
        url = settings.get("video_url") or ""
        if url and not _is_absolute_url(url):
            errors["video_url"] = "The URL is not valid."
        elif url and detect_provider(url) is None:
            errors["video_url"] = f"Unrecognized provider. Use {PROVIDER_LABELS}."
        return errors

    def build(self, config: dict[str, Any]) -> dict[str, Any]:
        config = self.configuration(config)
        embed_html = ""
        if config.get("video_url"):
            embed_html = build_embed_html(
                str(config["video_url"]),
                autoplay=bool(config.get("autoplay")),
                muted=bool(config.get("muted")),
                controls=bool(config.get("controls", True)),
                start=int(config.get("start_sec") or 0),
                kaltura_partner_id=str(config.get("kaltura_partner_id") or ""),
                kaltura_uiconf_id=str(config.get("kaltura_uiconf_id") or ""),
            )
        return {
            "heading_html": config.get("title_html", ""),
            "body_text": config.get("body_text", ""),
            "link_text": config.get("link_text", ""),
            "link_url": config.get("link_url", ""),
            "embed_html": embed_html,
        }
