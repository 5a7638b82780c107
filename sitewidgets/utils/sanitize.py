"""
Input Sanitization Utilities

HTML filtering and URL checks applied to widget configuration before it is
persisted or rendered.
"""

import html
import re
from typing import List, Optional
from urllib.parse import urlparse

import bleach

# Tags allowed in executive CV markup
CV_TAGS = [
    'a', 'p', 'br', 'strong', 'em', 'ul', 'ol', 'li', 'span', 'div',
    'h3', 'h4', 'h5', 'h6', 'b', 'i', 'u',
]

# Tags allowed in short inline markup (titles, tooltips)
INLINE_TAGS = ['strong', 'em', 'b', 'i', 'u', 'br', 'span', 'a', 'sup', 'sub']

DEFAULT_ATTRS = {
    'a': ['href', 'title', 'target', 'rel'],
    'span': ['class'],
    'div': ['class'],
}

# Allowed protocols for URLs
ALLOWED_PROTOCOLS = ['http', 'https', 'mailto']

_RELATIVE_PATH = re.compile(r"[\w\-./%~]+")


def sanitize_html(
    text: Optional[str],
    tags: Optional[List[str]] = None,
    attributes: Optional[dict] = None,
) -> str:
    """
    Filter HTML down to an allow-list of tags and attributes.

    Disallowed tags are removed but their text content is kept.
    """
    if text is None:
        return ""

    text = text.strip()
    if not text:
        return ""

    return bleach.clean(
        text,
        tags=tags if tags is not None else INLINE_TAGS,
        attributes=attributes if attributes is not None else DEFAULT_ATTRS,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )


def strip_markup(text: Optional[str]) -> str:
    """
    Remove every tag and decode HTML entities.

    Args:
        text: Markup to flatten

    Returns:
        Plain text, trimmed
    """
    if not text:
        return ""

    cleaned = bleach.clean(text, tags=[], strip=True)
    return html.unescape(cleaned).strip()


def sanitize_url(value) -> str:
    """
    Restrict links to safe URL schemes.

    Absolute URLs must use http, https or mailto; root-relative paths,
    fragments and plain relative paths pass through. Anything else
    collapses to an empty string.
    """
    if not isinstance(value, str):
        return ""

    value = value.strip()
    if not value:
        return ""

    parsed = urlparse(value)
    scheme = parsed.scheme.lower()
    if scheme:
        if scheme not in ALLOWED_PROTOCOLS:
            return ""
        if scheme in ("http", "https") and not parsed.netloc:
            return ""
        return value

    if value.startswith(("/", "#", "?")):
        return value

    return value if _RELATIVE_PATH.fullmatch(value) else ""


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Sanitize filenames to prevent directory traversal attacks.

    Args:
        filename: The filename to sanitize

    Returns:
        Safe filename
    """
    if not filename:
        return "unnamed"

    filename = filename.replace('/', '_').replace('\\', '_')
    filename = re.sub(r'[^\w\s.-]', '', filename)

    if len(filename) > 255:
        name, ext = filename.rsplit('.', 1) if '.' in filename else (filename, '')
        filename = f"{name[:250]}.{ext}" if ext else name[:255]

    return filename or "unnamed"
