"""
Cacheability Metadata

Collects cache lifetime, contexts and tags from every data source that
contributes to a response and turns the merged result into HTTP headers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fastapi import Response

# max_age value meaning "cache forever"
PERMANENT = -1


@dataclass
class CacheableMetadata:
    """
    Bubbleable cache metadata.

    Merging keeps the union of contexts and tags and the lowest max-age,
    so a response is never cached longer than its shortest-lived source.
    """

    max_age: int = PERMANENT
    contexts: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    def add_contexts(self, *contexts: str) -> CacheableMetadata:
        for context in contexts:
            if context not in self.contexts:
                self.contexts.append(context)
        return self

    def add_tags(self, *tags: str) -> CacheableMetadata:
        for tag in tags:
            if tag not in self.tags:
                self.tags.append(tag)
        return self

    def set_max_age(self, max_age: int) -> CacheableMetadata:
        self.max_age = max_age
        return self

    def merge(self, other: CacheableMetadata) -> CacheableMetadata:
        """Return a new object combining this metadata with ``other``."""
        merged = CacheableMetadata(
            max_age=_merge_max_age(self.max_age, other.max_age),
            contexts=list(self.contexts),
            tags=list(self.tags),
        )
        merged.add_contexts(*other.contexts)
        merged.add_tags(*other.tags)
        return merged

    def vary_headers(self) -> list[str]:
        """Request headers the response depends on (``headers:<name>`` contexts)."""
        return [c.split(":", 1)[1] for c in self.contexts if c.startswith("headers:")]

    def apply_to(self, response: Response) -> Response:
        """Write Cache-Control and tag headers onto ``response``."""
        if self.max_age == 0:
            response.headers["Cache-Control"] = "no-cache, private"
        elif self.max_age > 0:
            response.headers["Cache-Control"] = f"public, max-age={self.max_age}"
        else:
            response.headers["Cache-Control"] = "public"

        vary = self.vary_headers()
        if vary:
            response.headers["Vary"] = ", ".join(vary)
        if self.contexts:
            response.headers["X-Cache-Contexts"] = " ".join(self.contexts)
        if self.tags:
            response.headers["X-Cache-Tags"] = " ".join(self.tags)
        return response


def _merge_max_age(a: int, b: int) -> int:
    if a == PERMANENT:
        return b
    if b == PERMANENT:
        return a
    return min(a, b)
