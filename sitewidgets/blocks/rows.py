"""
Row Collections

Shape of the repeatable rows a block edits (executives, pins, cards) and
the helpers that merge, filter and clean them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sitewidgets.utils.sanitize import CV_TAGS, sanitize_html, sanitize_url

# Transient per-row selection flag, never persisted
REMOVE_FLAG = "remove"

FIELD_KINDS = ("text", "textarea", "html", "url", "coordinate", "file")


@dataclass
class FieldSpec:
    name: str
    label: str
    kind: str = "text"
    default: Any = ""

    def __post_init__(self):
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind '{self.kind}' for '{self.name}'")


@dataclass
class RowSpec:
    """
    Describes one ordered row collection stored on a block configuration.

    Attributes:
        collection:        Configuration key holding the rows, e.g. "pins".
        identifying_field: Rows where this field is empty are dropped on save.
        fields:            Typed fields of every row.
        max_rows:          Optional cap enforced when adding rows.
        legacy_key:        Configuration key of an older JSON-encoded copy.
        html_tags:         Tags allowed in "html" fields.
    """

    collection: str
    identifying_field: str
    fields: list[FieldSpec]
    max_rows: int | None = None
    legacy_key: str | None = None
    html_tags: list[str] = field(default_factory=lambda: list(CV_TAGS))

    def default_row(self) -> dict[str, Any]:
        return {f.name: f.default for f in self.fields}


def is_flagged(value: Any) -> bool:
    """Checkbox semantics: anything but empty, zero or an explicit off is set."""
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "off", "no")
    return bool(value)


def overlay_rows(working: list[dict[str, Any]], submitted: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    """
    Lay submitted values over the working copy, matching rows by index.

    Submitted rows beyond the working copy are appended; working rows with no
    submitted counterpart are kept as they are.
    """
    if not submitted:
        return [dict(row) for row in working]

    merged = []
    for index in range(max(len(working), len(submitted))):
        base = working[index] if index < len(working) else {}
        incoming = submitted[index] if index < len(submitted) else {}
        merged.append({**base, **(incoming or {})})
    return merged


def drop_flagged(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [row for row in rows if isinstance(row, dict) and not is_flagged(row.get(REMOVE_FLAG))]


def strip_flags(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Copy rows without the removal flag, for rows carried into the next request."""
    return [{key: value for key, value in row.items() if key != REMOVE_FLAG} for row in rows if isinstance(row, dict)]


def to_coordinate(value: Any) -> float | None:
    """Parse a 0..1 map coordinate; None when not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number:  # NaN
        return None
    return min(1.0, max(0.0, number))


def to_fid(value: Any) -> int | None:
    if isinstance(value, bool) or value in (None, ""):
        return None
    try:
        fid = int(float(value))
    except (TypeError, ValueError):
        return None
    return fid if fid > 0 else None


def clean_row(spec: RowSpec, row: dict[str, Any]) -> dict[str, Any] | None:
    """
    Normalize one row for persistence.

    Returns None when the row must be dropped: its identifying field is
    empty or one of its coordinates is not numeric.
    """
    if not isinstance(row, dict):
        return None

    clean: dict[str, Any] = {}
    for spec_field in spec.fields:
        value = row.get(spec_field.name, spec_field.default)
        if spec_field.kind == "coordinate":
            coordinate = to_coordinate(value)
            if coordinate is None:
                return None
            clean[spec_field.name] = coordinate
        elif spec_field.kind == "file":
            clean[spec_field.name] = to_fid(value)
        elif spec_field.kind == "html":
            clean[spec_field.name] = sanitize_html(value if isinstance(value, str) else "", tags=spec.html_tags)
        elif spec_field.kind == "url":
            clean[spec_field.name] = sanitize_url(value)
        else:
            clean[spec_field.name] = str(value).strip() if value is not None else ""

    if not clean.get(spec.identifying_field):
        return None
    return clean
