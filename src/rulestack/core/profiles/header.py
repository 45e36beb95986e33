"""Header metadata parsing for content documents.

A document may open with a YAML block between ``---`` lines. Only scalar
and list values are kept; they are normalized to ``str`` and ``list[str]``
so callers never see YAML-specific types::

    ---
    profiles: [development, writing:blog]
    exclude-from-profiles: docs
    ---
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from rulestack.core.constants import EXCLUDE_PROFILES_KEY, LEGACY_KEY_ALIASES, PROFILES_KEY
from rulestack.core.utils.frontmatter import FRONTMATTER_PATTERN, parse_frontmatter

logger = logging.getLogger(__name__)

HeaderValue = Union[str, List[str]]
Header = Dict[str, HeaderValue]

SCOPE_KEYS = (PROFILES_KEY, EXCLUDE_PROFILES_KEY, *LEGACY_KEY_ALIASES)


def _scalar_to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _normalize_value(value: Any) -> Optional[HeaderValue]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [_scalar_to_str(v) for v in value if v is not None and not isinstance(v, (dict, list))]
    if isinstance(value, (str, int, float, bool)):
        text = _scalar_to_str(value)
        return [] if text == "" else text
    return None


def normalize_header(raw: Dict[Any, Any]) -> Header:
    """Normalize a parsed YAML mapping into header metadata.

    Legacy keys are folded into their canonical name when the canonical key
    is absent, and removed from the result either way.
    """
    header: Header = {}
    for key, value in raw.items():
        normalized = _normalize_value(value)
        if normalized is None:
            continue
        header[str(key)] = normalized

    for legacy, canonical in LEGACY_KEY_ALIASES.items():
        if legacy not in header:
            continue
        legacy_value = header.pop(legacy)
        header.setdefault(canonical, legacy_value)
    return header


def _recover_scope_keys(raw: str) -> Dict[str, Any]:
    """Read the profile keys out of a block that is not valid YAML as a whole.

    Each top-level scope key is parsed together with its indented or
    ``- item`` continuation lines; keys that still fail to parse are dropped.
    """
    recovered: Dict[str, Any] = {}
    lines = raw.splitlines()
    for index, line in enumerate(lines):
        key, sep, _ = line.partition(":")
        if not sep or key not in SCOPE_KEYS:
            continue
        chunk = [line]
        for follow in lines[index + 1:]:
            if follow.strip() and not follow[0].isspace() and not follow.startswith("-"):
                break
            chunk.append(follow)
        try:
            parsed = yaml.safe_load("\n".join(chunk))
        except yaml.YAMLError:
            continue
        if isinstance(parsed, dict) and key in parsed:
            recovered[key] = parsed[key]
    return recovered


def parse_header_text(text: str, source: Path | str | None = None) -> Optional[Header]:
    """Parse header metadata from document text.

    Returns None when the text has no leading block. A block that is not a
    valid YAML mapping still yields its profile keys when those lines parse
    on their own; otherwise the result is None.
    """
    match = FRONTMATTER_PATTERN.match(text)
    if match is None:
        return None
    try:
        doc = parse_frontmatter(text)
    except ValueError as exc:
        recovered = _recover_scope_keys(match.group(1) or "")
        logger.warning(
            "Malformed header in %s (%s); using profile keys only: %s",
            source or "<text>",
            exc,
            sorted(recovered) or "none",
        )
        return normalize_header(recovered) if recovered else None
    return normalize_header(doc.frontmatter)


def parse_header(path: Path) -> Optional[Header]:
    """Read and parse the header metadata of the document at ``path``.

    Returns None when the file cannot be read or carries no usable header;
    callers treat that as unrestricted.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Cannot read header of %s: %s", path, exc)
        return None
    header = parse_header_text(text, path)
    if header is None:
        logger.debug("No header metadata in %s", path)
    return header


def get_list(header: Header, key: str) -> Optional[List[str]]:
    """Return ``header[key]`` as a list, or None when the key is absent."""
    if key not in header:
        return None
    value = header[key]
    if isinstance(value, list):
        return list(value)
    return [value]


__all__ = [
    "Header",
    "HeaderValue",
    "normalize_header",
    "parse_header",
    "parse_header_text",
    "get_list",
]
