"""Leading ``---`` YAML blocks on markdown documents.

Rules, commands, subagents and ``SKILL.md`` manifests carry their profile
scoping in this block::

    ---
    description: Review pull requests
    profiles: [development, writing]
    ---
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict

import yaml

# group(1) is the YAML text; absent for an empty block.
FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)


@dataclass(frozen=True)
class ParsedDocument:
    frontmatter: Dict[str, Any]
    content: str
    raw_frontmatter: str = ""


def has_frontmatter(text: str) -> bool:
    return FRONTMATTER_PATTERN.match(text) is not None


def parse_frontmatter(text: str) -> ParsedDocument:
    """Split ``text`` into its header mapping and body.

    Text without a leading block parses to an empty mapping and the
    unchanged text.

    Raises:
        ValueError: The block is not valid YAML or is not a mapping.

    Example:
        >>> parse_frontmatter("---\\nprofiles: [writing]\\n---\\n# Guide\\n").frontmatter
        {'profiles': ['writing']}
    """
    match = FRONTMATTER_PATTERN.match(text)
    if match is None:
        return ParsedDocument(frontmatter={}, content=text)

    raw = match.group(1) or ""
    try:
        header = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in frontmatter: {exc}") from exc

    if header is None:
        header = {}
    elif not isinstance(header, dict):
        raise ValueError(
            f"Frontmatter must be a YAML mapping, got {type(header).__name__}"
        )
    return ParsedDocument(frontmatter=header, content=text[match.end():], raw_frontmatter=raw)


__all__ = [
    "FRONTMATTER_PATTERN",
    "ParsedDocument",
    "has_frontmatter",
    "parse_frontmatter",
]
