"""Content sources: parsing, merging and resolution to local paths."""
from __future__ import annotations

from .models import GIT, LOCAL, ResolvedSource, Source
from .resolver import (
    SourceResolver,
    detect_source_kind,
    is_content_repo,
    merge_sources,
    normalize_git_url,
    parse_source,
    redact_credentials,
    validate_sources,
)

__all__ = [
    "GIT",
    "LOCAL",
    "ResolvedSource",
    "Source",
    "SourceResolver",
    "detect_source_kind",
    "is_content_repo",
    "merge_sources",
    "normalize_git_url",
    "parse_source",
    "redact_credentials",
    "validate_sources",
]
