"""Profiles: header metadata, visibility rules and specifier resolution."""
from __future__ import annotations

from .header import get_list, normalize_header, parse_header, parse_header_text
from .models import Profile, ProfileSpec, ScopeValidation, SelectionResult
from .resolver import ProfileResolver, parse_specifier, validate_specifier
from .scope import lint_source, validate_scope
from .visibility import header_allows, profile_matches, should_include

__all__ = [
    "Profile",
    "ProfileSpec",
    "ProfileResolver",
    "ScopeValidation",
    "SelectionResult",
    "get_list",
    "header_allows",
    "lint_source",
    "normalize_header",
    "parse_header",
    "parse_header_text",
    "parse_specifier",
    "profile_matches",
    "should_include",
    "validate_scope",
    "validate_specifier",
]
