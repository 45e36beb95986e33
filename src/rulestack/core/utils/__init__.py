"""Shared utilities (I/O, time, frontmatter) for rulestack core."""
