"""Top-level rulestack commands."""
