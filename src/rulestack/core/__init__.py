"""rulestack core engine: profiles, composition, deployment tracking."""
