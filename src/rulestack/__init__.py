"""
rulestack - profile-scoped AI agent configuration manager

rulestack composes rules, commands, subagents and skills from layered content
sources, filters them by the selected profiles, and deploys the generated
per-tool files into a project while tracking what it owns.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
