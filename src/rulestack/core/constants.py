"""Shared names and tables for rulestack.

Directory layout of a content source::

    repo.yaml
    shared/<entity>/...                 global shared content
    <profile>/.rulesync/<entity>/...    flat profile content
    <parent>/_shared/<entity>/...       parent shared content
    <parent>/<sub>/.rulesync/<entity>/  sub-profile content
    use-cases/<name>/.rulesync/...      legacy flat profile content
"""
from __future__ import annotations

from typing import Dict, Tuple

# Project-side files
CONFIG_DIR = ".rulestack"
CONFIG_FILE = "config.yaml"
LOCK_FILE = "rulestack-lock.json"
LOCK_VERSION = "1.0.0"

# Global (per-user) files
GLOBAL_DIR_NAME = ".rulestack"
GLOBAL_CONFIG_FILE = "config.yaml"
CACHE_DIR_NAME = "cache"

# Source-side layout
REPO_FILE = "repo.yaml"
SHARED_DIR = "shared"
SHARED_SUBDIR = "_shared"
USE_CASES_DIR = "use-cases"
RULESYNC_DIR = ".rulesync"
PROFILE_GENERATOR_FILE = "generator.yaml"
SKILL_MANIFEST = "SKILL.md"

ENTITY_TYPES: Tuple[str, ...] = ("rules", "commands", "skills", "subagents")
PASSTHROUGH_FILES: Tuple[str, ...] = (".aiignore", "mcp.json")

# Generator side
GENERATOR_CONFIG_FILE = "rulesync.jsonc"
GENERATOR_SCHEMA_URL = (
    "https://raw.githubusercontent.com/dyoshikawa/rulesync/refs/heads/main/config-schema.json"
)
DEFAULT_GENERATOR_COMMAND = "npx rulesync generate"

# Header metadata keys
PROFILES_KEY = "profiles"
EXCLUDE_PROFILES_KEY = "exclude-from-profiles"
LEGACY_KEY_ALIASES: Dict[str, str] = {
    "use-cases": PROFILES_KEY,
    "exclude-from-use-cases": EXCLUDE_PROFILES_KEY,
}

GLOBAL_SCOPE = "global"
RESERVED_PROFILE_NAMES: Tuple[str, ...] = (SHARED_DIR, SHARED_SUBDIR)

VALID_TARGETS: Tuple[str, ...] = (
    "claudecode",
    "cursor",
    "copilot",
    "geminicli",
    "cline",
    "codex",
    "opencode",
)

VALID_FEATURES: Tuple[str, ...] = (
    "rules",
    "ignore",
    "mcp",
    "commands",
    "subagents",
    "skills",
)

# Per-tool subdirectory the generator writes and the deployer copies.
TARGET_DIRECTORIES: Dict[str, str] = {
    "claudecode": ".claude",
    "cursor": ".cursor",
    "copilot": ".github/copilot",
    "geminicli": ".gemini",
    "cline": ".cline",
    "codex": ".codex",
    "opencode": ".opencode",
}

TARGET_DESCRIPTIONS: Dict[str, str] = {
    "claudecode": "Claude Code (Anthropic's CLI)",
    "cursor": "Cursor IDE",
    "copilot": "GitHub Copilot",
    "geminicli": "Gemini CLI",
    "cline": "Cline VS Code extension",
    "codex": "OpenAI Codex CLI",
    "opencode": "OpenCode",
}

FEATURE_DESCRIPTIONS: Dict[str, str] = {
    "rules": "General guidelines and instructions for AI assistants",
    "ignore": "File patterns to exclude from AI context",
    "mcp": "MCP (Model Context Protocol) server configurations",
    "commands": "Slash commands (e.g., /commit, /review)",
    "subagents": "Specialized AI assistant definitions",
    "skills": "Directory-based capability definitions",
}

GLOBAL_SOURCES_PREPEND = "prepend"
GLOBAL_SOURCES_APPEND = "append"

DEFAULT_OPTIONS: Dict[str, object] = {
    "simulateCommands": False,
    "simulateSubagents": False,
    "simulateSkills": False,
    "modularMcp": False,
    "ignoreGlobalSources": False,
    "globalSourcesPosition": GLOBAL_SOURCES_PREPEND,
}

GENERATOR_OPTION_KEYS: Tuple[str, ...] = (
    "simulateCommands",
    "simulateSubagents",
    "simulateSkills",
    "modularMcp",
)
