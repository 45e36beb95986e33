"""Tests for scoped-document linting."""
from __future__ import annotations

from pathlib import Path


def _doc(path: Path, header: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"---\n{header}\n---\n# Doc\n", encoding="utf-8")
    return path


class TestValidateScope:
    def test_global_scope_always_valid(self, tmp_path: Path) -> None:
        from rulestack.core.profiles import validate_scope

        path = _doc(tmp_path / "a.md", "profiles: [dev:frontend, nope]")

        result = validate_scope(path, "global", [])

        assert result.valid is True
        assert result.warnings == ()

    def test_bare_known_sub_name_is_valid(self, tmp_path: Path) -> None:
        from rulestack.core.profiles import validate_scope

        path = _doc(tmp_path / "a.md", "profiles: [frontend]")

        assert validate_scope(path, "dev", ["frontend", "backend"]).valid is True

    def test_fully_qualified_spec_warns(self, tmp_path: Path) -> None:
        from rulestack.core.profiles import validate_scope

        path = _doc(tmp_path / "a.md", "profiles: [dev:frontend]")

        result = validate_scope(path, "dev", ["frontend"])

        assert result.valid is False
        assert len(result.warnings) == 1
        assert "fully-qualified" in result.warnings[0]
        assert "'frontend'" in result.warnings[0]

    def test_unknown_sub_profile_warns(self, tmp_path: Path) -> None:
        from rulestack.core.profiles import validate_scope

        path = _doc(tmp_path / "a.md", "exclude-from-profiles: mobile")

        result = validate_scope(path, "dev", ["frontend", "backend"])

        assert result.valid is False
        assert "not a sub-profile of 'dev'" in result.warnings[0]
        assert "backend, frontend" in result.warnings[0]

    def test_document_without_header_is_valid(self, tmp_path: Path) -> None:
        from rulestack.core.profiles import validate_scope

        path = tmp_path / "a.md"
        path.write_text("# plain\n", encoding="utf-8")

        assert validate_scope(path, "dev", ["frontend"]).valid is True


class TestLintSource:
    def test_reports_only_scoped_documents_with_warnings(self, tmp_path: Path) -> None:
        from rulestack.core.profiles import Profile, lint_source

        root = tmp_path / "repo"
        _doc(root / "dev" / "_shared" / "rules" / "good.md", "profiles: [frontend]")
        _doc(root / "dev" / "_shared" / "rules" / "bad.md", "profiles: [dev:frontend]")
        _doc(root / "dev" / "_shared" / "skills" / "tool" / "SKILL.md", "profiles: [mobile]")
        _doc(root / "shared" / "rules" / "global.md", "profiles: [dev:frontend]")

        profiles = {
            "dev": Profile("dev", sub_profiles={"frontend": "", "backend": ""}),
            "writing": Profile("writing"),
        }

        results = lint_source(root, profiles)

        assert sorted(results) == [
            "dev/_shared/rules/bad.md",
            "dev/_shared/skills/tool/SKILL.md",
        ]
