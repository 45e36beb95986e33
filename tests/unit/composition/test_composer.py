"""Tests for layered composition."""
from __future__ import annotations

from pathlib import Path

import pytest

from helpers.content import doc, flat, nested


def _resolved(repo):
    from rulestack.core.sources import LOCAL, ResolvedSource, Source

    return ResolvedSource(Source(LOCAL, str(repo.root)), repo.root)


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


class TestGlobalSharedLayer:
    def test_unrestricted_documents_are_always_included(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat()})
        repo.shared("rules/base.md", doc("# Base\n"))

        tree = compose([_resolved(repo)], ["writing"], tmp_path / "out")

        assert _read(tree.rulesync_path / "rules" / "base.md") == "# Base\n"
        assert tree.origins["rules/base.md"] == "content/shared"

    def test_filtered_by_target_profiles(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat(), "dev": flat()})
        repo.shared("rules/dev-only.md", doc(profiles=["dev"]))
        repo.shared("rules/not-writing.md", doc(**{"exclude-from-profiles": ["writing"]}))
        repo.shared("commands/review.md", doc(profiles=["writing"]))

        tree = compose([_resolved(repo)], ["writing"], tmp_path / "out")

        assert tree.files == ["commands/review.md"]

    def test_nested_directories_are_recursed(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat()})
        repo.shared("rules/style/prose.md", doc(profiles=["writing"]))
        repo.shared("rules/style/code.md", doc(profiles=["dev"]))

        tree = compose([_resolved(repo)], ["writing"], tmp_path / "out")

        assert tree.files == ["rules/style/prose.md"]

    def test_non_markdown_files_are_copied_verbatim(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat()})
        repo.shared("rules/data.json", '{"a": 1}\n')

        tree = compose([_resolved(repo)], ["writing"], tmp_path / "out")

        assert _read(tree.rulesync_path / "rules" / "data.json") == '{"a": 1}\n'

    def test_passthrough_files(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat()})
        repo.shared(".aiignore", "secrets/\n")
        repo.shared("mcp.json", "{}\n")
        repo.shared("notes.txt", "ignored\n")

        tree = compose([_resolved(repo)], ["writing"], tmp_path / "out")

        assert tree.files == [".aiignore", "mcp.json"]


class TestSkills:
    def test_skill_directory_gated_by_manifest(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat()})
        repo.shared("skills/edit/SKILL.md", doc(profiles=["writing"]))
        repo.shared("skills/edit/scripts/run.sh", "echo hi\n")
        repo.shared("skills/build/SKILL.md", doc(profiles=["dev"]))
        repo.shared("skills/build/helper.py", "print()\n")

        tree = compose([_resolved(repo)], ["writing"], tmp_path / "out")

        assert tree.files == ["skills/edit/SKILL.md", "skills/edit/scripts/run.sh"]

    def test_skill_without_manifest_is_included(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat()})
        repo.shared("skills/misc/readme.md", doc(profiles=["dev"]))

        tree = compose([_resolved(repo)], ["writing"], tmp_path / "out")

        assert tree.files == ["skills/misc/readme.md"]

    def test_loose_files_in_skills_are_ignored(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat()})
        repo.shared("skills/loose.md", doc())

        tree = compose([_resolved(repo)], ["writing"], tmp_path / "out")

        assert tree.files == []


class TestProfileLayers:
    def test_flat_profile_content_copied_unfiltered(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat()})
        repo.flat("writing", "rules/style.md", doc(profiles=["dev"]))

        tree = compose([_resolved(repo)], ["writing"], tmp_path / "out")

        assert tree.files == ["rules/style.md"]
        assert tree.origins["rules/style.md"] == "content/writing"

    def test_legacy_use_case_layout(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(use_cases={"writing": flat()})
        repo.legacy("writing", "rules/style.md", "# Legacy\n")

        tree = compose([_resolved(repo)], ["writing"], tmp_path / "out")

        assert _read(tree.rulesync_path / "rules" / "style.md") == "# Legacy\n"

    def test_sub_profile_layers(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"dev": nested("frontend", "backend")})
        repo.parent_shared("dev", "rules/common.md", doc())
        repo.parent_shared("dev", "rules/ui.md", doc(profiles=["frontend"]))
        repo.parent_shared("dev", "rules/db.md", doc(profiles=["backend"]))
        repo.parent_shared("dev", "rules/qualified.md", doc(profiles=["dev:frontend"]))
        repo.sub("dev", "frontend", "rules/react.md", doc())
        repo.sub("dev", "backend", "rules/sql.md", doc())

        tree = compose([_resolved(repo)], ["dev:frontend"], tmp_path / "out")

        assert tree.files == ["rules/common.md", "rules/react.md", "rules/ui.md"]
        assert tree.origins["rules/ui.md"] == "content/dev/_shared"
        assert tree.origins["rules/react.md"] == "content/dev/frontend"

    def test_bare_nested_name_contributes_no_direct_content(
        self, make_repo, tmp_path: Path
    ) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"dev": nested("frontend")})
        repo.sub("dev", "frontend", "rules/react.md", doc())
        repo.parent_shared("dev", "rules/common.md", doc())

        tree = compose([_resolved(repo)], ["dev"], tmp_path / "out")

        assert tree.files == []

    def test_unknown_profile_contributes_nothing(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat()})
        repo.flat("writing", "rules/style.md", doc())

        tree = compose([_resolved(repo)], ["mystery", "mystery:*"], tmp_path / "out")

        assert tree.files == []


class TestOverrides:
    def test_later_layer_wins(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat()})
        repo.shared("rules/base.md", "# Shared\n")
        repo.flat("writing", "rules/base.md", "# Profile\n")

        tree = compose([_resolved(repo)], ["writing"], tmp_path / "out")

        assert _read(tree.rulesync_path / "rules" / "base.md") == "# Profile\n"
        assert tree.origins["rules/base.md"] == "content/writing"

    def test_later_profile_wins(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat(), "review": flat()})
        repo.flat("writing", "rules/tone.md", "# Writing\n")
        repo.flat("review", "rules/tone.md", "# Review\n")

        tree = compose([_resolved(repo)], ["writing", "review"], tmp_path / "out")

        assert _read(tree.rulesync_path / "rules" / "tone.md") == "# Review\n"

    def test_later_source_wins(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        first = make_repo("first").manifest(profiles={"writing": flat()})
        second = make_repo("second").manifest(profiles={"writing": flat()})
        first.shared("rules/base.md", "# A\n")
        first.shared("rules/only-a.md", "# Only A\n")
        second.shared("rules/base.md", "# B\n")

        tree = compose(
            [_resolved(first), _resolved(second)], ["writing"], tmp_path / "out"
        )

        assert _read(tree.rulesync_path / "rules" / "base.md") == "# B\n"
        assert tree.origins["rules/base.md"] == "second/shared"
        assert tree.origins["rules/only-a.md"] == "first/shared"

    def test_unrestricted_later_source_replaces_restricted_earlier(
        self, make_repo, tmp_path: Path
    ) -> None:
        from rulestack.core.composition import compose

        first = make_repo("first").manifest(profiles={"dev": flat()})
        second = make_repo("second").manifest(profiles={"dev": flat()})
        first.shared("rules/base.md", doc("# A\n", profiles=["dev"]))
        second.shared("rules/base.md", "# B\n")

        tree = compose([_resolved(first), _resolved(second)], ["dev"], tmp_path / "out")

        assert _read(tree.rulesync_path / "rules" / "base.md") == "# B\n"
        assert tree.origins["rules/base.md"] == "second/shared"

    def test_filtered_later_source_keeps_earlier_copy(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        first = make_repo("first").manifest(profiles={"dev": flat(), "writing": flat()})
        second = make_repo("second").manifest(profiles={"dev": flat(), "writing": flat()})
        first.shared("rules/base.md", "# A\n")
        second.shared("rules/base.md", doc("# B\n", profiles=["writing"]))

        tree = compose([_resolved(first), _resolved(second)], ["dev"], tmp_path / "out")

        assert _read(tree.rulesync_path / "rules" / "base.md") == "# A\n"
        assert tree.origins["rules/base.md"] == "first/shared"

    def test_sub_profile_content_beats_parent_shared(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"dev": nested("frontend")})
        repo.parent_shared("dev", "rules/lint.md", "# Parent\n")
        repo.sub("dev", "frontend", "rules/lint.md", "# Sub\n")

        tree = compose([_resolved(repo)], ["dev:frontend"], tmp_path / "out")

        assert _read(tree.rulesync_path / "rules" / "lint.md") == "# Sub\n"


class TestComposeOutput:
    def test_empty_sources_raise(self, tmp_path: Path) -> None:
        from rulestack.core.composition import compose
        from rulestack.core.exceptions import CompositionError

        with pytest.raises(CompositionError):
            compose([], ["writing"], tmp_path / "out")

    def test_output_directory_is_cleared(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        out = tmp_path / "out"
        (out / ".rulesync" / "rules").mkdir(parents=True)
        (out / ".rulesync" / "rules" / "stale.md").write_text("old", encoding="utf-8")
        repo = make_repo().manifest(profiles={"writing": flat()})
        repo.shared("rules/base.md", doc())

        tree = compose([_resolved(repo)], ["writing"], out)

        assert not (out / ".rulesync" / "rules" / "stale.md").exists()
        assert tree.files == ["rules/base.md"]

    def test_sources_are_not_modified(self, make_repo, tmp_path: Path) -> None:
        from rulestack.core.composition import compose

        repo = make_repo().manifest(profiles={"writing": flat()})
        original = doc(profiles=["writing"])
        path = repo.shared("rules/base.md", original)

        compose([_resolved(repo)], ["writing"], tmp_path / "out")

        assert _read(path) == original


class TestDetectProfileType:
    def test_layouts(self, make_repo) -> None:
        from rulestack.core.composition import detect_profile_type

        repo = make_repo()
        repo.flat("writing", "rules/a.md", doc())
        repo.sub("dev", "frontend", "rules/a.md", doc())
        repo.parent_shared("ops", "rules/a.md", doc())

        assert detect_profile_type(repo.root, "writing") == "flat"
        assert detect_profile_type(repo.root, "dev") == "nested"
        assert detect_profile_type(repo.root, "ops") == "flat"
        assert detect_profile_type(repo.root, "missing") == "flat"

    def test_available_profiles_on_disk(self, make_repo) -> None:
        from rulestack.core.composition import available_profiles_on_disk

        repo = make_repo()
        repo.legacy("writing", "rules/a.md", doc())
        repo.legacy("blog", "rules/a.md", doc())

        assert available_profiles_on_disk(repo.root) == ["blog", "writing"]
        assert available_profiles_on_disk(repo.root / "shared") == []
