"""Tests for deploying generator output into a project."""
from __future__ import annotations

from pathlib import Path

from helpers.content import write_text


def _generated(tmp_path: Path) -> Path:
    scratch = tmp_path / "scratch"
    write_text(scratch / ".claude" / "commands" / "review.md", "# Review\n")
    write_text(scratch / ".cursor" / "rules" / "base.mdc", "# Base\n")
    write_text(scratch / ".rulesync" / "rules" / "base.md", "# not deployed\n")
    return scratch


def _record(*files: str):
    from rulestack.core.deploy import LockRecord

    return LockRecord(created="t0", last_synced="t0", files=tuple(files))


class TestFilesToDeploy:
    def test_lists_generated_files(self, tmp_path: Path) -> None:
        from rulestack.core.deploy import files_to_deploy

        scratch = _generated(tmp_path)

        assert files_to_deploy(scratch) == [
            ".claude/commands/review.md",
            ".cursor/rules/base.mdc",
        ]

    def test_restricted_to_targets(self, tmp_path: Path) -> None:
        from rulestack.core.deploy import files_to_deploy

        scratch = _generated(tmp_path)

        assert files_to_deploy(scratch, ["cursor"]) == [".cursor/rules/base.mdc"]

    def test_output_prefix(self, tmp_path: Path) -> None:
        from rulestack.core.deploy import files_to_deploy

        scratch = _generated(tmp_path)

        assert files_to_deploy(scratch, ["cursor"], "docs") == ["docs/.cursor/rules/base.mdc"]


class TestDeploy:
    def test_fresh_project(self, tmp_path: Path, project: Path) -> None:
        from rulestack.core.deploy import deploy

        result = deploy(_generated(tmp_path), project)

        assert result.deployed == [".claude/commands/review.md", ".cursor/rules/base.mdc"]
        assert result.created == result.deployed
        assert result.overwritten == []
        assert (project / ".claude" / "commands" / "review.md").read_text() == "# Review\n"
        assert not (project / ".rulesync").exists()

    def test_untracked_file_is_never_overwritten(self, tmp_path: Path, project: Path) -> None:
        from rulestack.core.deploy import CONFLICT_REASON, deploy

        native = write_text(project / ".claude" / "commands" / "review.md", "# Mine\n")

        result = deploy(_generated(tmp_path), project, _record())

        assert native.read_text() == "# Mine\n"
        assert result.skipped == [".claude/commands/review.md"]
        assert [c.to_dict() for c in result.conflicts] == [
            {"file": ".claude/commands/review.md", "reason": CONFLICT_REASON}
        ]
        assert result.deployed == [".cursor/rules/base.mdc"]

    def test_tracked_file_is_overwritten(self, tmp_path: Path, project: Path) -> None:
        from rulestack.core.deploy import deploy

        write_text(project / ".claude" / "commands" / "review.md", "# Old\n")

        result = deploy(
            _generated(tmp_path), project, _record(".claude/commands/review.md")
        )

        assert (project / ".claude" / "commands" / "review.md").read_text() == "# Review\n"
        assert result.overwritten == [".claude/commands/review.md"]
        assert result.created == [".cursor/rules/base.mdc"]
        assert result.conflicts == []

    def test_dry_run_writes_nothing(self, tmp_path: Path, project: Path) -> None:
        from rulestack.core.deploy import DeployOptions, deploy

        result = deploy(_generated(tmp_path), project, None, DeployOptions(dry_run=True))

        assert result.deployed == [".claude/commands/review.md", ".cursor/rules/base.mdc"]
        assert not (project / ".claude").exists()
        assert not (project / ".cursor").exists()

    def test_output_prefix_and_targets(self, tmp_path: Path, project: Path) -> None:
        from rulestack.core.deploy import DeployOptions, deploy

        result = deploy(
            _generated(tmp_path),
            project,
            None,
            DeployOptions(targets=("claudecode",), output_prefix="packages/web/"),
        )

        assert result.deployed == ["packages/web/.claude/commands/review.md"]
        assert (project / "packages" / "web" / ".claude" / "commands" / "review.md").exists()
        assert not (project / ".claude").exists()

    def test_missing_generated_output_deploys_nothing(self, tmp_path: Path, project: Path) -> None:
        from rulestack.core.deploy import deploy

        scratch = tmp_path / "empty"
        scratch.mkdir()

        assert deploy(scratch, project).deployed == []


class TestDeployerClass:
    def test_check_conflicts(self, tmp_path: Path, project: Path) -> None:
        from rulestack.core.deploy import Deployer

        write_text(project / ".cursor" / "rules" / "base.mdc", "# Mine\n")
        write_text(project / ".claude" / "commands" / "review.md", "# Ours\n")
        deployer = Deployer(project, _record(".claude/commands/review.md"))

        assert deployer.check_conflicts(_generated(tmp_path)) == [".cursor/rules/base.mdc"]

    def test_deploy_delegates(self, tmp_path: Path, project: Path) -> None:
        from rulestack.core.deploy import Deployer

        result = Deployer(project).deploy(_generated(tmp_path), targets=["cursor"])

        assert result.deployed == [".cursor/rules/base.mdc"]
