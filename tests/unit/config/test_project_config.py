"""Tests for project configuration loading and validation."""
from __future__ import annotations

from pathlib import Path

import pytest

from helpers.content import write_project_config, write_text


def _valid(**overrides):
    data = {"targets": ["claudecode"], "features": ["rules"], "profiles": ["writing"]}
    data.update(overrides)
    return data


class TestValidateProjectConfig:
    def test_minimal_config_is_valid(self) -> None:
        from rulestack.core.config import validate_project_config

        assert validate_project_config(_valid()) == []

    def test_missing_targets(self) -> None:
        from rulestack.core.config import validate_project_config

        data = _valid()
        del data["targets"]

        errors = validate_project_config(data)

        assert any("targets" in e for e in errors)

    def test_unknown_target(self) -> None:
        from rulestack.core.config import validate_project_config

        errors = validate_project_config(_valid(targets=["vim"]))

        assert errors and errors[0].startswith("targets.0:")

    def test_unknown_feature(self) -> None:
        from rulestack.core.config import validate_project_config

        assert validate_project_config(_valid(features=["rules", "themes"]))

    def test_invalid_profile_pattern(self) -> None:
        from rulestack.core.config import validate_project_config

        errors = validate_project_config(_valid(profiles=["Dev:Frontend"]))

        assert errors and errors[0].startswith("profiles.0:")

    def test_no_profiles_selected(self) -> None:
        from rulestack.core.config import validate_project_config

        data = _valid()
        del data["profiles"]

        assert validate_project_config(data) == [
            "profiles: at least one profile must be selected"
        ]
        assert validate_project_config(_valid(profiles=[])) == [
            "profiles: at least one profile must be selected"
        ]

    def test_legacy_use_cases_accepted(self) -> None:
        from rulestack.core.config import validate_project_config

        data = _valid()
        del data["profiles"]
        data["use-cases"] = ["writing"]

        assert validate_project_config(data) == []

    @pytest.mark.parametrize("key", ["profiles", "use-cases"])
    @pytest.mark.parametrize("spec", ["shared", "_shared", "dev:shared"])
    def test_reserved_names_rejected(self, key: str, spec: str) -> None:
        from rulestack.core.config import validate_project_config

        data = _valid()
        del data["profiles"]
        data[key] = [spec]

        errors = validate_project_config(data)

        assert errors and errors[0].startswith(f"{key}")
        assert any("reserved" in e or "does not match" in e for e in errors)

    def test_invalid_legacy_use_case_pattern(self) -> None:
        from rulestack.core.config import validate_project_config

        data = _valid()
        del data["profiles"]
        data["use-cases"] = ["Writing"]

        errors = validate_project_config(data)

        assert errors and errors[0].startswith("use-cases.0:")

    def test_unknown_option_rejected(self) -> None:
        from rulestack.core.config import validate_project_config

        assert validate_project_config(_valid(options={"turbo": True}))

    def test_bad_source_entry(self) -> None:
        from rulestack.core.config import validate_project_config

        errors = validate_project_config(_valid(sources=[{"type": "git"}]))

        assert errors == ["sources[0]: Git source must have a url property"]

    def test_output_dirs_checks(self) -> None:
        from rulestack.core.config import validate_project_config

        errors = validate_project_config(
            _valid(outputDirs={"writing": "/abs", "dev": "../up"})
        )

        assert "outputDirs['writing'] must be a relative path, not an absolute path: '/abs'" in errors
        assert any("unknown profile 'dev'" in e for e in errors)
        assert "outputDirs['dev'] must not contain '..': '../up'" in errors


class TestProjectConfig:
    def test_from_dict(self) -> None:
        from rulestack.core.config import ProjectConfig

        config = ProjectConfig.from_dict(
            _valid(sources=["./rules", "https://example.com/r.git"], options={"modularMcp": True})
        )

        assert config.targets == ("claudecode",)
        assert config.profiles == ("writing",)
        assert [s.kind for s in config.sources] == ["local", "git"]
        assert config.options == {"modularMcp": True}
        assert config.effective_options["globalSourcesPosition"] == "prepend"
        assert config.effective_options["modularMcp"] is True

    def test_wildcard_target_expands(self) -> None:
        from rulestack.core.config import ProjectConfig
        from rulestack.core.constants import VALID_TARGETS

        config = ProjectConfig.from_dict(_valid(targets=["*"]))

        assert config.expanded_targets == list(VALID_TARGETS)

    def test_output_groups(self) -> None:
        from rulestack.core.config import ProjectConfig

        config = ProjectConfig.from_dict(
            _valid(
                profiles=["writing", "dev:frontend", "ops", "dev:backend"],
                outputDirs={"dev:frontend": "web", "dev:backend": "web/", "ops": ""},
            )
        )

        assert config.output_groups() == [
            ("", ["writing", "ops"]),
            ("web/", ["dev:frontend", "dev:backend"]),
        ]


class TestLoadProjectConfig:
    def test_missing_config(self, project: Path) -> None:
        from rulestack.core.config import load_project_config
        from rulestack.core.exceptions import ConfigNotFoundError

        with pytest.raises(ConfigNotFoundError):
            load_project_config(project)

    def test_loads_valid_config(self, project: Path) -> None:
        from rulestack.core.config import load_project_config

        path = write_project_config(project, _valid())

        config = load_project_config(project)

        assert config.path == path
        assert config.features == ("rules",)

    def test_custom_relative_path(self, project: Path) -> None:
        from rulestack.core.config import load_project_config

        write_text(project / "alt.yaml", "targets: [cursor]\nfeatures: [rules]\nprofiles: [dev]\n")

        config = load_project_config(project, "alt.yaml")

        assert config.targets == ("cursor",)

    def test_invalid_yaml(self, project: Path) -> None:
        from rulestack.core.config import load_project_config
        from rulestack.core.exceptions import ConfigError

        write_text(project / ".rulestack" / "config.yaml", "targets: [\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_project_config(project)

    def test_invalid_config_lists_errors(self, project: Path) -> None:
        from rulestack.core.config import load_project_config
        from rulestack.core.exceptions import ConfigError

        write_project_config(project, {"targets": ["vim"], "features": ["rules"], "profiles": ["a"]})

        with pytest.raises(ConfigError) as excinfo:
            load_project_config(project)

        assert excinfo.value.context["errors"]
        assert "targets.0" in str(excinfo.value)

    def test_empty_file_is_invalid(self, project: Path) -> None:
        from rulestack.core.config import load_project_config
        from rulestack.core.exceptions import ConfigError

        write_text(project / ".rulestack" / "config.yaml", "")

        with pytest.raises(ConfigError):
            load_project_config(project)
