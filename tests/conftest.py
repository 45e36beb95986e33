import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'rulestack' and tests/ importable for helpers
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.content import ContentRepo, FakeGeneratorRunner  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep tests away from the real home directory and env overrides."""
    for key in ("RULESTACK_CONFIG", "RULESTACK_VERBOSE"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("RULESTACK_HOME", str(tmp_path / "home" / ".rulestack"))


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    from rulestack.core.logging import reset_logging_for_tests

    reset_logging_for_tests()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def make_repo(tmp_path: Path):
    """Factory: ``make_repo("team")`` -> ContentRepo under tmp_path/sources/team."""

    def _make(name: str = "content") -> ContentRepo:
        return ContentRepo(tmp_path / "sources" / name, name=name)

    return _make


@pytest.fixture
def fake_runner() -> FakeGeneratorRunner:
    return FakeGeneratorRunner()
