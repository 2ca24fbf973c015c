import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'promptsmith' and tests/ as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from helpers.source_tree import SourceTree, populate_standard_tree  # noqa: E402
from promptsmith.core.stdlib_logging import reset_logging_for_tests  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch):
    """Strip PROMPTSMITH_* overrides from the developer's shell and reset logging."""
    import os

    for key in list(os.environ):
        if key.startswith("PROMPTSMITH_"):
            monkeypatch.delenv(key, raising=False)
    yield
    reset_logging_for_tests()


@pytest.fixture
def source_tree(tmp_path: Path) -> SourceTree:
    """An empty source tree rooted in a temporary directory."""
    return SourceTree(tmp_path / "sources")


@pytest.fixture
def standard_tree(source_tree: SourceTree) -> SourceTree:
    """A valid source tree with profile ``home`` and units ``alpha`` and ``beta``."""
    populate_standard_tree(source_tree)
    return source_tree
