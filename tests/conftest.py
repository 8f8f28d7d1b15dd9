import sys

import pytest

from .repo_root import REPO_ROOT

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def registry(tmp_path):
    root = tmp_path / "registry"
    (root / "projects").mkdir(parents=True)
    return root


@pytest.fixture
def settings(registry):
    from scidx_backend.config import BuilderSettings

    return BuilderSettings(
        projects_dir=registry / "projects",
        index_file=registry / "scripts" / "script-index.json",
    )
