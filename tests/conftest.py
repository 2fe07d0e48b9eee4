import asyncio
import os
from pathlib import Path
from typing import List

import pytest

from wasmpawn import PawnCompiler
from wasmpawn.testing import FakeModuleLoader


def _wasm_module_available() -> bool:
    """Check if WASMPAWN_MODULE_PATH points to an existing compiler module.

    Returns
    -------
    bool
        True if a real module binary is available, False otherwise.
    """
    value = os.environ.get("WASMPAWN_MODULE_PATH")
    return bool(value) and Path(value).is_file()


def pytest_collection_modifyitems(config: pytest.Config, items: List[pytest.Item]) -> None:
    """Skip tests that need the real compiler module when it is not configured."""
    if _wasm_module_available():
        return

    skip_wasm = pytest.mark.skip(reason="WASMPAWN_MODULE_PATH not set, skip test")
    for item in items:
        if any(item.iter_markers(name="requires_wasm_module")):
            item.add_marker(skip_wasm)


@pytest.fixture(autouse=True)
def tmp_cache_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Use an isolated temporary cache directory in all tests.

    This fixture sets WASMPAWN_CACHE_PATH to a unique temporary directory for each test,
    so temporary module roots never land in the user's cache.
    """
    cache = tmp_path / "cache"
    monkeypatch.setenv("WASMPAWN_CACHE_PATH", str(cache))
    return cache


@pytest.fixture
def fs_root(tmp_path: Path) -> Path:
    """Host directory backing the fake module's filesystem."""
    return tmp_path / "root"


@pytest.fixture
def fake_loader(fs_root: Path) -> FakeModuleLoader:
    return FakeModuleLoader(fs_root)


@pytest.fixture
def compiler(fake_loader: FakeModuleLoader) -> PawnCompiler:
    """An initialized compiler running on the fake module."""
    compiler = PawnCompiler(loader=fake_loader)
    asyncio.run(compiler.initialize())
    return compiler
