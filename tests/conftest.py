"""Shared fixtures for devdust tests."""

from pathlib import Path

import pytest


def write_file(path: Path, size: int = 0) -> Path:
    """Create a file with ``size`` bytes, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture
def rust_project(tmp_path: Path) -> Path:
    """A Cargo project with 3000 bytes of build output."""
    root = tmp_path / "crab"
    write_file(root / "Cargo.toml", 10)
    write_file(root / "src" / "main.rs", 20)
    write_file(root / "target" / "debug" / "crab", 2000)
    write_file(root / "target" / "release" / "crab", 1000)
    return root


@pytest.fixture
def node_project(tmp_path: Path) -> Path:
    """A Node project with dependencies and a dist folder."""
    root = tmp_path / "webapp"
    write_file(root / "package.json", 5)
    write_file(root / "node_modules" / "left-pad" / "package.json", 100)
    write_file(root / "node_modules" / "left-pad" / "index.js", 400)
    write_file(root / "dist" / "bundle.js", 500)
    return root
