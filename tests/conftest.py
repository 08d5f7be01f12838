from pathlib import Path

import pytest


def make_tree(root: Path, files: dict) -> Path:
    for rel, content in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            p.write_bytes(content)
        else:
            p.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def project(tmp_path):
    """The a/one.txt, a/two.txt, b.txt layout used across the suite."""
    root = tmp_path / "proj"
    root.mkdir()
    return make_tree(root, {"a/one.txt": "hi", "a/two.txt": "yo\n", "b.txt": ""})


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path, monkeypatch):
    home = tmp_path / "config-home"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home))
    return home
