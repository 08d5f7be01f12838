"""
Test tree reconstruction and rendering
======================================
"""
from snipcode.core import build_tree, render_tree

EXPECTED = (
    ".\n"
    "├── a\n"
    "│   ├── one.txt\n"
    "│   └── two.txt\n"
    "└── b.txt\n"
)


def test_render_example_layout():
    assert render_tree(["a/one.txt", "a/two.txt", "b.txt"]) == EXPECTED


def test_render_is_deterministic():
    paths = ["src/x/y.py", "src/z.py", "README.md"]
    assert render_tree(paths) == render_tree(paths)


def test_render_ignores_input_order():
    assert render_tree(["b.txt", "a/two.txt", "a/one.txt"]) == EXPECTED


def test_siblings_sorted_alphabetically():
    out = render_tree(["b/x.txt", "a/y.txt", "a/z.txt"])
    lines = out.splitlines()
    assert lines.index("├── a") < lines.index("└── b")
    assert lines.index("│   ├── y.txt") < lines.index("│   └── z.txt")


def test_last_child_connector_and_prefixes():
    out = render_tree(["d/p/1", "d/q/2", "d/r/3"])
    assert out == (
        ".\n"
        "└── d\n"
        "    ├── p\n"
        "    │   └── 1\n"
        "    ├── q\n"
        "    │   └── 2\n"
        "    └── r\n"
        "        └── 3\n"
    )


def test_deep_nesting_mixes_pipes_and_spaces():
    out = render_tree(["a/b/c/d.txt", "a/e.txt", "f.txt"])
    assert out == (
        ".\n"
        "├── a\n"
        "│   ├── b\n"
        "│   │   └── c\n"
        "│   │       └── d.txt\n"
        "│   └── e.txt\n"
        "└── f.txt\n"
    )


def test_empty_input_renders_root_only():
    assert render_tree([]) == ".\n"


def test_no_empty_directories():
    nodes = build_tree(["a/b/c.txt"])
    assert set(nodes) == {".", "a", "a/b", "a/b/c.txt"}
    assert nodes["a"].is_dir and nodes["a/b"].is_dir
    assert not nodes["a/b/c.txt"].is_dir
    assert "x" not in render_tree(["a/b/c.txt"])


def test_duplicate_paths_collapse():
    assert render_tree(["a/x", "a/x", "a/x"]) == ".\n└── a\n    └── x\n"


def test_build_tree_children_sorted_and_unique():
    nodes = build_tree(["z/1", "a/2", "z/0", "a/2"])
    assert nodes["."].children == ["a", "z"]
    assert nodes["z"].children == ["0", "1"]
    assert nodes["a"].children == ["2"]


def test_backslash_and_dot_segments_normalized():
    assert render_tree(["./a\\b.txt"]) == ".\n└── a\n    └── b.txt\n"
