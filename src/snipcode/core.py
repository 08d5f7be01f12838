"""
Core logic for snipcode package.
"""

from __future__ import annotations

import os
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Union

import pathspec
from colorama import Style, init as colorama_init

colorama_init()

StrPath = Union[str, "os.PathLike[str]"]


# Exceptions
class SnipcodeError(Exception): ...
class InvalidRootError(SnipcodeError): ...
class ConfigFileError(SnipcodeError): ...
class OutputError(SnipcodeError): ...
class FileReadError(SnipcodeError): ...


# Defaults & helpers
CONFIG_FILENAME = ".grepattern.yaml"
DEFAULT_OUTPUT = "comp_code.txt"
HEREDOC_MARKER = "SNIPCODE_HEREDOC"
TREE_HEADER = "## File Tree"
_TEMP_SUFFIX = ".tmp"

_BRANCH = "├── "
_LAST_BRANCH = "└── "
_PIPE = "│   "
_SPACE = "    "


def echo(msg: str, color: str = "", err: bool = False) -> None:
    text = f"[snipcode] {msg}"
    if color:
        text = color + text + Style.RESET_ALL
    print(text, file=sys.stderr if err else sys.stdout)


# Ignore-pattern utilities
def compile_patterns(patterns: Iterable[str]) -> "pathspec.PathSpec":
    """
    Compile ignore globs with gitignore glob semantics.

    Every pattern excludes; a leading "!" or "#" is matched literally, so the
    pattern order never matters. A pattern that cannot be compiled raises
    ``ConfigFileError``.
    """
    literal = []
    for pat in patterns:
        if not isinstance(pat, str):
            raise ConfigFileError(f"Ignore pattern {pat!r} is not a string")
        glob = "\\" + pat if pat.startswith(("!", "#")) else pat
        try:
            pathspec.GitIgnoreSpec.from_lines([glob])
        except (ValueError, TypeError) as e:
            raise ConfigFileError(f"Invalid ignore pattern {pat!r}: {e}") from e
        literal.append(glob)
    return pathspec.GitIgnoreSpec.from_lines(literal)


# Collector
def _check_root(root: StrPath) -> Path:
    try:
        root = Path(root).resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidRootError(f"Could not resolve root path '{root}': {e}") from e
    if not root.exists():
        raise InvalidRootError(f"Root directory '{root}' does not exist")
    if not root.is_dir():
        raise InvalidRootError(f"Root path '{root}' is not a directory")
    return root


def collect_files(root: StrPath, patterns: Sequence[str] = ()) -> List[str]:
    """
    Return the sorted root-relative POSIX paths of every file under *root*
    that no ignore pattern matches.

    Patterns are matched against the root-relative path, so ``dist/**``
    covers everything below ``root/dist`` and ``*.png`` covers PNGs at any
    depth. The config file at the root is never returned.
    """
    root = _check_root(root)
    spec = compile_patterns(patterns)

    def _on_error(err: OSError) -> None:
        raise InvalidRootError(f"Could not scan '{err.filename}': {err}") from err

    found = set()
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames.sort()
        base = Path(dirpath).relative_to(root)
        for name in filenames:
            rel = (base / name).as_posix()
            if rel == CONFIG_FILENAME:
                continue
            if spec.match_file(rel):
                continue
            found.add(rel)
    return sorted(found)


def _temp_prefix(out_path: Path) -> str:
    return f".{out_path.name}."


def exclude_output(files: Iterable[str], root: StrPath, out_path: StrPath) -> List[str]:
    """
    Drop the artifact itself from *files* so it is never read while written,
    along with temp files an interrupted write may have left next to it.
    """
    root = Path(root)
    target = Path(out_path).resolve()
    kept = []
    for f in files:
        p = (root / f).resolve()
        if p == target:
            continue
        if (
            p.parent == target.parent
            and p.name.startswith(_temp_prefix(target))
            and p.name.endswith(_TEMP_SUFFIX)
        ):
            continue
        kept.append(f)
    return kept


# Tree renderer
@dataclass
class TreeNode:
    is_dir: bool = False
    children: List[str] = field(default_factory=list)


def _join(parent: str, name: str) -> str:
    return name if parent == "." else f"{parent}/{name}"


def build_tree(paths: Iterable[str]) -> Dict[str, TreeNode]:
    """
    Rebuild the directory hierarchy implied by a flat list of file paths.

    The result maps each path prefix ("." for the root) to its node. Only
    prefixes of the given paths get a node, so a directory without any
    included file never shows up. Children are sorted by name.
    """
    nodes: Dict[str, TreeNode] = {".": TreeNode(is_dir=True)}
    for path in paths:
        parts = [p for p in path.replace("\\", "/").split("/") if p and p != "."]
        current = "."
        for idx, part in enumerate(parts):
            child = _join(current, part)
            parent = nodes.setdefault(current, TreeNode(is_dir=True))
            if part not in parent.children:
                parent.children.append(part)
            node = nodes.setdefault(child, TreeNode())
            if idx < len(parts) - 1:
                node.is_dir = True
            current = child

    for node in nodes.values():
        node.children.sort()
    return nodes


def render_tree(paths: Iterable[str]) -> str:
    """
    Return a ``tree``-style rendering of *paths*, starting with a "." line.

    Output depends only on the set of paths, never on their order.
    """
    nodes = build_tree(paths)
    lines: List[str] = ["."]

    def _walk(key: str, prefix: str) -> None:
        children = nodes[key].children
        for idx, name in enumerate(children):
            last = idx == len(children) - 1
            child_key = _join(key, name)
            lines.append(f"{prefix}{_LAST_BRANCH if last else _BRANCH}{name}")
            if nodes[child_key].is_dir:
                _walk(child_key, prefix + (_SPACE if last else _PIPE))

    _walk(".", "")
    return "\n".join(lines) + "\n"


# Packager
@dataclass
class PackageSummary:
    out_path: Path
    file_count: int
    content_chars: int
    artifact_bytes: int


def _encode(text: str) -> bytes:
    return text.encode("utf-8", errors="surrogateescape")


def _display_path(path: str, root: Path) -> str:
    p = Path(path)
    if p.is_absolute():
        try:
            return p.relative_to(root.resolve()).as_posix()
        except ValueError:
            return p.as_posix()
    return p.as_posix()


def format_block(rel: str, data: bytes) -> bytes:
    """Wrap one file's raw bytes in its header and heredoc markers."""
    block = bytearray(_encode(f"## {rel}\n\ncat <<{HEREDOC_MARKER}\n"))
    block += data
    # empty files get no filler line
    if data and not data.endswith(b"\n"):
        block += b"\n"
    block += _encode(f"{HEREDOC_MARKER}\n\n---\n\n")
    return bytes(block)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _atomic_write(out_path: Path, payload: bytes) -> None:
    if not out_path.parent.exists():
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Could not create directory '{out_path.parent}': {e}") from e

    try:
        fd, tmp = tempfile.mkstemp(
            prefix=_temp_prefix(out_path), suffix=_TEMP_SUFFIX, dir=out_path.parent
        )
    except OSError as e:
        raise OutputError(f"Failed to write output file '{out_path}': {e}") from e

    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
        os.chmod(tmp, 0o644 & ~_current_umask())
        os.replace(tmp, out_path)
    except OSError as e:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise OutputError(f"Failed to write output file '{out_path}': {e}") from e


def package_files(
    paths: Sequence[str],
    out_path: StrPath,
    root: StrPath = ".",
    with_tree: bool = False,
    verbose: bool = False,
) -> PackageSummary:
    """
    Concatenate the files in *paths* into one heredoc-delimited artifact.

    Nothing touches *out_path* until every file has been read; a single
    unreadable file raises ``FileReadError`` and leaves the target as it was.
    """
    root = Path(root)
    out_path = Path(out_path)
    buf = bytearray()
    rels: List[str] = []
    total = 0

    for path in paths:
        rel = _display_path(path, root)
        rels.append(rel)
        try:
            data = (root / path).read_bytes()
        except OSError as e:
            raise FileReadError(f"Failed to read file '{rel}': {e}") from e

        buf += format_block(rel, data)
        total += len(data)
        if verbose:
            echo(f"Included {rel} ({len(data)} chars)")

    if with_tree:
        if verbose:
            echo("Generating file tree...")
        buf += _encode(f"{TREE_HEADER}\n\n")
        buf += _encode(render_tree(rels))

    _atomic_write(out_path, bytes(buf))
    return PackageSummary(
        out_path=out_path,
        file_count=len(paths),
        content_chars=total,
        artifact_bytes=len(buf),
    )
