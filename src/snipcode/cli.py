"""
CLI entrypoint for snipcode package.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from colorama import Fore

from . import __version__
from .config import init_global, init_local, resolve_config
from .core import (
    SnipcodeError,
    collect_files,
    echo,
    exclude_output,
    package_files,
)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="snipcode",
        description="Collect & format code for LLM consumption.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init", help="Generate .grepattern.yaml in the project root")
    init.add_argument("--root", type=Path, default=Path("."), help="Project root dir")

    sub.add_parser(
        "init-admin", help="Generate the global .grepattern.yaml in the user config dir"
    )

    comp = sub.add_parser("compile", help="Build compilation file")
    comp.add_argument("--root", type=Path, default=Path("."), help="Project root dir")
    comp.add_argument(
        "-o", "--output", type=Path, help="Override output file (default from config)"
    )
    comp.add_argument(
        "--with-tree", action="store_true", help="Append file tree listing"
    )
    comp.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return p.parse_args(argv)


def run_compile(ns: argparse.Namespace) -> None:
    root = ns.root
    cfg = resolve_config(root, verbose=ns.verbose)
    out_path = ns.output if ns.output else root / cfg.default_name

    if ns.verbose:
        echo(f"Collecting files under {root} (skipping {out_path}) …")
    files = collect_files(root, cfg.ignore_patterns)

    kept = exclude_output(files, root, out_path)
    if ns.verbose:
        if len(kept) != len(files):
            echo(f"Skipping output file from collection: {out_path}", color=Fore.YELLOW)
        echo(f"Found {len(kept)} files")

    summary = package_files(
        kept,
        out_path=out_path,
        root=root,
        with_tree=ns.with_tree,
        verbose=ns.verbose,
    )
    echo(
        f"Wrote {summary.out_path}: {summary.file_count} files, "
        f"{summary.content_chars} total content chars, "
        f"{summary.artifact_bytes} bytes",
        color=Fore.GREEN,
    )


def main(argv: Optional[List[str]] = None) -> None:
    try:
        ns = _parse_args(argv)
        if ns.command == "init":
            path = init_local(ns.root)
            echo(f"Created local config {path}", color=Fore.GREEN)
        elif ns.command == "init-admin":
            path = init_global()
            echo(f"Created global config at {path}", color=Fore.GREEN)
        else:
            run_compile(ns)

    except SnipcodeError as e:
        echo(f"Error: {e}", color=Fore.RED, err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        echo("Cancelled.", color=Fore.YELLOW, err=True)
        sys.exit(1)
    except Exception as e:
        echo(f"Unexpected error: {e}", color=Fore.RED, err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
