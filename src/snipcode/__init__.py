"""
Snipcode - A tool for compiling a source tree into one LLM-ready document.

This package walks a directory tree, drops files matching the configured
ignore globs, and writes every remaining file's contents into a single
heredoc-delimited text file, optionally followed by a rendered file tree.
"""

__version__ = "0.1.0"
__author__ = "Snipcode Team"
