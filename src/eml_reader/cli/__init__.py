"""
CLI module for reading .eml files.

Provides command-line tools for inspecting single files and directories.
"""

from eml_reader.cli.read_eml import main as read_main

__all__ = ["read_main"]
