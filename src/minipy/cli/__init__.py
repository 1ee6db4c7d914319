"""
MiniPy Command-Line Interface
=============================

This package provides the command-line tool for MiniPy:

- **mpcc**: MiniPy to C translator

The tool is a Click-based CLI application with help text and
consistent exit codes (see minipy.cli.errors).
"""

__all__ = ["mpcc"]
