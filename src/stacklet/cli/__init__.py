"""
Stacklet Command-Line Interface
===============================

- **stlc**: compiles a let statement to stack-machine instructions

The tool is a Click-based CLI application; exit codes are shared through
stacklet.cli.errors.
"""

__all__ = ["stlc"]
