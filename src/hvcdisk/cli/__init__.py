"""
HVC Disk Recovery Command-Line Interface
========================================

This package provides the command-line tool for the disk recovery
library:

- **hvcscan**: List, inspect and extract the files in a disk dump

The tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["hvcscan"]
