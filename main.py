"""
mdindex - Main Entry Point

CLI interface for converting Markdown documents into tree indexes.
"""

import sys

from mdindex.cli import main


if __name__ == "__main__":
    sys.exit(main())
