"""Thin shim for IDEs and direct execution."""

import sys

from steam_news.cli import main

if __name__ == "__main__":
    sys.exit(main())
