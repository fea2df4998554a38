"""Entry point for running pdf_splitter as a module.

Usage:
    python -m pdf_splitter <command> [options]
"""
from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
