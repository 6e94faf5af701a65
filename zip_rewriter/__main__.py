"""
Main entry point for the zip_rewriter package.

Allows running the CLI as: python -m zip_rewriter
"""

import sys

from zip_rewriter.cli import main

if __name__ == "__main__":
    sys.exit(main())
