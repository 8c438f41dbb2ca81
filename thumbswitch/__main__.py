"""
Main entry point for running the package as a module.

Usage:
    python -m thumbswitch activate
    python -m thumbswitch sizes
    python -m thumbswitch regenerate
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
