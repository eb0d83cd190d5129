"""
Main entry point for running the package as a module.

Usage:
    python -m proofsheet scan /path/to/delivery --output manifest.json
    python -m proofsheet report --manifest manifest.json
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
