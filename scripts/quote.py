#!/usr/bin/env python3
"""
Quote launcher script.

Fetches a split swap route from the command line, e.g.

    scripts/quote.py --src 0xEeee... --dst 0x29eE... --amount 1.5 --dst-decimals 6
"""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from aggregator.runner.cli import run


if __name__ == "__main__":
    try:
        run()
    except KeyboardInterrupt:
        print("\nQuote cancelled by user.")
        sys.exit(0)
