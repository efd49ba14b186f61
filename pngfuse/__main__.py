#!/usr/bin/env python3
"""Entry point for running pngfuse as a module.

This allows the package to be invoked with:
    python -m pngfuse [arguments]
"""

import sys

from pngfuse.cli import main

if __name__ == "__main__":
    sys.exit(main())
